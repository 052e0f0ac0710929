"""
Storefront models - settings, menu catalogue, and orders.

All models follow the tenancy pattern with RestaurantScopedModel.
"""

from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models

from apps.web.core.models import RestaurantScopedModel
from apps.web.delivery.pricing import FeeSchedule

NON_NEGATIVE = [MinValueValidator(Decimal("0"))]
POSITIVE = [MinValueValidator(Decimal("0.1"))]


class StorefrontSettings(RestaurantScopedModel):
    """
    Ordering configuration for a restaurant.

    OneToOne with Restaurant (enforced by unique constraint). Restaurants
    without a settings row use the field defaults.
    """

    # Ordering configuration
    ordering_enabled = models.BooleanField(
        default=True,
        help_text="Allow online ordering",
    )
    pickup_enabled = models.BooleanField(default=True)
    delivery_enabled = models.BooleanField(default=True)

    # Tax and payment
    tax_rate = models.DecimalField(
        max_digits=5,
        decimal_places=4,
        default=Decimal("0.13"),
        help_text="Tax rate as decimal (e.g., 0.13 for 13% HST)",
    )
    currency = models.CharField(max_length=3, default="usd")
    statement_descriptor_suffix = models.CharField(
        max_length=22,
        blank=True,
        help_text="Shown on the customer's card statement",
    )

    # Delivery fee schedule
    delivery_base_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("5.00"),
        validators=NON_NEGATIVE,
    )
    delivery_per_km_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("1.00"),
        validators=NON_NEGATIVE,
    )
    delivery_included_km = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=Decimal("2.00"),
        validators=NON_NEGATIVE,
        help_text="Distance covered by the base fee",
    )
    max_delivery_distance_km = models.DecimalField(
        max_digits=6,
        decimal_places=2,
        default=Decimal("100.00"),
        validators=POSITIVE,
        help_text="Delivery radius; farther addresses are refused",
    )
    fallback_delivery_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal("5.99"),
        validators=NON_NEGATIVE,
        help_text="Quoted when the courier provider is unreachable",
    )
    average_speed_kmh = models.DecimalField(
        max_digits=5,
        decimal_places=1,
        default=Decimal("40.0"),
        validators=POSITIVE,
        help_text="Urban driving speed used for ETAs",
    )

    # DoorDash
    doordash_business_id = models.CharField(max_length=100, blank=True)
    doordash_store_id = models.CharField(max_length=100, blank=True)

    class Meta:
        verbose_name_plural = "storefront settings"
        constraints = [
            models.UniqueConstraint(
                fields=["restaurant"],
                name="unique_storefront_settings_per_restaurant",
            ),
        ]

    def __str__(self) -> str:
        return f"Storefront settings for {self.restaurant}"

    @property
    def fee_schedule(self) -> FeeSchedule:
        return FeeSchedule(
            base_fee=self.delivery_base_fee,
            per_km_fee=self.delivery_per_km_fee,
            included_km=self.delivery_included_km,
            max_distance_km=self.max_delivery_distance_km,
            fallback_fee=self.fallback_delivery_fee,
            average_speed_kmh=self.average_speed_kmh,
        )

    @classmethod
    def load(cls, restaurant: models.Model) -> "StorefrontSettings":
        """Saved settings for the restaurant, or unsaved defaults."""
        existing = cls.objects.filter(restaurant=restaurant).first()
        return existing or cls(restaurant=restaurant)


class MenuCategory(RestaurantScopedModel):
    """
    Category of the menu (e.g., Appetizers, Pizzas, Drinks).
    """

    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    display_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["display_order", "name"]
        verbose_name_plural = "menu categories"
        indexes = [
            models.Index(
                fields=["restaurant", "display_order"],
                name="menu_category_order_idx",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class MenuItem(RestaurantScopedModel):
    """
    Individual menu item.

    is_available=False hides the item from the menu and the cart.
    """

    category = models.ForeignKey(
        MenuCategory,
        on_delete=models.CASCADE,
        related_name="items",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    image_url = models.URLField(blank=True, max_length=500)
    is_available = models.BooleanField(default=True)
    display_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["display_order", "name"]
        indexes = [
            models.Index(
                fields=["restaurant", "category"],
                name="menu_item_category_idx",
            ),
            models.Index(
                fields=["restaurant", "is_available"],
                name="menu_item_available_idx",
            ),
        ]

    def __str__(self) -> str:
        return self.name


class OrderStatus(models.TextChoices):
    """Order lifecycle status."""

    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    PREPARING = "preparing", "Preparing"
    OUT_FOR_DELIVERY = "out_for_delivery", "Out for delivery"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"


class OrderType(models.TextChoices):
    """Order fulfillment type."""

    PICKUP = "pickup", "Pickup"
    DELIVERY = "delivery", "Delivery"


class PaymentStatus(models.TextChoices):
    """Payment processing status."""

    PENDING = "pending", "Pending"
    CAPTURED = "captured", "Captured"
    FAILED = "failed", "Failed"
    REFUNDED = "refunded", "Refunded"


class Order(RestaurantScopedModel):
    """
    Customer order.

    Tracks order lifecycle, payment, and courier dispatch.
    """

    confirmation_code = models.CharField(
        max_length=20,
        unique=True,
        help_text="Customer-facing order reference",
    )

    # Customer information
    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField(blank=True)
    customer_phone = models.CharField(max_length=30)

    # Order details
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    order_type = models.CharField(
        max_length=20,
        choices=OrderType.choices,
    )
    special_instructions = models.TextField(blank=True)

    # Delivery (if delivery order)
    delivery_address = models.TextField(blank=True)
    delivery_distance_km = models.DecimalField(
        max_digits=7,
        decimal_places=2,
        null=True,
        blank=True,
    )
    delivery_id = models.CharField(
        max_length=100,
        blank=True,
        help_text="DoorDash external delivery ID",
    )
    delivery_status = models.CharField(max_length=50, blank=True)
    delivery_tracking_url = models.URLField(blank=True, max_length=500)

    # Pricing
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    delivery_fee = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
    )
    tax = models.DecimalField(max_digits=10, decimal_places=2)
    tip = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=0,
    )
    total = models.DecimalField(max_digits=10, decimal_places=2)

    # Payment
    stripe_payment_intent_id = models.CharField(max_length=255, blank=True)
    payment_status = models.CharField(
        max_length=20,
        choices=PaymentStatus.choices,
        default=PaymentStatus.PENDING,
    )

    # Timing
    confirmed_at = models.DateTimeField(null=True, blank=True)
    estimated_ready_time = models.DateTimeField(null=True, blank=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["restaurant", "status"],
                name="order_status_idx",
            ),
            models.Index(
                fields=["stripe_payment_intent_id"],
                name="order_payment_intent_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.confirmation_code} ({self.customer_name})"

    @property
    def is_delivery(self) -> bool:
        return self.order_type == OrderType.DELIVERY


class OrderItem(RestaurantScopedModel):
    """
    Line item of an order.

    Name and price are snapshotted so later menu edits don't change the order.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.SET_NULL,
        null=True,
        related_name="order_items",
    )
    item_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=10, decimal_places=2)
    line_total = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ["pk"]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.item_name}"
