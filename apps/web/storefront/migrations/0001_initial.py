from decimal import Decimal

import django.core.validators
import django.db.models.deletion
from django.db import migrations, models


def _id() -> models.BigAutoField:
    return models.BigAutoField(
        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
    )


def _min(value: str) -> list:
    return [django.core.validators.MinValueValidator(Decimal(value))]


def _restaurant() -> models.ForeignKey:
    return models.ForeignKey(
        on_delete=django.db.models.deletion.CASCADE,
        related_name="%(class)ss",
        to="core.restaurant",
    )


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("core", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="MenuCategory",
            fields=[
                ("id", _id()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("display_order", models.PositiveIntegerField(default=0)),
                ("restaurant", _restaurant()),
            ],
            options={
                "verbose_name_plural": "menu categories",
                "ordering": ["display_order", "name"],
                "indexes": [
                    models.Index(
                        fields=["restaurant", "display_order"],
                        name="menu_category_order_idx",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="MenuItem",
            fields=[
                ("id", _id()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("name", models.CharField(max_length=200)),
                ("description", models.TextField(blank=True)),
                ("price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("image_url", models.URLField(blank=True, max_length=500)),
                ("is_available", models.BooleanField(default=True)),
                ("display_order", models.PositiveIntegerField(default=0)),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="storefront.menucategory",
                    ),
                ),
                ("restaurant", _restaurant()),
            ],
            options={
                "ordering": ["display_order", "name"],
                "indexes": [
                    models.Index(
                        fields=["restaurant", "category"],
                        name="menu_item_category_idx",
                    ),
                    models.Index(
                        fields=["restaurant", "is_available"],
                        name="menu_item_available_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="Order",
            fields=[
                ("id", _id()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "confirmation_code",
                    models.CharField(
                        help_text="Customer-facing order reference",
                        max_length=20,
                        unique=True,
                    ),
                ),
                ("customer_name", models.CharField(max_length=200)),
                ("customer_email", models.EmailField(blank=True, max_length=254)),
                ("customer_phone", models.CharField(max_length=30)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("confirmed", "Confirmed"),
                            ("preparing", "Preparing"),
                            ("out_for_delivery", "Out for delivery"),
                            ("completed", "Completed"),
                            ("cancelled", "Cancelled"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                (
                    "order_type",
                    models.CharField(
                        choices=[("pickup", "Pickup"), ("delivery", "Delivery")],
                        max_length=20,
                    ),
                ),
                ("special_instructions", models.TextField(blank=True)),
                ("delivery_address", models.TextField(blank=True)),
                (
                    "delivery_distance_km",
                    models.DecimalField(
                        blank=True, decimal_places=2, max_digits=7, null=True
                    ),
                ),
                (
                    "delivery_id",
                    models.CharField(
                        blank=True,
                        help_text="DoorDash external delivery ID",
                        max_length=100,
                    ),
                ),
                ("delivery_status", models.CharField(blank=True, max_length=50)),
                (
                    "delivery_tracking_url",
                    models.URLField(blank=True, max_length=500),
                ),
                ("subtotal", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "delivery_fee",
                    models.DecimalField(decimal_places=2, default=0, max_digits=10),
                ),
                ("tax", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "tip",
                    models.DecimalField(decimal_places=2, default=0, max_digits=10),
                ),
                ("total", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "stripe_payment_intent_id",
                    models.CharField(blank=True, max_length=255),
                ),
                (
                    "payment_status",
                    models.CharField(
                        choices=[
                            ("pending", "Pending"),
                            ("captured", "Captured"),
                            ("failed", "Failed"),
                            ("refunded", "Refunded"),
                        ],
                        default="pending",
                        max_length=20,
                    ),
                ),
                ("confirmed_at", models.DateTimeField(blank=True, null=True)),
                ("estimated_ready_time", models.DateTimeField(blank=True, null=True)),
                ("restaurant", _restaurant()),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["restaurant", "status"],
                        name="order_status_idx",
                    ),
                    models.Index(
                        fields=["stripe_payment_intent_id"],
                        name="order_payment_intent_idx",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="OrderItem",
            fields=[
                ("id", _id()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("item_name", models.CharField(max_length=200)),
                ("quantity", models.PositiveIntegerField(default=1)),
                ("unit_price", models.DecimalField(decimal_places=2, max_digits=10)),
                ("line_total", models.DecimalField(decimal_places=2, max_digits=10)),
                (
                    "menu_item",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="order_items",
                        to="storefront.menuitem",
                    ),
                ),
                (
                    "order",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="items",
                        to="storefront.order",
                    ),
                ),
                ("restaurant", _restaurant()),
            ],
            options={
                "ordering": ["pk"],
            },
        ),
        migrations.CreateModel(
            name="StorefrontSettings",
            fields=[
                ("id", _id()),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "ordering_enabled",
                    models.BooleanField(
                        default=True, help_text="Allow online ordering"
                    ),
                ),
                ("pickup_enabled", models.BooleanField(default=True)),
                ("delivery_enabled", models.BooleanField(default=True)),
                (
                    "tax_rate",
                    models.DecimalField(
                        decimal_places=4,
                        default=Decimal("0.13"),
                        help_text="Tax rate as decimal (e.g., 0.13 for 13% HST)",
                        max_digits=5,
                    ),
                ),
                ("currency", models.CharField(default="usd", max_length=3)),
                (
                    "statement_descriptor_suffix",
                    models.CharField(
                        blank=True,
                        help_text="Shown on the customer's card statement",
                        max_length=22,
                    ),
                ),
                (
                    "delivery_base_fee",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("5.00"),
                        max_digits=10,
                        validators=_min("0"),
                    ),
                ),
                (
                    "delivery_per_km_fee",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("1.00"),
                        max_digits=10,
                        validators=_min("0"),
                    ),
                ),
                (
                    "delivery_included_km",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("2.00"),
                        help_text="Distance covered by the base fee",
                        max_digits=6,
                        validators=_min("0"),
                    ),
                ),
                (
                    "max_delivery_distance_km",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("100.00"),
                        help_text="Delivery radius; farther addresses are refused",
                        max_digits=6,
                        validators=_min("0.1"),
                    ),
                ),
                (
                    "fallback_delivery_fee",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("5.99"),
                        help_text="Quoted when the courier provider is unreachable",
                        max_digits=10,
                        validators=_min("0"),
                    ),
                ),
                (
                    "average_speed_kmh",
                    models.DecimalField(
                        decimal_places=1,
                        default=Decimal("40.0"),
                        help_text="Urban driving speed used for ETAs",
                        max_digits=5,
                        validators=_min("0.1"),
                    ),
                ),
                (
                    "doordash_business_id",
                    models.CharField(blank=True, max_length=100),
                ),
                ("doordash_store_id", models.CharField(blank=True, max_length=100)),
                ("restaurant", _restaurant()),
            ],
            options={
                "verbose_name_plural": "storefront settings",
                "constraints": [
                    models.UniqueConstraint(
                        fields=("restaurant",),
                        name="unique_storefront_settings_per_restaurant",
                    )
                ],
            },
        ),
    ]
