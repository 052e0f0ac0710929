"""
Core models - Restaurant tenancy foundation.

All restaurant-owned models inherit from RestaurantScopedModel.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models

from .managers import RestaurantScopedManager


class Restaurant(models.Model):
    """
    Tenant - a restaurant running a storefront.

    Menus, orders and storefront settings are all scoped to a Restaurant.
    The address doubles as the default delivery pickup address.
    """

    slug = models.SlugField(unique=True, help_text="URL-safe identifier")
    name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(
        max_length=20,
        blank=True,
        help_text="Pickup phone number given to couriers",
    )
    address = models.TextField(blank=True, help_text="Street address for pickups")

    # Status
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class User(AbstractUser):
    """
    Custom user model with restaurant association.

    Users belong to one Restaurant (staff) or none (superuser).
    """

    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="users",
        help_text="Null for superusers",
    )

    class Role(models.TextChoices):
        OWNER = "owner", "Owner"
        STAFF = "staff", "Staff"
        READONLY = "readonly", "Read Only"

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.STAFF,
    )

    class Meta:
        ordering = ["username"]

    def __str__(self) -> str:
        if self.restaurant:
            return f"{self.username} ({self.restaurant.slug})"
        return self.username

    def can_manage(self, restaurant: Restaurant) -> bool:
        """Staff users manage every restaurant; others only their own, read-write."""
        if self.is_staff:
            return True
        return self.restaurant_id == restaurant.pk and self.role != self.Role.READONLY


class RestaurantScopedModel(models.Model):
    """
    Abstract base for all restaurant-scoped models.

    Provides:
    - Automatic restaurant FK
    - RestaurantScopedManager for filtered queries
    - Created/updated timestamps
    """

    restaurant = models.ForeignKey(
        Restaurant,
        on_delete=models.CASCADE,
        related_name="%(class)ss",  # e.g., restaurant.menuitems, restaurant.orders
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = RestaurantScopedManager()

    class Meta:
        abstract = True
