"""Admin registration for storefront models."""

from django.contrib import admin

from apps.web.storefront.models import (
    MenuCategory,
    MenuItem,
    Order,
    OrderItem,
    StorefrontSettings,
)


class MenuItemInline(admin.TabularInline):
    """Inline for items within a category."""

    model = MenuItem
    extra = 0
    fields = ["restaurant", "name", "price", "is_available", "display_order"]


class OrderItemInline(admin.TabularInline):
    """Inline for items within an order."""

    model = OrderItem
    extra = 0
    fields = ["item_name", "quantity", "unit_price", "line_total"]
    readonly_fields = ["item_name", "quantity", "unit_price", "line_total"]


@admin.register(StorefrontSettings)
class StorefrontSettingsAdmin(admin.ModelAdmin):
    """Admin for per-restaurant ordering configuration."""

    list_display = [
        "restaurant",
        "ordering_enabled",
        "delivery_enabled",
        "tax_rate",
        "max_delivery_distance_km",
    ]
    list_filter = ["ordering_enabled", "delivery_enabled"]
    search_fields = ["restaurant__name", "restaurant__slug"]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["restaurant"]}),
        (
            "Ordering",
            {"fields": ["ordering_enabled", "pickup_enabled", "delivery_enabled"]},
        ),
        (
            "Payment",
            {"fields": ["tax_rate", "currency", "statement_descriptor_suffix"]},
        ),
        (
            "Delivery fees",
            {
                "fields": [
                    "delivery_base_fee",
                    "delivery_per_km_fee",
                    "delivery_included_km",
                    "max_delivery_distance_km",
                    "fallback_delivery_fee",
                    "average_speed_kmh",
                ]
            },
        ),
        ("DoorDash", {"fields": ["doordash_business_id", "doordash_store_id"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]


@admin.register(MenuCategory)
class MenuCategoryAdmin(admin.ModelAdmin):
    """Admin for menu categories."""

    list_display = ["name", "restaurant", "display_order"]
    list_filter = ["restaurant"]
    search_fields = ["name"]
    inlines = [MenuItemInline]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(MenuItem)
class MenuItemAdmin(admin.ModelAdmin):
    """Admin for menu items."""

    list_display = ["name", "category", "price", "is_available", "restaurant"]
    list_filter = ["is_available", "restaurant", "category"]
    list_editable = ["is_available"]
    search_fields = ["name", "description"]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin for orders."""

    list_display = [
        "confirmation_code",
        "restaurant",
        "customer_name",
        "order_type",
        "status",
        "payment_status",
        "delivery_status",
        "total",
        "created_at",
    ]
    list_filter = ["status", "payment_status", "order_type", "restaurant"]
    search_fields = [
        "confirmation_code",
        "customer_name",
        "customer_phone",
        "stripe_payment_intent_id",
        "delivery_id",
    ]
    inlines = [OrderItemInline]
    readonly_fields = [
        "confirmation_code",
        "stripe_payment_intent_id",
        "delivery_id",
        "delivery_tracking_url",
        "created_at",
        "updated_at",
        "confirmed_at",
    ]
