"""Django app configuration for delivery estimation and dispatch."""

from django.apps import AppConfig


class DeliveryConfig(AppConfig):
    """Delivery app configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.web.delivery"
    verbose_name = "Delivery"
