"""Django app configuration for the storefront."""

from django.apps import AppConfig


class StorefrontConfig(AppConfig):
    """Storefront app configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.web.storefront"
    verbose_name = "Storefront"
