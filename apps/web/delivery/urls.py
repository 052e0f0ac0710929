"""
URL routing for delivery endpoints.

Mounted under /api/restaurants/<slug>/delivery/.
"""

from django.urls import path

from apps.web.delivery import views

app_name = "delivery"

urlpatterns = [
    path("quote", views.delivery_quote, name="quote"),
    path("provider-quote", views.provider_quote, name="provider_quote"),
    path("deliveries", views.create_delivery, name="delivery_create"),
    path(
        "deliveries/<str:delivery_id>",
        views.delivery_status,
        name="delivery_status",
    ),
    # Staff-only DoorDash account management
    path("business", views.create_business, name="business_create"),
    path("stores", views.stores, name="stores"),
    path("defaults", views.list_defaults, name="defaults"),
]
