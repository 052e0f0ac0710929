"""
URL configuration for the restaurant storefront.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("payments/", include("apps.web.payments.urls")),
    # Public storefront API, scoped to a restaurant
    path("api/restaurants/<slug:slug>/", include("apps.web.storefront.urls")),
    path(
        "api/restaurants/<slug:slug>/payments/",
        include("apps.web.payments.api_urls"),
    ),
    path(
        "api/restaurants/<slug:slug>/delivery/",
        include("apps.web.delivery.urls"),
    ),
]
