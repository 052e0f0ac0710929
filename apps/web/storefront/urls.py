"""
URL routing for storefront API endpoints.

All endpoints are public and CORS-enabled.
"""

from django.urls import path

from apps.web.storefront import views

app_name = "storefront"

urlpatterns = [
    path("menu", views.menu, name="menu"),
    # Session cart
    path("cart", views.cart, name="cart"),
    path("cart/items", views.cart_add_item, name="cart_add_item"),
    path("cart/items/<int:item_id>", views.cart_item, name="cart_item"),
    # Orders
    path("orders", views.create_order, name="order_create"),
    path("orders/<int:order_id>", views.get_order, name="order_detail"),
    path("orders/<int:order_id>/status", views.order_status, name="order_status"),
    path("orders/<int:order_id>/confirm", views.confirm_order, name="order_confirm"),
]
