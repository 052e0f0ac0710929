"""
URL routing for the restaurant-scoped payment API.

Mounted under /api/restaurants/<slug>/payments/.
"""

from django.urls import path

from apps.web.payments import views

app_name = "payments_api"

urlpatterns = [
    path("intent", views.create_intent, name="intent_create"),
]
