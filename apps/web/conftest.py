"""
Pytest configuration for Django app tests.
"""

from django.contrib.auth import get_user_model
from django.test import Client as DjangoClient

import pytest

from apps.web.core.models import Restaurant, User


@pytest.fixture
def restaurant() -> Restaurant:
    """Create a test restaurant (tenant)."""
    return Restaurant.objects.create(
        slug="joes-pizza",
        name="Joe's Pizza",
        email="orders@joespizza.example.com",
        phone="(905) 555-0100",
        address="2180 Credit Valley Rd, Mississauga, ON L5M 3C9",
    )


@pytest.fixture
def user(restaurant: Restaurant) -> User:
    """Create an owner user of the test restaurant."""
    return get_user_model().objects.create_user(
        username="owner",
        email="owner@example.com",
        password="testpass123",
        restaurant=restaurant,
        role=User.Role.OWNER,
    )


@pytest.fixture
def api_client() -> DjangoClient:
    """Django test client for API requests."""
    return DjangoClient()


@pytest.fixture
def staff_client(user: User) -> DjangoClient:
    """Test client logged in as the restaurant owner."""
    client = DjangoClient()
    client.force_login(user)
    return client
