"""Tests for core models and the restaurant-scoped manager."""

import pytest

from apps.web.core.models import User
from apps.web.storefront.models import MenuItem
from apps.web.storefront.tests.factories import MenuItemFactory, RestaurantFactory


@pytest.mark.django_db
class TestUserCanManage:
    """Tests for User.can_manage."""

    def test_staff_user_manages_any_restaurant(self):
        other = RestaurantFactory()
        admin = User.objects.create_user(username="admin", is_staff=True)

        assert admin.can_manage(other)

    def test_owner_manages_own_restaurant(self, restaurant, user):
        assert user.can_manage(restaurant)

    def test_owner_cannot_manage_other_restaurant(self, user):
        assert not user.can_manage(RestaurantFactory())

    def test_readonly_user_cannot_manage(self, restaurant):
        viewer = User.objects.create_user(
            username="viewer", restaurant=restaurant, role=User.Role.READONLY
        )

        assert not viewer.can_manage(restaurant)


@pytest.mark.django_db
class TestRestaurantScopedManager:
    """Tests for RestaurantScopedManager.for_restaurant."""

    def test_filters_to_restaurant(self):
        item = MenuItemFactory()
        MenuItemFactory()  # another restaurant

        items = MenuItem.objects.for_restaurant(item.restaurant)

        assert list(items) == [item]

    def test_requires_restaurant(self):
        with pytest.raises(ValueError):
            MenuItem.objects.for_restaurant(None)
