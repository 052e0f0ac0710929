"""
Custom managers for restaurant tenancy.

RestaurantScopedManager filters queries by restaurant.
"""

from typing import TYPE_CHECKING, TypeVar

from django.db import models

if TYPE_CHECKING:
    from .models import Restaurant, RestaurantScopedModel

_T = TypeVar("_T", bound="RestaurantScopedModel")


class RestaurantScopedManager(models.Manager[_T]):
    """
    Manager that filters by restaurant.

    Usage in views:
        items = MenuItem.objects.for_restaurant(restaurant).filter(is_available=True)

    SECURITY: Always use for_restaurant() in public views, never raw querysets.
    """

    def for_restaurant(self, restaurant: "Restaurant | None") -> models.QuerySet[_T]:
        """
        Filter queryset by restaurant.

        Raises:
            ValueError: If no restaurant is given
        """
        if restaurant is None:
            msg = "No restaurant given. Resolve the restaurant from the URL first."
            raise ValueError(msg)
        return self.filter(restaurant=restaurant)
