"""
Session-backed shopping cart.

The cart stores only {menu_item_id: quantity} in the session, one cart per
restaurant. Prices and availability are read from the menu every time the
cart is resolved, so a line whose item was removed or 86'd silently drops out.
"""

from dataclasses import dataclass
from decimal import Decimal

from django.contrib.sessions.backends.base import SessionBase

from apps.web.core.models import Restaurant
from apps.web.storefront.models import MenuItem

SESSION_KEY_PREFIX = "cart"
MAX_QUANTITY = 99


@dataclass(frozen=True)
class CartLine:
    menu_item: MenuItem
    quantity: int

    @property
    def line_total(self) -> Decimal:
        return self.menu_item.price * self.quantity


class Cart:
    """
    Cart of one restaurant within a browser session.

    Usage:
        cart = Cart(request.session, restaurant)
        cart.add(item, 2)
        cart.subtotal()
    """

    def __init__(self, session: SessionBase, restaurant: Restaurant) -> None:
        self._session = session
        self.restaurant = restaurant
        self.session_key = f"{SESSION_KEY_PREFIX}:{restaurant.slug}"

    def _quantities(self) -> dict[str, int]:
        return dict(self._session.get(self.session_key, {}))

    def _store(self, quantities: dict[str, int]) -> None:
        self._session[self.session_key] = quantities
        self._session.modified = True

    def add(self, item: MenuItem, quantity: int = 1) -> int:
        """Add an item; adding an item already in the cart increases its quantity."""
        quantities = self._quantities()
        key = str(item.pk)
        quantities[key] = min(quantities.get(key, 0) + quantity, MAX_QUANTITY)
        self._store(quantities)
        return quantities[key]

    def update_quantity(self, item_id: int, quantity: int) -> None:
        """Set the quantity of a line; zero or less removes it."""
        if quantity <= 0:
            self.remove(item_id)
            return
        quantities = self._quantities()
        quantities[str(item_id)] = min(quantity, MAX_QUANTITY)
        self._store(quantities)

    def remove(self, item_id: int) -> None:
        quantities = self._quantities()
        if quantities.pop(str(item_id), None) is not None:
            self._store(quantities)

    def clear(self) -> None:
        if self.session_key in self._session:
            del self._session[self.session_key]
            self._session.modified = True

    def __contains__(self, item_id: int) -> bool:
        return str(item_id) in self._quantities()

    def lines(self) -> list[CartLine]:
        """
        Resolve the cart against the menu.

        Lines for items that no longer exist or are unavailable are dropped
        from the session as well as from the result.
        """
        quantities = self._quantities()
        if not quantities:
            return []

        items = MenuItem.objects.for_restaurant(self.restaurant).filter(
            pk__in=[int(pk) for pk in quantities], is_available=True
        )
        by_id = {str(item.pk): item for item in items}

        lines = [
            CartLine(menu_item=by_id[key], quantity=quantity)
            for key, quantity in quantities.items()
            if key in by_id
        ]

        if len(by_id) != len(quantities):
            self._store({key: q for key, q in quantities.items() if key in by_id})

        return lines

    def subtotal(self) -> Decimal:
        return sum((line.line_total for line in self.lines()), Decimal("0"))
