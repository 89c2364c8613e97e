"""
Restaurant data store - the repository every API view goes through.

One RestaurantStore instance is created by the root URLconf and injected
into the views as the "storage" kwarg. Lookups that find nothing return
None (or False for deletes) instead of raising; the views turn that into
a 404.

Ids are database auto-increment keys: assigned in creation order and
never reused.
"""

import logging
from collections.abc import Iterable, Mapping
from typing import Any, NamedTuple

from django.contrib.auth import get_user_model
from django.db import transaction

from apps.web.core.models import User
from apps.web.restaurant.models import MenuItem, Order, OrderItem

logger = logging.getLogger(__name__)

ALL_CATEGORIES = "all"

MENU_ITEM_FIELDS = frozenset({"name", "description", "price", "image_url", "category"})


class OrderWithItems(NamedTuple):
    """An order together with all of its line items."""

    order: Order
    items: list[OrderItem]


class RestaurantStore:
    """
    Users, menu items and orders backed by the Django ORM.

    Usage:
        store = RestaurantStore()
        item = store.create_menu_item({"name": "Tea", ...})
        store.get_menu_item(item.pk)
    """

    # -------------------------------------------------------------------------
    # Users
    # -------------------------------------------------------------------------

    def get_user(self, user_id: int) -> User | None:
        return get_user_model().objects.filter(pk=user_id).first()

    def get_user_by_username(self, username: str) -> User | None:
        """Find a user by username, ignoring case."""
        return get_user_model().objects.get_by_username(username)

    def create_user(
        self,
        username: str,
        password: str,
        name: str,
        is_admin: bool = False,
    ) -> User:
        """Create a user; the password is hashed before it is stored."""
        return get_user_model().objects.create_user(
            username=username,
            password=password,
            name=name,
            is_admin=is_admin,
        )

    # -------------------------------------------------------------------------
    # Menu items
    # -------------------------------------------------------------------------

    def get_all_menu_items(self) -> list[MenuItem]:
        """All menu items in insertion order."""
        return list(MenuItem.objects.order_by("pk"))

    def get_menu_items_by_category(self, category: str) -> list[MenuItem]:
        """Menu items in one category; "all" returns the full menu."""
        if category == ALL_CATEGORIES:
            return self.get_all_menu_items()
        return list(MenuItem.objects.filter(category=category).order_by("pk"))

    def get_menu_item(self, item_id: int) -> MenuItem | None:
        return MenuItem.objects.filter(pk=item_id).first()

    def create_menu_item(self, data: Mapping[str, Any]) -> MenuItem:
        item = MenuItem.objects.create(**_menu_fields(data))
        logger.info("Created menu item %s (%s)", item.pk, item.name)
        return item

    def update_menu_item(
        self, item_id: int, changes: Mapping[str, Any]
    ) -> MenuItem | None:
        """
        Merge changes into a menu item.

        Only the given fields change. Returns None if the item does not exist.
        """
        item = self.get_menu_item(item_id)
        if item is None:
            return None

        fields = _menu_fields(changes)
        for field, value in fields.items():
            setattr(item, field, value)
        if fields:
            item.save(update_fields=[*fields, "updated_at"])
            logger.info(
                "Updated menu item %s: %s", item.pk, ", ".join(sorted(fields))
            )
        return item

    def delete_menu_item(self, item_id: int) -> bool:
        """Delete a menu item. Returns False if it did not exist."""
        deleted, _ = MenuItem.objects.filter(pk=item_id).delete()
        if deleted:
            logger.info("Deleted menu item %s", item_id)
        return deleted > 0

    # -------------------------------------------------------------------------
    # Orders
    # -------------------------------------------------------------------------

    @transaction.atomic
    def create_order(
        self,
        order: Mapping[str, Any],
        items: Iterable[Mapping[str, Any]],
    ) -> Order:
        """
        Create an order and its line items in one transaction.

        The order gets its id and timestamp first; every item is then linked
        to it. Any item's orderId in the input is ignored.

        Args:
            order: Order fields (user_id, customer_name, customer_phone,
                order_type, special_instructions, subtotal, tax, total)
            items: Line items (menu_item_id, name, price, quantity)

        Raises:
            ValueError: If items is empty
        """
        lines = list(items)
        if not lines:
            raise ValueError("An order needs at least one item")

        new_order = Order.objects.create(**order)
        OrderItem.objects.bulk_create(
            [
                OrderItem(
                    order=new_order,
                    menu_item_id=line["menu_item_id"],
                    name=line["name"],
                    price=line["price"],
                    quantity=line["quantity"],
                )
                for line in lines
            ]
        )
        return new_order

    def get_orders_by_user_id(self, user_id: int) -> list[Order]:
        """A user's orders, newest first."""
        return list(Order.objects.filter(user_id=user_id).order_by("-created_at", "-pk"))

    def get_all_orders(self) -> list[Order]:
        """Every order, newest first."""
        return list(Order.objects.order_by("-created_at", "-pk"))

    def get_order_with_items(self, order_id: int) -> OrderWithItems | None:
        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            return None
        return OrderWithItems(order=order, items=list(order.items.order_by("pk")))

    def update_order_status(self, order_id: int, status: str) -> Order | None:
        """
        Replace an order's status.

        The value is not checked here; callers validate it.
        Returns None if the order does not exist.
        """
        order = Order.objects.filter(pk=order_id).first()
        if order is None:
            return None

        previous = order.status
        order.status = status
        order.save(update_fields=["status", "updated_at"])
        logger.info("Order %s status %s -> %s", order.pk, previous, status)
        return order


def _menu_fields(data: Mapping[str, Any]) -> dict[str, Any]:
    """Keep only writable menu item fields."""
    return {key: value for key, value in data.items() if key in MENU_ITEM_FIELDS}
