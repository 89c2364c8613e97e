"""
Seed the administrator account and the default menu.

Safe to run repeatedly: the admin is only created when missing and the menu
only when it is empty.

Usage:
    uv run python manage.py seed_restaurant
    uv run python manage.py seed_restaurant --skip-admin
"""

import logging
from decimal import Decimal
from typing import Any

from django.conf import settings
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.web.restaurant.models import MenuCategory
from apps.web.restaurant.storage import RestaurantStore

logger = logging.getLogger(__name__)

_IMAGE = "https://images.unsplash.com/{}?ixlib=rb-4.0.3&auto=format&fit=crop&w=800&h=500"

DEFAULT_MENU: list[dict[str, Any]] = [
    {
        "name": "Classic Cheeseburger",
        "description": (
            "Juicy beef patty with melted cheese, fresh vegetables, "
            "and our special sauce."
        ),
        "price": Decimal("3.99"),
        "image_url": _IMAGE.format("photo-1568901346375-23c9450c58cd"),
        "category": MenuCategory.FOOD,
    },
    {
        "name": "Veggie Pasta Salad",
        "description": (
            "Fresh pasta with mixed vegetables, herbs, and light vinaigrette dressing."
        ),
        "price": Decimal("3.49"),
        "image_url": _IMAGE.format("photo-1473093295043-cdd812d0e601"),
        "category": MenuCategory.FOOD,
    },
    {
        "name": "Crispy Chicken Sandwich",
        "description": (
            "Crispy fried chicken breast with lettuce, tomato, "
            "and mayo on a toasted bun."
        ),
        "price": Decimal("3.69"),
        "image_url": _IMAGE.format("photo-1606755962773-d324e0a13086"),
        "category": MenuCategory.FOOD,
    },
    {
        "name": "Berry Smoothie",
        "description": "Refreshing blend of mixed berries, yogurt, and honey.",
        "price": Decimal("2.49"),
        "image_url": _IMAGE.format("photo-1505252585461-04db1eb84625"),
        "category": MenuCategory.JUICE,
    },
    {
        "name": "Fresh Orange Juice",
        "description": "Freshly squeezed orange juice, no added sugar or preservatives.",
        "price": Decimal("1.99"),
        "image_url": _IMAGE.format("photo-1600271886742-f049cd451bba"),
        "category": MenuCategory.JUICE,
    },
    {
        "name": "Cafe Latte",
        "description": "Espresso with steamed milk and a light layer of foam.",
        "price": Decimal("1.79"),
        "image_url": _IMAGE.format("photo-1541167760496-1628856ab772"),
        "category": MenuCategory.BEVERAGE,
    },
    {
        "name": "Hot Chocolate",
        "description": "Rich and creamy hot chocolate topped with whipped cream.",
        "price": Decimal("1.59"),
        "image_url": _IMAGE.format("photo-1542990253-0d0f5be5f0ed"),
        "category": MenuCategory.BEVERAGE,
    },
]


class Command(BaseCommand):
    help = "Create the admin account and default menu if they do not exist"

    def add_arguments(self, parser: Any) -> None:
        parser.add_argument(
            "--skip-admin",
            action="store_true",
            help="Do not create the administrator account",
        )
        parser.add_argument(
            "--skip-menu",
            action="store_true",
            help="Do not insert the default menu",
        )

    def handle(self, *_args: Any, **options: Any) -> None:
        store = RestaurantStore()

        if not options["skip_admin"]:
            self.seed_admin(store)
        if not options["skip_menu"]:
            self.seed_menu(store)

    def seed_admin(self, store: RestaurantStore) -> None:
        """Create the administrator from settings unless it already exists."""
        username = settings.RESTAURANT_ADMIN_USERNAME

        if store.get_user_by_username(username) is not None:
            self.stdout.write(f"Admin {username} already exists")
            return

        store.create_user(
            username=username,
            password=settings.RESTAURANT_ADMIN_PASSWORD,
            name="Admin",
            is_admin=True,
        )
        logger.info("Seeded admin account %s", username)
        self.stdout.write(self.style.SUCCESS(f"Created admin {username}"))

    @transaction.atomic
    def seed_menu(self, store: RestaurantStore) -> None:
        """Insert the default menu when no menu items exist."""
        if store.get_all_menu_items():
            self.stdout.write("Menu already has items, skipping")
            return

        for data in DEFAULT_MENU:
            store.create_menu_item(data)

        logger.info("Seeded %s menu items", len(DEFAULT_MENU))
        self.stdout.write(self.style.SUCCESS(f"Created {len(DEFAULT_MENU)} menu items"))
