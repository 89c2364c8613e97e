"""
Restaurant models - Menu items, orders and order line items.

Order items are snapshots: they copy the menu item's name and price at
order time, so later menu edits (or deleting the item) never change
order history.
"""

from decimal import Decimal

from django.conf import settings
from django.db import models

from apps.web.core.models import TimeStampedModel


class MenuCategory(models.TextChoices):
    """Conventional menu categories. The category field itself is free text."""

    FOOD = "food", "Food"
    JUICE = "juice", "Juice"
    BEVERAGE = "beverage", "Beverage"


class MenuItem(TimeStampedModel):
    """
    A purchasable product.

    Created, updated and deleted only by admins.
    """

    name = models.CharField(max_length=200)
    description = models.TextField()
    price = models.DecimalField(max_digits=10, decimal_places=2)
    image_url = models.CharField(max_length=500)
    category = models.CharField(
        max_length=50,
        db_index=True,
        help_text='Free text, conventionally "food", "juice" or "beverage"',
    )

    class Meta:
        ordering = ["pk"]

    def __str__(self) -> str:
        return self.name


class OrderStatus(models.TextChoices):
    """
    Order lifecycle status.

    new -> preparing -> ready -> completed, but admins may set any value at
    any time.
    """

    NEW = "new", "New"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready"
    COMPLETED = "completed", "Completed"


class OrderType(models.TextChoices):
    """Order fulfillment type."""

    PICKUP = "pickup", "Pickup"
    DINE_IN = "dine-in", "Dine-in"


class Order(TimeStampedModel):
    """
    Customer order.

    Created together with its line items; only the status changes afterwards.
    """

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="orders",
    )

    # Customer information
    customer_name = models.CharField(max_length=200)
    customer_phone = models.CharField(max_length=30)

    # Order details
    order_type = models.CharField(max_length=20, choices=OrderType.choices)
    special_instructions = models.TextField(null=True, blank=True)
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.NEW,
    )

    # Pricing
    subtotal = models.DecimalField(max_digits=10, decimal_places=2)
    tax = models.DecimalField(max_digits=10, decimal_places=2)
    total = models.DecimalField(max_digits=10, decimal_places=2)

    class Meta:
        ordering = ["-created_at", "-pk"]
        indexes = [
            models.Index(fields=["user", "created_at"], name="order_user_created_idx"),
            models.Index(fields=["status"], name="order_status_idx"),
        ]

    def __str__(self) -> str:
        return f"Order {self.pk} - {self.customer_name}"


class OrderItem(TimeStampedModel):
    """
    Line item in an order.

    menu_item_id is a plain reference, not a foreign key: the menu item may
    be deleted later without touching the order.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    menu_item_id = models.PositiveBigIntegerField(
        help_text="Menu item this line was ordered from (not enforced)",
    )

    # Snapshot of the menu item at order time
    name = models.CharField(max_length=200)
    price = models.DecimalField(max_digits=10, decimal_places=2)
    quantity = models.PositiveIntegerField()

    class Meta:
        ordering = ["pk"]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.name}"

    @property
    def line_total(self) -> Decimal:
        """Price times quantity for this line."""
        return self.price * self.quantity
