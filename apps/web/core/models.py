"""
Core models - Users and shared model bases.

Usernames are compared case-insensitively everywhere (login, registration,
uniqueness). The is_admin flag gates menu management, order status changes
and visibility of other customers' orders.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.db.models.functions import Lower

from .managers import UserManager


class User(AbstractUser):
    """
    Customer or administrator account.

    Created at registration and append-only afterwards.
    """

    name = models.CharField(max_length=200, help_text="Display name")
    is_admin = models.BooleanField(
        default=False,
        help_text="Can manage the menu and order statuses, sees all orders",
    )

    objects = UserManager()

    class Meta:
        ordering = ["username"]
        constraints = [
            models.UniqueConstraint(
                Lower("username"),
                name="unique_username_case_insensitive",
            ),
        ]

    def __str__(self) -> str:
        if self.is_admin:
            return f"{self.username} (admin)"
        return self.username


class TimeStampedModel(models.Model):
    """
    Abstract base for restaurant records.

    Provides created/updated timestamps.
    """

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True
