"""
Custom managers for users.

UserManager makes username lookups case-insensitive, so "Alice@Example.com"
and "alice@example.com" resolve to the same account.
"""

from typing import TYPE_CHECKING, Any

from django.contrib.auth.models import UserManager as BaseUserManager

if TYPE_CHECKING:
    from .models import User


class UserManager(BaseUserManager["User"]):
    """
    Manager for the custom User model.

    Usage:
        user = User.objects.get_by_username("ADMIN@milestar.com")

    Django's ModelBackend authenticates through get_by_natural_key(), so
    logins are case-insensitive too.
    """

    def get_by_natural_key(self, username: str | None) -> "User":
        return self.get(**{f"{self.model.USERNAME_FIELD}__iexact": username})

    def get_by_username(self, username: str) -> "User | None":
        """
        Look up a user by username, ignoring case.

        Returns:
            The matching User, or None if no account uses that username
        """
        return self.filter(**{f"{self.model.USERNAME_FIELD}__iexact": username}).first()

    def create_superuser(
        self,
        username: str,
        email: str | None = None,
        password: str | None = None,
        **extra_fields: Any,
    ) -> "User":
        extra_fields.setdefault("is_admin", True)
        extra_fields.setdefault("name", username)
        return super().create_superuser(username, email, password, **extra_fields)
