"""
Access policy for API endpoints.

All role checks are declared in ACCESS_POLICY instead of being repeated in
each view. Views name the action they perform:

    @require_access("menu:create")
    def create_menu_item(request, storage):
        ...

Ownership checks depend on the record being accessed, so they are plain
functions next to the table (can_view_order, sees_all_orders).
"""

from collections.abc import Callable
from enum import Enum
from functools import wraps
from typing import TYPE_CHECKING, Any

from django.http import HttpRequest

from .http import error_response

if TYPE_CHECKING:
    from apps.web.restaurant.models import Order


class Access(Enum):
    """Who may perform an action."""

    PUBLIC = "public"
    AUTHENTICATED = "authenticated"
    ADMIN = "admin"


ACCESS_POLICY: dict[str, Access] = {
    # Authentication
    "auth:register": Access.PUBLIC,
    "auth:login": Access.PUBLIC,
    "auth:logout": Access.PUBLIC,
    "auth:user": Access.AUTHENTICATED,
    # Menu
    "menu:list": Access.PUBLIC,
    "menu:detail": Access.PUBLIC,
    "menu:create": Access.ADMIN,
    "menu:update": Access.ADMIN,
    "menu:delete": Access.ADMIN,
    # Orders
    "orders:create": Access.AUTHENTICATED,
    "orders:list": Access.AUTHENTICATED,
    "orders:detail": Access.AUTHENTICATED,
    "orders:update_status": Access.ADMIN,
}


def is_admin(user: Any) -> bool:
    """Check whether the user is an authenticated administrator."""
    return bool(user.is_authenticated and getattr(user, "is_admin", False))


def is_allowed(user: Any, action: str) -> bool:
    """
    Check the policy table for an action.

    Raises:
        KeyError: If the action is not declared in ACCESS_POLICY
    """
    access = ACCESS_POLICY[action]
    if access is Access.PUBLIC:
        return True
    if access is Access.AUTHENTICATED:
        return bool(user.is_authenticated)
    return is_admin(user)


def sees_all_orders(user: Any) -> bool:
    """Admins list every order; everyone else only their own."""
    return is_admin(user)


def can_view_order(user: Any, order: "Order") -> bool:
    """Only admins and the customer who placed the order may view it."""
    if not user.is_authenticated:
        return False
    return is_admin(user) or order.user_id == user.pk


def require_access(action: str) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """
    Decorator enforcing ACCESS_POLICY for a view.

    Anonymous callers get 401 on any non-public action; authenticated
    non-admins get 403 on admin actions.
    """
    if action not in ACCESS_POLICY:
        raise KeyError(f"No access policy declared for '{action}'")

    def decorator(view_func: Callable[..., Any]) -> Callable[..., Any]:
        @wraps(view_func)
        def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
            user = request.user
            if is_allowed(user, action):
                return view_func(request, *args, **kwargs)
            if not user.is_authenticated:
                return error_response("Unauthorized", status=401)
            return error_response("Forbidden - Admin access required", status=403)

        return wrapper

    return decorator
