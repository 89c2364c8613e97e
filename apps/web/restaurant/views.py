"""
Menu and Order API views - JSON endpoints for the ordering SPA.

Each endpoint follows the same steps: check access (ACCESS_POLICY), validate
the path and body, call the injected RestaurantStore, map the result to a
response. A None from the store becomes a 404.

Menu reads are public; menu writes and status changes are admin-only;
orders require a session.
"""

import logging
from typing import Any

from django.conf import settings
from django.http import Http404, HttpRequest, HttpResponse, JsonResponse
from django.views.decorators.http import require_http_methods

from pydantic import ValidationError as PydanticValidationError

from apps.web.core.http import (
    FieldViolation,
    dump,
    error_response,
    json_response,
    load_json,
    parse_id,
    validation_error_response,
)
from apps.web.core.permissions import (
    can_view_order,
    require_access,
    sees_all_orders,
)
from apps.web.restaurant.models import OrderStatus
from apps.web.restaurant.pricing import (
    MAX_AMOUNT,
    OrderTotals,
    calculate_totals,
    exceeds_max_amount,
    mismatched_fields,
)
from apps.web.restaurant.serializers import (
    CartItemSchema,
    MenuItemCreateRequest,
    MenuItemSchema,
    MenuItemUpdateRequest,
    OrderCreateRequest,
    OrderSchema,
    OrderWithItemsResponse,
)
from apps.web.restaurant.storage import ALL_CATEGORIES, RestaurantStore

logger = logging.getLogger(__name__)


# =============================================================================
# Menu API Endpoints
# =============================================================================


@require_http_methods(["GET", "POST"])
def menu_collection(request: HttpRequest, storage: RestaurantStore) -> JsonResponse:
    """Dispatch /api/menu by method."""
    if request.method == "POST":
        return create_menu_item(request, storage)
    return list_menu(request, storage)


@require_http_methods(["GET", "PUT", "DELETE"])
def menu_item_resource(
    request: HttpRequest, item_id: str, storage: RestaurantStore
) -> HttpResponse:
    """Dispatch /api/menu/{id} by method."""
    if request.method == "PUT":
        return update_menu_item(request, item_id, storage)
    if request.method == "DELETE":
        return delete_menu_item(request, item_id, storage)
    return get_menu_item(request, item_id, storage)


@require_access("menu:list")
def list_menu(request: HttpRequest, storage: RestaurantStore) -> JsonResponse:
    """
    GET /api/menu?category=

    Returns menu items in insertion order. A missing category or
    category=all returns the whole menu.
    """
    category = request.GET.get("category") or ALL_CATEGORIES
    items = storage.get_menu_items_by_category(category)
    return json_response([dump(MenuItemSchema.model_validate(item)) for item in items])


@require_access("menu:detail")
def get_menu_item(
    request: HttpRequest, item_id: str, storage: RestaurantStore
) -> JsonResponse:
    """
    GET /api/menu/{id}

    Response: MenuItemSchema (200), 400 for a malformed id, or 404
    """
    item = storage.get_menu_item(parse_id(item_id))
    if item is None:
        raise Http404("Menu item not found")
    return json_response(dump(MenuItemSchema.model_validate(item)))


@require_access("menu:create")
def create_menu_item(request: HttpRequest, storage: RestaurantStore) -> JsonResponse:
    """
    POST /api/menu (admin)

    Request body: MenuItemCreateRequest
    Response: MenuItemSchema (201) or 400 listing the invalid fields
    """
    try:
        data = MenuItemCreateRequest.model_validate(load_json(request))
    except PydanticValidationError as e:
        return validation_error_response("Invalid menu item data", e)

    item = storage.create_menu_item(data.model_dump())
    return json_response(dump(MenuItemSchema.model_validate(item)), status=201)


@require_access("menu:update")
def update_menu_item(
    request: HttpRequest, item_id: str, storage: RestaurantStore
) -> JsonResponse:
    """
    PUT /api/menu/{id} (admin)

    Partial update: only the fields present in the body change.

    Response: MenuItemSchema (200), 400, or 404
    """
    pk = parse_id(item_id)
    try:
        data = MenuItemUpdateRequest.model_validate(load_json(request))
    except PydanticValidationError as e:
        return validation_error_response("Invalid menu item data", e)

    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    item = storage.update_menu_item(pk, changes)
    if item is None:
        raise Http404("Menu item not found")
    return json_response(dump(MenuItemSchema.model_validate(item)))


@require_access("menu:delete")
def delete_menu_item(
    request: HttpRequest, item_id: str, storage: RestaurantStore
) -> HttpResponse:
    """
    DELETE /api/menu/{id} (admin)

    Response: 204 with no body, or 404
    """
    if not storage.delete_menu_item(parse_id(item_id)):
        raise Http404("Menu item not found")
    return HttpResponse(status=204)


# =============================================================================
# Order API Endpoints
# =============================================================================


@require_http_methods(["GET", "POST"])
def order_collection(request: HttpRequest, storage: RestaurantStore) -> JsonResponse:
    """Dispatch /api/orders by method."""
    if request.method == "POST":
        return create_order(request, storage)
    return list_orders(request, storage)


def _cart_is_empty(body: Any) -> bool:
    """True unless the body carries a non-empty cartItems list."""
    if not isinstance(body, dict):
        return True
    cart = body.get("cartItems", body.get("cart_items"))
    return not isinstance(cart, list) or not cart


def _reprice_from_menu(
    storage: RestaurantStore, cart: list[CartItemSchema]
) -> tuple[list[FieldViolation], list[dict[str, Any]]]:
    """
    Snapshot current menu names and prices for each cart line.

    Returns:
        Tuple of (errors, order_items)
    """
    errors: list[FieldViolation] = []
    order_items: list[dict[str, Any]] = []

    for i, line in enumerate(cart):
        menu_item = storage.get_menu_item(line.id)
        if menu_item is None:
            errors.append(
                FieldViolation(field=f"cartItems.{i}.id", message="Menu item not found")
            )
            continue
        order_items.append(
            {
                "menu_item_id": menu_item.pk,
                "name": menu_item.name,
                "price": menu_item.price,
                "quantity": line.quantity,
            }
        )

    return errors, order_items


@require_access("orders:create")
def create_order(request: HttpRequest, storage: RestaurantStore) -> JsonResponse:
    """
    POST /api/orders

    Place an order for the session's user. The owner is always the caller;
    any userId in the body is ignored.

    Request body: {"orderDetails": OrderDetailsSchema, "cartItems": [CartItemSchema]}
    Response: OrderSchema (201) or 400

    By default the client's subtotal/tax/total are stored as sent and a
    mismatch is only logged. With RESTAURANT_RECOMPUTE_TOTALS the lines are
    repriced from the menu and the totals recomputed.
    """
    body = load_json(request)
    if _cart_is_empty(body):
        return error_response("Cart cannot be empty.", status=400)

    try:
        order_request = OrderCreateRequest.model_validate(body)
    except PydanticValidationError as e:
        return validation_error_response("Invalid order data", e)

    details = order_request.order_details
    claimed = OrderTotals(subtotal=details.subtotal, tax=details.tax, total=details.total)

    recompute = getattr(settings, "RESTAURANT_RECOMPUTE_TOTALS", False)
    if recompute:
        errors, order_items = _reprice_from_menu(storage, order_request.cart_items)
        if errors:
            return error_response("Invalid order data", status=400, errors=errors)
    else:
        order_items = [
            {
                "menu_item_id": line.id,
                "name": line.name,
                "price": line.price,
                "quantity": line.quantity,
            }
            for line in order_request.cart_items
        ]

    computed = calculate_totals((line["price"], line["quantity"]) for line in order_items)
    mismatches = mismatched_fields(claimed, computed)
    if mismatches:
        logger.warning(
            "Order totals from user %s do not match the cart (%s): "
            "claimed=%s computed=%s",
            request.user.pk,
            ", ".join(mismatches),
            claimed,
            computed,
        )
    totals = computed if recompute else claimed

    too_large = exceeds_max_amount(totals)
    if too_large:
        logger.info(
            "Rejected order from user %s: %s over %s",
            request.user.pk,
            ", ".join(too_large),
            MAX_AMOUNT,
        )
        return error_response(
            "Invalid order data",
            status=400,
            errors=[
                FieldViolation(
                    field="orderDetails.total",
                    message=f"Order total may not exceed {MAX_AMOUNT}",
                )
            ],
        )

    order = storage.create_order(
        {
            "user_id": request.user.pk,
            "customer_name": details.customer_name,
            "customer_phone": details.customer_phone,
            "order_type": details.order_type,
            "special_instructions": details.special_instructions,
            "subtotal": totals.subtotal,
            "tax": totals.tax,
            "total": totals.total,
        },
        order_items,
    )
    logger.info(
        "Created order %s for user %s: %s item(s), total %s",
        order.pk,
        request.user.pk,
        len(order_items),
        order.total,
    )

    return json_response(dump(OrderSchema.model_validate(order)), status=201)


@require_access("orders:list")
def list_orders(request: HttpRequest, storage: RestaurantStore) -> JsonResponse:
    """
    GET /api/orders

    Admins get every order; customers get their own. Newest first.
    """
    if sees_all_orders(request.user):
        orders = storage.get_all_orders()
    else:
        orders = storage.get_orders_by_user_id(request.user.pk)
    return json_response([dump(OrderSchema.model_validate(order)) for order in orders])


@require_http_methods(["GET"])
@require_access("orders:detail")
def order_detail(
    request: HttpRequest, order_id: str, storage: RestaurantStore
) -> JsonResponse:
    """
    GET /api/orders/{id}

    Response: OrderWithItemsResponse (200), 404, or 403 when the order
    belongs to another customer
    """
    found = storage.get_order_with_items(parse_id(order_id))
    if found is None:
        raise Http404("Order not found")

    if not can_view_order(request.user, found.order):
        return error_response("Access denied", status=403)

    return json_response(dump(OrderWithItemsResponse.model_validate(found)))


@require_http_methods(["PATCH"])
@require_access("orders:update_status")
def update_order_status(
    request: HttpRequest, order_id: str, storage: RestaurantStore
) -> JsonResponse:
    """
    PATCH /api/orders/{id}/status (admin)

    Request body: {"status": "new" | "preparing" | "ready" | "completed"}

    Any of the four values may be set at any time; there is no forward-only
    rule.

    Response: OrderSchema (200), 400, or 404
    """
    pk = parse_id(order_id)
    body = load_json(request)
    status = body.get("status") if isinstance(body, dict) else None

    if not status or not isinstance(status, str):
        return error_response(
            "Status is required",
            status=400,
            errors=[FieldViolation(field="status", message="Field required")],
        )

    if status not in OrderStatus.values:
        return error_response(
            "Invalid status",
            status=400,
            errors=[
                FieldViolation(
                    field="status",
                    message=f"Must be one of: {', '.join(OrderStatus.values)}",
                )
            ],
        )

    order = storage.update_order_status(pk, status)
    if order is None:
        raise Http404("Order not found")
    return json_response(dump(OrderSchema.model_validate(order)))
