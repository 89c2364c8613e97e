"""
Pydantic schemas for menu and order API requests and responses.

These schemas define the public API contract. Keys are camelCase on the
wire (imageUrl, customerName, cartItems, ...); money is validated as a
decimal rounded to cents and emitted as a JSON number.
"""

from datetime import datetime
from decimal import Decimal
from typing import Annotated, Literal

from pydantic import AfterValidator, Field, PlainSerializer

from apps.web.core.http import CamelModel
from apps.web.restaurant.pricing import MAX_AMOUNT, to_cents

Money = Annotated[
    Decimal,
    Field(ge=0, le=MAX_AMOUNT),
    AfterValidator(to_cents),
    PlainSerializer(float, return_type=float, when_used="json"),
]

OrderTypeValue = Literal["pickup", "dine-in"]


# =============================================================================
# Menu Schemas
# =============================================================================


class MenuItemSchema(CamelModel):
    """A menu item as returned by the API."""

    id: int
    name: str
    description: str
    price: Money
    image_url: str
    category: str


class MenuItemCreateRequest(CamelModel):
    """Request body for POST /api/menu."""

    name: str = Field(..., min_length=1, max_length=200)
    description: str
    price: Money
    image_url: str = Field(..., max_length=500)
    category: str = Field(..., min_length=1, max_length=50)


class MenuItemUpdateRequest(CamelModel):
    """Request body for PUT /api/menu/{id}. Only the fields sent are changed."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = None
    price: Money | None = None
    image_url: str | None = Field(default=None, max_length=500)
    category: str | None = Field(default=None, min_length=1, max_length=50)


# =============================================================================
# Order Schemas
# =============================================================================


class OrderDetailsSchema(CamelModel):
    """Customer and pricing details of an order creation request."""

    customer_name: str = Field(..., min_length=1, max_length=200)
    customer_phone: str = Field(..., min_length=1, max_length=30)
    order_type: OrderTypeValue
    special_instructions: str | None = Field(default=None, max_length=1000)
    subtotal: Money
    tax: Money
    total: Money


class CartItemSchema(CamelModel):
    """A cart line: the menu item as the client saw it, plus a quantity."""

    id: int = Field(..., ge=1, description="Menu item ID")
    name: str = Field(..., min_length=1, max_length=200)
    price: Money
    quantity: int = Field(..., ge=1, le=999)


class OrderCreateRequest(CamelModel):
    """Request body for POST /api/orders."""

    order_details: OrderDetailsSchema
    cart_items: list[CartItemSchema] = Field(..., min_length=1)


class OrderSchema(CamelModel):
    """An order as returned by the API."""

    id: int
    user_id: int
    customer_name: str
    customer_phone: str
    order_type: str
    special_instructions: str | None
    status: str
    subtotal: Money
    tax: Money
    total: Money
    created_at: datetime


class OrderItemSchema(CamelModel):
    """A line item in an order response."""

    id: int
    order_id: int
    menu_item_id: int
    name: str
    price: Money
    quantity: int


class OrderWithItemsResponse(CamelModel):
    """Response for GET /api/orders/{id}."""

    order: OrderSchema
    items: list[OrderItemSchema]
