"""
Integration tests for menu and order API views.
"""

from decimal import Decimal

from django.test import Client as DjangoClient

import pytest

from apps.web.restaurant.models import MenuItem, Order, OrderItem, OrderStatus
from apps.web.restaurant.tests.factories import (
    MenuItemFactory,
    OrderFactory,
    OrderItemFactory,
)

TEA = {
    "name": "Tea",
    "price": 1.5,
    "category": "beverage",
    "description": "d",
    "imageUrl": "u",
}


@pytest.fixture
def tea(db) -> MenuItem:
    """A menu item priced at 1.50."""
    return MenuItemFactory(
        name="Tea",
        description="d",
        price=Decimal("1.50"),
        image_url="u",
        category="beverage",
    )


def order_payload(menu_item: MenuItem, quantity: int = 2, **details) -> dict:
    """Order request body for a single cart line, with matching 7% totals."""
    subtotal = menu_item.price * quantity
    tax = (subtotal * Decimal("0.07")).quantize(Decimal("0.01"))
    order_details = {
        "customerName": "A",
        "customerPhone": "1234567890",
        "orderType": "pickup",
        "subtotal": float(subtotal),
        "tax": float(tax),
        "total": float(subtotal + tax),
    }
    order_details.update(details)
    return {
        "orderDetails": order_details,
        "cartItems": [
            {
                "id": menu_item.pk,
                "name": menu_item.name,
                "price": float(menu_item.price),
                "quantity": quantity,
            }
        ],
    }


def post_json(http_client: DjangoClient, path: str, data):
    return http_client.post(path, data, content_type="application/json")


# =============================================================================
# Menu
# =============================================================================


@pytest.mark.django_db
class TestMenuListView:
    """Tests for GET /api/menu."""

    def test_menu_is_public(self, api_client: DjangoClient, tea):
        """Anonymous callers can browse the menu."""
        response = api_client.get("/api/menu")

        assert response.status_code == 200
        assert response.json() == [
            {
                "id": tea.pk,
                "name": "Tea",
                "description": "d",
                "price": 1.5,
                "imageUrl": "u",
                "category": "beverage",
            }
        ]

    def test_insertion_order(self, api_client: DjangoClient):
        first = MenuItemFactory(name="Zebra Cake")
        second = MenuItemFactory(name="Apple Pie")

        response = api_client.get("/api/menu")

        assert [item["id"] for item in response.json()] == [first.pk, second.pk]

    def test_filter_by_category(self, api_client: DjangoClient):
        burger = MenuItemFactory(category="food")
        MenuItemFactory(category="juice")

        response = api_client.get("/api/menu", {"category": "food"})

        assert [item["id"] for item in response.json()] == [burger.pk]

    def test_category_all_returns_everything(self, api_client: DjangoClient):
        MenuItemFactory(category="food")
        MenuItemFactory(category="juice")

        response = api_client.get("/api/menu", {"category": "all"})

        assert len(response.json()) == 2

    def test_empty_menu(self, api_client: DjangoClient):
        response = api_client.get("/api/menu")

        assert response.status_code == 200
        assert response.json() == []


@pytest.mark.django_db
class TestMenuDetailView:
    """Tests for GET /api/menu/{id}."""

    def test_get_item(self, api_client: DjangoClient, tea):
        response = api_client.get(f"/api/menu/{tea.pk}")

        assert response.status_code == 200
        assert response.json()["name"] == "Tea"

    def test_missing_item(self, api_client: DjangoClient):
        response = api_client.get("/api/menu/424242")

        assert response.status_code == 404
        assert response.json() == {"message": "Menu item not found"}

    def test_malformed_id(self, api_client: DjangoClient):
        response = api_client.get("/api/menu/-1")

        assert response.status_code == 400
        assert response.json() == {"message": "Invalid ID"}


@pytest.mark.django_db
class TestMenuCreateView:
    """Tests for POST /api/menu."""

    def test_admin_creates_item(self, admin_api_client: DjangoClient, api_client):
        """A created item shows up in the public menu with its price."""
        response = post_json(admin_api_client, "/api/menu", TEA)

        assert response.status_code == 201
        created = response.json()
        assert created["price"] == 1.5
        assert created["imageUrl"] == "u"

        listing = api_client.get("/api/menu").json()
        assert {"id": created["id"], "price": 1.5} in [
            {"id": item["id"], "price": item["price"]} for item in listing
        ]

    def test_anonymous_gets_401(self, api_client: DjangoClient):
        response = post_json(api_client, "/api/menu", TEA)

        assert response.status_code == 401
        assert response.json() == {"message": "Unauthorized"}
        assert not MenuItem.objects.exists()

    def test_customer_gets_403(self, customer_client: DjangoClient):
        response = post_json(customer_client, "/api/menu", TEA)

        assert response.status_code == 403
        assert response.json() == {"message": "Forbidden - Admin access required"}
        assert not MenuItem.objects.exists()

    def test_missing_fields_listed(self, admin_api_client: DjangoClient):
        response = post_json(admin_api_client, "/api/menu", {"name": "Tea"})

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Invalid menu item data"
        fields = {error["field"] for error in data["errors"]}
        assert fields == {"description", "price", "imageUrl", "category"}

    def test_negative_price_rejected(self, admin_api_client: DjangoClient):
        response = post_json(admin_api_client, "/api/menu", {**TEA, "price": -1})

        assert response.status_code == 400
        assert [error["field"] for error in response.json()["errors"]] == ["price"]

    def test_extra_fields_ignored(self, admin_api_client: DjangoClient):
        response = post_json(
            admin_api_client, "/api/menu", {**TEA, "id": 999, "calories": 5}
        )

        assert response.status_code == 201
        assert "calories" not in response.json()

    def test_price_rounded_to_cents(self, admin_api_client: DjangoClient):
        response = post_json(admin_api_client, "/api/menu", {**TEA, "price": 1.499})

        assert response.status_code == 201
        assert response.json()["price"] == 1.5


@pytest.mark.django_db
class TestMenuUpdateView:
    """Tests for PUT /api/menu/{id}."""

    def test_partial_update(self, admin_api_client: DjangoClient, tea):
        """Only the fields sent are changed."""
        response = admin_api_client.put(
            f"/api/menu/{tea.pk}", {"price": 1.75}, content_type="application/json"
        )

        assert response.status_code == 200
        data = response.json()
        assert data["price"] == 1.75
        assert data["name"] == "Tea"
        tea.refresh_from_db()
        assert tea.price == Decimal("1.75")
        assert tea.category == "beverage"

    def test_missing_item(self, admin_api_client: DjangoClient):
        response = admin_api_client.put(
            "/api/menu/424242", {"name": "Ghost"}, content_type="application/json"
        )

        assert response.status_code == 404

    def test_invalid_field(self, admin_api_client: DjangoClient, tea):
        response = admin_api_client.put(
            f"/api/menu/{tea.pk}", {"price": "free"}, content_type="application/json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["field"] == "price"

    def test_customer_gets_403(self, customer_client: DjangoClient, tea):
        response = customer_client.put(
            f"/api/menu/{tea.pk}", {"price": 0}, content_type="application/json"
        )

        assert response.status_code == 403
        tea.refresh_from_db()
        assert tea.price == Decimal("1.50")


@pytest.mark.django_db
class TestMenuDeleteView:
    """Tests for DELETE /api/menu/{id}."""

    def test_delete_then_get_is_404(self, admin_api_client: DjangoClient, tea):
        response = admin_api_client.delete(f"/api/menu/{tea.pk}")

        assert response.status_code == 204
        assert response.content == b""
        assert admin_api_client.get(f"/api/menu/{tea.pk}").status_code == 404

    def test_delete_missing(self, admin_api_client: DjangoClient):
        response = admin_api_client.delete("/api/menu/424242")

        assert response.status_code == 404

    def test_customer_gets_403(self, customer_client: DjangoClient, tea):
        response = customer_client.delete(f"/api/menu/{tea.pk}")

        assert response.status_code == 403
        assert MenuItem.objects.filter(pk=tea.pk).exists()

    def test_wrong_method(self, admin_api_client: DjangoClient, tea):
        response = admin_api_client.patch(f"/api/menu/{tea.pk}")

        assert response.status_code == 405


# =============================================================================
# Orders
# =============================================================================


@pytest.mark.django_db
class TestOrderCreateView:
    """Tests for POST /api/orders."""

    def test_place_order(self, customer_client: DjangoClient, customer, tea):
        """Two teas at 1.50 with 7% tax total 3.21."""
        response = post_json(customer_client, "/api/orders", order_payload(tea))

        assert response.status_code == 201
        order = response.json()
        assert order["total"] == 3.21
        assert order["subtotal"] == 3.0
        assert order["tax"] == 0.21
        assert order["status"] == "new"
        assert order["userId"] == customer.pk
        assert order["orderType"] == "pickup"
        assert order["specialInstructions"] is None
        assert order["createdAt"]

        detail = customer_client.get(f"/api/orders/{order['id']}").json()
        items = detail["items"]
        assert sum(item["quantity"] for item in items) == 2
        assert sum(item["price"] * item["quantity"] for item in items) == 3.0
        assert items[0]["menuItemId"] == tea.pk
        assert items[0]["orderId"] == order["id"]

    def test_owner_is_always_the_caller(
        self, customer_client: DjangoClient, customer, other_customer, tea
    ):
        """A userId in the body cannot assign the order to someone else."""
        payload = order_payload(tea)
        payload["userId"] = other_customer.pk
        payload["orderDetails"]["userId"] = other_customer.pk

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 201
        assert response.json()["userId"] == customer.pk
        assert Order.objects.get().user == customer

    def test_special_instructions(self, customer_client: DjangoClient, tea):
        payload = order_payload(
            tea, specialInstructions="No sugar", orderType="dine-in"
        )

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 201
        assert response.json()["specialInstructions"] == "No sugar"
        assert response.json()["orderType"] == "dine-in"

    def test_requires_authentication(self, api_client: DjangoClient, tea):
        response = post_json(api_client, "/api/orders", order_payload(tea))

        assert response.status_code == 401
        assert not Order.objects.exists()

    def test_empty_cart(self, customer_client: DjangoClient, tea):
        payload = order_payload(tea)
        payload["cartItems"] = []

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 400
        assert response.json()["message"] == "Cart cannot be empty."
        assert not Order.objects.exists()

    def test_missing_cart(self, customer_client: DjangoClient, tea):
        payload = order_payload(tea)
        del payload["cartItems"]

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 400
        assert response.json()["message"] == "Cart cannot be empty."

    def test_invalid_order_type(self, customer_client: DjangoClient, tea):
        payload = order_payload(tea, orderType="delivery")

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Invalid order data"
        assert [error["field"] for error in data["errors"]] == [
            "orderDetails.orderType"
        ]

    def test_zero_quantity(self, customer_client: DjangoClient, tea):
        payload = order_payload(tea)
        payload["cartItems"][0]["quantity"] = 0

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 400
        fields = [error["field"] for error in response.json()["errors"]]
        assert fields == ["cartItems.0.quantity"]

    def test_missing_customer_fields(self, customer_client: DjangoClient, tea):
        payload = order_payload(tea)
        del payload["orderDetails"]["customerName"]
        payload["orderDetails"]["customerPhone"] = ""

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 400
        fields = {error["field"] for error in response.json()["errors"]}
        assert fields == {"orderDetails.customerName", "orderDetails.customerPhone"}

    def test_mismatched_totals_kept_and_logged(
        self, customer_client: DjangoClient, tea, caplog
    ):
        """Client totals are stored as sent; the mismatch is only logged."""
        payload = order_payload(tea, subtotal=0.01, tax=0, total=0.01)

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 201
        assert response.json()["total"] == 0.01
        assert "do not match" in caplog.text

    def test_matching_totals_not_logged(
        self, customer_client: DjangoClient, tea, caplog
    ):
        response = post_json(customer_client, "/api/orders", order_payload(tea))

        assert response.status_code == 201
        assert "do not match" not in caplog.text


@pytest.mark.django_db
class TestOrderCreateRecomputed:
    """Tests for POST /api/orders with RESTAURANT_RECOMPUTE_TOTALS enabled."""

    @pytest.fixture(autouse=True)
    def recompute(self, settings):
        settings.RESTAURANT_RECOMPUTE_TOTALS = True
        settings.RESTAURANT_TAX_RATE = Decimal("0.07")

    def test_totals_from_menu_prices(self, customer_client: DjangoClient, tea):
        """Client prices and totals are replaced by the menu's."""
        payload = order_payload(tea, subtotal=0.01, tax=0, total=0.01)
        payload["cartItems"][0]["price"] = 0.01
        payload["cartItems"][0]["name"] = "Free Tea"

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 201
        order = response.json()
        assert order["subtotal"] == 3.0
        assert order["tax"] == 0.21
        assert order["total"] == 3.21

        line = OrderItem.objects.get(order_id=order["id"])
        assert line.name == "Tea"
        assert line.price == Decimal("1.50")

    def test_unknown_menu_item(self, customer_client: DjangoClient, tea):
        payload = order_payload(tea)
        payload["cartItems"][0]["id"] = 424242

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Invalid order data"
        assert data["errors"] == [
            {"field": "cartItems.0.id", "message": "Menu item not found"}
        ]
        assert not Order.objects.exists()

    def test_total_over_money_limit(
        self, customer_client: DjangoClient, admin_api_client, tea
    ):
        """Recomputed totals that do not fit a money column are rejected unsaved."""
        tea.price = Decimal("99999999.00")
        tea.save()
        payload = order_payload(tea, quantity=999, subtotal=1, tax=0, total=1)
        payload["cartItems"][0]["price"] = 1

        response = post_json(customer_client, "/api/orders", payload)

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Invalid order data"
        assert [error["field"] for error in data["errors"]] == ["orderDetails.total"]
        assert Order.objects.count() == 0

        listing = admin_api_client.get("/api/orders")
        assert listing.status_code == 200
        assert listing.json() == []


@pytest.mark.django_db
class TestOrderListView:
    """Tests for GET /api/orders."""

    def test_customer_sees_own_orders(
        self, customer_client: DjangoClient, customer, other_customer
    ):
        older = OrderFactory(user=customer)
        newer = OrderFactory(user=customer)
        OrderFactory(user=other_customer)

        response = customer_client.get("/api/orders")

        assert response.status_code == 200
        assert [order["id"] for order in response.json()] == [newer.pk, older.pk]

    def test_admin_sees_all_orders(
        self, admin_api_client: DjangoClient, customer, other_customer
    ):
        first = OrderFactory(user=customer)
        second = OrderFactory(user=other_customer)

        response = admin_api_client.get("/api/orders")

        assert [order["id"] for order in response.json()] == [second.pk, first.pk]

    def test_requires_authentication(self, api_client: DjangoClient):
        response = api_client.get("/api/orders")

        assert response.status_code == 401


@pytest.mark.django_db
class TestOrderDetailView:
    """Tests for GET /api/orders/{id}."""

    def test_owner_gets_order_with_items(self, customer_client: DjangoClient, customer):
        order = OrderFactory(user=customer)
        OrderItemFactory(order=order, name="Tea", price=Decimal("1.50"), quantity=2)

        response = customer_client.get(f"/api/orders/{order.pk}")

        assert response.status_code == 200
        data = response.json()
        assert data["order"]["id"] == order.pk
        assert len(data["items"]) == 1
        assert data["items"][0]["name"] == "Tea"
        assert data["items"][0]["price"] == 1.5

    def test_other_customer_gets_403(
        self, customer_client: DjangoClient, other_customer
    ):
        order = OrderFactory(user=other_customer)

        response = customer_client.get(f"/api/orders/{order.pk}")

        assert response.status_code == 403
        assert response.json() == {"message": "Access denied"}

    def test_admin_can_view_any(self, admin_api_client: DjangoClient, customer):
        order = OrderFactory(user=customer)

        response = admin_api_client.get(f"/api/orders/{order.pk}")

        assert response.status_code == 200

    def test_missing_order(self, customer_client: DjangoClient):
        response = customer_client.get("/api/orders/424242")

        assert response.status_code == 404
        assert response.json() == {"message": "Order not found"}

    def test_requires_authentication(self, api_client: DjangoClient, customer):
        order = OrderFactory(user=customer)

        response = api_client.get(f"/api/orders/{order.pk}")

        assert response.status_code == 401

    def test_history_unchanged_by_menu_edits(
        self, customer_client: DjangoClient, admin_api_client, tea
    ):
        """Order lines keep the name and price they were ordered at."""
        order_id = post_json(
            customer_client, "/api/orders", order_payload(tea)
        ).json()["id"]

        admin_api_client.put(
            f"/api/menu/{tea.pk}",
            {"name": "Premium Tea", "price": 9.99},
            content_type="application/json",
        )
        admin_api_client.delete(f"/api/menu/{tea.pk}")

        items = customer_client.get(f"/api/orders/{order_id}").json()["items"]
        assert items[0]["name"] == "Tea"
        assert items[0]["price"] == 1.5


@pytest.mark.django_db
class TestOrderStatusView:
    """Tests for PATCH /api/orders/{id}/status."""

    def test_admin_updates_status(self, admin_api_client: DjangoClient):
        order = OrderFactory()

        response = admin_api_client.patch(
            f"/api/orders/{order.pk}/status",
            {"status": "completed"},
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json()["status"] == "completed"
        order.refresh_from_db()
        assert order.status == OrderStatus.COMPLETED

    def test_any_transition_allowed(self, admin_api_client: DjangoClient):
        order = OrderFactory(status=OrderStatus.COMPLETED)

        response = admin_api_client.patch(
            f"/api/orders/{order.pk}/status",
            {"status": "preparing"},
            content_type="application/json",
        )

        assert response.status_code == 200
        assert response.json()["status"] == "preparing"

    def test_customer_gets_403(self, customer_client: DjangoClient, customer):
        order = OrderFactory(user=customer)

        response = customer_client.patch(
            f"/api/orders/{order.pk}/status",
            {"status": "completed"},
            content_type="application/json",
        )

        assert response.status_code == 403
        order.refresh_from_db()
        assert order.status == OrderStatus.NEW

    def test_anonymous_gets_401(self, api_client: DjangoClient):
        order = OrderFactory()

        response = api_client.patch(
            f"/api/orders/{order.pk}/status",
            {"status": "completed"},
            content_type="application/json",
        )

        assert response.status_code == 401

    def test_invalid_status(self, admin_api_client: DjangoClient):
        order = OrderFactory()

        response = admin_api_client.patch(
            f"/api/orders/{order.pk}/status",
            {"status": "shipped"},
            content_type="application/json",
        )

        assert response.status_code == 400
        data = response.json()
        assert data["message"] == "Invalid status"
        assert data["errors"][0]["field"] == "status"

    def test_missing_status(self, admin_api_client: DjangoClient):
        order = OrderFactory()

        response = admin_api_client.patch(
            f"/api/orders/{order.pk}/status", {}, content_type="application/json"
        )

        assert response.status_code == 400
        assert response.json()["message"] == "Status is required"

    def test_missing_order(self, admin_api_client: DjangoClient):
        response = admin_api_client.patch(
            "/api/orders/424242/status",
            {"status": "ready"},
            content_type="application/json",
        )

        assert response.status_code == 404
