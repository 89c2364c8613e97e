"""
Pytest configuration for Django app tests.
"""

from django.test import Client as DjangoClient

import pytest

from apps.web.core.models import User
from apps.web.core.tests.factories import AdminFactory, UserFactory
from apps.web.restaurant.storage import RestaurantStore


@pytest.fixture
def customer(db) -> User:
    """A regular (non-admin) customer account."""
    return UserFactory(username="alice@example.com", name="Alice")


@pytest.fixture
def other_customer(db) -> User:
    """A second customer, for ownership checks."""
    return UserFactory(username="bob@example.com", name="Bob")


@pytest.fixture
def admin(db) -> User:
    """An administrator account."""
    return AdminFactory(username="admin@milestar.com", name="Admin")


@pytest.fixture
def api_client() -> DjangoClient:
    """Anonymous Django test client for API requests."""
    return DjangoClient()


@pytest.fixture
def customer_client(customer: User) -> DjangoClient:
    """Test client with a session for the customer."""
    http_client = DjangoClient()
    http_client.force_login(customer)
    return http_client


@pytest.fixture
def admin_api_client(admin: User) -> DjangoClient:
    """Test client with a session for the administrator."""
    http_client = DjangoClient()
    http_client.force_login(admin)
    return http_client


@pytest.fixture
def store() -> RestaurantStore:
    """A fresh data store. All instances share the test database."""
    return RestaurantStore()
