from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="apiuser", password="testpass123"
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def customer():
    return Customer.objects.create(name="Test Customer", email="customer@example.com")


@pytest.fixture()
def make_product():
    counter = {"n": 0}

    def _make(price="10.00", stock=10, name=None, sku=None):
        counter["n"] += 1
        n = counter["n"]
        return Product.objects.create(
            sku=sku or f"SKU-{n:03d}",
            name=name or f"Product {n}",
            price=Decimal(price),
            stock=stock,
        )

    return _make


@pytest.fixture()
def product_a(make_product):
    return make_product(price="100.00", stock=10, name="Product A", sku="PROD-A")


@pytest.fixture()
def product_b(make_product):
    return make_product(price="50.00", stock=5, name="Product B", sku="PROD-B")


@pytest.fixture()
def order_service():
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        product_repository=ProductDjangoRepository(),
    )
