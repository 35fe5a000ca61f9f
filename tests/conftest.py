from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from dressshop.app import ShopApp
from dressshop.models.product import ProductData
from dressshop.storage import MemoryRepository
from dressshop.utils.config import AuthSettings, LoggingSettings, Settings, StorageSettings
from web.main import create_app

ADMIN_PASSWORD = "admin-pass-123"


@pytest.fixture
def settings():
    return Settings(
        storage=StorageSettings(backend="memory"),
        # low bcrypt cost keeps the suite fast
        auth=AuthSettings(bcrypt_rounds=4, admin_password=ADMIN_PASSWORD),
        logging=LoggingSettings(level="WARNING", format="console"),
    )


@pytest.fixture
def repository():
    return MemoryRepository()


@pytest.fixture
def shop(settings, repository):
    return ShopApp(settings=settings, repository=repository).initialize(seed_products=False)


@pytest.fixture
def client(shop):
    return TestClient(create_app(shop))


@pytest.fixture
def products(shop):
    """Product A at 49.99 and product B at 10.00"""
    a = shop.catalog.create(ProductData(
        title="Floral Summer Dress",
        price=Decimal("49.99"),
        images=["https://example.com/a-1.jpg", "https://example.com/a-2.jpg"],
        category="dresses",
        colors=["Pink", "Blue"],
        sizes=["S", "M"],
    ))
    b = shop.catalog.create(ProductData(
        title="Silk Scarf",
        price=Decimal("10.00"),
        images=["https://example.com/b.jpg"],
        category="accessories",
    ))
    return a, b
