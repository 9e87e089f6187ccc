"""Pytest configuration and fixtures"""
import pytest
from unittest.mock import AsyncMock
from fastapi.testclient import TestClient

from storefront.core.config import Settings
from storefront.core.session import CartSessions
from storefront.database import CartStore, MemoryStorage
from storefront.main import create_app
from storefront.models.content import DEFAULT_HOMEPAGE_CONTENT
from storefront.models.product import Category, ProductProjection
from storefront.services.cms_client import CMSClient
from storefront.services.commerce_client import CommerceClient


@pytest.fixture
def storage():
    """Empty in-memory cart slot"""
    return MemoryStorage("bt-cart-test")


@pytest.fixture
def store(storage):
    """Cart store over an empty slot"""
    return CartStore(storage)


@pytest.fixture
def sample_product_data():
    """Product projection as returned by the commerce API"""
    return {
        "id": "prod-123",
        "key": "iphone-17-pro",
        "version": 4,
        "name": {"en-GB": "iPhone 17 Pro", "en": "iPhone 17 Pro"},
        "description": {"en": "The latest iPhone"},
        "slug": {"en": "iphone-17-pro"},
        "categories": [{"typeId": "category", "id": "cat-phones"}],
        "masterVariant": {
            "id": 1,
            "sku": "IP17P-256-BLK",
            "images": [{"url": "https://img.example.com/ip17p-black.png", "label": "Black"}],
            "prices": [
                {"id": "price-1", "value": {"centAmount": 99900, "currencyCode": "GBP", "fractionDigits": 2}}
            ],
            "attributes": [
                {"name": "color", "value": "Black"},
                {"name": "storage", "value": "256GB"},
            ],
        },
        "variants": [
            {
                "id": 2,
                "sku": "IP17P-512-SLV",
                "images": [],
                "prices": [
                    {"value": {"centAmount": 119900, "currencyCode": "GBP", "fractionDigits": 2}}
                ],
                "attributes": [
                    {"name": "color", "value": "Silver"},
                    {"name": "storage", "value": "512GB"},
                ],
            }
        ],
    }


@pytest.fixture
def sample_product(sample_product_data):
    return ProductProjection.model_validate(sample_product_data)


@pytest.fixture
def sample_category_data():
    return {
        "id": "cat-phones",
        "key": "phones",
        "name": {"en": "Phones"},
        "slug": {"en": "phones"},
        "orderHint": "0.1",
    }


@pytest.fixture
def sample_category(sample_category_data):
    return Category.model_validate(sample_category_data)


@pytest.fixture
def mock_commerce_client(sample_product, sample_category):
    """Mock commerce client with one product in one category"""
    client = AsyncMock(spec=CommerceClient)
    client.get_product_by_slug.return_value = None
    client.get_product_by_key.return_value = None
    client.get_product_by_id.return_value = sample_product
    client.get_all_products.return_value = [sample_product]
    client.get_categories.return_value = [sample_category]
    client.get_category_by_slug.return_value = None
    client.get_products_by_category.return_value = [sample_product]
    return client


@pytest.fixture
def mock_cms_client():
    """Mock CMS client serving the default content"""
    client = AsyncMock(spec=CMSClient)
    client.get_homepage_content.return_value = DEFAULT_HOMEPAGE_CONTENT
    return client


@pytest.fixture
def cart_sessions():
    return CartSessions()


@pytest.fixture
def app(mock_commerce_client, mock_cms_client, cart_sessions):
    return create_app(
        settings=Settings(),
        commerce_client=mock_commerce_client,
        cms_client=mock_cms_client,
        cart_sessions=cart_sessions,
    )


@pytest.fixture
def client(app):
    return TestClient(app)
