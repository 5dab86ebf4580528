"""Shared test fixtures."""

from collections.abc import Iterator
from typing import Any

import pytest

from cart_sdk.cart import CartClient
from cart_sdk.config import CartClientConfig

BASE_URL = "https://carts.example.test"


@pytest.fixture()
def api_key() -> str:
    return "test-api-key"


@pytest.fixture()
def config(api_key: str) -> CartClientConfig:
    return CartClientConfig(base_url=BASE_URL, api_key=api_key, store_id=3)


@pytest.fixture()
def client(config: CartClientConfig) -> Iterator[CartClient]:
    with CartClient(config) as cart_client:
        yield cart_client


@pytest.fixture()
def item_payload() -> dict[str, Any]:
    return {
        "id": 11,
        "cart_id": 7,
        "product_variant_id": 42,
        "quantity": 2,
        "unit_price": "12.50",
        "total_price": "25.00",
        "attributes": {"size": "M", "color": "navy"},
        "variant": {"id": 42, "sku": "TSHIRT-M-NAVY", "stock": 8},
        "created_at": "2024-05-01T10:00:00Z",
        "updated_at": "2024-05-01T10:05:00Z",
    }


@pytest.fixture()
def cart_payload(item_payload: dict[str, Any]) -> dict[str, Any]:
    return {
        "id": 7,
        "store_id": 3,
        "guest_id": "guest-abc",
        "user_id": None,
        "status": "active",
        "total_items": 2,
        "total_price": "25.00",
        "items": [item_payload],
        "created_at": "2024-05-01T09:00:00Z",
        "updated_at": "2024-05-01T10:05:00Z",
    }
