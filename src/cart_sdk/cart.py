"""Cart operations for the cart API."""

from __future__ import annotations

import json
from collections.abc import Callable, Mapping
from typing import Any, NoReturn, TypeVar
from urllib.parse import quote

import httpx

from cart_sdk.config import CartClientConfig
from cart_sdk.errors import (
    CartError,
    CartItemValidationError,
    CartValidationError,
    ValidationError,
)
from cart_sdk.log import get_logger
from cart_sdk.models import Cart, CartItem

CARTS_PATH = "/api/carts"
ENVELOPE_KEY = "data"

logger = get_logger(__name__)

T = TypeVar("T")


def _is_positive_int(value: object) -> bool:
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def _check_cart_id(cart_id: int) -> None:
    if not _is_positive_int(cart_id):
        raise CartValidationError.invalid_cart_id()


def _check_item_id(item_id: int) -> None:
    if not _is_positive_int(item_id):
        raise CartItemValidationError.invalid_item_id()


def _check_quantity(quantity: int, limit: int | None) -> None:
    if not _is_positive_int(quantity):
        raise CartItemValidationError.invalid_quantity()
    if limit is not None and quantity > limit:
        raise CartItemValidationError.max_quantity_exceeded()


def _check_identifiers(session_id: str | None, user_id: int | None) -> None:
    if session_id is None and user_id is None:
        raise CartValidationError.missing_identifier()
    if user_id is not None and not _is_positive_int(user_id):
        raise CartValidationError.invalid_user_id()
    if session_id is not None and (
        not isinstance(session_id, str) or not session_id.strip()
    ):
        raise CartValidationError.invalid_session_id()


def _check_guest_id(guest_id: str) -> None:
    if not isinstance(guest_id, str) or not guest_id.strip():
        raise CartValidationError.invalid_guest_id()


def _check_attributes(attributes: Mapping[str, Any] | None) -> dict[str, Any]:
    if attributes is None:
        return {}
    if not isinstance(attributes, Mapping):
        raise CartItemValidationError.invalid_attributes()
    try:
        json.dumps(attributes)
    except (TypeError, ValueError) as exc:
        raise CartItemValidationError.invalid_attributes() from exc
    return dict(attributes)


def _cart_path(cart_id: int) -> str:
    return f"{CARTS_PATH}/{cart_id}"


def _items_path(cart_id: int, item_id: int | None = None) -> str:
    path = f"{CARTS_PATH}/{cart_id}/items"
    if item_id is not None:
        path = f"{path}/{item_id}"
    return path


def _guest_path(guest_id: str) -> str:
    return f"{CARTS_PATH}/guest/{quote(guest_id, safe='')}"


def _raise_api_error(exc: httpx.HTTPError) -> NoReturn:
    """Translate an httpx failure into a cart error.

    Every network-facing call funnels its httpx exceptions through here.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        try:
            body = exc.response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            errors = body.get("errors")
            message = body.get("message")
            if status == 422 and isinstance(errors, Mapping) and errors:
                logger.warning("Cart API rejected request: %s %s", status, errors)
                if not isinstance(message, str) or not message:
                    message = "Validation failed"
                raise ValidationError(errors, message, status) from exc
            if isinstance(message, str) and message:
                logger.warning("Cart API request failed: %s %s", status, message)
                raise CartError(message, status) from exc
        logger.warning("Cart API request failed: %s", exc)
        raise CartError(str(exc), status) from exc

    logger.warning("Cart API unreachable: %r", exc)
    raise CartError(str(exc) or type(exc).__name__, 0) from exc


def _check_status(response: httpx.Response) -> None:
    try:
        response.raise_for_status()
    except httpx.HTTPStatusError as exc:
        _raise_api_error(exc)


def _unwrap(body: Any) -> Any:
    """Strip one ``data`` envelope level when the API version adds it."""
    if isinstance(body, dict) and ENVELOPE_KEY in body:
        return body[ENVELOPE_KEY]
    return body


def _load(response: httpx.Response, build: Callable[[Any], T]) -> T:
    """Decode a successful response body and map it with ``build``."""
    try:
        return build(_unwrap(response.json()))
    except ValueError as exc:
        raise CartError(
            f"Unexpected response from cart API: {exc}", response.status_code
        ) from exc


def _parse_guest_cart(body: Any) -> Cart | None:
    if body is None:
        return None
    return Cart.from_dict(body)


def _load_guest_cart(response: httpx.Response) -> Cart | None:
    """Map a guest lookup response; a missing or empty cart gives None."""
    if response.status_code == httpx.codes.NOT_FOUND:
        return None
    _check_status(response)
    if response.status_code == httpx.codes.NO_CONTENT:
        return None
    if not response.content.strip():
        return None
    return _load(response, _parse_guest_cart)


def _parse_items(body: Any) -> list[CartItem]:
    if not isinstance(body, list):
        raise ValueError("expected a list of cart items")
    return [CartItem.from_dict(item) for item in body]


class _BaseCartClient:
    """Configuration shared by the sync and async clients."""

    def __init__(self, config: CartClientConfig) -> None:
        self._config = config
        self._headers = config.headers()

    @property
    def config(self) -> CartClientConfig:
        return self._config

    def _url(self, path: str) -> str:
        return f"{self._config.base_url.rstrip('/')}{path}"


class CartClient(_BaseCartClient):
    """Synchronous client for the cart API.

    Pass ``http_client`` to reuse a configured ``httpx.Client``; the SDK then
    leaves closing it to the caller.
    """

    def __init__(
        self,
        config: CartClientConfig,
        http_client: httpx.Client | None = None,
    ) -> None:
        super().__init__(config)
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(timeout=config.timeout)

    def __enter__(self) -> CartClient:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def _send(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            return self._http.request(
                method, self._url(path), headers=self._headers, json=payload
            )
        except httpx.HTTPError as exc:
            _raise_api_error(exc)

    def _request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> httpx.Response:
        response = self._send(method, path, payload)
        _check_status(response)
        return response

    def get_cart(self, cart_id: int) -> Cart:
        """Fetch a cart by its id."""
        _check_cart_id(cart_id)
        response = self._request("GET", _cart_path(cart_id))
        return _load(response, Cart.from_dict)

    def get_cart_by_guest_id(self, guest_id: str) -> Cart | None:
        """Fetch the cart of a guest session, or None if it has none."""
        _check_guest_id(guest_id)
        response = self._send("GET", _guest_path(guest_id))
        return _load_guest_cart(response)

    def create_cart(
        self, session_id: str | None = None, user_id: int | None = None
    ) -> Cart:
        """Create a cart for a guest session or a user."""
        _check_identifiers(session_id, user_id)
        response = self._request(
            "POST", CARTS_PATH, {"session_id": session_id, "user_id": user_id}
        )
        return _load(response, Cart.from_dict)

    def add_item(
        self,
        cart_id: int,
        variant_id: int,
        quantity: int,
        attributes: Mapping[str, Any] | None = None,
    ) -> CartItem:
        """Add a product variant to a cart."""
        _check_cart_id(cart_id)
        if not _is_positive_int(variant_id):
            raise CartItemValidationError.invalid_variant_id()
        _check_quantity(quantity, self._config.max_item_quantity)
        attributes = _check_attributes(attributes)
        response = self._request(
            "POST",
            _items_path(cart_id),
            {
                "product_variant_id": variant_id,
                "quantity": quantity,
                "attributes": attributes,
            },
        )
        return _load(response, CartItem.from_dict)

    def update_item_quantity(
        self, cart_id: int, item_id: int, quantity: int
    ) -> CartItem:
        """Set the quantity of a cart line."""
        _check_cart_id(cart_id)
        _check_item_id(item_id)
        _check_quantity(quantity, self._config.max_item_quantity)
        response = self._request(
            "PUT", _items_path(cart_id, item_id), {"quantity": quantity}
        )
        return _load(response, CartItem.from_dict)

    def remove_item(self, cart_id: int, item_id: int) -> None:
        """Remove a line from a cart."""
        _check_cart_id(cart_id)
        _check_item_id(item_id)
        self._request("DELETE", _items_path(cart_id, item_id))

    def clear_cart(self, cart_id: int) -> None:
        """Remove every line from a cart."""
        _check_cart_id(cart_id)
        self._request("DELETE", _items_path(cart_id))

    def get_items(self, cart_id: int) -> list[CartItem]:
        """List the lines of a cart in server order."""
        _check_cart_id(cart_id)
        response = self._request("GET", _items_path(cart_id))
        return _load(response, _parse_items)


class AsyncCartClient(_BaseCartClient):
    """Asynchronous client for the cart API, mirroring ``CartClient``."""

    def __init__(
        self,
        config: CartClientConfig,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        super().__init__(config)
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=config.timeout)

    async def __aenter__(self) -> AsyncCartClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._http.aclose()

    async def _send(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> httpx.Response:
        logger.debug("%s %s", method, path)
        try:
            return await self._http.request(
                method, self._url(path), headers=self._headers, json=payload
            )
        except httpx.HTTPError as exc:
            _raise_api_error(exc)

    async def _request(
        self, method: str, path: str, payload: dict[str, Any] | None = None
    ) -> httpx.Response:
        response = await self._send(method, path, payload)
        _check_status(response)
        return response

    async def get_cart(self, cart_id: int) -> Cart:
        """Fetch a cart by its id."""
        _check_cart_id(cart_id)
        response = await self._request("GET", _cart_path(cart_id))
        return _load(response, Cart.from_dict)

    async def get_cart_by_guest_id(self, guest_id: str) -> Cart | None:
        """Fetch the cart of a guest session, or None if it has none."""
        _check_guest_id(guest_id)
        response = await self._send("GET", _guest_path(guest_id))
        return _load_guest_cart(response)

    async def create_cart(
        self, session_id: str | None = None, user_id: int | None = None
    ) -> Cart:
        """Create a cart for a guest session or a user."""
        _check_identifiers(session_id, user_id)
        response = await self._request(
            "POST", CARTS_PATH, {"session_id": session_id, "user_id": user_id}
        )
        return _load(response, Cart.from_dict)

    async def add_item(
        self,
        cart_id: int,
        variant_id: int,
        quantity: int,
        attributes: Mapping[str, Any] | None = None,
    ) -> CartItem:
        """Add a product variant to a cart."""
        _check_cart_id(cart_id)
        if not _is_positive_int(variant_id):
            raise CartItemValidationError.invalid_variant_id()
        _check_quantity(quantity, self._config.max_item_quantity)
        attributes = _check_attributes(attributes)
        response = await self._request(
            "POST",
            _items_path(cart_id),
            {
                "product_variant_id": variant_id,
                "quantity": quantity,
                "attributes": attributes,
            },
        )
        return _load(response, CartItem.from_dict)

    async def update_item_quantity(
        self, cart_id: int, item_id: int, quantity: int
    ) -> CartItem:
        """Set the quantity of a cart line."""
        _check_cart_id(cart_id)
        _check_item_id(item_id)
        _check_quantity(quantity, self._config.max_item_quantity)
        response = await self._request(
            "PUT", _items_path(cart_id, item_id), {"quantity": quantity}
        )
        return _load(response, CartItem.from_dict)

    async def remove_item(self, cart_id: int, item_id: int) -> None:
        """Remove a line from a cart."""
        _check_cart_id(cart_id)
        _check_item_id(item_id)
        await self._request("DELETE", _items_path(cart_id, item_id))

    async def clear_cart(self, cart_id: int) -> None:
        """Remove every line from a cart."""
        _check_cart_id(cart_id)
        await self._request("DELETE", _items_path(cart_id))

    async def get_items(self, cart_id: int) -> list[CartItem]:
        """List the lines of a cart in server order."""
        _check_cart_id(cart_id)
        response = await self._request("GET", _items_path(cart_id))
        return _load(response, _parse_items)
