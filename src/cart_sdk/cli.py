"""CLI entry point for cart-sdk."""

from __future__ import annotations

import sys
from pathlib import Path

from pydantic import ValidationError as PydanticValidationError

from cart_sdk.cart import CartClient
from cart_sdk.config import CartClientConfig, CartSettings
from cart_sdk.errors import CartError, ValidationError
from cart_sdk.log import setup_logging
from cart_sdk.models import Cart, CartItem

ENV_PATH = Path(".env")

USAGE = "Usage: cart-sdk init | show <cart_id> | items <cart_id> | guest <guest_id>"


def main(argv: list[str] | None = None) -> None:
    """CLI entry point."""
    args = sys.argv[1:] if argv is None else argv
    if args == ["init"]:
        _run_init()
        return
    if len(args) == 2 and args[0] in ("show", "items", "guest"):
        _run_query(args[0], args[1])
        return
    print(USAGE)
    sys.exit(1)


def _run_init() -> None:
    """Prompt for API settings and save them to .env."""
    print()
    print("  cart-sdk Setup")
    print("  ==============")

    if ENV_PATH.exists():
        print()
        print("  .env already exists.")
        answer = input("  Overwrite? [y/N]: ").strip().lower()
        if answer != "y":
            print("  Aborted.")
            return

    print()
    api_url = input("  API URL: ").strip()
    api_key = input("  API key: ").strip()
    if not api_url or not api_key:
        print("  Error: Both the API URL and the API key are required.")
        sys.exit(1)

    store_id = input("  Store ID (optional): ").strip()
    if store_id and not store_id.isdigit():
        print("  Error: The store ID must be a number.")
        sys.exit(1)

    _write_env(api_url, api_key, store_id or None)

    print()
    print("  Setup complete! Configuration saved to .env")
    print()


def _write_env(api_url: str, api_key: str, store_id: str | None = None) -> None:
    """Write configuration to .env file."""
    content = f"CART_API_URL={api_url}\nCART_API_KEY={api_key}\n"
    if store_id:
        content += f"CART_STORE_ID={store_id}\n"
    ENV_PATH.write_text(content)


def _load_settings() -> tuple[CartSettings, CartClientConfig]:
    try:
        settings = CartSettings()
        return settings, settings.to_config()
    except PydanticValidationError:
        print("  Error: Missing or invalid configuration. Run `cart-sdk init` first.")
        sys.exit(1)


def _parse_cart_id(value: str) -> int:
    try:
        return int(value)
    except ValueError:
        print(f"  Error: Invalid cart ID: {value}")
        sys.exit(1)


def _run_query(command: str, target: str) -> None:
    settings, config = _load_settings()
    setup_logging(settings.log_level)

    with CartClient(config) as client:
        try:
            if command == "show":
                _print_cart(client.get_cart(_parse_cart_id(target)))
            elif command == "items":
                _print_items(client.get_items(_parse_cart_id(target)))
            else:
                cart = client.get_cart_by_guest_id(target)
                if cart is None:
                    print(f"  No cart found for guest {target}.")
                else:
                    _print_cart(cart)
        except CartError as e:
            _print_error(e)
            sys.exit(1)


def _print_cart(cart: Cart) -> None:
    print()
    print(f"  Cart #{cart.id} ({cart.status})")
    if cart.user_id is not None:
        print(f"  User: {cart.user_id}")
    if cart.session_id:
        print(f"  Session: {cart.session_id}")
    print(f"  Items: {cart.total_items}  Total: {cart.total}")
    _print_items(list(cart.items))


def _print_items(items: list[CartItem]) -> None:
    print()
    if not items:
        print("  The cart is empty.")
        return
    for i, item in enumerate(items, 1):
        variant = item.product_variant_id
        if variant is None and item.product_variant is not None:
            variant = item.product_variant.id
        print(
            f"    {i}. variant {variant} x{item.quantity}"
            f" @ {item.unit_price} = {item.total_price}"
        )
    print()


def _print_error(error: CartError) -> None:
    print(f"  Error: {error.message}")
    if isinstance(error, ValidationError):
        for field, messages in error.errors.items():
            for message in messages:
                print(f"    {field}: {message}")
