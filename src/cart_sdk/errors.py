"""Error types raised by the cart clients."""

from __future__ import annotations

from collections.abc import Iterable, Mapping

DEFAULT_VALIDATION_MESSAGE = "The given data was invalid."


def _as_messages(value: object) -> list[str]:
    # Servers send a list, a bare string, a scalar or null per field.
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(message) for message in value if message is not None]
    return [str(value)]


class CartError(Exception):
    """Raised when a cart operation fails.

    ``code`` is the HTTP status of the failed response, or 0 when the request
    never got one (connection refused, timeout).
    """

    def __init__(self, message: str, code: int = 0) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


class ValidationError(CartError):
    """Raised when input is rejected, either locally or by a 422 response."""

    def __init__(
        self,
        errors: Mapping[str, str | Iterable[str]],
        message: str = DEFAULT_VALIDATION_MESSAGE,
        code: int = 422,
    ) -> None:
        if not errors:
            raise ValueError("a validation error needs at least one field")
        super().__init__(message, code)
        self.errors: dict[str, list[str]] = {
            str(field): _as_messages(messages) for field, messages in errors.items()
        }

    def first_error(self) -> str:
        """Return the first message of the first field."""
        messages = next(iter(self.errors.values()))
        return messages[0] if messages else self.message


class CartValidationError(ValidationError):
    """Invalid cart-level argument."""

    @classmethod
    def invalid_cart_id(cls) -> CartValidationError:
        return cls({"cart_id": ["The cart ID must be a positive integer."]})

    @classmethod
    def invalid_user_id(cls) -> CartValidationError:
        return cls({"user_id": ["The user ID must be a positive integer."]})

    @classmethod
    def invalid_session_id(cls) -> CartValidationError:
        return cls({"session_id": ["The session ID must be a non-empty string."]})

    @classmethod
    def invalid_guest_id(cls) -> CartValidationError:
        return cls({"guest_id": ["The guest ID must be a non-empty string."]})

    @classmethod
    def missing_identifier(cls) -> CartValidationError:
        return cls(
            {"identifier": ["Either user_id or session_id must be provided."]}
        )


class CartItemValidationError(ValidationError):
    """Invalid cart-item argument."""

    @classmethod
    def invalid_item_id(cls) -> CartItemValidationError:
        return cls({"item_id": ["The item ID must be a positive integer."]})

    @classmethod
    def invalid_variant_id(cls) -> CartItemValidationError:
        return cls(
            {"variant_id": ["The product variant ID must be a positive integer."]}
        )

    @classmethod
    def invalid_quantity(cls) -> CartItemValidationError:
        return cls({"quantity": ["The quantity must be a positive integer."]})

    @classmethod
    def invalid_attributes(cls) -> CartItemValidationError:
        return cls({"attributes": ["The attributes must be a mapping."]})

    @classmethod
    def out_of_stock(cls) -> CartItemValidationError:
        return cls({"stock": ["The requested quantity is not available in stock."]})

    @classmethod
    def max_quantity_exceeded(cls) -> CartItemValidationError:
        return cls(
            {"quantity": ["The maximum quantity per item has been exceeded."]}
        )
