"""Pydantic models for cart API responses."""

from __future__ import annotations

from decimal import Decimal
from typing import Any, Self

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


class WireModel(BaseModel):
    """Immutable record built from a cart API payload.

    Wire spellings differ between API versions (``guest_id`` vs ``session_id``,
    snake_case vs camelCase). Every accepted spelling is declared on the field
    itself, so ``from_dict`` is the only place that knows about them and
    ``to_dict`` always emits the canonical snake_case shape.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls.model_validate(data)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(mode="json")


class ProductVariant(WireModel):
    """The purchased variant, embedded in a cart item when the server expands it.

    Only ``id`` is declared; any other key is kept as-is and round-trips.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    id: int | None = None


class CartItem(WireModel):
    """A single line in a cart."""

    id: int
    cart_id: int = Field(validation_alias=AliasChoices("cart_id", "cartId"))
    product_variant_id: int | None = Field(
        default=None,
        validation_alias=AliasChoices(
            "product_variant_id", "productVariantId", "variant_id", "variantId"
        ),
    )
    quantity: int
    unit_price: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        validation_alias=AliasChoices("unit_price", "unitPrice"),
    )
    total_price: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        validation_alias=AliasChoices("total_price", "totalPrice"),
    )
    attributes: dict[str, Any] = Field(default_factory=dict)
    product_variant: ProductVariant | None = Field(
        default=None,
        validation_alias=AliasChoices("product_variant", "productVariant", "variant"),
    )
    created_at: str | None = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    updated_at: str | None = Field(
        default=None, validation_alias=AliasChoices("updated_at", "updatedAt")
    )

    @field_validator("attributes", mode="before")
    @classmethod
    def _empty_attributes(cls, value: Any) -> Any:
        # PHP backends encode an empty map as [].
        if not value:
            return {}
        return value


class Cart(WireModel):
    """A cart owned by a guest session or a user, scoped to a store."""

    id: int
    store_id: int | None = Field(
        default=None, validation_alias=AliasChoices("store_id", "storeId")
    )
    session_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("session_id", "sessionId", "guest_id", "guestId"),
    )
    user_id: int | None = Field(
        default=None, validation_alias=AliasChoices("user_id", "userId")
    )
    status: str
    total: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        validation_alias=AliasChoices("total", "total_price", "totalPrice"),
    )
    total_items: int = Field(
        default=0, validation_alias=AliasChoices("total_items", "totalItems")
    )
    items: tuple[CartItem, ...] = ()
    created_at: str | None = Field(
        default=None, validation_alias=AliasChoices("created_at", "createdAt")
    )
    updated_at: str | None = Field(
        default=None, validation_alias=AliasChoices("updated_at", "updatedAt")
    )

    @field_validator("items", mode="before")
    @classmethod
    def _missing_items(cls, value: Any) -> Any:
        if value is None:
            return ()
        return value
