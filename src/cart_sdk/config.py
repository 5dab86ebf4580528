"""Client configuration and environment loading."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_TIMEOUT = 10.0


class CartClientConfig(BaseModel):
    """Immutable settings a cart client is bound to."""

    model_config = ConfigDict(frozen=True)

    base_url: str
    api_key: str = Field(repr=False)
    store_id: int | None = None
    auth_header: str = "Authorization"
    # None sends the key as-is, for store-scoped token deployments.
    auth_scheme: str | None = "Bearer"
    store_header: str = "X-Store-ID"
    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    max_item_quantity: int | None = Field(default=None, gt=0)

    def headers(self) -> dict[str, str]:
        """Headers sent with every request."""
        credential = (
            f"{self.auth_scheme} {self.api_key}" if self.auth_scheme else self.api_key
        )
        headers = {
            "Accept": "application/json",
            "Content-Type": "application/json",
            self.auth_header: credential,
        }
        if self.store_id is not None:
            headers[self.store_header] = str(self.store_id)
        return headers


class CartSettings(BaseSettings):
    """Settings loaded from ``CART_*`` environment variables or a .env file."""

    model_config = SettingsConfigDict(
        env_prefix="CART_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_url: str
    api_key: str = Field(repr=False)
    store_id: int | None = None
    timeout: float = DEFAULT_TIMEOUT
    log_level: str = "INFO"

    def to_config(self) -> CartClientConfig:
        return CartClientConfig(
            base_url=self.api_url,
            api_key=self.api_key,
            store_id=self.store_id,
            timeout=self.timeout,
        )
