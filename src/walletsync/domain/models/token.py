"""Token metadata types."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from walletsync.domain.enums import TokenCategory


class TokenInfo(BaseModel):
    """Metadata for one asset unit. Immutable once resolved."""

    model_config = ConfigDict(frozen=True)

    unit: str  # policy_id + asset_name hex, or "lovelace"
    policy_id: str = ""
    asset_name: str = ""
    name: str
    ticker: str
    decimals: int = Field(default=0, ge=0)
    category: TokenCategory = TokenCategory.FUNGIBLE
    logo: str | None = None
    metadata: dict[str, Any] | None = None  # provenance: source, fetched_at, fallback
