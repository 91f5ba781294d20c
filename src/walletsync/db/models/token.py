"""Persisted token metadata. Source of truth across sync sessions."""

from typing import Any, Optional

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from walletsync.db.session import Base, TimestampMixin


class TokenRecord(TimestampMixin, Base):
    """One row per asset unit. Fallback placeholders are stored too (negative cache)."""

    __tablename__ = "tokens"

    unit: Mapped[str] = mapped_column(String(120), primary_key=True)
    policy_id: Mapped[str] = mapped_column(String(56), index=True, default="")
    asset_name: Mapped[str] = mapped_column(String(64), default="")
    name: Mapped[str] = mapped_column(String(255), default="")
    ticker: Mapped[str] = mapped_column(String(64), default="")
    decimals: Mapped[int] = mapped_column(Integer, default=0)
    category: Mapped[str] = mapped_column(String(20), index=True)
    logo: Mapped[Optional[str]] = mapped_column(Text, default=None)
    token_metadata: Mapped[Optional[dict[str, Any]]] = mapped_column("metadata", JSON, default=None)
