import asyncio
from typing import Protocol

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from walletsync.db.models.token import TokenRecord
from walletsync.domain.enums import TokenCategory
from walletsync.domain.models.token import TokenInfo


class TokenStore(Protocol):
    """Persistent token store consumed by TokenRegistryService."""

    async def find_by_unit(self, unit: str) -> TokenInfo | None: ...

    async def save(self, token: TokenInfo) -> None: ...


class TokenRepo:
    """SQLAlchemy-backed TokenStore.

    The registry resolves units concurrently, but an AsyncSession allows one
    operation at a time, so every call goes through ``_lock``.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._lock = asyncio.Lock()

    async def find_by_unit(self, unit: str) -> TokenInfo | None:
        async with self._lock:
            record = await self._session.get(TokenRecord, unit)
        return _to_token_info(record) if record is not None else None

    async def save(self, token: TokenInfo) -> None:
        """Upsert by unit."""
        async with self._lock:
            await self._session.merge(_to_record(token))
            await self._session.flush()

    async def save_batch(self, tokens: list[TokenInfo]) -> None:
        if not tokens:
            return
        async with self._lock:
            for token in tokens:
                await self._session.merge(_to_record(token))
            await self._session.flush()

    async def find_by_policy(self, policy_id: str) -> list[TokenInfo]:
        async with self._lock:
            result = await self._session.execute(
                select(TokenRecord).where(TokenRecord.policy_id == policy_id).order_by(TokenRecord.unit)
            )
            records = list(result.scalars().all())
        return [_to_token_info(r) for r in records]

    async def find_by_category(self, category: TokenCategory) -> list[TokenInfo]:
        async with self._lock:
            result = await self._session.execute(
                select(TokenRecord).where(TokenRecord.category == category.value).order_by(TokenRecord.unit)
            )
            records = list(result.scalars().all())
        return [_to_token_info(r) for r in records]


def _to_record(token: TokenInfo) -> TokenRecord:
    return TokenRecord(
        unit=token.unit,
        policy_id=token.policy_id,
        asset_name=token.asset_name,
        name=token.name,
        ticker=token.ticker,
        decimals=token.decimals,
        category=token.category.value,
        logo=token.logo,
        token_metadata=token.metadata,
    )


def _to_token_info(record: TokenRecord) -> TokenInfo:
    return TokenInfo(
        unit=record.unit,
        policy_id=record.policy_id or "",
        asset_name=record.asset_name or "",
        name=record.name or "",
        ticker=record.ticker or "",
        decimals=record.decimals or 0,
        category=TokenCategory(record.category),
        logo=record.logo,
        metadata=record.token_metadata,
    )
