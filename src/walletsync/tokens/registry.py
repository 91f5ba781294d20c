"""TokenRegistryService — three-tier token metadata lookup.

in-process LRU cache → persistent store → Cardano Token Registry API → fallback

Never raises for data problems: an unknown or unreachable unit resolves to a
synthesized placeholder, which is persisted so the next sync doesn't ask the
network again.
"""

import asyncio
import logging

from walletsync.db.repos.token_repo import TokenStore
from walletsync.domain.models.token import TokenInfo
from walletsync.domain.units import is_ada
from walletsync.infra.token_registry.client import CardanoTokenRegistryClient
from walletsync.tokens.cache import LRUTokenCache
from walletsync.tokens.metadata import fallback_token, native_token, token_from_registry_entry

logger = logging.getLogger(__name__)


class TokenRegistryService:
    def __init__(
        self,
        store: TokenStore,
        client: CardanoTokenRegistryClient | None = None,
        cache: LRUTokenCache | None = None,
    ) -> None:
        self._store = store
        self._client = client
        self._cache = cache if cache is not None else LRUTokenCache(1000)

    async def get_token_info(self, unit: str) -> TokenInfo:
        if is_ada(unit):
            return self._native()

        cached = self._cache.get(unit)
        if cached is not None:
            return cached

        stored = await self._store_lookup(unit)
        if stored is not None:
            self._cache.set(unit, stored)
            return stored

        return await self._fetch_and_remember(unit)

    async def batch_get_token_info(self, units: list[str]) -> dict[str, TokenInfo]:
        """Resolve many units with at most one batch API call. Returns whatever could be resolved.

        Units already in the cache or the store never reach the API.
        """
        tokens: dict[str, TokenInfo] = {}
        uncached: list[str] = []

        for unit in dict.fromkeys(units):
            if is_ada(unit):
                tokens[unit] = self._native()
                continue
            cached = self._cache.get(unit)
            if cached is None:
                cached = await self._store_lookup(unit)
                if cached is not None:
                    self._cache.set(unit, cached)
            if cached is not None:
                tokens[unit] = cached
            else:
                uncached.append(unit)

        if not uncached:
            return tokens

        remaining = uncached
        if self._client is not None:
            try:
                entries = await self._client.query_metadata(uncached)
            except Exception:
                logger.exception("Batch token lookup failed, resolving %d units individually", len(uncached))
                entries = []

            requested = set(uncached)
            for entry in entries:
                if entry.subject not in requested or entry.subject in tokens:
                    continue
                token = token_from_registry_entry(entry)
                await self._remember(token)
                tokens[token.unit] = token
            remaining = [u for u in uncached if u not in tokens]

        if remaining:
            tokens.update(await self._resolve_individually(remaining))

        return tokens

    def is_cached(self, unit: str) -> bool:
        return self._cache.has(unit)

    def cache_stats(self) -> dict[str, float]:
        return self._cache.stats()

    def clear_cache(self) -> None:
        self._cache.clear()

    def _native(self) -> TokenInfo:
        token = self._cache.get("lovelace")
        if token is None:
            token = native_token()
            self._cache.set("lovelace", token)
        return token

    async def _resolve_individually(self, units: list[str]) -> dict[str, TokenInfo]:
        results = await asyncio.gather(*(self._fetch_and_remember(u) for u in units), return_exceptions=True)
        tokens: dict[str, TokenInfo] = {}
        for unit, result in zip(units, results):
            if isinstance(result, BaseException):
                logger.error("Token lookup for %s failed: %r", unit, result)
                tokens[unit] = fallback_token(unit)
            else:
                tokens[unit] = result
        return tokens

    async def _store_lookup(self, unit: str) -> TokenInfo | None:
        try:
            return await self._store.find_by_unit(unit)
        except Exception:
            logger.exception("Token store lookup failed for %s", unit)
            return None

    async def _fetch_and_remember(self, unit: str) -> TokenInfo:
        token = await self._fetch_one(unit)
        if token is None:
            token = fallback_token(unit)
            logger.debug("No registry metadata for %s, using fallback", unit)

        await self._remember(token)
        return token

    async def _fetch_one(self, unit: str) -> TokenInfo | None:
        if self._client is None:
            return None
        try:
            entry = await self._client.fetch_metadata(unit)
            if entry is None:
                return None
            return token_from_registry_entry(entry)
        except Exception:
            logger.exception("Registry lookup failed for %s", unit)
            return None

    async def _remember(self, token: TokenInfo) -> None:
        """Persist then cache. A store failure still leaves the token cached for this process."""
        try:
            await self._store.save(token)
        except Exception:
            logger.exception("Failed to persist token %s", token.unit)
        self._cache.set(token.unit, token)
