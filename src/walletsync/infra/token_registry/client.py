"""Cardano Token Registry client (tokens.cardano.org offchain-metadata API).

GET  /metadata/{subject}   single subject, 404 = unknown
POST /metadata/query       batch query by subjects + properties

Every failure mode (404, timeout, 5xx, malformed body) collapses to
"not found" so callers can fall through to fallback synthesis.
"""

import logging
from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from walletsync.exceptions import ExternalServiceError, RateLimitError
from walletsync.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

BASE_URL = "https://tokens.cardano.org"

QUERY_PROPERTIES = ["name", "description", "ticker", "decimals", "logo", "url"]

HEADERS = {
    "Accept": "application/json",
    "User-Agent": "walletsync/0.1",
}


class TokenProperty(BaseModel):
    """One signed metadata property: value plus its provenance sequence number."""

    model_config = ConfigDict(populate_by_name=True)

    value: str | int | None = None
    sequence_number: int | None = Field(default=None, alias="sequenceNumber")
    signatures: list[dict[str, Any]] = []


class RegistryEntry(BaseModel):
    subject: str  # == asset unit
    policy: str | None = None
    name: TokenProperty | None = None
    description: TokenProperty | None = None
    ticker: TokenProperty | None = None
    decimals: TokenProperty | None = None
    logo: TokenProperty | None = None
    url: TokenProperty | None = None


class CardanoTokenRegistryClient:
    def __init__(
        self,
        http_client: RateLimitedClient,
        base_url: str = BASE_URL,
        timeout: float = 5.0,
        batch_timeout: float = 10.0,
        batch_timeout_per_unit: float = 0.05,
        max_batch_timeout: float = 60.0,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._batch_timeout = batch_timeout
        self._batch_timeout_per_unit = batch_timeout_per_unit
        self._max_batch_timeout = max_batch_timeout

    def batch_timeout_for(self, unit_count: int) -> float:
        return min(self._batch_timeout + self._batch_timeout_per_unit * unit_count, self._max_batch_timeout)

    async def fetch_metadata(self, unit: str) -> RegistryEntry | None:
        """Metadata for one unit, or None if unknown / unreachable."""
        try:
            data = await self._get_subject(unit)
        except httpx.TimeoutException:
            logger.warning("Token registry request timed out for %s", unit)
            return None
        except Exception:
            logger.exception("Token registry lookup failed for %s", unit)
            return None

        if data is None:
            return None
        return _parse_entry(data)

    async def query_metadata(self, units: list[str]) -> list[RegistryEntry]:
        """Batch lookup. Units the registry doesn't know are simply absent from the result."""
        if not units:
            return []
        try:
            data = await self._post_query(units)
        except httpx.TimeoutException:
            logger.warning("Token registry batch query timed out (%d units)", len(units))
            return []
        except Exception:
            logger.exception("Token registry batch query failed (%d units)", len(units))
            return []

        # The live service wraps results in {"subjects": [...]}; older deployments return a bare list
        if isinstance(data, dict):
            data = data.get("subjects", [])
        if not isinstance(data, list):
            logger.warning("Unexpected token registry batch payload: %s", type(data).__name__)
            return []

        entries = []
        for item in data:
            entry = _parse_entry(item)
            if entry is not None:
                entries.append(entry)
        return entries

    @retry(
        retry=retry_if_exception_type(RateLimitError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
    )
    async def _get_subject(self, unit: str) -> dict | None:
        resp = await self._http.get(f"{self._base_url}/metadata/{unit}", headers=HEADERS, timeout=self._timeout)
        if resp.status_code == 404:
            return None
        if resp.status_code == 429:
            raise RateLimitError(f"Token registry rate limited ({unit})")
        if resp.status_code != 200:
            raise ExternalServiceError(f"Token registry returned {resp.status_code} for {unit}")
        return resp.json()

    @retry(
        retry=retry_if_exception_type(RateLimitError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.5, min=0.5, max=4),
        reraise=True,
    )
    async def _post_query(self, units: list[str]) -> Any:
        resp = await self._http.post(
            f"{self._base_url}/metadata/query",
            json={"subjects": units, "properties": QUERY_PROPERTIES},
            headers=HEADERS,
            timeout=self.batch_timeout_for(len(units)),
        )
        if resp.status_code == 429:
            raise RateLimitError("Token registry rate limited (batch)")
        if resp.status_code != 200:
            raise ExternalServiceError(f"Token registry batch query returned {resp.status_code}")
        return resp.json()


def _parse_entry(data: Any) -> RegistryEntry | None:
    if not isinstance(data, dict) or not data.get("subject"):
        return None
    try:
        return RegistryEntry.model_validate(data)
    except ValidationError:
        logger.warning("Malformed token registry entry for %s", data.get("subject"))
        return None
