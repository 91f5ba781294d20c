"""Blockfrost REST client — the subset needed to rebuild RawTransactions."""

import logging
from typing import Any

from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from walletsync.exceptions import ExternalServiceError, RateLimitError
from walletsync.infra.http.rate_limited_client import RateLimitedClient

logger = logging.getLogger(__name__)

NETWORK_URLS: dict[str, str] = {
    "mainnet": "https://cardano-mainnet.blockfrost.io/api/v0",
    "preprod": "https://cardano-preprod.blockfrost.io/api/v0",
    "preview": "https://cardano-preview.blockfrost.io/api/v0",
}

PAGE_SIZE = 100  # Blockfrost max per page


class BlockfrostClient:
    def __init__(self, project_id: str, http_client: RateLimitedClient, network: str = "mainnet") -> None:
        if network not in NETWORK_URLS:
            raise ValueError(f"Unsupported Cardano network: {network}")
        self._base_url = NETWORK_URLS[network]
        self._headers = {"project_id": project_id}
        self._http = http_client

    @retry(
        retry=retry_if_exception_type(ExternalServiceError),
        stop=stop_after_attempt(5),
        wait=wait_exponential(multiplier=2, min=2, max=30),
    )
    async def _get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET a path. Returns None on 404; 429/5xx raise and are retried."""
        resp = await self._http.get(f"{self._base_url}{path}", params=params, headers=self._headers)

        if resp.status_code == 404:
            return None
        if resp.status_code == 429:
            raise RateLimitError(f"Blockfrost rate limited: {path}")
        if resp.status_code >= 500:
            raise ExternalServiceError(f"Blockfrost {resp.status_code}: {path}")
        if resp.status_code != 200:
            # 400/403 won't get better on retry
            raise ValueError(f"Blockfrost rejected {path}: {resp.status_code} {resp.text[:200]}")
        return resp.json()

    async def get_address_transactions(
        self, address: str, page: int = 1, count: int = PAGE_SIZE, order: str = "asc"
    ) -> list[dict]:
        """[{tx_hash, tx_index, block_height, block_time}, ...]"""
        result = await self._get(
            f"/addresses/{address}/transactions",
            params={"page": page, "count": count, "order": order},
        )
        return result or []

    async def get_transaction(self, tx_hash: str) -> dict | None:
        return await self._get(f"/txs/{tx_hash}")

    async def get_transaction_utxos(self, tx_hash: str) -> dict | None:
        return await self._get(f"/txs/{tx_hash}/utxos")

    async def get_transaction_withdrawals(self, tx_hash: str) -> list[dict]:
        return await self._get(f"/txs/{tx_hash}/withdrawals") or []

    async def get_transaction_delegations(self, tx_hash: str) -> list[dict]:
        return await self._get(f"/txs/{tx_hash}/delegations") or []

    async def get_transaction_stakes(self, tx_hash: str) -> list[dict]:
        """Stake (de)registration certificates: [{cert_index, address, registration}]"""
        return await self._get(f"/txs/{tx_hash}/stakes") or []

    async def get_transaction_metadata(self, tx_hash: str) -> list[dict]:
        """[{label, json_metadata}]"""
        return await self._get(f"/txs/{tx_hash}/metadata") or []

    async def get_latest_block_height(self) -> int:
        block = await self._get("/blocks/latest")
        if not block:
            return 0
        return int(block.get("height") or 0)
