"""Blockfrost transaction loader — pages address history and assembles RawTransactions."""

import asyncio
import logging
from typing import AsyncIterator

from walletsync.domain.models.transaction import Certificate, RawTransaction, TxInput, TxOutput, Withdrawal
from walletsync.exceptions import ExternalServiceError
from walletsync.infra.blockchain.base import RawTransactionSource
from walletsync.infra.blockchain.blockfrost.client import PAGE_SIZE, BlockfrostClient

logger = logging.getLogger(__name__)


class BlockfrostTxLoader(RawTransactionSource):
    def __init__(self, client: BlockfrostClient, page_size: int = PAGE_SIZE) -> None:
        self._client = client
        self._page_size = page_size

    async def iter_transaction_hashes(self, address: str, from_block: int | None = None) -> AsyncIterator[list[str]]:
        """Full sync walks history ascending. Incremental sync walks newest-first and
        stops at the first already-synced block, yielding each page oldest first."""
        incremental = from_block is not None and from_block > 0
        order = "desc" if incremental else "asc"
        logger.info(
            "Starting %s sync for %s from block %s",
            "incremental" if incremental else "full", address, from_block or 0,
        )

        page = 1
        while True:
            txs = await self._client.get_address_transactions(address, page=page, count=self._page_size, order=order)
            if not txs:
                return

            if incremental:
                fresh = [t for t in txs if t["block_height"] > from_block]
                if fresh:
                    yield [t["tx_hash"] for t in reversed(fresh)]
                if len(fresh) < len(txs):
                    logger.info("Incremental sync for %s reached block %d", address, from_block)
                    return
            else:
                yield [t["tx_hash"] for t in txs]

            if len(txs) < self._page_size:
                return
            page += 1

    async def fetch_raw_transaction(self, tx_hash: str) -> RawTransaction:
        tx_info, utxos, metadata = await asyncio.gather(
            self._client.get_transaction(tx_hash),
            self._client.get_transaction_utxos(tx_hash),
            self._client.get_transaction_metadata(tx_hash),
        )
        if tx_info is None or utxos is None:
            raise ExternalServiceError(f"Transaction {tx_hash} not found on Blockfrost")

        withdrawals: list[dict] = []
        if int(tx_info.get("withdrawal_count") or 0) > 0:
            withdrawals = await self._client.get_transaction_withdrawals(tx_hash)

        certificates: list[Certificate] = []
        if int(tx_info.get("delegation_count") or 0) > 0:
            for d in await self._client.get_transaction_delegations(tx_hash):
                certificates.append(Certificate(
                    cert_index=d.get("cert_index", 0),
                    type="stake_delegation",
                    address=d.get("address", ""),
                    pool_id=d.get("pool_id"),
                ))
        if int(tx_info.get("stake_cert_count") or 0) > 0:
            for s in await self._client.get_transaction_stakes(tx_hash):
                certificates.append(Certificate(
                    cert_index=s.get("cert_index", 0),
                    type="stake_registration" if s.get("registration") else "stake_deregistration",
                    address=s.get("address", ""),
                ))
        certificates.sort(key=lambda c: c.cert_index)

        return RawTransaction(
            hash=tx_info["hash"],
            block=tx_info.get("block", ""),
            block_height=tx_info["block_height"],
            block_time=tx_info["block_time"],
            slot=tx_info.get("slot", 0),
            index=tx_info.get("index", 0),
            # Collateral is only consumed when scripts fail; reference inputs are never spent
            inputs=[
                TxInput.model_validate(i) for i in utxos.get("inputs", [])
                if not i.get("collateral") and not i.get("reference")
            ],
            outputs=[TxOutput.model_validate(o) for o in utxos.get("outputs", []) if not o.get("collateral")],
            fees=int(tx_info.get("fees") or 0),
            metadata={str(m["label"]): m.get("json_metadata") for m in metadata} or None,
            certificates=certificates,
            withdrawals=[Withdrawal(address=w["address"], amount=w["amount"]) for w in withdrawals],
        )

    async def get_latest_block_height(self) -> int:
        return await self._client.get_latest_block_height()
