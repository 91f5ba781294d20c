"""WalletSyncService — pull a wallet's history from a raw source and parse it."""

import logging
from datetime import UTC, datetime

from walletsync.domain.models.transaction import SyncResult, WalletTransaction
from walletsync.infra.blockchain.base import RawTransactionSource
from walletsync.parser.wallet_parser import WalletTransactionParser

logger = logging.getLogger(__name__)


class WalletSyncService:
    def __init__(self, source: RawTransactionSource, parser: WalletTransactionParser) -> None:
        self._source = source
        self._parser = parser

    async def sync_wallet(self, wallet_address: str, from_block: int | None = None) -> SyncResult:
        """Full sync when from_block is None, otherwise only TXs above from_block.

        Never raises: a failure mid-sync is reported on the result.
        """
        try:
            transactions = await self._do_sync(wallet_address, from_block)
            tip = await self._source.get_latest_block_height()
        except Exception as e:
            logger.exception("Failed to sync wallet %s", wallet_address)
            return SyncResult(
                success=False,
                wallet_address=wallet_address,
                synced_at=datetime.now(UTC),
                block_height=from_block or 0,
                error=str(e) or type(e).__name__,
            )

        logger.info("Synced wallet %s: %d TXs, tip=%d", wallet_address, len(transactions), tip)
        return SyncResult(
            success=True,
            wallet_address=wallet_address,
            synced_at=datetime.now(UTC),
            block_height=tip,
            transaction_count=len(transactions),
            transactions=transactions,
        )

    async def _do_sync(self, wallet_address: str, from_block: int | None) -> list[WalletTransaction]:
        transactions: list[WalletTransaction] = []
        seen: set[str] = set()

        async for hashes in self._source.iter_transaction_hashes(wallet_address, from_block):
            page = [h for h in hashes if h not in seen]
            seen.update(page)
            if not page:
                continue

            raw_txs = [await self._source.fetch_raw_transaction(h) for h in page]
            transactions.extend(await self._parser.parse_transaction_batch(raw_txs, wallet_address))

        return transactions
