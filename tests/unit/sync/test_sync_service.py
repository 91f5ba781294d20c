"""Tests for WalletSyncService — paging raw TXs through the parser."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest

from walletsync.domain.enums import TxAction
from walletsync.domain.models.transaction import RawTransaction, WalletTransaction
from walletsync.exceptions import ExternalServiceError
from walletsync.sync.service import WalletSyncService

WALLET = "addr1qwallet"


def _raw(tx_hash: str) -> RawTransaction:
    return RawTransaction(hash=tx_hash, block_height=1, block_time=1700000000)


def _wallet_tx(tx_hash: str) -> WalletTransaction:
    return WalletTransaction(
        id=f"wallet_{tx_hash}",
        wallet_address=WALLET,
        tx_hash=tx_hash,
        block_height=1,
        tx_timestamp=datetime.fromtimestamp(1700000000, tz=UTC),
        tx_action=TxAction.RECEIVE,
        description="Receive ADA",
    )


class FakeSource:
    def __init__(self, pages: list[list[str]], tip: int = 500) -> None:
        self.pages = pages
        self.tip = tip
        self.from_block = "unset"
        self.fetch_raw_transaction = AsyncMock(side_effect=_raw)

    async def iter_transaction_hashes(self, address, from_block=None):
        self.from_block = from_block
        for page in self.pages:
            yield page

    async def get_latest_block_height(self):
        return self.tip


@pytest.fixture()
def parser():
    mock = MagicMock()

    async def parse_batch(raw_txs, wallet_address):
        return [_wallet_tx(tx.hash) for tx in raw_txs]

    mock.parse_transaction_batch = AsyncMock(side_effect=parse_batch)
    return mock


class TestSyncWallet:
    async def test_full_sync(self, parser):
        source = FakeSource([["a", "b"], ["c"]])
        service = WalletSyncService(source, parser)

        result = await service.sync_wallet(WALLET)

        assert result.success
        assert result.transaction_count == 3
        assert result.block_height == 500
        assert result.wallet_address == WALLET
        assert source.from_block is None
        assert parser.parse_transaction_batch.await_count == 2

    async def test_incremental_passes_from_block(self, parser):
        source = FakeSource([["d"]])
        result = await WalletSyncService(source, parser).sync_wallet(WALLET, from_block=400)
        assert result.success
        assert source.from_block == 400

    async def test_duplicate_hashes_loaded_once(self, parser):
        source = FakeSource([["a", "b"], ["b", "c"]])
        await WalletSyncService(source, parser).sync_wallet(WALLET)
        assert source.fetch_raw_transaction.await_count == 3

    async def test_irrelevant_transactions_dropped(self, parser):
        parser.parse_transaction_batch = AsyncMock(return_value=[])
        result = await WalletSyncService(FakeSource([["a"]]), parser).sync_wallet(WALLET)
        assert result.success
        assert result.transaction_count == 0
        assert result.transactions == []

    async def test_failure_reported(self, parser):
        source = FakeSource([["a"]])
        source.fetch_raw_transaction.side_effect = ExternalServiceError("Blockfrost 503")

        result = await WalletSyncService(source, parser).sync_wallet(WALLET, from_block=10)
        assert not result.success
        assert result.error == "Blockfrost 503"
        assert result.block_height == 10
        assert result.transactions == []
