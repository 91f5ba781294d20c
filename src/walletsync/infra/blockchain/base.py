"""Abstract base for raw transaction sources."""

from abc import ABC, abstractmethod
from typing import AsyncIterator

from walletsync.domain.models.transaction import RawTransaction


class RawTransactionSource(ABC):
    """Strategy interface for pulling confirmed transactions for an address."""

    @abstractmethod
    def iter_transaction_hashes(self, address: str, from_block: int | None = None) -> AsyncIterator[list[str]]:
        """Yield pages of TX hashes touching the address, oldest first."""

    @abstractmethod
    async def fetch_raw_transaction(self, tx_hash: str) -> RawTransaction:
        """Full TX with inputs, outputs, withdrawals and certificates."""

    @abstractmethod
    async def get_latest_block_height(self) -> int:
        """Chain tip height."""
