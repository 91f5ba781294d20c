"""Raw (chain-side) and wallet-centric transaction types."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from walletsync.domain.enums import Protocol, TxAction
from walletsync.domain.models.token import TokenInfo

# --- Raw blockchain data (as delivered by Blockfrost-style sources) ---


class AssetAmount(BaseModel):
    unit: str
    quantity: int  # arrives as a decimal string on the wire


class TxInput(BaseModel):
    address: str
    amount: list[AssetAmount] = []
    tx_hash: str = ""
    output_index: int = 0
    data_hash: str | None = None
    inline_datum: str | None = None
    reference_script_hash: str | None = None


class TxOutput(BaseModel):
    address: str
    amount: list[AssetAmount] = []
    output_index: int = 0
    data_hash: str | None = None
    inline_datum: str | None = None
    reference_script_hash: str | None = None


class Certificate(BaseModel):
    cert_index: int = 0
    type: str  # stake_delegation | stake_registration | stake_deregistration
    address: str = ""
    pool_id: str | None = None


class Withdrawal(BaseModel):
    address: str
    amount: int


class RawTransaction(BaseModel):
    """A confirmed transaction exactly as the chain source reports it. Never mutated by the parser."""

    hash: str
    block: str = ""
    block_height: int
    block_time: int  # unix seconds
    slot: int = 0
    index: int = 0
    inputs: list[TxInput] = []
    outputs: list[TxOutput] = []
    fees: int = 0
    metadata: Any = None
    certificates: list[Certificate] = []
    withdrawals: list[Withdrawal] = []


# --- Wallet-centric view ---


class WalletFilterResult(BaseModel):
    inputs: list[TxInput] = []
    outputs: list[TxOutput] = []
    is_relevant: bool


class WalletAssetFlow(BaseModel):
    """Net movement of one asset for one wallet within one transaction."""

    model_config = ConfigDict(frozen=True)

    token: TokenInfo
    amount_in: int = Field(ge=0)
    amount_out: int = Field(ge=0)
    net_change: int  # positive = received

    @model_validator(mode="after")
    def _check_net_change(self) -> "WalletAssetFlow":
        if self.net_change != self.amount_in - self.amount_out:
            raise ValueError(
                f"net_change {self.net_change} != amount_in {self.amount_in} - amount_out {self.amount_out}"
                f" for {self.token.unit}"
            )
        return self

    @property
    def is_inflow(self) -> bool:
        return self.net_change > 0

    @property
    def is_outflow(self) -> bool:
        return self.net_change < 0


class WalletTransaction(BaseModel):
    """Final, immutable parse result. One per (wallet, tx_hash)."""

    model_config = ConfigDict(frozen=True)

    id: str  # last 6 chars of wallet address + "_" + tx hash
    wallet_address: str
    tx_hash: str
    block_height: int
    tx_timestamp: datetime
    tx_action: TxAction
    tx_protocol: Protocol | None = None
    asset_flows: tuple[WalletAssetFlow, ...] = ()
    net_ada_change: int = 0
    fees: int = 0
    description: str


class SyncResult(BaseModel):
    success: bool
    wallet_address: str
    synced_at: datetime
    block_height: int = 0
    transaction_count: int = 0
    transactions: list[WalletTransaction] = []
    error: str | None = None
