"""Wallet relevance filtering and per-asset flow calculation."""

import logging
from typing import Protocol

from walletsync.domain.models.transaction import (
    AssetAmount,
    RawTransaction,
    TxInput,
    TxOutput,
    WalletAssetFlow,
    WalletFilterResult,
)
from walletsync.domain.units import is_ada
from walletsync.tokens.metadata import basic_token

logger = logging.getLogger(__name__)


class WalletFilter(Protocol):
    def filter_for_wallet(self, tx: RawTransaction, wallet_address: str) -> WalletFilterResult: ...


class AssetFlowCalculator(Protocol):
    def calculate_asset_flows(
        self, inputs: list[TxInput], outputs: list[TxOutput], wallet_address: str
    ) -> list[WalletAssetFlow]: ...


def aggregate_amounts(amounts: list[AssetAmount]) -> dict[str, int]:
    """Sum quantities per unit, preserving first-seen order."""
    totals: dict[str, int] = {}
    for amount in amounts:
        totals[amount.unit] = totals.get(amount.unit, 0) + amount.quantity
    return totals


def calculate_net_ada_change(flows: list[WalletAssetFlow] | tuple[WalletAssetFlow, ...]) -> int:
    for flow in flows:
        if is_ada(flow.token.unit):
            return flow.net_change
    return 0


class WalletTransactionFilter:
    """Default WalletFilter + AssetFlowCalculator: exact address match on UTXO inputs/outputs.

    Inputs spent by the wallet are outflows; outputs paid to the wallet are inflows.
    """

    def is_wallet_input(self, tx_input: TxInput, address: str) -> bool:
        return tx_input.address == address

    def is_wallet_output(self, tx_output: TxOutput, address: str) -> bool:
        return tx_output.address == address

    def filter_for_wallet(self, tx: RawTransaction, wallet_address: str) -> WalletFilterResult:
        inputs = [i for i in tx.inputs if self.is_wallet_input(i, wallet_address)]
        outputs = [o for o in tx.outputs if self.is_wallet_output(o, wallet_address)]
        # Withdrawals are keyed by stake address, so they only count when the wallet is tracked by one
        own_withdrawal = any(w.address == wallet_address for w in tx.withdrawals)
        return WalletFilterResult(
            inputs=inputs,
            outputs=outputs,
            is_relevant=bool(inputs or outputs or own_withdrawal),
        )

    def calculate_asset_flows(
        self, inputs: list[TxInput], outputs: list[TxOutput], wallet_address: str
    ) -> list[WalletAssetFlow]:
        wallet_inputs = [i for i in inputs if i.address == wallet_address]
        wallet_outputs = [o for o in outputs if o.address == wallet_address]

        outflows = aggregate_amounts([a for i in wallet_inputs for a in i.amount])
        inflows = aggregate_amounts([a for o in wallet_outputs for a in o.amount])

        flows: list[WalletAssetFlow] = []
        for unit in dict.fromkeys([*outflows, *inflows]):
            amount_in = inflows.get(unit, 0)
            amount_out = outflows.get(unit, 0)
            if amount_in == 0 and amount_out == 0:
                continue
            flows.append(WalletAssetFlow(
                token=basic_token(unit),
                amount_in=amount_in,
                amount_out=amount_out,
                net_change=amount_in - amount_out,
            ))
        return flows

    def calculate_net_ada_change(self, flows: list[WalletAssetFlow]) -> int:
        return calculate_net_ada_change(flows)

    def validate_asset_flows(self, flows: list[WalletAssetFlow]) -> bool:
        for flow in flows:
            if flow.net_change != flow.amount_in - flow.amount_out:
                logger.error("Invalid asset flow for %s: net_change mismatch", flow.token.unit)
                return False
            if flow.amount_in < 0 or flow.amount_out < 0:
                logger.error("Invalid asset flow for %s: negative amounts", flow.token.unit)
                return False
        return True

    def flow_summary(self, flows: list[WalletAssetFlow]) -> dict[str, int]:
        return {
            "total_assets": len(flows),
            "inflow_assets": sum(1 for f in flows if f.amount_in > 0),
            "outflow_assets": sum(1 for f in flows if f.amount_out > 0),
            "net_positive_assets": sum(1 for f in flows if f.net_change > 0),
            "net_negative_assets": sum(1 for f in flows if f.net_change < 0),
        }
