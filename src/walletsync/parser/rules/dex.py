"""DEX rules. One rule per DEX; all share the same action derivation."""

import json
import logging

from walletsync.domain.enums import Protocol, TokenCategory, TxAction
from walletsync.domain.models.transaction import RawTransaction, WalletAssetFlow
from walletsync.parser.rules.base import BaseRule
from walletsync.parser.rules.common import is_lp_flow, meaningful_inflows, meaningful_outflows, tickers

logger = logging.getLogger(__name__)


def categorize_dex_action(flows: list[WalletAssetFlow], fee_bound: int = 0) -> TxAction:
    """LP in → provide, LP out → remove, something in and something out → swap.

    Once a DEX is identified the ADA side of a swap only has to exceed
    fee_bound, so small market orders still count.
    """
    lp_flows = [f for f in flows if is_lp_flow(f)]
    if any(f.net_change > 0 for f in lp_flows):
        return TxAction.PROVIDE_LIQUIDITY
    if any(f.net_change < 0 for f in lp_flows):
        return TxAction.REMOVE_LIQUIDITY

    received = meaningful_inflows(flows, fee_bound)
    sent = meaningful_outflows(flows, fee_bound)
    if received and sent:
        logger.debug("DEX swap: sent=%s received=%s", tickers(sent), tickers(received))
        return TxAction.SWAP
    return TxAction.UNKNOWN


class DexRule(BaseRule):
    """Matches on a metadata marker or on the DEX's LP tokens.

    Subclasses define:
        METADATA_MARKERS: lowercase substrings searched in the JSON-dumped tx metadata
        LP_TICKER_MARKERS: ticker substrings identifying this DEX's LP tokens
    """

    RULE_NAME = "DexRule"
    PRIORITY = 2
    METADATA_MARKERS: tuple[str, ...] = ()
    LP_TICKER_MARKERS: tuple[str, ...] = ()

    def matches(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> bool:
        if tx.metadata:
            text = json.dumps(tx.metadata, default=str).lower()
            if any(marker in text for marker in self.METADATA_MARKERS):
                return True

        return any(
            f.token.category == TokenCategory.LP_TOKEN
            and any(marker in f.token.ticker for marker in self.LP_TICKER_MARKERS)
            for f in flows
        )

    def get_action(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> TxAction:
        return categorize_dex_action(flows, tx.fees)


class MinswapDexRule(DexRule):
    RULE_NAME = "MinswapDexRule"
    PROTOCOL = Protocol.MINSWAP
    METADATA_MARKERS = ("minswap",)
    LP_TICKER_MARKERS = ("MIN", "LP")


class SundaeSwapDexRule(DexRule):
    RULE_NAME = "SundaeSwapDexRule"
    PROTOCOL = Protocol.SUNDAESWAP
    METADATA_MARKERS = ("sundaeswap", "sundae")
    LP_TICKER_MARKERS = ("SSLP", "SUNDAE")


class WingRidersDexRule(DexRule):
    RULE_NAME = "WingRidersDexRule"
    PROTOCOL = Protocol.WINGRIDERS
    METADATA_MARKERS = ("wingriders",)
    LP_TICKER_MARKERS = ("WRLP", "WRT")
