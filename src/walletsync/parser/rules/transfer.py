"""Catch-all rule for plain sends, receives and unlabelled swaps."""

import logging

from walletsync.domain.enums import Protocol, TxAction
from walletsync.domain.models.transaction import RawTransaction, WalletAssetFlow
from walletsync.parser.rules.base import BaseRule
from walletsync.parser.rules.common import DEFAULT_DUST_THRESHOLD, meaningful_inflows, meaningful_outflows, tickers

logger = logging.getLogger(__name__)


class SimpleTransferRule(BaseRule):
    """Always matches. Must stay last."""

    RULE_NAME = "SimpleTransferRule"
    PRIORITY = 100
    PROTOCOL = Protocol.UNKNOWN

    def __init__(self, dust_threshold: int = DEFAULT_DUST_THRESHOLD, priority: int | None = None) -> None:
        super().__init__(priority)
        self._dust_threshold = dust_threshold

    def matches(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> bool:
        return True

    def get_action(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> TxAction:
        has_inflow = any(f.net_change > 0 for f in flows)
        has_outflow = any(f.net_change < 0 for f in flows)

        if has_inflow and not has_outflow:
            return TxAction.RECEIVE
        if has_outflow and not has_inflow:
            return TxAction.SEND

        if has_inflow and has_outflow and len(flows) >= 2:
            received = meaningful_inflows(flows, self._dust_threshold)
            sent = meaningful_outflows(flows, self._dust_threshold)
            if received and sent:
                logger.debug("%s: mixed flows sent=%s received=%s → SWAP", tx.hash, tickers(sent), tickers(received))
                return TxAction.SWAP

        logger.info(
            "%s: transfer pattern not recognized: %s",
            tx.hash, [(f.token.ticker, f.net_change) for f in flows],
        )
        return TxAction.UNKNOWN
