"""Liqwid lending rule.

qTokens are receipt tokens minted against supplied assets:
    Supply:   ADA  → qADA   (wallet receives qTokens)
    Withdraw: qADA → ADA    (wallet burns qTokens)
Both directions in one TX means collateral is being rebalanced.

qTokens have EMPTY asset names, so they are identified by policy id via
ProtocolTokenRegistry.
"""

import logging

from walletsync.domain.enums import Protocol, TxAction
from walletsync.domain.models.transaction import RawTransaction, WalletAssetFlow
from walletsync.domain.units import is_ada, is_script_address
from walletsync.parser.rules.base import BaseRule
from walletsync.tokens.protocol_tokens import ProtocolTokenRegistry, detect_potential_qtoken

logger = logging.getLogger(__name__)


class LiqwidLendingRule(BaseRule):
    RULE_NAME = "LiqwidLendingRule"
    PRIORITY = 1
    PROTOCOL = Protocol.LIQWID

    def __init__(self, protocol_tokens: ProtocolTokenRegistry, priority: int | None = None) -> None:
        super().__init__(priority)
        self._protocol_tokens = protocol_tokens

    def matches(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> bool:
        if any(self._protocol_tokens.is_qtoken(f.token.unit) for f in flows):
            return True

        potential = self._potential_qtokens(tx, flows)
        if potential:
            logger.warning(
                "Potential undiscovered qTokens in %s: %s",
                tx.hash, [f.token.unit[:20] + "..." for f in potential],
            )
            return True
        return False

    def get_action(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> TxAction:
        qtoken_flows = [f for f in flows if self._protocol_tokens.is_qtoken(f.token.unit)]
        qtoken_in = any(f.net_change > 0 for f in qtoken_flows)
        qtoken_out = any(f.net_change < 0 for f in qtoken_flows)

        if qtoken_in and not qtoken_out:
            logger.debug("%s: qTokens received → SUPPLY", tx.hash)
            return TxAction.SUPPLY
        if qtoken_out and not qtoken_in:
            logger.debug("%s: qTokens burned → WITHDRAW", tx.hash)
            return TxAction.WITHDRAW
        if qtoken_in and qtoken_out:
            logger.debug("%s: qTokens both ways → COLLATERALIZE", tx.hash)
            return TxAction.COLLATERALIZE

        logger.info("Liqwid-like TX %s without known qToken movement (%d flows)", tx.hash, len(flows))
        return TxAction.UNKNOWN

    def _potential_qtokens(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> list[WalletAssetFlow]:
        addresses = {i.address for i in tx.inputs} | {o.address for o in tx.outputs}
        script_count = sum(1 for a in addresses if is_script_address(a))
        has_ada = any(is_ada(f.token.unit) for f in flows)

        return [
            f for f in flows
            if self._protocol_tokens.get_protocol_token(f.token.unit) is None
            and detect_potential_qtoken(f.token.unit, has_ada_movement=has_ada, script_address_count=script_count)
        ]
