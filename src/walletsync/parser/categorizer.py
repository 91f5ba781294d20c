"""TransactionCategorizer — ordered rule list, first committed action wins."""

import logging

from walletsync.domain.enums import Protocol, TxAction
from walletsync.domain.models.transaction import RawTransaction, WalletAssetFlow
from walletsync.domain.units import is_ada
from walletsync.parser.rules.base import CategorizationRule
from walletsync.parser.rules.common import DEFAULT_DUST_THRESHOLD
from walletsync.tokens.protocol_tokens import ProtocolTokenRegistry

logger = logging.getLogger(__name__)


def _rule_name(rule: CategorizationRule) -> str:
    return getattr(rule, "RULE_NAME", type(rule).__name__)


class TransactionCategorizer:
    """Evaluates rules in ascending priority (stable: ties keep list order).

    A rule that matches but returns UNKNOWN does not stop evaluation. A rule
    that raises is logged and skipped.
    """

    def __init__(self, rules: list[CategorizationRule] | None = None) -> None:
        if rules is None:
            rules = build_default_rules()
        self._rules: list[CategorizationRule] = sorted(rules, key=lambda r: r.priority)
        logger.debug("Categorizer rules: %s", [(_rule_name(r), r.priority) for r in self._rules])

    @property
    def rules(self) -> list[CategorizationRule]:
        return list(self._rules)

    def categorize(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> TxAction:
        for rule in self._rules:
            name = _rule_name(rule)
            try:
                if not rule.matches(tx, flows):
                    continue
                action = rule.get_action(tx, flows)
            except Exception:
                logger.exception("Rule %s failed on %s, skipping", name, tx.hash)
                continue

            if action != TxAction.UNKNOWN:
                logger.debug("%s categorized %s as %s", name, tx.hash, action.value)
                return action
            logger.debug("%s matched %s but returned UNKNOWN", name, tx.hash)

        logger.warning(
            "Categorization gap for %s: flows=%s ada=%s native_assets=%s metadata=%s withdrawals=%d certificates=%d rules=%s",
            tx.hash,
            [(f.token.unit[:20], f.net_change) for f in flows[:5]],
            any(is_ada(f.token.unit) for f in flows),
            any(not is_ada(f.token.unit) for f in flows),
            tx.metadata is not None,
            len(tx.withdrawals),
            len(tx.certificates),
            [_rule_name(r) for r in self._rules],
        )
        return TxAction.UNKNOWN

    def detect_protocol(self, tx: RawTransaction, flows: list[WalletAssetFlow] | None = None) -> Protocol | None:
        """First matching rule that names a protocol. Independent of the action."""
        flows = flows or []
        for rule in self._rules:
            try:
                if not rule.matches(tx, flows):
                    continue
                protocol = rule.get_protocol()
            except Exception:
                logger.exception("Rule %s failed during protocol detection on %s", _rule_name(rule), tx.hash)
                continue
            if protocol != Protocol.UNKNOWN:
                return protocol
        return None


def build_default_rules(
    protocol_tokens: ProtocolTokenRegistry | None = None,
    dust_threshold: int = DEFAULT_DUST_THRESHOLD,
) -> list[CategorizationRule]:
    """Built-in rule set: lending → DEX → staking → plain transfer."""
    from walletsync.parser.rules.dex import MinswapDexRule, SundaeSwapDexRule, WingRidersDexRule
    from walletsync.parser.rules.lending import LiqwidLendingRule
    from walletsync.parser.rules.stake import StakeRewardsRule
    from walletsync.parser.rules.transfer import SimpleTransferRule
    from walletsync.tokens.protocol_tokens import build_default_protocol_tokens

    if protocol_tokens is None:
        protocol_tokens = build_default_protocol_tokens()

    return [
        LiqwidLendingRule(protocol_tokens),
        # Same priority: the DEXes with distinctive LP tickers go before Minswap's generic "LP" marker
        SundaeSwapDexRule(),
        WingRidersDexRule(),
        MinswapDexRule(),
        StakeRewardsRule(),
        SimpleTransferRule(dust_threshold),
    ]
