"""Staking rule: reward withdrawals and delegation certificates."""

import logging

from walletsync.domain.enums import Protocol, TxAction
from walletsync.domain.models.transaction import RawTransaction, WalletAssetFlow
from walletsync.domain.units import is_ada
from walletsync.parser.rules.base import BaseRule

logger = logging.getLogger(__name__)

DELEGATION_CERT = "stake_delegation"
DEREGISTRATION_CERT = "stake_deregistration"


class StakeRewardsRule(BaseRule):
    RULE_NAME = "StakeRewardsRule"
    PRIORITY = 10
    PROTOCOL = Protocol.UNKNOWN

    def matches(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> bool:
        if tx.withdrawals or tx.certificates:
            return True
        # Rewards paid without an explicit withdrawal record
        return len(flows) == 1 and is_ada(flows[0].token.unit) and flows[0].net_change > 0

    def get_action(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> TxAction:
        if tx.withdrawals:
            logger.debug("%s: %d withdrawal(s) → CLAIM_REWARDS", tx.hash, len(tx.withdrawals))
            return TxAction.CLAIM_REWARDS

        cert_types = {c.type for c in tx.certificates}
        if DELEGATION_CERT in cert_types:
            pool_id = next((c.pool_id for c in tx.certificates if c.type == DELEGATION_CERT), None)
            logger.debug("%s: delegation to %s → STAKE", tx.hash, pool_id)
            return TxAction.STAKE
        if DEREGISTRATION_CERT in cert_types:
            return TxAction.UNSTAKE

        return TxAction.UNKNOWN
