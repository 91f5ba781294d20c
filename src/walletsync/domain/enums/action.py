from enum import Enum


class TxAction(str, Enum):
    """Semantic action of a transaction from the wallet's point of view."""

    RECEIVE = "receive"
    SEND = "send"

    SWAP = "swap"
    PROVIDE_LIQUIDITY = "provide_liquidity"
    REMOVE_LIQUIDITY = "remove_liquidity"

    STAKE = "stake"
    UNSTAKE = "unstake"
    CLAIM_REWARDS = "claim_rewards"

    SUPPLY = "supply"
    WITHDRAW = "withdraw"
    COLLATERALIZE = "collateralize"

    UNKNOWN = "unknown"
