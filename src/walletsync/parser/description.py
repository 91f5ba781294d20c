"""One-line human-readable summaries for parsed transactions."""

from walletsync.domain.enums import Protocol, TxAction
from walletsync.domain.models.transaction import WalletAssetFlow
from walletsync.domain.units import is_ada

UNKNOWN_TICKER = "Unknown"

# Actions whose text doesn't depend on the flows
_FIXED: dict[TxAction, str] = {
    TxAction.COLLATERALIZE: "Adjust Collateral",
    TxAction.PROVIDE_LIQUIDITY: "Add Liquidity",
    TxAction.REMOVE_LIQUIDITY: "Remove Liquidity",
}

# Never prefixed with a protocol label
_UNPREFIXED: dict[TxAction, str] = {
    TxAction.CLAIM_REWARDS: "Claim Staking Rewards",
    TxAction.STAKE: "Delegate Stake",
    TxAction.UNSTAKE: "Deregister Stake",
}


def dominant_ticker(flows: list[WalletAssetFlow]) -> str:
    """Prefer the first native asset; ADA only when nothing else moved that way."""
    if not flows:
        return UNKNOWN_TICKER
    for flow in flows:
        if not is_ada(flow.token.unit):
            return flow.token.ticker or UNKNOWN_TICKER
    return flows[0].token.ticker or UNKNOWN_TICKER


def generate_description(
    action: TxAction,
    flows: list[WalletAssetFlow] | tuple[WalletAssetFlow, ...],
    protocol: Protocol | None = None,
) -> str:
    prefix = f"[{protocol.label}] " if protocol is not None and protocol != Protocol.UNKNOWN else ""
    received = [f for f in flows if f.net_change > 0]
    sent = [f for f in flows if f.net_change < 0]

    if action in _UNPREFIXED:
        return _UNPREFIXED[action]
    if action in _FIXED:
        return f"{prefix}{_FIXED[action]}"
    if action == TxAction.SWAP:
        return f"{prefix}Swap {dominant_ticker(sent)} → {dominant_ticker(received)}"
    if action == TxAction.SUPPLY:
        return f"{prefix}Supply {dominant_ticker(sent)}"
    if action == TxAction.WITHDRAW:
        return f"{prefix}Withdraw {dominant_ticker(received)}"
    if action == TxAction.SEND:
        return f"Send {dominant_ticker(sent)}"
    if action == TxAction.RECEIVE:
        return f"Receive {dominant_ticker(received)}"
    return "Transaction"
