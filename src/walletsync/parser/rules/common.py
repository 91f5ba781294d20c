"""Flow predicates shared by several rules."""

from walletsync.domain.enums import TokenCategory
from walletsync.domain.models.transaction import WalletAssetFlow
from walletsync.domain.units import is_ada

DEFAULT_DUST_THRESHOLD = 10_000_000  # lovelace


def is_meaningful(flow: WalletAssetFlow, dust_threshold: int = DEFAULT_DUST_THRESHOLD) -> bool:
    """Any native asset counts; ADA only when it moves more than fee-sized dust."""
    if not is_ada(flow.token.unit):
        return flow.net_change != 0
    return abs(flow.net_change) > dust_threshold


def meaningful_inflows(flows: list[WalletAssetFlow], dust_threshold: int = DEFAULT_DUST_THRESHOLD) -> list[WalletAssetFlow]:
    return [f for f in flows if f.net_change > 0 and is_meaningful(f, dust_threshold)]


def meaningful_outflows(flows: list[WalletAssetFlow], dust_threshold: int = DEFAULT_DUST_THRESHOLD) -> list[WalletAssetFlow]:
    return [f for f in flows if f.net_change < 0 and is_meaningful(f, dust_threshold)]


def is_lp_flow(flow: WalletAssetFlow) -> bool:
    return flow.token.category == TokenCategory.LP_TOKEN or "LP" in flow.token.ticker


def tickers(flows: list[WalletAssetFlow]) -> list[str]:
    return [f.token.ticker for f in flows]
