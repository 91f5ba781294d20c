"""Build TokenInfo records: native coin, registry entries, and fallbacks for unknown units."""

import re
from datetime import UTC, datetime

from walletsync.domain.enums import TokenCategory
from walletsync.domain.models.token import TokenInfo
from walletsync.domain.units import ADA_DECIMALS, ADA_UNIT, decode_asset_name, get_asset_name, get_policy_id, is_ada
from walletsync.infra.token_registry.client import RegistryEntry, TokenProperty

ADA_LOGO = "https://cryptologos.cc/logos/cardano-ada-logo.png"

STABLECOIN_TICKERS = {"djed", "shen", "iusd", "usdm", "usda", "usdc", "usdt", "dai", "eurc"}
STABLECOIN_MARKERS = ("usd", "eur", "djed", "stable")

_ALNUM = re.compile(r"^[A-Za-z0-9]+$")
_QTOKEN_TICKER = re.compile(r"^q[a-z0-9]{1,5}$")


def native_token() -> TokenInfo:
    return TokenInfo(
        unit=ADA_UNIT,
        policy_id="",
        asset_name="",
        name="Cardano",
        ticker="ADA",
        decimals=ADA_DECIMALS,
        category=TokenCategory.NATIVE,
        logo=ADA_LOGO,
        metadata={"native": True, "official": True},
    )


def default_name(unit: str) -> str:
    decoded = decode_asset_name(get_asset_name(unit))
    if decoded:
        return decoded
    return f"Token {unit[:8]}..."


def default_ticker(unit: str) -> str:
    asset_name = get_asset_name(unit)
    if asset_name and len(asset_name) <= 16:
        decoded = decode_asset_name(asset_name)
        if decoded and _ALNUM.match(decoded):
            return decoded.upper()[:8]
    return unit[-8:].upper()


def fallback_token(unit: str) -> TokenInfo:
    """Placeholder for a unit nobody knows. Pure function of the unit."""
    return TokenInfo(
        unit=unit,
        policy_id=get_policy_id(unit),
        asset_name=get_asset_name(unit),
        name=default_name(unit),
        ticker=default_ticker(unit),
        decimals=0,
        category=TokenCategory.FUNGIBLE,
        metadata={"fallback": True},
    )


def basic_token(unit: str) -> TokenInfo:
    """Pre-resolution record attached by the flow calculator; enriched later by the registry."""
    if is_ada(unit):
        return native_token()
    asset_name = get_asset_name(unit)
    return TokenInfo(
        unit=unit,
        policy_id=get_policy_id(unit),
        asset_name=asset_name,
        name=f"Token {asset_name or 'Unknown'}",
        ticker=asset_name[:8].upper() if asset_name else "TOKEN",
        decimals=0,
        category=TokenCategory.FUNGIBLE,
    )


def detect_token_category(name: str = "", ticker: str = "", description: str = "") -> TokenCategory:
    """Best-effort category from registry text fields. Order matters: LP, qToken, governance, stablecoin."""
    name = name.lower()
    ticker = ticker.lower()
    description = description.lower()

    if "lp" in ticker or "liquidity" in name or re.search(r"\blp\b", name) or "liquidity pool" in description:
        return TokenCategory.LP_TOKEN

    if _QTOKEN_TICKER.match(ticker):
        return TokenCategory.Q_TOKEN

    if "governance" in name or "governance" in description or re.search(r"\bdao\b", name) or "gov" in ticker:
        return TokenCategory.GOVERNANCE

    if ticker in STABLECOIN_TICKERS or any(
        marker in ticker or marker in name or marker in description for marker in STABLECOIN_MARKERS
    ):
        return TokenCategory.STABLECOIN

    return TokenCategory.FUNGIBLE


def normalize_logo(logo: str | None) -> str | None:
    """Registry logos are raw base64 PNGs; hand them out as data URLs."""
    if not logo:
        return None
    if logo.startswith("data:"):
        return logo
    return f"data:image/png;base64,{logo}"


def _text(prop: TokenProperty | None) -> str:
    if prop is None or prop.value is None:
        return ""
    return str(prop.value)


def _decimals(prop: TokenProperty | None) -> int:
    if prop is None or prop.value is None:
        return 0
    try:
        value = int(prop.value)
    except (TypeError, ValueError):
        return 0
    return max(value, 0)


def token_from_registry_entry(entry: RegistryEntry) -> TokenInfo:
    unit = entry.subject
    name = _text(entry.name)
    ticker = _text(entry.ticker)
    description = _text(entry.description)

    return TokenInfo(
        unit=unit,
        policy_id=get_policy_id(unit),
        asset_name=get_asset_name(unit),
        name=name or default_name(unit),
        ticker=ticker or default_ticker(unit),
        decimals=_decimals(entry.decimals),
        category=detect_token_category(name, ticker, description),
        logo=normalize_logo(_text(entry.logo)),
        metadata={
            "source": "cardano_registry",
            "description": description or None,
            "url": _text(entry.url) or None,
            "fetched_at": datetime.now(UTC).isoformat(),
            "sequence_numbers": {
                "name": entry.name.sequence_number if entry.name else None,
                "ticker": entry.ticker.sequence_number if entry.ticker else None,
                "decimals": entry.decimals.sequence_number if entry.decimals else None,
                "logo": entry.logo.sequence_number if entry.logo else None,
            },
        },
    )
