from enum import Enum


class TokenCategory(str, Enum):
    """Coarse classification of a Cardano asset unit."""

    NATIVE = "native"
    FUNGIBLE = "fungible"
    LP_TOKEN = "lp_token"
    Q_TOKEN = "q_token"  # lending receipt token (Liqwid qADA, ...)
    GOVERNANCE = "governance"
    STABLECOIN = "stablecoin"
