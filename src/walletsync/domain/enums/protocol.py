from enum import Enum

_LABELS = {
    "minswap": "Minswap",
    "liqwid": "Liqwid",
    "sundaeswap": "SundaeSwap",
    "wingriders": "WingRiders",
    "indigo": "Indigo",
    "djed": "Djed",
    "unknown": "Unknown",
}


class Protocol(str, Enum):
    """Cardano DeFi protocols the rule engine can recognise."""

    MINSWAP = "minswap"
    LIQWID = "liqwid"
    SUNDAESWAP = "sundaeswap"
    WINGRIDERS = "wingriders"
    INDIGO = "indigo"
    DJED = "djed"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        return _LABELS[self.value]
