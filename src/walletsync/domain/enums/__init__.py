from walletsync.domain.enums.action import TxAction
from walletsync.domain.enums.protocol import Protocol
from walletsync.domain.enums.token_category import TokenCategory

__all__ = [
    "Protocol",
    "TokenCategory",
    "TxAction",
]
