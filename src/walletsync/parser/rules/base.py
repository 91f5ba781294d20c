"""Categorization rule interfaces."""

from abc import ABC, abstractmethod
from typing import Protocol as TypingProtocol

from walletsync.domain.enums import Protocol, TxAction
from walletsync.domain.models.transaction import RawTransaction, WalletAssetFlow


class CategorizationRule(TypingProtocol):
    """Anything with this shape can be handed to TransactionCategorizer."""

    priority: int

    def matches(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> bool: ...

    def get_action(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> TxAction: ...

    def get_protocol(self) -> Protocol: ...


class BaseRule(ABC):
    """Minimal base for built-in rules.

    Subclasses define:
        RULE_NAME: label used in logs
        PRIORITY: lower runs first
        PROTOCOL: protocol reported by detect_protocol when the rule matches

    get_action is only called after matches returned True. Returning
    TxAction.UNKNOWN lets lower-priority rules have a go.
    """

    RULE_NAME: str = "BaseRule"
    PRIORITY: int = 100
    PROTOCOL: Protocol = Protocol.UNKNOWN

    def __init__(self, priority: int | None = None) -> None:
        self.priority = self.PRIORITY if priority is None else priority

    @abstractmethod
    def matches(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> bool:
        """Quick check: is this rule relevant to the TX?"""

    @abstractmethod
    def get_action(self, tx: RawTransaction, flows: list[WalletAssetFlow]) -> TxAction:
        """Derive the action. UNKNOWN = soft match, keep looking."""

    def get_protocol(self) -> Protocol:
        return self.PROTOCOL

    def __repr__(self) -> str:
        return f"{self.RULE_NAME}(priority={self.priority})"
