"""Known protocol tokens, keyed by policy id.

Lending receipt tokens (Liqwid qTokens) are minted with EMPTY asset names, so
the policy id is the only reliable identifier.
"""

import logging

from pydantic import BaseModel

from walletsync.domain.enums import Protocol, TokenCategory
from walletsync.domain.units import get_asset_name, get_policy_id

logger = logging.getLogger(__name__)

# More than this many distinct script addresses alongside an ADA movement
# makes an empty-named token look like a lending receipt.
MIN_SCRIPT_ADDRESSES = 2


class ProtocolToken(BaseModel):
    policy_id: str
    name: str
    protocol: Protocol
    category: TokenCategory
    description: str = ""
    discovered_date: str | None = None
    discovered_from: str | None = None  # tx hash or other source


LIQWID_QTOKENS: list[ProtocolToken] = [
    ProtocolToken(
        policy_id="a04ce7a52545e5e33c2867e148898d9e667a69602285f6a1298f9d68",
        name="qADA",
        protocol=Protocol.LIQWID,
        category=TokenCategory.Q_TOKEN,
        description="Interest-bearing ADA supplied to Liqwid",
        discovered_date="2024-08-11",
        discovered_from="0ded8ac279d9bf95c65d9b099adbc07ab076e3050c2a1c2a810197c7a968be34",
    ),
]

LIQWID_AUX_TOKENS: list[ProtocolToken] = [
    ProtocolToken(
        policy_id="da8c30857834c6ae7203935b89278c532b3995245295456f993e1d24",
        name="LQ",
        protocol=Protocol.LIQWID,
        category=TokenCategory.GOVERNANCE,
        description="Liqwid governance token",
    ),
]

MINSWAP_TOKENS: list[ProtocolToken] = [
    ProtocolToken(
        policy_id="29d222ce763455e3d7a09a665ce554f00ac89d2e99a1a83d267170c6",
        name="MIN",
        protocol=Protocol.MINSWAP,
        category=TokenCategory.GOVERNANCE,
        description="Minswap governance token",
    ),
]


class ProtocolTokenRegistry:
    """Policy id → ProtocolToken lookup table."""

    def __init__(self, tokens: list[ProtocolToken] | None = None) -> None:
        self._tokens: dict[str, ProtocolToken] = {}
        for token in tokens or []:
            self._tokens[token.policy_id] = token

    def get_protocol_token(self, unit: str) -> ProtocolToken | None:
        policy_id = get_policy_id(unit)
        if not policy_id:
            return None
        return self._tokens.get(policy_id)

    def is_liqwid_token(self, unit: str) -> bool:
        token = self.get_protocol_token(unit)
        return token is not None and token.protocol == Protocol.LIQWID

    def is_qtoken(self, unit: str) -> bool:
        token = self.get_protocol_token(unit)
        return token is not None and token.category == TokenCategory.Q_TOKEN

    def register_token(self, token: ProtocolToken) -> None:
        self._tokens[token.policy_id] = token
        logger.info(
            "Registered protocol token %s (%s) policy=%s... source=%s",
            token.name, token.protocol.value, token.policy_id[:20], token.discovered_from,
        )

    def tokens_for_protocol(self, protocol: Protocol) -> list[ProtocolToken]:
        return [t for t in self._tokens.values() if t.protocol == protocol]

    def export(self) -> dict[str, ProtocolToken]:
        return dict(self._tokens)

    def __len__(self) -> int:
        return len(self._tokens)


def build_default_protocol_tokens() -> ProtocolTokenRegistry:
    return ProtocolTokenRegistry(LIQWID_QTOKENS + LIQWID_AUX_TOKENS + MINSWAP_TOKENS)


def detect_potential_qtoken(unit: str, *, has_ada_movement: bool, script_address_count: int) -> bool:
    """Heuristic: empty asset name moving with ADA through several script addresses.

    Advisory only. Feeds LiqwidLendingRule.matches, never the action.
    """
    if not get_policy_id(unit) or get_asset_name(unit):
        return False
    return has_ada_movement and script_address_count > MIN_SCRIPT_ADDRESSES
