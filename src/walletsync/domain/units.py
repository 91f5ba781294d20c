"""Helpers for Cardano asset units and addresses.

A unit is ``policy_id`` (56 hex chars) followed by the hex-encoded asset name.
``"lovelace"`` is the native coin.
"""

ADA_UNIT = "lovelace"
ADA_DECIMALS = 6
POLICY_ID_LENGTH = 56

# Shelley address header types whose payment credential is a script
# (types 1, 3 and 7 render as addr1z / addr1x / addr1w).
SCRIPT_ADDRESS_PREFIXES = (
    "addr1w",
    "addr1z",
    "addr1x",
    "addr_test1w",
    "addr_test1z",
    "addr_test1x",
)


def is_ada(unit: str) -> bool:
    return unit == ADA_UNIT


def get_policy_id(unit: str) -> str:
    if is_ada(unit):
        return ""
    return unit[:POLICY_ID_LENGTH]


def get_asset_name(unit: str) -> str:
    """Hex-encoded asset name; empty for lovelace and for nameless tokens."""
    if is_ada(unit):
        return ""
    return unit[POLICY_ID_LENGTH:]


def decode_asset_name(asset_name_hex: str) -> str | None:
    """Decode a hex asset name to text. Returns None unless it is printable ASCII."""
    if not asset_name_hex:
        return None
    try:
        decoded = bytes.fromhex(asset_name_hex).decode("utf-8")
    except (ValueError, UnicodeDecodeError):
        return None
    if decoded and all(0x20 <= ord(ch) <= 0x7E for ch in decoded):
        return decoded
    return None


def is_script_address(address: str) -> bool:
    return address.startswith(SCRIPT_ADDRESS_PREFIXES)
