from datetime import UTC, datetime

import pytest
from pydantic import ValidationError

from walletsync.domain.enums import TokenCategory, TxAction
from walletsync.domain.models.token import TokenInfo
from walletsync.domain.models.transaction import RawTransaction, TxInput, WalletAssetFlow, WalletTransaction
from walletsync.domain.units import (
    decode_asset_name,
    get_asset_name,
    get_policy_id,
    is_ada,
    is_script_address,
)

POLICY = "ab" * 28
HOSKY = POLICY + "484f534b59"


def _token(unit: str = HOSKY) -> TokenInfo:
    return TokenInfo(unit=unit, name="HOSKY", ticker="HOSKY")


class TestUnits:
    def test_lovelace(self):
        assert is_ada("lovelace")
        assert get_policy_id("lovelace") == ""
        assert get_asset_name("lovelace") == ""

    def test_split_unit(self):
        assert get_policy_id(HOSKY) == POLICY
        assert get_asset_name(HOSKY) == "484f534b59"

    def test_empty_asset_name(self):
        assert get_asset_name(POLICY) == ""

    def test_decode_asset_name(self):
        assert decode_asset_name("484f534b59") == "HOSKY"
        assert decode_asset_name("") is None
        assert decode_asset_name("zz") is None
        assert decode_asset_name("000de140") is None  # CIP-68 label bytes aren't printable

    def test_script_address(self):
        assert is_script_address("addr1wxyz")
        assert is_script_address("addr1zxyz")
        assert is_script_address("addr1xxyz")
        assert not is_script_address("addr1qxyz")
        assert not is_script_address("stake1uxyz")


class TestTokenInfo:
    def test_defaults(self):
        token = _token()
        assert token.decimals == 0
        assert token.category == TokenCategory.FUNGIBLE
        assert token.logo is None

    def test_frozen(self):
        token = _token()
        with pytest.raises(ValidationError):
            token.ticker = "OTHER"

    def test_negative_decimals_rejected(self):
        with pytest.raises(ValidationError):
            TokenInfo(unit=HOSKY, name="x", ticker="x", decimals=-1)


class TestWalletAssetFlow:
    def test_valid_flow(self):
        flow = WalletAssetFlow(token=_token(), amount_in=100, amount_out=40, net_change=60)
        assert flow.is_inflow
        assert not flow.is_outflow

    def test_net_change_must_match(self):
        with pytest.raises(ValidationError):
            WalletAssetFlow(token=_token(), amount_in=100, amount_out=40, net_change=50)

    def test_negative_amounts_rejected(self):
        with pytest.raises(ValidationError):
            WalletAssetFlow(token=_token(), amount_in=-1, amount_out=0, net_change=-1)

    def test_big_quantities_stay_exact(self):
        big = 45_000_000_000_000_000_000
        flow = WalletAssetFlow(token=_token(), amount_in=big + 1, amount_out=big, net_change=1)
        assert flow.net_change == 1


class TestRawTransaction:
    def test_quantities_parsed_from_strings(self):
        tx = RawTransaction.model_validate({
            "hash": "abc",
            "block_height": 10,
            "block_time": 1700000000,
            "fees": "170000",
            "inputs": [{"address": "addr1q", "amount": [{"unit": "lovelace", "quantity": "5000000"}]}],
        })
        assert tx.fees == 170000
        assert tx.inputs[0].amount[0].quantity == 5_000_000
        assert tx.outputs == []
        assert tx.metadata is None

    def test_input_ignores_unknown_fields(self):
        tx_input = TxInput.model_validate({"address": "addr1q", "amount": [], "collateral": False})
        assert tx_input.address == "addr1q"


class TestWalletTransaction:
    def test_frozen(self):
        wtx = WalletTransaction(
            id="abcdef_hash",
            wallet_address="addr1qabcdef",
            tx_hash="hash",
            block_height=1,
            tx_timestamp=datetime(2024, 1, 1, tzinfo=UTC),
            tx_action=TxAction.SEND,
            description="Send ADA",
        )
        with pytest.raises(ValidationError):
            wtx.description = "changed"
        assert wtx.tx_protocol is None
        assert wtx.asset_flows == ()
