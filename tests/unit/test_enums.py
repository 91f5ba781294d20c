from walletsync.domain.enums import Protocol, TokenCategory, TxAction


class TestEnumsAreStringMixin:
    """All enums use (str, Enum) so they serialize to strings in JSON and DB."""

    def test_tx_action_is_str(self):
        assert isinstance(TxAction.SWAP, str)
        assert TxAction.SWAP == "swap"

    def test_protocol_is_str(self):
        assert isinstance(Protocol.LIQWID, str)
        assert Protocol.LIQWID == "liqwid"

    def test_token_category_is_str(self):
        assert isinstance(TokenCategory.Q_TOKEN, str)
        assert TokenCategory.Q_TOKEN == "q_token"


class TestEnumCounts:
    """Verify expected member counts to catch accidental additions/removals."""

    def test_tx_action_has_12(self):
        assert len(TxAction) == 12

    def test_protocol_has_7(self):
        assert len(Protocol) == 7

    def test_token_category_has_6(self):
        assert len(TokenCategory) == 6


class TestProtocolLabel:
    def test_display_labels(self):
        assert Protocol.MINSWAP.label == "Minswap"
        assert Protocol.SUNDAESWAP.label == "SundaeSwap"
        assert Protocol.WINGRIDERS.label == "WingRiders"

    def test_every_member_has_label(self):
        for protocol in Protocol:
            assert protocol.label
