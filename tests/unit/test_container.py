from unittest.mock import MagicMock

from walletsync.config import Settings
from walletsync.container import Container, build_sync_service, build_wallet_parser
from walletsync.parser.rules.transfer import SimpleTransferRule
from walletsync.parser.wallet_parser import WalletTransactionParser
from walletsync.sync.service import WalletSyncService


def _container(**overrides) -> Container:
    container = Container()
    container.settings.override(Settings(blockfrost_project_id="mainnetTEST", **overrides))
    return container


class TestContainer:
    def test_singletons(self):
        container = _container()
        assert container.token_cache() is container.token_cache()
        assert container.protocol_tokens() is container.protocol_tokens()

    def test_cache_size_from_settings(self):
        container = _container(token_cache_size=7)
        assert container.token_cache().stats()["max_size"] == 7

    def test_categorizer_uses_dust_threshold(self):
        container = _container(dust_threshold_lovelace=1_000_000)
        rules = container.categorizer().rules
        transfer = next(r for r in rules if isinstance(r, SimpleTransferRule))
        assert transfer._dust_threshold == 1_000_000

    def test_build_wallet_parser(self):
        container = _container()
        parser = build_wallet_parser(container, MagicMock())
        assert isinstance(parser, WalletTransactionParser)

    def test_build_sync_service(self):
        container = _container(blockfrost_network="preview")
        service = build_sync_service(container, MagicMock())
        assert isinstance(service, WalletSyncService)
