from dependency_injector import containers, providers
from sqlalchemy.ext.asyncio import AsyncSession

from walletsync.config import Settings
from walletsync.db.repos.token_repo import TokenRepo
from walletsync.db.session import build_engine, build_session_factory
from walletsync.infra.blockchain.blockfrost.client import BlockfrostClient
from walletsync.infra.blockchain.blockfrost.tx_loader import BlockfrostTxLoader
from walletsync.infra.http.rate_limited_client import RateLimitedClient
from walletsync.infra.token_registry.client import CardanoTokenRegistryClient
from walletsync.parser.categorizer import TransactionCategorizer, build_default_rules
from walletsync.parser.utils.flows import WalletTransactionFilter
from walletsync.parser.wallet_parser import WalletTransactionParser
from walletsync.sync.service import WalletSyncService
from walletsync.tokens.cache import LRUTokenCache
from walletsync.tokens.protocol_tokens import build_default_protocol_tokens
from walletsync.tokens.registry import TokenRegistryService


class Container(containers.DeclarativeContainer):
    settings = providers.Singleton(Settings)

    engine = providers.Singleton(
        build_engine,
        database_url=settings.provided.database_url,
        echo=settings.provided.debug,
    )

    session_factory = providers.Singleton(
        build_session_factory,
        engine=engine,
    )

    http_client = providers.Singleton(
        RateLimitedClient,
        rate_per_second=settings.provided.http_rate_per_second,
    )

    token_cache = providers.Singleton(
        LRUTokenCache,
        max_size=settings.provided.token_cache_size,
    )

    protocol_tokens = providers.Singleton(build_default_protocol_tokens)

    registry_client = providers.Singleton(
        CardanoTokenRegistryClient,
        http_client=http_client,
        base_url=settings.provided.token_registry_url,
        timeout=settings.provided.token_registry_timeout,
        batch_timeout=settings.provided.token_registry_batch_timeout,
        batch_timeout_per_unit=settings.provided.token_registry_batch_timeout_per_unit,
        max_batch_timeout=settings.provided.token_registry_max_batch_timeout,
    )

    blockfrost_client = providers.Singleton(
        BlockfrostClient,
        project_id=settings.provided.blockfrost_project_id,
        http_client=http_client,
        network=settings.provided.blockfrost_network,
    )

    tx_loader = providers.Singleton(BlockfrostTxLoader, client=blockfrost_client)

    wallet_filter = providers.Singleton(WalletTransactionFilter)

    categorizer = providers.Singleton(
        TransactionCategorizer,
        rules=providers.Callable(
            build_default_rules,
            protocol_tokens=protocol_tokens,
            dust_threshold=settings.provided.dust_threshold_lovelace,
        ),
    )


def build_wallet_parser(container: Container, session: AsyncSession) -> WalletTransactionParser:
    """Parser whose token registry persists through the given session."""
    registry = TokenRegistryService(
        store=TokenRepo(session),
        client=container.registry_client(),
        cache=container.token_cache(),
    )
    wallet_filter = container.wallet_filter()
    return WalletTransactionParser(
        wallet_filter=wallet_filter,
        flow_calculator=wallet_filter,
        categorizer=container.categorizer(),
        token_registry=registry,
        protocol_tokens=container.protocol_tokens(),
    )


def build_sync_service(container: Container, session: AsyncSession) -> WalletSyncService:
    return WalletSyncService(container.tx_loader(), build_wallet_parser(container, session))
