"""WalletTransactionParser — raw Cardano TX → wallet-centric WalletTransaction.

filter → asset flows → token resolution → categorization → description

Batch mode first sweeps every unit in the batch and resolves the unknown ones
with a single registry call, so per-TX parsing mostly hits the cache.
"""

import logging
from datetime import UTC, datetime

from walletsync.domain.models.token import TokenInfo
from walletsync.domain.models.transaction import RawTransaction, WalletAssetFlow, WalletTransaction
from walletsync.domain.units import get_asset_name, is_ada
from walletsync.parser.categorizer import TransactionCategorizer
from walletsync.parser.description import generate_description
from walletsync.parser.utils.flows import AssetFlowCalculator, WalletFilter, calculate_net_ada_change
from walletsync.tokens.protocol_tokens import ProtocolTokenRegistry
from walletsync.tokens.registry import TokenRegistryService

logger = logging.getLogger(__name__)

WALLET_ID_SUFFIX_LENGTH = 6


def make_wallet_tx_id(wallet_address: str, tx_hash: str) -> str:
    return f"{wallet_address[-WALLET_ID_SUFFIX_LENGTH:]}_{tx_hash}"


class WalletTransactionParser:
    def __init__(
        self,
        wallet_filter: WalletFilter,
        flow_calculator: AssetFlowCalculator,
        categorizer: TransactionCategorizer,
        token_registry: TokenRegistryService,
        protocol_tokens: ProtocolTokenRegistry,
    ) -> None:
        self._filter = wallet_filter
        self._flows = flow_calculator
        self._categorizer = categorizer
        self._registry = token_registry
        self._protocol_tokens = protocol_tokens
        self._potential_protocol_tokens: set[str] = set()

    @property
    def potential_protocol_tokens(self) -> set[str]:
        """Units with empty asset names seen during batch discovery, for manual review."""
        return set(self._potential_protocol_tokens)

    async def parse_transaction(self, raw_tx: RawTransaction, wallet_address: str) -> WalletTransaction | None:
        """Parse one TX. Returns None only when the TX doesn't touch the wallet."""
        filtered = self._filter.filter_for_wallet(raw_tx, wallet_address)
        if not filtered.is_relevant:
            return None

        flows = self._flows.calculate_asset_flows(filtered.inputs, filtered.outputs, wallet_address)
        resolved = await self._resolve_tokens(flows)

        action = self._categorizer.categorize(raw_tx, resolved)
        protocol = self._categorizer.detect_protocol(raw_tx, resolved)

        return WalletTransaction(
            id=make_wallet_tx_id(wallet_address, raw_tx.hash),
            wallet_address=wallet_address,
            tx_hash=raw_tx.hash,
            block_height=raw_tx.block_height,
            tx_timestamp=datetime.fromtimestamp(raw_tx.block_time, tz=UTC),
            tx_action=action,
            tx_protocol=protocol,
            asset_flows=tuple(resolved),
            net_ada_change=calculate_net_ada_change(resolved),
            fees=raw_tx.fees,
            description=generate_description(action, resolved, protocol),
        )

    async def parse_transaction_batch(
        self, raw_txs: list[RawTransaction], wallet_address: str
    ) -> list[WalletTransaction]:
        """Parse TXs in input order, skipping irrelevant ones."""
        await self.discover_tokens(raw_txs)

        parsed: list[WalletTransaction] = []
        for raw_tx in raw_txs:
            wallet_tx = await self.parse_transaction(raw_tx, wallet_address)
            if wallet_tx is not None:
                parsed.append(wallet_tx)

        logger.info("Parsed %d/%d TXs for wallet ...%s", len(parsed), len(raw_txs), wallet_address[-8:])
        return parsed

    async def discover_tokens(self, raw_txs: list[RawTransaction]) -> list[str]:
        """Resolve every not-yet-known unit in the batch with one registry call.

        Looks at all inputs/outputs, not just the wallet's. Returns the units
        that were sent to the registry.
        """
        units: dict[str, None] = {}
        for tx in raw_txs:
            for utxo in [*tx.inputs, *tx.outputs]:
                for amount in utxo.amount:
                    units[amount.unit] = None

        unknown = [
            unit for unit in units
            if not is_ada(unit)
            and not self._registry.is_cached(unit)
            and self._protocol_tokens.get_protocol_token(unit) is None
        ]
        if not unknown:
            return []

        logger.info("Fetching metadata for %d unknown tokens", len(unknown))
        try:
            tokens = await self._registry.batch_get_token_info(unknown)
        except Exception:
            logger.exception("Token discovery failed for %d units; falling back to per-TX lookups", len(unknown))
            return unknown

        for unit in tokens:
            if not is_ada(unit) and not get_asset_name(unit) and unit not in self._potential_protocol_tokens:
                self._potential_protocol_tokens.add(unit)
                logger.warning(
                    "Potential protocol token (empty asset name): policy=%s - consider adding it to protocol_tokens",
                    unit[:56],
                )
        return unknown

    async def _resolve_tokens(self, flows: list[WalletAssetFlow]) -> list[WalletAssetFlow]:
        resolved: list[WalletAssetFlow] = []
        for flow in flows:
            token = await self._resolve_token(flow.token)
            resolved.append(flow.model_copy(update={"token": token}))
        return resolved

    async def _resolve_token(self, basic: TokenInfo) -> TokenInfo:
        protocol_token = self._protocol_tokens.get_protocol_token(basic.unit)
        if protocol_token is not None:
            return TokenInfo(
                unit=basic.unit,
                policy_id=protocol_token.policy_id,
                asset_name=basic.asset_name,
                name=protocol_token.name,
                ticker=protocol_token.name,
                decimals=0,
                category=protocol_token.category,
                metadata={"source": "protocol_registry", "protocol": protocol_token.protocol.value},
            )

        try:
            return await self._registry.get_token_info(basic.unit)
        except Exception:
            logger.exception("Token resolution failed for %s, keeping basic info", basic.unit)
            return basic
