"""Sync one Cardano wallet against Blockfrost and print the parsed history.

Usage:
    PYTHONPATH=src python scripts/sync_wallet.py <address> [from_block]

Needs BLOCKFROST_PROJECT_ID (env or .env). Token metadata resolved along the
way is committed to the tokens table.
"""

import asyncio
import logging
import sys

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)-5s %(name)s - %(message)s")
logger = logging.getLogger("sync_wallet")

# Suppress noisy loggers
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


def separator(title: str) -> None:
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}\n")


def format_ada(lovelace: int) -> str:
    return f"{lovelace / 1_000_000:+,.6f} ADA"


async def main(address: str, from_block: int | None) -> int:
    from walletsync.container import Container, build_sync_service

    container = Container()
    settings = container.settings()
    if not settings.blockfrost_project_id:
        logger.error("BLOCKFROST_PROJECT_ID is not set")
        return 1

    separator(f"Sync {address[:20]}...{address[-6:]}")
    print(f"Network:      {settings.blockfrost_network}")
    print(f"From block:   {from_block or 'genesis'}")
    print(f"Database:     {settings.db_host}:{settings.db_port}/{settings.db_name}")

    session_factory = container.session_factory()
    async with session_factory() as session:
        service = build_sync_service(container, session)
        result = await service.sync_wallet(address, from_block)
        if result.success:
            await session.commit()
        else:
            await session.rollback()

    await container.http_client().close()
    await container.engine().dispose()

    if not result.success:
        logger.error("Sync failed: %s", result.error)
        return 1

    separator(f"{result.transaction_count} transactions (tip {result.block_height})")
    for tx in result.transactions:
        print(
            f"{tx.tx_timestamp:%Y-%m-%d %H:%M}  {tx.tx_action.value:<18} "
            f"{format_ada(tx.net_ada_change):>22}  {tx.description}"
        )
    return 0


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print(__doc__)
        sys.exit(2)
    start = int(sys.argv[2]) if len(sys.argv) > 2 else None
    sys.exit(asyncio.run(main(sys.argv[1], start)))
