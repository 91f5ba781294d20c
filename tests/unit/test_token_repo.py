import asyncio

from walletsync.db.repos.token_repo import TokenRepo
from walletsync.domain.enums import TokenCategory
from walletsync.domain.models.token import TokenInfo

POLICY = "ab" * 28
OTHER_POLICY = "cd" * 28


def _token(unit: str, ticker: str = "HOSKY", category: TokenCategory = TokenCategory.FUNGIBLE) -> TokenInfo:
    return TokenInfo(
        unit=unit,
        policy_id=unit[:56],
        asset_name=unit[56:],
        name=f"{ticker} token",
        ticker=ticker,
        decimals=6,
        category=category,
        metadata={"source": "cardano_registry"},
    )


class TestTokenRepo:
    async def test_save_and_find(self, session):
        repo = TokenRepo(session)
        token = _token(POLICY + "01")
        await repo.save(token)

        found = await repo.find_by_unit(POLICY + "01")
        assert found == token

    async def test_find_missing(self, session):
        repo = TokenRepo(session)
        assert await repo.find_by_unit(POLICY + "ff") is None

    async def test_save_is_upsert(self, session):
        repo = TokenRepo(session)
        await repo.save(_token(POLICY + "01", ticker="OLD"))
        await repo.save(_token(POLICY + "01", ticker="NEW"))

        found = await repo.find_by_unit(POLICY + "01")
        assert found.ticker == "NEW"
        assert len(await repo.find_by_policy(POLICY)) == 1

    async def test_save_batch_and_filters(self, session):
        repo = TokenRepo(session)
        await repo.save_batch([
            _token(POLICY + "01", "A"),
            _token(POLICY + "02", "B", TokenCategory.LP_TOKEN),
            _token(OTHER_POLICY + "01", "C"),
        ])

        assert [t.ticker for t in await repo.find_by_policy(POLICY)] == ["A", "B"]
        assert [t.ticker for t in await repo.find_by_category(TokenCategory.LP_TOKEN)] == ["B"]

    async def test_concurrent_calls_share_session(self, session):
        repo = TokenRepo(session)
        units = [POLICY + f"{i:02x}" for i in range(5)]
        await asyncio.gather(*(repo.save(_token(u)) for u in units))

        found = await asyncio.gather(*(repo.find_by_unit(u) for u in units))
        assert all(t is not None for t in found)

    async def test_fallback_metadata_roundtrip(self, session):
        repo = TokenRepo(session)
        token = TokenInfo(unit=POLICY, name="Token abababab...", ticker="ABABABAB", metadata={"fallback": True})
        await repo.save(token)

        found = await repo.find_by_unit(POLICY)
        assert found.metadata == {"fallback": True}
        assert found.category == TokenCategory.FUNGIBLE
