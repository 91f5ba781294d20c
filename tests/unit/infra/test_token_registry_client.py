"""Tests for CardanoTokenRegistryClient — offchain metadata API."""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from walletsync.infra.token_registry.client import CardanoTokenRegistryClient

UNIT = "ab" * 28 + "484f534b59"


@pytest.fixture()
def mock_http():
    return AsyncMock()


@pytest.fixture()
def client(mock_http):
    return CardanoTokenRegistryClient(http_client=mock_http, base_url="https://tokens.example/")


def _mock_response(data, status_code: int = 200):
    resp = MagicMock()
    resp.status_code = status_code
    resp.json.return_value = data
    return resp


def _subject(unit: str = UNIT) -> dict:
    return {
        "subject": unit,
        "name": {"value": "Hosky Token", "sequenceNumber": 0, "signatures": []},
        "ticker": {"value": "HOSKY", "sequenceNumber": 0},
        "decimals": {"value": 0},
    }


class TestFetchMetadata:
    async def test_returns_entry(self, client, mock_http):
        mock_http.get.return_value = _mock_response(_subject())

        entry = await client.fetch_metadata(UNIT)
        assert entry.subject == UNIT
        assert entry.ticker.value == "HOSKY"
        assert entry.name.sequence_number == 0

        url = mock_http.get.call_args[0][0]
        assert url == f"https://tokens.example/metadata/{UNIT}"
        assert mock_http.get.call_args[1]["timeout"] == 5.0

    async def test_not_found(self, client, mock_http):
        mock_http.get.return_value = _mock_response({}, status_code=404)
        assert await client.fetch_metadata(UNIT) is None

    async def test_timeout_is_not_found(self, client, mock_http):
        mock_http.get.side_effect = httpx.ReadTimeout("slow")
        assert await client.fetch_metadata(UNIT) is None

    async def test_server_error_is_not_found(self, client, mock_http):
        mock_http.get.return_value = _mock_response({}, status_code=500)
        assert await client.fetch_metadata(UNIT) is None
        assert mock_http.get.call_count == 1

    async def test_rate_limit_retried(self, client, mock_http):
        mock_http.get.side_effect = [_mock_response({}, status_code=429), _mock_response(_subject())]

        entry = await client.fetch_metadata(UNIT)
        assert entry is not None
        assert mock_http.get.call_count == 2

    async def test_malformed_body(self, client, mock_http):
        mock_http.get.return_value = _mock_response({"name": "no subject"})
        assert await client.fetch_metadata(UNIT) is None


class TestQueryMetadata:
    async def test_wrapped_response(self, client, mock_http):
        mock_http.post.return_value = _mock_response({"subjects": [_subject(), _subject(UNIT + "00")]})

        entries = await client.query_metadata([UNIT, UNIT + "00"])
        assert [e.subject for e in entries] == [UNIT, UNIT + "00"]

        payload = mock_http.post.call_args[1]["json"]
        assert payload["subjects"] == [UNIT, UNIT + "00"]
        assert "ticker" in payload["properties"]

    async def test_bare_list_response(self, client, mock_http):
        mock_http.post.return_value = _mock_response([_subject()])
        entries = await client.query_metadata([UNIT])
        assert len(entries) == 1

    async def test_drops_malformed_entries(self, client, mock_http):
        mock_http.post.return_value = _mock_response([_subject(), {"oops": True}, "junk"])
        entries = await client.query_metadata([UNIT])
        assert len(entries) == 1

    async def test_failure_returns_empty(self, client, mock_http):
        mock_http.post.return_value = _mock_response({}, status_code=503)
        assert await client.query_metadata([UNIT]) == []

    async def test_timeout_returns_empty(self, client, mock_http):
        mock_http.post.side_effect = httpx.ConnectTimeout("slow")
        assert await client.query_metadata([UNIT]) == []

    async def test_empty_input_skips_request(self, client, mock_http):
        assert await client.query_metadata([]) == []
        mock_http.post.assert_not_called()

    async def test_batch_timeout_scales_and_caps(self, client, mock_http):
        assert client.batch_timeout_for(0) == 10.0
        assert client.batch_timeout_for(100) == pytest.approx(15.0)
        assert client.batch_timeout_for(100_000) == 60.0

        mock_http.post.return_value = _mock_response([])
        await client.query_metadata([UNIT] * 100)
        assert mock_http.post.call_args[1]["timeout"] == pytest.approx(15.0)
