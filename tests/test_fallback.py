"""Tests for the Pokémon TCG API client."""

import httpx
import pytest

from tcg_search.services.fallback import PokemonTCGClient
from tcg_search.utils.exceptions import UpstreamError, UpstreamTimeoutError

PAYLOAD = {"data": [{"id": "base1-4", "name": "Charizard"}], "page": 1, "pageSize": 20, "count": 1, "totalCount": 1}


def _client(handler, api_key=None) -> PokemonTCGClient:
    return PokemonTCGClient(
        base_url="https://cards.test/v2",
        api_key=api_key,
        transport=httpx.MockTransport(handler),
    )


@pytest.mark.asyncio
class TestSearch:
    async def test_forwards_query_and_paging(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=PAYLOAD)

        result = await _client(handler).search("name:Charizard* types:Fire", 2, 50, "-set.releaseDate")

        assert result == PAYLOAD
        (request,) = seen
        assert request.url.path == "/v2/cards"
        assert dict(request.url.params) == {
            "q": "name:Charizard* types:Fire",
            "page": "2",
            "pageSize": "50",
            "orderBy": "-set.releaseDate",
        }

    async def test_omits_empty_order_by(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=PAYLOAD)

        await _client(handler).search("name:Mew", 1, 20, "")

        assert "orderBy" not in seen[0].url.params

    async def test_sends_api_key_when_configured(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=PAYLOAD)

        await _client(handler, api_key="secret").search("name:Mew")
        await _client(handler).search("name:Mew")

        assert seen[0].headers["X-Api-Key"] == "secret"
        assert "X-Api-Key" not in seen[1].headers

    async def test_error_status_carries_upstream_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, text="x" * 5000)

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).search("name:Mew")

        assert exc_info.value.status_code == 429
        assert str(exc_info.value) == "Upstream 429 Too Many Requests"
        assert len(exc_info.value.upstream) == 1000

    async def test_timeout(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(UpstreamTimeoutError) as exc_info:
            await _client(handler).search("name:Mew")

        assert exc_info.value.status_code == 504

    async def test_connection_failure(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(UpstreamError) as exc_info:
            await _client(handler).search("name:Mew")

        assert exc_info.value.status_code == 502
        assert "connection refused" in str(exc_info.value)

    async def test_non_json_body(self):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="<html>maintenance</html>")

        with pytest.raises(UpstreamError):
            await _client(handler).search("name:Mew")


@pytest.mark.asyncio
class TestLookupByName:
    async def test_strips_quotes_and_limits_page(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json=PAYLOAD)

        result = await _client(handler).lookup_by_name('"Dark Charizard"')

        assert result == PAYLOAD
        assert dict(seen[0].url.params) == {"q": "name:Dark Charizard", "pageSize": "12"}
