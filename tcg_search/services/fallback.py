"""Client for the public Pokémon TCG API, used when the card store cannot answer.

The API understands the same ``field:value`` query syntax, paginates and
sorts on its own, and returns ``{data, page, pageSize, count, totalCount}``.
Its TCGplayer prices lag behind the synced store.
"""

from typing import Any, Dict, Optional, Protocol

import httpx

from ..models.constants import LOOKUP_PAGE_SIZE
from ..utils.exceptions import UpstreamError, UpstreamTimeoutError
from .logger import SearchLogger

DEFAULT_API_URL = "https://api.pokemontcg.io/v2"
DEFAULT_TIMEOUT = 7.0


class FallbackSource(Protocol):
    async def search(self, query: str, page: int, page_size: int, order_by: str) -> Dict[str, Any]:
        ...

    async def lookup_by_name(self, name: str) -> Dict[str, Any]:
        ...


class PokemonTCGClient:
    def __init__(self, base_url: str = DEFAULT_API_URL,
                 api_key: Optional[str] = None,
                 timeout: float = DEFAULT_TIMEOUT,
                 transport: Optional[httpx.AsyncBaseTransport] = None):
        self.base_url = base_url
        self.api_key = api_key
        self.timeout = timeout
        self.transport = transport
        self.logger = SearchLogger()

    def _headers(self) -> Dict[str, str]:
        headers = {"Accept": "application/json"}
        if self.api_key:
            headers["X-Api-Key"] = self.api_key
        return headers

    async def _get_cards(self, params: Dict[str, Any]) -> Dict[str, Any]:
        """GET /cards, mapping every failure onto an UpstreamError"""
        async with httpx.AsyncClient(
            base_url=self.base_url,
            timeout=self.timeout,
            transport=self.transport,
        ) as client:
            try:
                response = await client.get("/cards", params=params, headers=self._headers())
            except httpx.TimeoutException as e:
                self.logger.warning(f"Upstream request timed out: {e}")
                raise UpstreamTimeoutError() from e
            except httpx.HTTPError as e:
                self.logger.error(f"Upstream request failed: {e}")
                raise UpstreamError(f"Upstream request failed: {e}") from e

        if not response.is_success:
            self.logger.warning(
                "Upstream returned an error status",
                extra={"status_code": response.status_code},
            )
            raise UpstreamError(
                f"Upstream {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
                upstream=response.text[:1000],
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamError("Upstream returned a non-JSON body") from e

    async def search(self, query: str, page: int = 1, page_size: int = 20,
                     order_by: str = "") -> Dict[str, Any]:
        """Run a full query against the API; the payload is returned untouched"""
        params = {"q": query, "page": page, "pageSize": page_size}
        if order_by:
            params["orderBy"] = order_by
        self.logger.debug("Searching fallback card API", extra={"params": params})
        return await self._get_cards(params)

    async def lookup_by_name(self, name: str) -> Dict[str, Any]:
        """Plain name search

        Quotes are dropped because the API rejects quoted name queries.
        """
        q = "name:" + name.replace('"', '')
        return await self._get_cards({"q": q, "pageSize": LOOKUP_PAGE_SIZE})
