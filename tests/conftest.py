"""Pytest fixtures for card search tests."""

from collections.abc import AsyncGenerator
from typing import Any, Dict, List, Optional

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from tcg_search.main import app
from tcg_search.services.card_search import CardSearchService


# =============================================================================
# Store Doubles
# =============================================================================


class FakeCursor:
    """Records the cursor chain the service builds."""

    def __init__(self, docs: List[Dict[str, Any]]):
        self.docs = docs
        self.sort_spec = None
        self.skip_count = None
        self.limit_count = None

    def sort(self, sort_spec):
        self.sort_spec = sort_spec
        return self

    def skip(self, count: int):
        self.skip_count = count
        return self

    def limit(self, count: int):
        self.limit_count = count
        return self

    def __iter__(self):
        return iter(self.docs)


class FakeCollection:
    def __init__(self, docs=None, total_count: Optional[int] = None, error: Exception = None):
        self.docs = docs or []
        self.total_count = len(self.docs) if total_count is None else total_count
        self.error = error
        self.filters: List[Dict[str, Any]] = []
        self.cursor: Optional[FakeCursor] = None

    def find(self, mongo_filter):
        if self.error:
            raise self.error
        self.filters.append(mongo_filter)
        self.cursor = FakeCursor(self.docs)
        return self.cursor

    def count_documents(self, mongo_filter):
        if self.error:
            raise self.error
        return self.total_count


class FakeStore:
    def __init__(self, collection: Optional[FakeCollection] = None):
        self.collection = collection
        self.requested: List[str] = []
        self.closed = False

    @property
    def configured(self) -> bool:
        return self.collection is not None

    def get_collection(self, name: str):
        self.requested.append(name)
        return self.collection

    def close(self):
        self.closed = True


class FakeFallback:
    def __init__(self, result: Optional[Dict[str, Any]] = None, error: Exception = None):
        self.result = result if result is not None else {"data": [{"id": "base1-4"}], "source": "fallback"}
        self.error = error
        self.calls: List[tuple] = []

    async def search(self, query, page, page_size, order_by):
        self.calls.append(("search", query, page, page_size, order_by))
        if self.error:
            raise self.error
        return self.result

    async def lookup_by_name(self, name):
        self.calls.append(("lookup", name))
        if self.error:
            raise self.error
        return self.result


# =============================================================================
# Sample Data
# =============================================================================


@pytest.fixture
def charizard() -> Dict[str, Any]:
    return {
        "id": "sv3pt5-6",
        "name": "Charizard ex",
        "supertype": "Pokémon",
        "types": ["Fire"],
        "subtypes": ["Stage 2", "ex"],
        "hp": "330",
        "rarity": "Double Rare",
        "number": "6",
        "set": {"id": "sv3pt5", "releaseDate": "2023/09/22"},
        "tcgplayer": {
            "prices": {
                "holofoil": {"low": 3.5, "mid": 5.2, "high": 20.0, "market": 4.8},
                "reverseHolofoil": {"low": 9.0, "mid": 12.0, "high": 30.0, "market": 11.25},
            }
        },
    }


@pytest.fixture
def fake_fallback() -> FakeFallback:
    return FakeFallback()


# =============================================================================
# API Client
# =============================================================================


@pytest_asyncio.fixture
async def test_client() -> AsyncGenerator[AsyncClient, None]:
    """Client against the app; tests install their own service on app.state."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client


@pytest.fixture
def install_service():
    """Install a search service built from doubles on the app."""

    def _install(store: FakeStore, fallback: FakeFallback) -> CardSearchService:
        service = CardSearchService(store=store, fallback=fallback)
        app.state.search = service
        return service

    yield _install
    if hasattr(app.state, "search"):
        del app.state.search
