# /tcg_search/__init__.py

import os
from .services.card_search import CardSearchService
from .services.fallback import PokemonTCGClient, DEFAULT_API_URL, DEFAULT_TIMEOUT
from .services.store import MongoStore
from .models.constants import CARDS_COLLECTION


def create_search_service(
        mongodb_uri: str = None,
        mongodb_db: str = None,
        collection_name: str = None,
        api_url: str = None,
        api_key: str = None,
        timeout: float = None
) -> CardSearchService:
    """Create the search service with configuration"""

    # Use environment variables as defaults if not provided
    mongodb_uri = mongodb_uri or os.getenv("MONGODB_URI")
    mongodb_db = mongodb_db or os.getenv("MONGODB_DB", "pokemon_tcg")
    collection_name = collection_name or os.getenv("CARDS_COLLECTION", CARDS_COLLECTION)
    api_url = api_url or os.getenv("POKEMON_TCG_API_URL", DEFAULT_API_URL)
    api_key = api_key or os.getenv("POKEMON_TCG_API_KEY")
    timeout = timeout or float(os.getenv("UPSTREAM_TIMEOUT", DEFAULT_TIMEOUT))

    return CardSearchService(
        store=MongoStore(mongodb_uri=mongodb_uri, database=mongodb_db),
        fallback=PokemonTCGClient(base_url=api_url, api_key=api_key, timeout=timeout),
        collection_name=collection_name
    )
