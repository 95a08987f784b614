from typing import Optional, Protocol

from pymongo import MongoClient
from pymongo.collection import Collection

from .logger import SearchLogger


class StoreAvailability(Protocol):
    """Hands out collections of the primary card store, or None when it is not configured"""

    def get_collection(self, name: str) -> Optional[Collection]:
        ...


class MongoStore:
    def __init__(self, mongodb_uri: Optional[str] = None,
                 database: str = "pokemon_tcg",
                 server_selection_timeout_ms: int = 5000):
        self.mongodb_uri = mongodb_uri
        self.database = database
        self.server_selection_timeout_ms = server_selection_timeout_ms
        self.client: Optional[MongoClient] = None
        self.logger = SearchLogger()

    @property
    def configured(self) -> bool:
        return bool(self.mongodb_uri)

    def get_collection(self, name: str) -> Optional[Collection]:
        """Return the named collection, connecting lazily on first use"""
        if not self.configured:
            return None

        if self.client is None:
            # Connection errors surface on the first query, not here
            self.client = MongoClient(
                self.mongodb_uri,
                serverSelectionTimeoutMS=self.server_selection_timeout_ms,
            )
            self.logger.info(f"Created MongoDB client for database {self.database}")

        return self.client[self.database][name]

    def close(self):
        if self.client is not None:
            self.client.close()
            self.client = None
