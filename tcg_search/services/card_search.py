import asyncio
import json
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from bson import Decimal128, ObjectId
from pymongo.collection import Collection

from ..models.constants import CARDS_COLLECTION, DEFAULT_PAGE_SIZE, MAX_PAGE_SIZE
from ..utils.exceptions import InvalidRequestError, UpstreamError
from ..utils.metrics import PRIMARY_STORE_FAILURES, SEARCH_REQUESTS, monitor_method
from .fallback import FallbackSource
from .filter_builder import build_filter
from .logger import SearchLogger
from .mongo_adapter import to_mongo_filter, to_mongo_sort
from .query_parser import parse_query
from .sort_builder import build_sort
from .store import StoreAvailability


class JSONEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, ObjectId):
            return str(obj)
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Decimal128):
            return float(obj.to_decimal())
        return super().default(obj)


class CardSearchService:
    """Searches the synced card store, falling back to the public card API

    Results come from exactly one source: the store when it holds matching
    cards, otherwise the fallback API. Store errors are logged and never
    reach the caller.
    """

    def __init__(self, store: StoreAvailability, fallback: FallbackSource,
                 collection_name: str = CARDS_COLLECTION):
        self.store = store
        self.fallback = fallback
        self.collection_name = collection_name
        self.logger = SearchLogger()

    def _serialize_mongo_doc(self, doc: Dict) -> Dict:
        """Serialize MongoDB document to JSON-compatible format"""
        return json.loads(JSONEncoder().encode(doc))

    @staticmethod
    def _clamp(page: int, page_size: int) -> Tuple[int, int]:
        # Pages count from 1; a limit of 0 would mean "no limit" to MongoDB
        return max(page, 1), min(max(page_size, 1), MAX_PAGE_SIZE)

    def _find(self, collection: Collection, mongo_filter: Dict[str, Any],
              sort: List[Tuple[str, int]], skip: int, limit: int) -> List[Dict]:
        cursor = collection.find(mongo_filter).sort(sort).skip(skip).limit(limit)
        return list(cursor)

    async def _search_primary(self, query: str, page: int, page_size: int,
                              order_by: str) -> Optional[Dict[str, Any]]:
        """Query the card store; None means the fallback should answer instead"""
        collection = self.store.get_collection(self.collection_name)
        if collection is None:
            self.logger.info("Card store not configured, using fallback API")
            return None

        try:
            fields = parse_query(query)
            mongo_filter = to_mongo_filter(build_filter(fields))
            sort = to_mongo_sort(build_sort(order_by))
            skip = (page - 1) * page_size

            self.logger.debug(
                "Querying card store",
                extra={"filter": mongo_filter, "sort": sort, "skip": skip, "limit": page_size},
            )
            docs, total_count = await asyncio.gather(
                asyncio.to_thread(self._find, collection, mongo_filter, sort, skip, page_size),
                asyncio.to_thread(collection.count_documents, mongo_filter),
            )

            if total_count > 0 or docs:
                return {
                    "data": [self._serialize_mongo_doc(doc) for doc in docs],
                    "page": page,
                    "pageSize": page_size,
                    "count": len(docs),
                    "totalCount": total_count,
                }
        except Exception as e:
            PRIMARY_STORE_FAILURES.inc()
            self.logger.error(f"Card store search failed, falling back to card API: {e}")
            return None

        # The cards collection has not been synced yet
        self.logger.info("Card store returned nothing, using fallback API")
        return None

    @monitor_method("card_search")
    async def search(self, query: str, page: int = 1, page_size: int = DEFAULT_PAGE_SIZE,
                     order_by: str = "") -> Dict[str, Any]:
        """Search cards with a field:value query, one page at a time"""
        if not query or not query.strip():
            raise InvalidRequestError("Missing `q` query parameter")

        page, page_size = self._clamp(page, page_size)

        result = await self._search_primary(query, page, page_size, order_by)
        if result is not None:
            SEARCH_REQUESTS.labels(source="primary").inc()
            return result

        try:
            data = await self.fallback.search(query, page, page_size, order_by)
        except Exception as e:
            self.logger.error(f"Fallback card search failed: {e}")
            raise UpstreamError(str(e)) from e

        SEARCH_REQUESTS.labels(source="fallback").inc()
        return data

    @monitor_method("card_lookup")
    async def lookup(self, name: str) -> Dict[str, Any]:
        """Name-only search served straight from the card API"""
        if not name or not name.strip():
            raise InvalidRequestError("Missing `query` string parameter")
        return await self.fallback.lookup_by_name(name)

    def count_cards(self) -> Optional[int]:
        collection = self.store.get_collection(self.collection_name)
        if collection is None:
            return None
        return collection.count_documents({})

    def close(self):
        close = getattr(self.store, "close", None)
        if close is not None:
            close()
