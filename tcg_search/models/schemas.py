from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional, Dict, Any


# Response Models
class CardSearchPage(BaseModel):
    """Page of cards served from the synced card store.

    Pages served by the fallback card API share these keys but are passed
    through unvalidated.
    """
    model_config = ConfigDict(populate_by_name=True)

    data: List[Dict[str, Any]]
    page: int
    page_size: int = Field(alias="pageSize")
    count: int
    total_count: int = Field(alias="totalCount")


class HealthCheckResponse(BaseModel):
    status: str
    card_store_configured: bool
    cards_loaded: Optional[int] = None


class ErrorResponse(BaseModel):
    error: str
    upstream: Optional[str] = None
