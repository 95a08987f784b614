# /tcg_search/main.py

from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import Optional
from dotenv import load_dotenv
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from . import create_search_service
from .models.constants import DEFAULT_PAGE_SIZE
from .models.schemas import CardSearchPage, HealthCheckResponse, ErrorResponse
from .utils.exceptions import CardSearchError
from .utils.metrics import registry

# Load environment variables
load_dotenv()

# Set up logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        app.state.search = create_search_service()
        logger.info(
            f"Initialized card search (card store configured: {app.state.search.store.configured})"
        )
    except Exception as e:
        logger.error(f"Failed to initialize search service: {e}")
        raise

    yield

    if hasattr(app.state, 'search'):
        app.state.search.close()


# Create FastAPI app
app = FastAPI(
    title="TCG Card Search API",
    description="Pokémon TCG card search with live TCGplayer prices",
    version="1.0.0",
    lifespan=lifespan
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(CardSearchError)
async def card_search_error_handler(request: Request, exc: CardSearchError) -> JSONResponse:
    body = {"error": str(exc)}
    upstream = getattr(exc, "upstream", None)
    if upstream:
        body["upstream"] = upstream
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # Same {"error": ...} body as every other failure
    problems = [
        f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={"error": "; ".join(problems)}
    )


@app.get("/metrics")
async def metrics():
    """Endpoint to expose Prometheus metrics"""
    return Response(
        generate_latest(registry),
        media_type=CONTENT_TYPE_LATEST
    )


@app.get("/health", response_model=HealthCheckResponse)
async def health_check() -> HealthCheckResponse:
    """Check the health of the API and its card store"""
    search = app.state.search
    try:
        card_count = await asyncio.to_thread(search.count_cards)
    except Exception as e:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail=str(e)
        )

    return HealthCheckResponse(
        status="healthy",
        card_store_configured=card_count is not None,
        cards_loaded=card_count
    )


@app.get(
    "/api/cards",
    responses={
        200: {"model": CardSearchPage},
        400: {"model": ErrorResponse},
        502: {"model": ErrorResponse},
    },
)
async def search_cards(
    q: Optional[str] = Query(None, description='Query such as name:Charizard* set.id:sv4 rarity:"Special illustration rare"'),
    page: int = Query(1, description="Page number, starting at 1"),
    page_size: int = Query(DEFAULT_PAGE_SIZE, alias="pageSize", description="Cards per page, at most 250"),
    order_by: str = Query("", alias="orderBy", description="Sort field, prefix with - for descending"),
):
    """Search cards, preferring the synced store with live prices"""
    logger.debug(f"Card search: q={q!r} page={page} pageSize={page_size} orderBy={order_by!r}")
    return await app.state.search.search(q or "", page=page, page_size=page_size, order_by=order_by)


@app.get(
    "/api/cards/lookup",
    responses={400: {"model": ErrorResponse}, 502: {"model": ErrorResponse}, 504: {"model": ErrorResponse}},
)
async def lookup_cards(query: Optional[str] = Query(None, description="Card name")):
    """Name search proxied to the Pokémon TCG API"""
    return await app.state.search.lookup(query or "")


# Only if running directly (not through uvicorn command)
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "tcg_search.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level="info"
    )
