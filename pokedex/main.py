"""FastAPI application initialization and configuration."""

import logging
import time
from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from pokedex.api.v1.endpoints.pokemon import limiter, router as pokemon_router
from pokedex.config import settings
from pokedex.services.pokeapi_service import CatalogFetchError, PokeApiService

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.DEBUG else logging.INFO,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared PokeAPI client on startup and close it on shutdown."""
    client = httpx.AsyncClient(base_url=settings.POKEAPI_BASE_URL, timeout=settings.POKEAPI_TIMEOUT)
    app.state.pokeapi_service = PokeApiService(client)
    logger.info("PokeAPI client ready (%s)", settings.POKEAPI_BASE_URL)
    try:
        yield
    finally:
        await client.aclose()
        app.state.pokeapi_service = None


# Create FastAPI app
app = FastAPI(
    title="Pokédex API",
    description="Browse, filter, export and email Pokémon from the public PokeAPI.",
    version="1.0.0",
    docs_url="/api/v1/docs",
    redoc_url="/api/v1/redoc",
    openapi_url="/api/v1/openapi.json",
    lifespan=lifespan,
)

# --- Middleware ---

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_middleware(SlowAPIMiddleware)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)


# Request logging
@app.middleware("http")
async def log_requests(request: Request, call_next) -> Response:
    """Log every incoming request and its duration."""
    start = time.perf_counter()
    response: Response = await call_next(request)
    duration_ms = (time.perf_counter() - start) * 1000
    logger.info(
        "%s %s -> %s (%.1fms)",
        request.method,
        request.url.path,
        response.status_code,
        duration_ms,
    )
    return response


@app.exception_handler(CatalogFetchError)
async def catalog_fetch_error_handler(request: Request, exc: CatalogFetchError) -> JSONResponse:
    """Report upstream failures as 502 without leaking payload details."""
    logger.error("Upstream failure on %s: %s", request.url.path, exc)
    return JSONResponse(
        status_code=502,
        content={"detail": {"error": {"code": "upstream_unavailable", "message": "PokeAPI is unavailable"}}},
    )


# Register routes
app.include_router(pokemon_router, prefix="/api/v1", tags=["pokemon"])

logger.info("Pokédex API started (debug=%s)", settings.DEBUG)
