from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from garden.core.config import settings
from garden.core.log import configure_logging
from garden.core.rate_limit import RateLimitMiddleware
from garden.routers import analysis as analysis_router
from garden.routers import quote as quote_router
from garden.services.completion import CompletionClient
from garden.services.quote_cache import DailyQuoteCache
from garden.core.errors import (
    GardenException,
    garden_exception_handler,
    validation_exception_handler,
    unhandled_exception_handler,
)

configure_logging(settings.LOG_LEVEL)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # One client and one quote cache for the life of the process.
    client = CompletionClient.from_settings(settings)
    app.state.completion_client = client
    app.state.quote_cache = DailyQuoteCache(client)
    yield
    await client.aclose()


app = FastAPI(
    title="Garden Gateway API",
    description=(
        "**글숲 정원 관리 서버**\n\n"
        "Turns diary text into virtue growth data for the virtual garden, "
        "builds monthly retrospectives, and serves a daily greeting quote.\n\n"
        "All error responses follow the `{code, message, details}` envelope."
    ),
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

# --- Rate limit (innermost, so CORS headers still wrap a 429) ---
app.add_middleware(
    RateLimitMiddleware,
    rpm=settings.RATE_LIMIT_PER_MINUTE,
    trust_forwarded=settings.TRUST_PROXY_HEADERS,
)

# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Exception handlers (most specific first) ---
app.add_exception_handler(GardenException, garden_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# --- Routers ---
app.include_router(analysis_router.router)
app.include_router(quote_router.router)


@app.get("/", response_class=PlainTextResponse, include_in_schema=False)
def root():
    return "🌿 글숲 정원 관리 서버 가동 중"


@app.get("/health", tags=["health"], summary="Health check")
def health():
    """Liveness probe. Does not touch the upstream model."""
    return {"status": "ok", "env": settings.APP_ENV}
