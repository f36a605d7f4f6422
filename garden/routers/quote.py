"""
Daily quote router.

GET /api/daily-quote
"""
from fastapi import APIRouter, Depends

from garden.deps import get_quote_cache
from garden.schemas.quote import DailyQuoteResponse
from garden.services.quote_cache import DailyQuoteCache

router = APIRouter(prefix="/api", tags=["quote"])


@router.get(
    "/daily-quote",
    response_model=DailyQuoteResponse,
    summary="A random greeting from today's generated set",
)
async def daily_quote(cache: DailyQuoteCache = Depends(get_quote_cache)):
    """
    Generates today's set on the first call of the day (Asia/Seoul).
    If generation fails, the previous set or the fallback line is served.
    """
    await cache.ensure_fresh()
    day = cache.entry.reference_date
    return DailyQuoteResponse(
        quote=cache.pick_one(),
        date=day.isoformat() if day else None,
    )
