"""
Analysis router.

POST /analyze          — virtue points + commentary for one diary
POST /monthly-summary  — per-virtue quote selection across a month of diaries
"""
from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from garden.core.config import settings
from garden.deps import get_completion_client
from garden.schemas.analysis import AnalyzeRequest, MonthlySummaryRequest
from garden.schemas.common import ErrorResponse
from garden.services.analysis import DatedDiary, analyze_diary, summarize_month
from garden.services.completion import CompletionClient

router = APIRouter(tags=["analysis"])


@router.post(
    "/analyze",
    summary="Turn a diary entry into garden growth data",
    responses={
        200: {"description": "`{points: {virtue: int}, comment: str}` as produced by the model."},
        400: {"model": ErrorResponse, "description": "Diary text is missing or blank."},
        500: {"model": ErrorResponse, "description": "Upstream model unavailable."},
    },
)
async def analyze(
    payload: AnalyzeRequest,
    client: CompletionClient = Depends(get_completion_client),
) -> dict[str, Any]:
    return await analyze_diary(client, payload.diaryText)


@router.post(
    "/monthly-summary",
    summary="Monthly retrospective over dated diaries",
    responses={
        200: {"description": "`{virtue: [{text, date}]}` as produced by the model."},
        400: {"model": ErrorResponse, "description": "No diaries supplied."},
        500: {"model": ErrorResponse, "description": "Upstream model unavailable."},
    },
)
async def monthly_summary(
    payload: MonthlySummaryRequest,
    client: CompletionClient = Depends(get_completion_client),
) -> dict[str, Any]:
    """
    Each diary is tagged with its `date_str` so the model can attribute the
    quotes it picks. The combined text is truncated to `MONTHLY_MAX_CHARS`.
    """
    diaries = [DatedDiary(content=d.content, date_str=d.date_str) for d in payload.diaries or []]
    return await summarize_month(client, diaries, max_chars=settings.MONTHLY_MAX_CHARS)
