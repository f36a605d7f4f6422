"""
Diary analysis service: single-entry virtue scoring and the monthly
retrospective. Both are one JSON-mode completion call each; the reply object
is passed back as-is.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from garden.core.errors import (
    EmptyDiaryError,
    GardenerAwayError,
    NoDiariesError,
    SummaryFailedError,
    UpstreamUnavailableError,
)
from garden.services.completion import CompletionClient
from garden.services.prompts import CHRONICLER_PROMPT, GARDENER_PROMPT, MONTHLY_USER_PREFIX

logger = logging.getLogger(__name__)

ANALYZE_TEMPERATURE = 0.8
MONTHLY_TEMPERATURE = 0.7

DIARY_SEPARATOR = "\n\n=================\n\n"
UNKNOWN_DATE = "Unknown Date"


@dataclass
class DatedDiary:
    content: str
    date_str: Optional[str] = None


def format_diaries(diaries: Sequence[DatedDiary], max_chars: int) -> str:
    """Tag each entry with its date and join them, truncated to `max_chars`."""
    blocks = [f"[Date: {d.date_str or UNKNOWN_DATE}]\n{d.content}" for d in diaries]
    return DIARY_SEPARATOR.join(blocks)[:max_chars]


async def analyze_diary(client: CompletionClient, diary_text: Optional[str]) -> dict[str, Any]:
    if not diary_text or not diary_text.strip():
        raise EmptyDiaryError()

    logger.info("Diary received for analysis (%d chars)", len(diary_text))
    try:
        return await client.complete_json(
            GARDENER_PROMPT, diary_text, temperature=ANALYZE_TEMPERATURE
        )
    except UpstreamUnavailableError as exc:
        logger.error("Diary analysis failed: %s", exc.message)
        raise GardenerAwayError() from exc


async def summarize_month(
    client: CompletionClient,
    diaries: Optional[Sequence[DatedDiary]],
    max_chars: int = 25_000,
) -> dict[str, Any]:
    if not diaries:
        raise NoDiariesError()

    logger.info("Monthly summary requested for %d diaries", len(diaries))
    content = format_diaries(diaries, max_chars)
    try:
        result = await client.complete_json(
            CHRONICLER_PROMPT,
            f"{MONTHLY_USER_PREFIX}{content}",
            temperature=MONTHLY_TEMPERATURE,
        )
    except UpstreamUnavailableError as exc:
        logger.error("Monthly summary failed: %s", exc.message)
        raise SummaryFailedError() from exc

    logger.info("Monthly summary generated")
    return result
