"""
Daily quote cache.

Holds one day's worth of generated greeting lines for the whole process.
The calendar day is computed in Asia/Seoul regardless of the host timezone.
At most one upstream generation runs per day: the refresh path is guarded by
an asyncio lock and re-checks freshness once inside it. A failed or empty
generation leaves the previous entry in place, so readers always get a quote.
"""
from __future__ import annotations

import asyncio
import logging
import random
import re
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable, Optional, Protocol
from zoneinfo import ZoneInfo

from garden.core.errors import EmptyGenerationError, UpstreamUnavailableError
from garden.services.prompts import DAILY_QUOTE_PROMPT

logger = logging.getLogger(__name__)

SEOUL = ZoneInfo("Asia/Seoul")

FALLBACK_QUOTE = "오늘도 당신의 정원에 평안이 깃들기를."

QUOTE_TEMPERATURE = 0.9

# (month, day) -> label. Lunisolar holidays are pinned to fixed dates.
SPECIAL_DAYS: dict[tuple[int, int], str] = {
    (1, 1): "신정 (New Year's Day)",
    (2, 17): "설날 (Lunar New Year)",
    (9, 25): "추석 (Harvest festival)",
    (12, 25): "크리스마스 (Christmas)",
    (12, 31): "한 해의 마지막 날 (Year's end)",
}

WEEKDAYS_KO = ("월요일", "화요일", "수요일", "목요일", "금요일", "토요일", "일요일")

_LEADING_MARKERS = re.compile(r"^[\d.\-*\s]+")


class TextCompleter(Protocol):
    async def complete(
        self,
        system_prompt: str,
        user_content: Optional[str] = None,
        *,
        temperature: float = ...,
    ) -> str: ...


@dataclass(frozen=True)
class QuoteCacheEntry:
    reference_date: Optional[date]
    texts: tuple[str, ...]


def seoul_now() -> datetime:
    return datetime.now(tz=SEOUL)


def parse_quote_lines(raw: str) -> list[str]:
    """Split an upstream reply into clean lines, dropping numbering and bullets."""
    lines = []
    for line in raw.splitlines():
        cleaned = _LEADING_MARKERS.sub("", line.strip()).strip()
        if cleaned:
            lines.append(cleaned)
    return lines


def build_day_context(day: date) -> str:
    context = f"오늘은 {day.year}년 {day.month}월 {day.day}일 {WEEKDAYS_KO[day.weekday()]}입니다."
    label = SPECIAL_DAYS.get((day.month, day.day))
    if label:
        context += f" 오늘은 특별한 날입니다: {label}."
    return context


class DailyQuoteCache:
    def __init__(
        self,
        completer: TextCompleter,
        *,
        clock: Callable[[], datetime] = seoul_now,
        rng: Optional[random.Random] = None,
        fallback: str = FALLBACK_QUOTE,
    ) -> None:
        self._completer = completer
        self._clock = clock
        self._rng = rng or random.Random()
        self._lock = asyncio.Lock()
        self.entry = QuoteCacheEntry(reference_date=None, texts=(fallback,))

    def today(self) -> date:
        return self._clock().astimezone(SEOUL).date()

    def is_fresh(self, today: date) -> bool:
        # A single text is the placeholder, not a successful generation.
        entry = self.entry
        return entry.reference_date == today and len(entry.texts) > 1

    async def ensure_fresh(self) -> None:
        today = self.today()
        if self.is_fresh(today):
            return

        async with self._lock:
            # The wait may have crossed midnight.
            today = self.today()
            if self.is_fresh(today):
                return
            try:
                texts = await self._generate(today)
            except (UpstreamUnavailableError, EmptyGenerationError) as exc:
                logger.warning(
                    "Daily quote refresh for %s failed, keeping cached entry (%s): %s",
                    today, self.entry.reference_date, exc.message,
                )
                return
            self.entry = QuoteCacheEntry(reference_date=today, texts=tuple(texts))
            logger.info("Daily quotes refreshed for %s (%d lines)", today, len(texts))

    def pick_one(self) -> str:
        return self._rng.choice(self.entry.texts)

    async def _generate(self, today: date) -> list[str]:
        logger.info("Generating daily quotes for %s", today)
        prompt = DAILY_QUOTE_PROMPT.format(context=build_day_context(today))
        raw = await self._completer.complete(prompt, temperature=QUOTE_TEMPERATURE)
        lines = parse_quote_lines(raw)
        if not lines:
            raise EmptyGenerationError()
        return lines
