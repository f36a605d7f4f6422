"""
Analysis request schemas.

Single diary:   POST /analyze           → AnalyzeRequest        → {points, comment}
Monthly batch:  POST /monthly-summary   → MonthlySummaryRequest → {virtue: [{text, date}]}

Field names follow the mobile client's JSON (`diaryText`, `date_str`).
Emptiness is checked by the service so it maps to 400, not 422.
Replies are the model's JSON object, returned as-is.
"""
from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class AnalyzeRequest(BaseModel):
    diaryText: Optional[str] = Field(
        default=None,
        description="Diary entry to analyze.",
        examples=["오늘은 처음으로 발표를 했다. 떨렸지만 끝까지 해냈다."],
    )


class DiaryIn(BaseModel):
    content: str = Field(description="Diary body.")
    date_str: Optional[str] = Field(
        default=None,
        description="Date label sent alongside the entry, usually YYYY-MM-DD.",
        examples=["2024-05-21"],
    )


class MonthlySummaryRequest(BaseModel):
    diaries: Optional[list[DiaryIn]] = Field(
        default=None,
        description="The month's diary entries.",
    )
