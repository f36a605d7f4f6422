from typing import Optional

from pydantic import BaseModel, Field


class DailyQuoteResponse(BaseModel):
    quote: str = Field(description="Greeting line for today.")
    date: Optional[str] = Field(
        default=None,
        description="Asia/Seoul date the quote set was generated for; null for the fallback.",
        examples=["2026-10-19"],
    )
