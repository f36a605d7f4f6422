"""
Shared pytest fixtures.

The completion endpoint is never contacted: routes get a scripted fake via
dependency overrides, and the quote cache runs on a controllable clock.
"""
import os
import random
from datetime import datetime

os.environ["RATE_LIMIT_PER_MINUTE"] = "0"
os.environ["OPENAI_API_KEY"] = ""

import pytest
from fastapi.testclient import TestClient

from garden.core.errors import UpstreamUnavailableError
from garden.deps import get_completion_client, get_quote_cache
from garden.main import app
from garden.services.quote_cache import SEOUL, DailyQuoteCache

FIVE_LINES = "\n".join([
    "1. 오늘도 평안하세요",
    "2. 작은 씨앗이 자라는 하루",
    "3. 마음에 햇살이 머물기를",
    "4. 천천히 걸어도 괜찮아요",
    "5. 당신의 정원은 오늘도 자랍니다",
])


class FakeCompletion:
    """Stands in for CompletionClient; records every call."""

    def __init__(self, reply=FIVE_LINES, json_reply=None, error=None):
        self.reply = reply
        self.json_reply = json_reply if json_reply is not None else {}
        self.error = error
        self.calls = []

    async def complete(self, system_prompt, user_content=None, *, temperature=0.7, json_mode=False):
        self.calls.append({
            "system": system_prompt,
            "user": user_content,
            "temperature": temperature,
            "json_mode": json_mode,
        })
        if self.error:
            raise self.error
        return self.reply

    async def complete_json(self, system_prompt, user_content=None, *, temperature=0.7):
        self.calls.append({
            "system": system_prompt,
            "user": user_content,
            "temperature": temperature,
            "json_mode": True,
        })
        if self.error:
            raise self.error
        return self.json_reply


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def upstream_down() -> UpstreamUnavailableError:
    return UpstreamUnavailableError("Upstream returned 503", status_code=503)


@pytest.fixture()
def clock():
    return FakeClock(datetime(2026, 10, 19, 9, 30, tzinfo=SEOUL))


@pytest.fixture()
def fake_completion():
    return FakeCompletion()


@pytest.fixture()
def quote_cache(fake_completion, clock):
    return DailyQuoteCache(fake_completion, clock=clock, rng=random.Random(7))


@pytest.fixture()
def client(fake_completion, quote_cache):
    app.dependency_overrides[get_completion_client] = lambda: fake_completion
    app.dependency_overrides[get_quote_cache] = lambda: quote_cache
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
