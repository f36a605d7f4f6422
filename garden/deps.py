"""
Request-scoped access to the process-wide collaborators created at startup.
"""
from fastapi import Request

from garden.services.completion import CompletionClient
from garden.services.quote_cache import DailyQuoteCache


def get_completion_client(request: Request) -> CompletionClient:
    return request.app.state.completion_client


def get_quote_cache(request: Request) -> DailyQuoteCache:
    return request.app.state.quote_cache
