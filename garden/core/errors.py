"""
Custom exception hierarchy for the garden gateway.

Rule: every HTTP error has a machine-readable `code` string so clients
can branch on it without parsing the (Korean) user-facing message.
"""
from __future__ import annotations

import logging
from typing import Any

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class GardenException(Exception):
    """Base class for all application-level errors."""
    http_status: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    code: str = "INTERNAL_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        # "error" carries the same text for clients of the original {"error": ...} body.
        payload: dict[str, Any] = {"code": self.code, "message": self.message, "error": self.message}
        if self.details:
            payload["details"] = self.details
        return payload


class EmptyDiaryError(GardenException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "EMPTY_DIARY"

    def __init__(self):
        super().__init__(message="일기 내용이 비어있습니다.")


class NoDiariesError(GardenException):
    http_status = status.HTTP_400_BAD_REQUEST
    code = "NO_DIARIES"

    def __init__(self):
        super().__init__(message="분석할 일기가 없습니다.")


class UpstreamUnavailableError(GardenException):
    """Any failure talking to the completion endpoint: network, timeout, status, body."""
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "UPSTREAM_UNAVAILABLE"

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(
            message=message,
            details={"status_code": status_code} if status_code is not None else {},
        )
        self.status_code = status_code


class EmptyGenerationError(GardenException):
    http_status = status.HTTP_502_BAD_GATEWAY
    code = "EMPTY_GENERATION"

    def __init__(self):
        super().__init__(message="Upstream reply contained no usable lines.")


class GardenerAwayError(GardenException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "GARDENER_AWAY"

    def __init__(self):
        super().__init__(message="정원사가 잠시 자리를 비웠습니다.")


class SummaryFailedError(GardenException):
    http_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "SUMMARY_FAILED"

    def __init__(self):
        super().__init__(message="회고 분석 실패")


class RateLimitExceededError(GardenException):
    http_status = status.HTTP_429_TOO_MANY_REQUESTS
    code = "RATE_LIMITED"

    def __init__(self, limit: int, retry_after: int):
        super().__init__(
            message=f"Rate limit of {limit} requests per minute exceeded.",
            details={"limit": limit, "retry_after": retry_after},
        )
        self.retry_after = retry_after


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

async def garden_exception_handler(request: Request, exc: GardenException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return structured 422 with machine-readable field errors."""
    field_errors = []
    for error in exc.errors():
        field_errors.append({
            "field": ".".join(str(loc) for loc in error["loc"] if loc != "body"),
            "message": error["msg"],
            "type": error["type"],
        })
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed.",
            "error": "Request validation failed.",
            "details": {"errors": field_errors},
        },
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "code": "INTERNAL_ERROR",
            "message": "An unexpected error occurred.",
            "error": "An unexpected error occurred.",
        },
    )
