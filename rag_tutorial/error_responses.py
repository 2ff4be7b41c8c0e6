"""
Name: RFC 7807 Problem Details

Responsibilities:
  - Define the error codes clients can branch on
  - Render any failure as application/problem+json
  - Provide small factories for request-level errors raised by controllers

Collaborators:
  - routes.py: raises AppHTTPException via the factories
  - exception_handlers.py: renders domain errors through problem_response
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

PROBLEM_JSON_MEDIA_TYPE = "application/problem+json"
ERROR_TYPE_BASE = "https://api.rag-tutorial.local/errors/"


class ErrorCode(str, Enum):
    BAD_REQUEST = "BAD_REQUEST"
    EXTRACTION_ERROR = "EXTRACTION_ERROR"
    PAYLOAD_TOO_LARGE = "PAYLOAD_TOO_LARGE"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DOCUMENT_PROCESSING_ERROR = "DOCUMENT_PROCESSING_ERROR"
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"
    LLM_ERROR = "LLM_ERROR"
    EMBEDDING_ERROR = "EMBEDDING_ERROR"
    STORM_ERROR = "STORM_ERROR"

    @property
    def title(self) -> str:
        return self.value.replace("_", " ").title()


class ErrorDetail(BaseModel):
    """Problem Details body (RFC 7807) plus an application code."""

    type: str = "about:blank"
    title: str
    status: int
    detail: str
    code: ErrorCode
    instance: str | None = None
    errors: list[dict[str, Any]] | None = None


class AppHTTPException(HTTPException):
    """HTTPException carrying an ErrorCode and optional error entries."""

    def __init__(
        self,
        status_code: int,
        code: ErrorCode,
        detail: str,
        errors: list[dict[str, Any]] | None = None,
    ):
        super().__init__(status_code=status_code, detail=detail)
        self.code = code
        self.errors = errors


def problem_response(
    request: Request,
    status_code: int,
    code: ErrorCode,
    detail: str,
    errors: list[dict[str, Any]] | None = None,
) -> JSONResponse:
    body = ErrorDetail(
        type=f"{ERROR_TYPE_BASE}{code.value.lower()}",
        title=code.title,
        status=status_code,
        detail=detail,
        code=code,
        instance=str(request.url),
        errors=errors,
    )
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        media_type=PROBLEM_JSON_MEDIA_TYPE,
    )


def bad_request(detail: str) -> AppHTTPException:
    return AppHTTPException(400, ErrorCode.BAD_REQUEST, detail)


def payload_too_large(limit_bytes: int) -> AppHTTPException:
    return AppHTTPException(
        413,
        ErrorCode.PAYLOAD_TOO_LARGE,
        f"Upload exceeds the {limit_bytes} byte limit",
    )


def service_unavailable(service: str) -> AppHTTPException:
    return AppHTTPException(
        503, ErrorCode.SERVICE_UNAVAILABLE, f"{service} is not configured"
    )


def llm_error(detail: str) -> AppHTTPException:
    return AppHTTPException(502, ErrorCode.LLM_ERROR, detail)


async def app_exception_handler(
    request: Request, exc: AppHTTPException
) -> JSONResponse:
    return problem_response(request, exc.status_code, exc.code, exc.detail, exc.errors)
