"""
Name: FastAPI Exception Handlers

Responsibilities:
  - Convert application error kinds to RFC 7807 HTTP responses
  - Log every handled error once, with its error_id and cause

Collaborators:
  - main.py: calls register_exception_handlers
  - exceptions.py: RAGError and its kinds
  - error_responses.py: problem+json rendering

Constraints:
  - Extraction 422, document processing 500, embedding/provider 503,
    Storm 502, any other RAGError 500

Notes:
  - Starlette resolves handlers by MRO, so ExtractionError is matched
    before DocumentProcessingError
  - Anything that is not a RAGError falls through to
    unhandled_exception_handler (generic 500, details only in the log)
"""

from typing import Dict, Tuple, Type

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .error_responses import (
    AppHTTPException,
    ErrorCode,
    app_exception_handler,
    problem_response,
)
from .exceptions import (
    DocumentProcessingError,
    EmbeddingError,
    ExtractionError,
    ProviderUnavailable,
    RAGError,
    StormAPIError,
)
from .context import current_request_id
from .logger import logger

# R: error kind -> (HTTP status, client-facing code)
ERROR_STATUS: Dict[Type[RAGError], Tuple[int, ErrorCode]] = {
    ExtractionError: (422, ErrorCode.EXTRACTION_ERROR),
    DocumentProcessingError: (500, ErrorCode.DOCUMENT_PROCESSING_ERROR),
    EmbeddingError: (503, ErrorCode.EMBEDDING_ERROR),
    ProviderUnavailable: (503, ErrorCode.LLM_ERROR),
    StormAPIError: (502, ErrorCode.STORM_ERROR),
    RAGError: (500, ErrorCode.INTERNAL_ERROR),
}


def _status_for(exc: RAGError) -> Tuple[int, ErrorCode]:
    for kind in type(exc).__mro__:
        if kind in ERROR_STATUS:
            return ERROR_STATUS[kind]
    return ERROR_STATUS[RAGError]


async def rag_error_handler(request: Request, exc: RAGError) -> JSONResponse:
    status_code, code = _status_for(exc)
    log = logger.error if status_code >= 500 else logger.warning
    log(
        f"{type(exc).__name__}: {exc.message}",
        extra={
            "error_id": exc.error_id,
            "error_code": exc.error_code,
            "status_code": status_code,
            "cause": repr(exc.original_error) if exc.original_error else None,
        },
    )
    return problem_response(
        request,
        status_code,
        code,
        exc.message,
        errors=[exc.to_response()],
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Fallback for errors no other handler claims.

    The traceback goes to the log; the client only sees a generic 500 and
    the request id to quote.
    """
    request_id = current_request_id() or getattr(request.state, "request_id", None)
    logger.error(
        f"Unhandled {type(exc).__name__}",
        exc_info=(type(exc), exc, exc.__traceback__),
        extra={"status_code": 500},
    )
    return problem_response(
        request,
        500,
        ErrorCode.INTERNAL_ERROR,
        "Internal server error",
        errors=[{"request_id": request_id}] if request_id else None,
    )


def register_exception_handlers(app: FastAPI) -> None:
    for kind in ERROR_STATUS:
        app.add_exception_handler(kind, rag_error_handler)
    app.add_exception_handler(AppHTTPException, app_exception_handler)
    # R: Registered last; Starlette routes Exception to ServerErrorMiddleware
    app.add_exception_handler(Exception, unhandled_exception_handler)
