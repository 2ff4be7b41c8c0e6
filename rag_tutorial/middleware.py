"""
Name: Request Context Middleware

Responsibilities:
  - Accept the caller's X-Request-Id or mint a new one
  - Bind request context for logging and echo the id on the response
  - Log one line per request with status and latency

Collaborators:
  - context.py: bind_request / reset_request
  - logger.py: structured logging

Constraints:
  - The context is reset in finally, even when the handler raises
"""

import time
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from .context import bind_request, reset_request
from .logger import logger

REQUEST_ID_HEADER = "X-Request-Id"


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        request.state.request_id = request_id
        token = bind_request(request_id, request.method, request.url.path)
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "request failed", extra={"latency_ms": _elapsed_ms(started)}
            )
            raise
        else:
            response.headers[REQUEST_ID_HEADER] = request_id
            logger.info(
                "request completed",
                extra={
                    "status_code": response.status_code,
                    "latency_ms": _elapsed_ms(started),
                },
            )
            return response
        finally:
            reset_request(token)
