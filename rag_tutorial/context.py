"""
Name: Request Context

Responsibilities:
  - Hold the request id, HTTP method and path of the request being served
  - Expose them to the JSON log formatter

Collaborators:
  - middleware.py: binds the context when a request starts, resets it after
  - logger.py: reads it for every log line

Notes:
  - A single ContextVar holds a frozen snapshot; binding returns a token so the
    previous value is restored exactly (nested TestClient calls included)
"""

from contextvars import ContextVar, Token
from dataclasses import asdict, dataclass
from typing import Dict, Optional


@dataclass(frozen=True)
class RequestContext:
    request_id: str
    method: str = ""
    path: str = ""


_current: ContextVar[Optional[RequestContext]] = ContextVar(
    "rag_tutorial_request_context", default=None
)


def bind_request(
    request_id: str, method: str = "", path: str = ""
) -> Token:
    """R: Make this request's identity visible to logging."""
    return _current.set(RequestContext(request_id=request_id, method=method, path=path))


def reset_request(token: Token) -> None:
    _current.reset(token)


def current_request_id() -> str:
    ctx = _current.get()
    return ctx.request_id if ctx else ""


def get_context_dict() -> Dict[str, str]:
    """
    R: Context fields for log enrichment.

    Returns:
        request_id/method/path, empty values omitted ({} outside a request)
    """
    ctx = _current.get()
    if ctx is None:
        return {}
    return {key: value for key, value in asdict(ctx).items() if value}
