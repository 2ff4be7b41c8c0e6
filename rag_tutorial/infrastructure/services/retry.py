"""
Name: Retry Policy

Responsibilities:
  - Decide whether a provider/HTTP failure is worth retrying
  - Build tenacity decorators for Gemini and Storm calls
  - Log each retry with the function name, attempt and wait

Collaborators:
  - tenacity: stop/wait/retry strategies
  - config.Settings: RETRY_MAX_ATTEMPTS, RETRY_BASE_DELAY_SECONDS, RETRY_MAX_DELAY_SECONDS

Constraints:
  - Rate limits, 5xx, timeouts and dropped connections are retried
  - 400/401/403/404 never are, whatever the message says

Notes:
  - Wait grows exponentially from base_delay up to max_delay, with jitter
"""

from dataclasses import dataclass
from typing import Callable

from tenacity import (
    RetryCallState,
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential_jitter,
)

from ...config import get_settings
from ...logger import logger

# R: 429 rate limit plus gateway/server failures
TRANSIENT_HTTP_CODES: frozenset[int] = frozenset({429, 500, 502, 503, 504})

PERMANENT_HTTP_CODES: frozenset[int] = frozenset({400, 401, 403, 404})

_TRANSIENT_NAME_PATTERNS = (
    "timeout",
    "connection",
    "connecterror",
    "temporary",
    "unavailable",
    "resourceexhausted",
    "deadline",
    "remoteprotocol",
)

_TRANSIENT_MESSAGE_PATTERNS = (
    "rate limit",
    "too many requests",
    "quota exceeded",
    "temporarily unavailable",
    "connection reset",
    "connection refused",
    "timed out",
    "deadline exceeded",
)


def get_http_status_code(exception: BaseException) -> int | None:
    """
    R: HTTP status carried by an exception, if any.

    Looks at .code (google-genai APIError), .response.status_code
    (httpx.HTTPStatusError) and .status_code, in that order. gRPC-style
    codes below 100 are ignored.
    """
    candidates = (
        getattr(exception, "code", None),
        getattr(getattr(exception, "response", None), "status_code", None),
        getattr(exception, "status_code", None),
    )
    for candidate in candidates:
        if isinstance(candidate, int) and candidate >= 100:
            return candidate
    return None


def _mentions(text: str, patterns: tuple[str, ...]) -> bool:
    text = text.lower()
    return any(pattern in text for pattern in patterns)


def is_transient_error(exception: BaseException) -> bool:
    """
    R: True when retrying might succeed.

    An HTTP status, when present and known, decides. Otherwise the exception
    class name and message are matched against known transient patterns.
    Anything unrecognized fails fast.
    """
    status_code = get_http_status_code(exception)
    if status_code in PERMANENT_HTTP_CODES:
        return False
    if status_code in TRANSIENT_HTTP_CODES:
        return True

    return _mentions(type(exception).__name__, _TRANSIENT_NAME_PATTERNS) or _mentions(
        str(exception), _TRANSIENT_MESSAGE_PATTERNS
    )


def _log_retry(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    wait = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        "Retrying transient failure",
        extra={
            "retry_function": getattr(retry_state.fn, "__name__", "unknown"),
            "attempt": retry_state.attempt_number,
            "wait_seconds": round(wait, 2),
            "error_type": type(exc).__name__ if exc else None,
            "error": str(exc) if exc else None,
        },
    )


@dataclass(frozen=True)
class RetryPolicy:
    """R: Attempts and backoff bounds for one retry decorator."""

    max_attempts: int
    base_delay: float
    max_delay: float

    @classmethod
    def from_settings(
        cls,
        max_attempts: int | None = None,
        base_delay: float | None = None,
        max_delay: float | None = None,
    ) -> "RetryPolicy":
        settings = get_settings()
        return cls(
            max_attempts=max_attempts or settings.retry_max_attempts,
            base_delay=(
                settings.retry_base_delay_seconds if base_delay is None else base_delay
            ),
            max_delay=(
                settings.retry_max_delay_seconds if max_delay is None else max_delay
            ),
        )


def create_retry_decorator(
    max_attempts: int | None = None,
    base_delay: float | None = None,
    max_delay: float | None = None,
) -> Callable:
    """
    R: tenacity decorator that retries transient errors only.

    Arguments left as None come from Settings (RETRY_* env vars). Zero
    delays are honoured, which keeps tests instant.

    Returns:
        Decorator that re-raises the last exception once attempts run out
    """
    policy = RetryPolicy.from_settings(max_attempts, base_delay, max_delay)
    return retry(
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_exponential_jitter(
            initial=policy.base_delay,
            max=policy.max_delay,
            jitter=policy.base_delay,
        ),
        retry=retry_if_exception(is_transient_error),
        before_sleep=_log_retry,
        reraise=True,
    )
