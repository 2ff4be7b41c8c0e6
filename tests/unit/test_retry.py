"""
Name: Retry Helper Unit Tests

Responsibilities:
  - Verify transient/permanent error classification
  - Verify the tenacity decorator retries only transient errors
"""

from types import SimpleNamespace
from unittest.mock import Mock

import pytest

from rag_tutorial.infrastructure.services.retry import (
    create_retry_decorator,
    get_http_status_code,
    is_transient_error,
)

pytestmark = pytest.mark.unit


class ServiceUnavailableError(Exception):
    pass


class ApiError(Exception):
    def __init__(self, message: str, code: int):
        super().__init__(message)
        self.code = code


@pytest.mark.parametrize(
    "exc,expected",
    [
        (ApiError("rate limited", 429), True),
        (ApiError("server", 503), True),
        (ApiError("bad key", 401), False),
        (ApiError("missing", 404), False),
        (TimeoutError("read"), True),
        (ConnectionError("reset"), True),
        (ServiceUnavailableError("down"), True),
        (RuntimeError("Quota exceeded for project"), True),
        (ValueError("invalid argument"), False),
    ],
)
def test_is_transient_error(exc, expected):
    assert is_transient_error(exc) is expected


def test_status_code_from_response_attribute():
    exc = Exception("http")
    exc.response = SimpleNamespace(status_code=502)

    assert get_http_status_code(exc) == 502


def test_small_grpc_code_is_ignored():
    assert get_http_status_code(ApiError("grpc", 14)) is None


def test_permanent_code_wins_over_transient_message():
    """R: A 400 is never retried, even if its message sounds transient."""
    assert is_transient_error(ApiError("timed out validating request", 400)) is False


def _decorated(fn: Mock, max_attempts: int):
    decorator = create_retry_decorator(
        max_attempts=max_attempts, base_delay=0.0, max_delay=0.0
    )

    @decorator
    def call_provider():
        return fn()

    return call_provider


def test_decorator_retries_transient_until_success():
    fn = Mock(side_effect=[ApiError("busy", 503), ApiError("busy", 503), "ok"])

    assert _decorated(fn, max_attempts=3)() == "ok"
    assert fn.call_count == 3


def test_decorator_reraises_after_last_attempt():
    fn = Mock(side_effect=ApiError("busy", 503))

    with pytest.raises(ApiError):
        _decorated(fn, max_attempts=2)()
    assert fn.call_count == 2


def test_decorator_does_not_retry_permanent_errors():
    fn = Mock(side_effect=ApiError("forbidden", 403))

    with pytest.raises(ApiError):
        _decorated(fn, max_attempts=3)()
    assert fn.call_count == 1
