"""
Name: Storm Client Unit Tests

Responsibilities:
  - Verify request shape (auth header, multipart upload, JSON answer body)
  - Verify payload mapping with and without the {"data": ...} wrapper
  - Verify HTTP, transport and JSON failures become StormAPIError

Notes:
  - httpx.MockTransport stands in for the Storm API
"""

import json

import httpx
import pytest

from rag_tutorial.exceptions import StormAPIError
from rag_tutorial.infrastructure.services import StormClient, create_retry_decorator
from rag_tutorial.infrastructure.services.storm_client import (
    ANSWER_PATH,
    API_KEY_HEADER,
    UPLOAD_PATH,
)

pytestmark = pytest.mark.unit

BASE_URL = "https://storm.test"


def _client(handler, max_attempts: int = 2) -> StormClient:
    http_client = httpx.Client(
        transport=httpx.MockTransport(handler), base_url=BASE_URL
    )
    return StormClient(
        api_key="storm-secret",
        base_url=BASE_URL,
        client=http_client,
        retry_decorator=create_retry_decorator(
            max_attempts=max_attempts, base_delay=0.0, max_delay=0.0
        ),
    )


def test_requires_api_key():
    with pytest.raises(ValueError):
        StormClient(api_key=" ", base_url=BASE_URL)


def test_upload_sends_multipart_with_bucket():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["key"] = request.headers.get(API_KEY_HEADER)
        seen["body"] = request.content
        return httpx.Response(
            200, json={"data": {"id": "doc-77", "name": "guide.pdf", "status": "QUEUED"}}
        )

    document = _client(handler).upload_document("guide.pdf", b"%PDF-1.4 data", "bucket-1")

    assert seen["path"] == UPLOAD_PATH
    assert seen["key"] == "storm-secret"
    assert b'name="bucketId"' in seen["body"]
    assert b"bucket-1" in seen["body"]
    assert b'filename="guide.pdf"' in seen["body"]
    assert document.id == "doc-77"
    assert document.name == "guide.pdf"
    assert document.status == "QUEUED"


def test_upload_accepts_bare_payload_with_document_id():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"documentId": 42})

    document = _client(handler).upload_document("a.txt", b"hello", "bucket-1")

    assert document.id == "42"
    assert document.name is None


def test_upload_without_id_is_an_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"status": "FAILED"}})

    with pytest.raises(StormAPIError, match="no document id"):
        _client(handler).upload_document("a.txt", b"hello", "bucket-1")


def test_answer_posts_question_and_maps_contexts():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["path"] = request.url.path
        seen["json"] = json.loads(request.content)
        return httpx.Response(
            200,
            json={
                "data": {
                    "chat": {"question": "What is Storm?", "answer": "A Q&A API."},
                    "contexts": [
                        {
                            "documentId": "doc-1",
                            "content": "Storm answers questions.",
                            "metadata": {"page": 3},
                        }
                    ],
                }
            },
        )

    answer = _client(handler).answer("What is Storm?", ["b1", "b2"])

    assert seen["path"] == ANSWER_PATH
    assert seen["json"] == {"question": "What is Storm?", "bucketIds": ["b1", "b2"]}
    assert answer.chat.answer == "A Q&A API."
    assert len(answer.contexts) == 1
    assert answer.contexts[0].document_id == "doc-1"
    assert answer.contexts[0].metadata == {"page": 3}


def test_answer_with_missing_chat_keeps_question():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={})

    answer = _client(handler).answer("Anything?", ["b1"])

    assert answer.chat.question == "Anything?"
    assert answer.chat.answer == ""
    assert answer.contexts == []


def test_answer_with_non_object_chat_is_storm_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"data": {"chat": "oops"}})

    with pytest.raises(StormAPIError, match="'chat' is str"):
        _client(handler).answer("q", ["b1"])


@pytest.mark.parametrize(
    "context",
    [
        {"documentId": "doc-1", "content": "text", "metadata": ["page", 3]},
        {"documentId": "doc-1", "content": {"text": "nested"}},
    ],
)
def test_answer_with_malformed_context_is_storm_error(context):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(
            200, json={"chat": {"answer": "ok"}, "contexts": [context]}
        )

    with pytest.raises(StormAPIError, match=r"contexts\.") as exc_info:
        _client(handler).answer("q", ["b1"])

    assert exc_info.value.status_code is None


def test_transient_status_is_retried():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        if calls["count"] == 1:
            return httpx.Response(503, json={"error": "busy"})
        return httpx.Response(200, json={"id": "doc-1"})

    document = _client(handler).upload_document("a.txt", b"hello", "bucket-1")

    assert document.id == "doc-1"
    assert calls["count"] == 2


def test_permanent_status_fails_fast_with_status_code():
    calls = {"count": 0}

    def handler(request: httpx.Request) -> httpx.Response:
        calls["count"] += 1
        return httpx.Response(401, json={"error": "bad key"})

    with pytest.raises(StormAPIError) as exc_info:
        _client(handler, max_attempts=3).answer("q", ["b1"])

    assert exc_info.value.status_code == 401
    assert isinstance(exc_info.value.original_error, httpx.HTTPStatusError)
    assert calls["count"] == 1


def test_transport_error_becomes_storm_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(StormAPIError) as exc_info:
        _client(handler).answer("q", ["b1"])

    assert exc_info.value.status_code is None
    assert isinstance(exc_info.value.original_error, httpx.ConnectError)


def test_invalid_json_becomes_storm_error():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>gateway</html>")

    with pytest.raises(StormAPIError, match="invalid JSON"):
        _client(handler).answer("q", ["b1"])
