"""
Name: Storm API Client

Responsibilities:
  - Upload files into Storm buckets (multipart POST)
  - Ask questions against buckets and map chat + contexts
  - Retry transient HTTP failures with exponential backoff + jitter
  - Turn HTTP, transport and payload errors into StormAPIError

Collaborators:
  - domain.services.StormService: Interface implementation
  - httpx: HTTP client (injectable for tests via MockTransport)
  - retry: Resilience helper for transient errors

Constraints:
  - Auth header: storm-api-key
  - Payloads may arrive wrapped as {"data": {...}}; both shapes are accepted
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List

import httpx

from ...domain.entities import StormAnswer, StormChat, StormContext, StormDocument
from ...domain.services import StormService
from ...exceptions import StormAPIError
from ...logger import logger
from .retry import create_retry_decorator

API_KEY_HEADER = "storm-api-key"
UPLOAD_PATH = "/api/v2/documents/by-file"
ANSWER_PATH = "/api/v2/answer"


def _unwrap(payload: Any) -> Dict[str, Any]:
    """R: Accept both {"data": {...}} and bare object payloads."""
    if isinstance(payload, dict) and isinstance(payload.get("data"), dict):
        return payload["data"]
    if isinstance(payload, dict):
        return payload
    raise StormAPIError(f"Unexpected Storm payload type: {type(payload).__name__}")


def _expect(value: Any, kind: type, field_name: str) -> Any:
    """R: Missing (None) becomes an empty kind; any other mismatch is an error."""
    if value is None:
        return kind()
    if not isinstance(value, kind):
        raise StormAPIError(
            f"Storm field '{field_name}' is {type(value).__name__}, expected {kind.__name__}"
        )
    return value


def _parse_document(payload: Dict[str, Any]) -> StormDocument:
    document_id = payload.get("id") or payload.get("documentId")
    if not document_id:
        raise StormAPIError("Storm upload response has no document id")
    return StormDocument(
        id=str(document_id),
        name=_expect(payload.get("name"), str, "name") or None,
        status=_expect(payload.get("status"), str, "status") or None,
    )


def _parse_answer(payload: Dict[str, Any], question: str) -> StormAnswer:
    chat = _expect(payload.get("chat"), dict, "chat")
    contexts = _expect(payload.get("contexts"), list, "contexts")
    return StormAnswer(
        chat=StormChat(
            question=_expect(chat.get("question"), str, "chat.question") or question,
            answer=_expect(chat.get("answer"), str, "chat.answer"),
        ),
        contexts=[
            StormContext(
                document_id=str(ctx.get("documentId") or ctx.get("document_id") or ""),
                content=_expect(ctx.get("content"), str, "contexts.content"),
                metadata=_expect(ctx.get("metadata"), dict, "contexts.metadata"),
            )
            for ctx in contexts
            if isinstance(ctx, dict)
        ],
    )


class StormClient(StormService):
    """
    R: httpx-based StormService implementation.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        *,
        timeout_seconds: float = 60.0,
        client: httpx.Client | None = None,
        retry_decorator: Callable | None = None,
    ):
        if not (api_key or "").strip():
            raise ValueError("api_key is required for StormClient")

        self._client = client or httpx.Client(
            base_url=base_url.rstrip("/"),
            timeout=timeout_seconds,
        )
        self._headers = {API_KEY_HEADER: api_key.strip()}

        decorator = retry_decorator or create_retry_decorator()
        self._send = decorator(self._post)

    def close(self) -> None:
        self._client.close()

    def upload_document(
        self, file_name: str, content: bytes, bucket_id: str
    ) -> StormDocument:
        payload = self._request(
            UPLOAD_PATH,
            files={"file": (file_name, content)},
            data={"bucketId": bucket_id},
        )
        document = _parse_document(_unwrap(payload))
        logger.info(
            "StormClient: document uploaded",
            extra={
                "storm_document_id": document.id,
                "bucket_id": bucket_id,
                "file_name": file_name,
            },
        )
        return document

    def answer(self, question: str, bucket_ids: List[str]) -> StormAnswer:
        payload = self._request(
            ANSWER_PATH,
            json={"question": question, "bucketIds": list(bucket_ids)},
        )
        answer = _parse_answer(_unwrap(payload), question)
        logger.info(
            "StormClient: answer received",
            extra={"bucket_count": len(bucket_ids), "contexts": len(answer.contexts)},
        )
        return answer

    def _post(self, path: str, **kwargs) -> httpx.Response:
        response = self._client.post(path, headers=self._headers, **kwargs)
        response.raise_for_status()
        return response

    def _request(self, path: str, **kwargs) -> Any:
        try:
            response = self._send(path, **kwargs)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.error(
                "StormClient: HTTP error",
                extra={"storm_path": path, "status_code": status},
            )
            raise StormAPIError(
                f"Storm API returned HTTP {status} for {path}",
                status_code=status,
                original_error=exc,
            ) from exc
        except httpx.HTTPError as exc:
            logger.error(
                "StormClient: transport error",
                exc_info=True,
                extra={"storm_path": path, "error_type": type(exc).__name__},
            )
            raise StormAPIError(
                f"Storm API request to {path} failed", original_error=exc
            ) from exc

        try:
            return response.json()
        except ValueError as exc:
            raise StormAPIError(
                f"Storm API returned invalid JSON for {path}", original_error=exc
            ) from exc
