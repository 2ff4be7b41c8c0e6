"""
Name: API Controllers

Responsibilities:
  - Expose chat, RAG and Storm endpoints
  - Delegate business logic to application use cases
  - Validate requests and serialize responses using Pydantic models
  - Wrap successful payloads in the ApiResponse envelope

Collaborators:
  - application.use_cases: chat, ingest/upload, search, answer, Storm
  - container: Dependency providers for use cases
  - error_responses: RFC 7807 errors for request problems

Constraints:
  - Blank queries are 400; over-long ones are 422 (pydantic)
  - File uploads are read fully into memory, bounded by max_upload_bytes

Notes:
  - This module stays thin (controllers only)
  - Use cases run in the threadpool from async upload handlers
"""

import os
from typing import Any, Dict, Generic, List, Optional, TypeVar

from fastapi import APIRouter, Depends, File, Form, UploadFile
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from .application.use_cases import (
    AnswerQueryInput,
    AnswerQueryUseCase,
    ChatInput,
    ChatUseCase,
    IngestDocumentInput,
    IngestDocumentUseCase,
    SearchChunksInput,
    SearchChunksUseCase,
    StormQueryInput,
    StormQueryUseCase,
    StormUploadInput,
    StormUploadUseCase,
    UploadDocumentInput,
    UploadDocumentUseCase,
)
from .config import get_settings
from .container import (
    get_answer_query_use_case,
    get_chat_use_case,
    get_ingest_document_use_case,
    get_search_chunks_use_case,
    get_storm_query_use_case,
    get_storm_upload_use_case,
    get_upload_document_use_case,
)
from .domain.entities import ChatFailure, SearchResult
from .error_responses import (
    bad_request,
    llm_error,
    payload_too_large,
    service_unavailable,
)

router = APIRouter()

# R: Limits are loaded from Settings at module load time for Pydantic schema
_settings = get_settings()

# R: Content previews in query responses are cut to this many characters
CONTENT_PREVIEW_CHARS = 1000

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    error: Optional[str] = None


def _ok(data: Any) -> Dict[str, Any]:
    return {"success": True, "data": data, "error": None}


def _require_text(value: str, field_name: str) -> str:
    value = (value or "").strip()
    if not value:
        raise bad_request(f"{field_name} must not be empty")
    return value


def _preview(text: str) -> str:
    if len(text) <= CONTENT_PREVIEW_CHARS:
        return text
    return text[:CONTENT_PREVIEW_CHARS] + "..."


async def _read_upload(file: UploadFile) -> tuple[str, bytes]:
    settings = get_settings()
    file_name = os.path.basename(file.filename or "").strip() or "upload"
    try:
        content = await file.read()
    finally:
        await file.close()

    if not content:
        raise bad_request("Uploaded file is empty")
    if settings.max_upload_bytes > 0 and len(content) > settings.max_upload_bytes:
        raise payload_too_large(settings.max_upload_bytes)
    return file_name, content


# ============================================================================
# Chat
# ============================================================================


class ChatReq(BaseModel):
    query: str = Field(..., max_length=_settings.max_query_chars)
    model: Optional[str] = None
    system_message: Optional[str] = Field(default=None, max_length=4_000)


class ChatRes(BaseModel):
    answer: str
    model: str


@router.post("/chat/query", response_model=ApiResponse[ChatRes], tags=["chat"])
def chat_query(
    req: ChatReq,
    use_case: ChatUseCase = Depends(get_chat_use_case),
):
    query = _require_text(req.query, "query")
    result = use_case.execute(
        ChatInput(user_input=query, model=req.model, system_message=req.system_message)
    )
    if isinstance(result, ChatFailure):
        raise llm_error(result.reason)
    return _ok(ChatRes(answer=result.answer, model=result.model))


# ============================================================================
# RAG
# ============================================================================


class IngestTextReq(BaseModel):
    text: str = Field(..., min_length=1)
    document_id: Optional[str] = Field(default=None, max_length=200)
    metadata: Dict[str, str] = Field(default_factory=dict)


class IngestRes(BaseModel):
    document_id: str
    file_name: Optional[str] = None
    chunks_created: int


class SearchReq(BaseModel):
    query: str = Field(..., max_length=_settings.max_query_chars)
    max_results: int = Field(
        default=_settings.default_max_results, ge=1, le=_settings.max_top_k
    )


class QueryReq(SearchReq):
    model: Optional[str] = None


class MatchRes(BaseModel):
    id: str
    document_id: str
    content: str
    metadata: Dict[str, str]
    score: float


class SearchRes(BaseModel):
    matches: List[MatchRes]


class QueryRes(BaseModel):
    query: str
    answer: str
    grounded: bool
    relevant_documents: List[MatchRes]


def _to_match(result: SearchResult, preview: bool = False) -> MatchRes:
    return MatchRes(
        id=result.id,
        document_id=result.document_id,
        content=_preview(result.text) if preview else result.text,
        metadata=result.metadata,
        score=result.score,
    )


@router.post("/rag/documents", response_model=ApiResponse[IngestRes], tags=["rag"])
async def upload_document(
    file: UploadFile = File(...),
    use_case: UploadDocumentUseCase = Depends(get_upload_document_use_case),
):
    file_name, content = await _read_upload(file)
    output = await run_in_threadpool(
        use_case.execute,
        UploadDocumentInput(
            file_name=file_name,
            content=content,
            content_type=file.content_type,
        ),
    )
    return _ok(
        IngestRes(
            document_id=output.document_id,
            file_name=file_name,
            chunks_created=output.chunks_created,
        )
    )


@router.post(
    "/rag/documents/text", response_model=ApiResponse[IngestRes], tags=["rag"]
)
def ingest_text(
    req: IngestTextReq,
    use_case: IngestDocumentUseCase = Depends(get_ingest_document_use_case),
):
    text = _require_text(req.text, "text")
    output = use_case.execute(
        IngestDocumentInput(text=text, document_id=req.document_id, metadata=req.metadata)
    )
    return _ok(
        IngestRes(document_id=output.document_id, chunks_created=output.chunks_created)
    )


@router.post("/rag/search", response_model=ApiResponse[SearchRes], tags=["rag"])
def search(
    req: SearchReq,
    use_case: SearchChunksUseCase = Depends(get_search_chunks_use_case),
):
    query = _require_text(req.query, "query")
    output = use_case.execute(SearchChunksInput(query=query, max_results=req.max_results))
    return _ok(SearchRes(matches=[_to_match(r) for r in output.results]))


@router.post("/rag/query", response_model=ApiResponse[QueryRes], tags=["rag"])
def rag_query(
    req: QueryReq,
    use_case: AnswerQueryUseCase = Depends(get_answer_query_use_case),
):
    query = _require_text(req.query, "query")
    result = use_case.execute(
        AnswerQueryInput(query=query, max_results=req.max_results, model=req.model)
    )
    return _ok(
        QueryRes(
            query=result.query,
            answer=result.answer,
            grounded=result.grounded,
            relevant_documents=[_to_match(r, preview=True) for r in result.sources],
        )
    )


# ============================================================================
# Storm
# ============================================================================


class StormQueryReq(BaseModel):
    query: str = Field(..., max_length=_settings.max_query_chars)
    bucket_ids: List[str] = Field(default_factory=list)


class StormDocumentRes(BaseModel):
    id: str
    name: Optional[str] = None
    status: Optional[str] = None


class StormChatRes(BaseModel):
    question: str
    answer: str


class StormContextRes(BaseModel):
    document_id: str
    content: str
    metadata: Dict[str, Any]


class StormAnswerRes(BaseModel):
    chat: StormChatRes
    contexts: List[StormContextRes]


@router.post(
    "/storm/documents", response_model=ApiResponse[StormDocumentRes], tags=["storm"]
)
async def storm_upload_document(
    file: UploadFile = File(...),
    bucket_id: Optional[str] = Form(None),
    use_case: Optional[StormUploadUseCase] = Depends(get_storm_upload_use_case),
):
    if use_case is None:
        raise service_unavailable("Storm API")

    file_name, content = await _read_upload(file)
    try:
        document = await run_in_threadpool(
            use_case.execute,
            StormUploadInput(file_name=file_name, content=content, bucket_id=bucket_id),
        )
    except ValueError as exc:
        raise bad_request(str(exc)) from exc
    return _ok(
        StormDocumentRes(id=document.id, name=document.name, status=document.status)
    )


@router.post("/storm/query", response_model=ApiResponse[StormAnswerRes], tags=["storm"])
def storm_query(
    req: StormQueryReq,
    use_case: Optional[StormQueryUseCase] = Depends(get_storm_query_use_case),
):
    if use_case is None:
        raise service_unavailable("Storm API")

    query = _require_text(req.query, "query")
    try:
        answer = use_case.execute(StormQueryInput(question=query, bucket_ids=req.bucket_ids))
    except ValueError as exc:
        raise bad_request(str(exc)) from exc
    return _ok(
        StormAnswerRes(
            chat=StormChatRes(question=answer.chat.question, answer=answer.chat.answer),
            contexts=[
                StormContextRes(
                    document_id=ctx.document_id,
                    content=_preview(ctx.content),
                    metadata=ctx.metadata,
                )
                for ctx in answer.contexts
            ],
        )
    )
