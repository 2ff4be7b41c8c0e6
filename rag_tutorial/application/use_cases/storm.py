"""
Name: Storm Use Cases

Responsibilities:
  - Upload a file to a Storm bucket (default bucket when none given)
  - Ask Storm a question against one or more buckets

Collaborators:
  - domain.services.StormService: Storm API client

Constraints:
  - A missing bucket id (and no default) is a ValueError
  - StormAPIError propagates to the HTTP layer
"""

from dataclasses import dataclass, field
from typing import List, Optional

from ...domain.entities import StormAnswer, StormDocument
from ...domain.services import StormService


@dataclass
class StormUploadInput:
    file_name: str
    content: bytes
    bucket_id: Optional[str] = None


@dataclass
class StormQueryInput:
    question: str
    bucket_ids: List[str] = field(default_factory=list)


def _resolve_buckets(requested: List[str], default_bucket_id: str) -> List[str]:
    buckets = [b.strip() for b in requested if b and b.strip()]
    if not buckets and default_bucket_id:
        buckets = [default_bucket_id]
    if not buckets:
        raise ValueError("A Storm bucket id is required (none given, no default set)")
    return buckets


class StormUploadUseCase:
    def __init__(self, storm: StormService, default_bucket_id: str = ""):
        self.storm = storm
        self.default_bucket_id = default_bucket_id

    def execute(self, input_data: StormUploadInput) -> StormDocument:
        bucket_id = _resolve_buckets(
            [input_data.bucket_id or ""], self.default_bucket_id
        )[0]
        return self.storm.upload_document(
            input_data.file_name, input_data.content, bucket_id
        )


class StormQueryUseCase:
    def __init__(self, storm: StormService, default_bucket_id: str = ""):
        self.storm = storm
        self.default_bucket_id = default_bucket_id

    def execute(self, input_data: StormQueryInput) -> StormAnswer:
        if not (input_data.question or "").strip():
            raise ValueError("question must not be empty")
        buckets = _resolve_buckets(input_data.bucket_ids, self.default_bucket_id)
        return self.storm.answer(input_data.question, buckets)
