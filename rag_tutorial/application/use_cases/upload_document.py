"""
Name: Upload Document Use Case

Responsibilities:
  - Extract text from an uploaded file (PDF/DOCX/plain text)
  - Record original file name and upload time as chunk metadata
  - Delegate chunking, embedding and storage to IngestDocumentUseCase

Collaborators:
  - domain/services.DocumentTextExtractor: file -> text
  - ingest_document.IngestDocumentUseCase: text -> chunks in the store

Constraints:
  - Extraction failures raise ExtractionError (a DocumentProcessingError)
"""

import time
from dataclasses import dataclass
from typing import Optional

from ...domain.entities import ORIGINAL_FILENAME_KEY, UPLOAD_TIME_KEY
from ...domain.services import DocumentTextExtractor
from .ingest_document import (
    IngestDocumentInput,
    IngestDocumentOutput,
    IngestDocumentUseCase,
)


@dataclass
class UploadDocumentInput:
    file_name: str
    content: bytes
    content_type: Optional[str] = None
    document_id: Optional[str] = None


class UploadDocumentUseCase:
    """
    R: Use case for file upload ingestion.
    """

    def __init__(
        self,
        extractor: DocumentTextExtractor,
        ingest_use_case: IngestDocumentUseCase,
    ):
        self.extractor = extractor
        self.ingest_use_case = ingest_use_case

    def execute(self, input_data: UploadDocumentInput) -> IngestDocumentOutput:
        text = self.extractor.extract_text(
            input_data.file_name, input_data.content, input_data.content_type
        )
        return self.ingest_use_case.execute(
            IngestDocumentInput(
                text=text,
                document_id=input_data.document_id,
                metadata={
                    ORIGINAL_FILENAME_KEY: input_data.file_name,
                    UPLOAD_TIME_KEY: int(time.time() * 1000),
                },
            )
        )
