"""
Name: Document Text Extraction Adapter

Responsibilities:
  - Extract text from PDF, DOCX and plain-text uploads
  - Resolve the file kind from extension, then from MIME type
  - Report every failure as ExtractionError carrying the parser's exception
"""

from io import BytesIO
from pathlib import PurePath

from docx import Document as DocxDocument
from pypdf import PdfReader

from ...domain.services import DocumentTextExtractor
from ...exceptions import ExtractionError
from ...logger import logger


PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIMES = frozenset({"text/plain", "text/markdown"})

PDF = "pdf"
DOCX = "docx"
TEXT = "text"

_KIND_BY_EXTENSION = {
    ".pdf": PDF,
    ".docx": DOCX,
    ".txt": TEXT,
    ".md": TEXT,
    ".markdown": TEXT,
}


def _extract_pdf(content: bytes) -> str:
    reader = PdfReader(BytesIO(content))
    return "\n".join(page.extract_text() or "" for page in reader.pages).strip()


def _extract_docx(content: bytes) -> str:
    doc = DocxDocument(BytesIO(content))
    return "\n".join(p.text for p in doc.paragraphs).strip()


def _extract_plain(content: bytes) -> str:
    return content.decode("utf-8").strip()


_EXTRACTORS = {
    PDF: _extract_pdf,
    DOCX: _extract_docx,
    TEXT: _extract_plain,
}


def resolve_kind(file_name: str, content_type: str | None = None) -> str | None:
    """R: Map a file name (or MIME type) to pdf/docx/text, None if unsupported."""
    kind = _KIND_BY_EXTENSION.get(PurePath(file_name or "").suffix.lower())
    if kind is not None:
        return kind

    mime = (content_type or "").split(";")[0].strip().lower()
    if mime == PDF_MIME:
        return PDF
    if mime == DOCX_MIME:
        return DOCX
    if mime in TEXT_MIMES:
        return TEXT
    return None


class SimpleDocumentTextExtractor(DocumentTextExtractor):
    """R: Extract text from PDF/DOCX/plain-text content."""

    def extract_text(
        self, file_name: str, content: bytes, content_type: str | None = None
    ) -> str:
        kind = resolve_kind(file_name, content_type)
        if kind is None:
            raise ExtractionError(
                f"Unsupported file type: {file_name} ({content_type or 'unknown'})"
            )

        try:
            text = _EXTRACTORS[kind](content)
        except Exception as exc:
            logger.error(
                "Text extraction failed",
                exc_info=True,
                extra={"file_name": file_name, "kind": kind},
            )
            raise ExtractionError(
                f"Failed to extract text from {file_name}", original_error=exc
            ) from exc

        if not text:
            raise ExtractionError(f"No text could be extracted from {file_name}")

        logger.info(
            "Text extracted",
            extra={"file_name": file_name, "kind": kind, "chars": len(text)},
        )
        return text
