"""Document parsers"""

from .document_text_extractor import SimpleDocumentTextExtractor, resolve_kind

__all__ = ["SimpleDocumentTextExtractor", "resolve_kind"]
