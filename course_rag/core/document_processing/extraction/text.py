"""
Plain text and source code extraction.

Dependencies: None
System role: Text handler of the Extractor
"""

from course_rag.core.document_processing.extraction.base import (
    FormatHandler,
    document_from_text,
)
from course_rag.core.document_processing.models import ExtractedDocument, ExtractionMethod

TEXT_EXTENSIONS = (
    ".txt", ".md", ".json", ".js", ".py", ".java", ".c", ".cpp",
    ".ts", ".html", ".css", ".xml",
)


class TextHandler(FormatHandler):
    """UTF-8 decode with invalid bytes replaced and any BOM dropped."""

    method = ExtractionMethod.TEXT

    def matches(self, mime_type: str, file_name: str) -> bool:
        return mime_type.startswith("text/") or file_name.lower().endswith(TEXT_EXTENSIONS)

    def extract_sync(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        return document_from_text(data.decode("utf-8-sig", errors="replace"), self.method)
