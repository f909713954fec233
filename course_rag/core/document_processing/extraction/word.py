"""
Word document extraction using python-docx.

Dependencies: python-docx
System role: Word handler of the Extractor
"""

import io

from docx import Document

from course_rag.core.document_processing.extraction.base import (
    PAGE_SEPARATOR,
    FormatHandler,
    document_from_text,
)
from course_rag.core.document_processing.models import ExtractedDocument, ExtractionMethod
from course_rag.core.exceptions import ExtractionError

WORD_MIME_TYPES = frozenset({
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "application/msword",
})

# Legacy .doc files are OLE2 compound files, not zip packages
OLE2_SIGNATURE = b"\xd0\xcf\x11\xe0\xa1\xb1\x1a\xe1"


class WordHandler(FormatHandler):
    """Paragraphs joined by blank lines, tables flattened to pipe-delimited rows."""

    method = ExtractionMethod.DOCX

    def matches(self, mime_type: str, file_name: str) -> bool:
        return mime_type in WORD_MIME_TYPES

    def extract_sync(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        if data.startswith(OLE2_SIGNATURE):
            raise ExtractionError(
                "Legacy .doc files are not supported, save the document as .docx",
                file_type=mime_type,
            )

        document = Document(io.BytesIO(data))
        blocks = [p.text.strip() for p in document.paragraphs if p.text.strip()]

        for table in document.tables:
            rows = []
            for row in table.rows:
                cells = [cell.text.strip() for cell in row.cells if cell.text.strip()]
                if cells:
                    rows.append(" | ".join(cells))
            if rows:
                blocks.append("\n".join(rows))

        return document_from_text(PAGE_SEPARATOR.join(blocks), self.method)
