"""
Extractor: dispatch uploaded files to format handlers.

Dispatch is by MIME type first, then by file extension for the text family.
Handler failures never propagate: they come back as an ExtractedDocument
with empty text and ``error`` set.

Dependencies: course_rag.core.document_processing.extraction handlers
System role: First stage of material ingestion
"""

import asyncio
import logging
import time
from collections.abc import Sequence

from course_rag.core.document_processing.extraction.base import FormatHandler
from course_rag.core.document_processing.extraction.image_ocr import ImageOcrHandler
from course_rag.core.document_processing.extraction.pdf import PdfHandler
from course_rag.core.document_processing.extraction.presentation import PptHandler, PptxHandler
from course_rag.core.document_processing.extraction.spreadsheet import XlsHandler, XlsxHandler
from course_rag.core.document_processing.extraction.text import TextHandler
from course_rag.core.document_processing.extraction.word import WordHandler
from course_rag.core.document_processing.models import ExtractedDocument, ExtractionMethod
from course_rag.core.exceptions import CourseRagError
from course_rag.observability.log_utils import elapsed_ms

logger = logging.getLogger(__name__)


class Extractor:
    """Turns raw file bytes into plain text."""

    def __init__(
        self,
        handlers: Sequence[FormatHandler] | None = None,
        ocr_handler: ImageOcrHandler | None = None,
    ) -> None:
        """
        Initialize extractor.

        Args:
            handlers: Full handler list, checked in order (overrides defaults)
            ocr_handler: Image handler to use with the default handler list
        """
        if handlers is None:
            handlers = [
                PdfHandler(),
                WordHandler(),
                PptxHandler(),
                PptHandler(),
                XlsxHandler(),
                XlsHandler(),
                ocr_handler or ImageOcrHandler(),
                TextHandler(),
            ]
        self._handlers = list(handlers)

    @classmethod
    def from_settings(cls, settings) -> "Extractor":
        """Build with the OCR model configured in EmbeddingSettings."""
        return cls(
            ocr_handler=ImageOcrHandler(
                model_name=settings.embedding.ocr_model,
                google_api_key=settings.embedding.google_api_key or None,
            )
        )

    def handler_for(self, mime_type: str, file_name: str) -> FormatHandler | None:
        mime_type = (mime_type or "").lower().split(";")[0].strip()
        for handler in self._handlers:
            if handler.matches(mime_type, file_name):
                return handler
        return None

    async def extract(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        """
        Extract plain text from one file.

        Args:
            data: Raw file bytes
            file_name: Original file name
            mime_type: Declared MIME type

        Returns:
            ExtractedDocument: Never raises for format problems
        """
        start = time.perf_counter()
        handler = self.handler_for(mime_type, file_name)

        if handler is None:
            logger.warning(
                f"{__name__}:extract - Unsupported file type: {mime_type}",
                extra={"file_name": file_name, "mime_type": mime_type},
            )
            return ExtractedDocument(
                text="",
                extraction_method=ExtractionMethod.UNSUPPORTED,
                error=f"Unsupported file type: {mime_type}",
            )

        try:
            document = await handler.extract(data, file_name, mime_type)
        except CourseRagError as e:
            error = e.message
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
        else:
            logger.info(
                f"{__name__}:extract - Extracted {document.word_count} words",
                extra={
                    "file_name": file_name,
                    "extraction_method": document.extraction_method.value,
                    "page_count": document.page_count,
                    "duration_ms": elapsed_ms(start),
                },
            )
            return document

        logger.warning(
            f"{__name__}:extract - Extraction failed: {error}",
            extra={"file_name": file_name, "extraction_method": handler.method.value},
        )
        return ExtractedDocument(text="", extraction_method=handler.method, error=error)

    async def extract_many(
        self,
        files: Sequence[tuple[bytes, str, str]],
    ) -> list[ExtractedDocument]:
        """Extract (data, file_name, mime_type) triples concurrently, in order."""
        return list(
            await asyncio.gather(*(self.extract(data, name, mime) for data, name, mime in files))
        )
