"""
Shared pieces for format handlers.

Dependencies: course_rag.core.document_processing.models
System role: Common handler interface and document assembly
"""

import asyncio
from abc import ABC, abstractmethod

from course_rag.core.document_processing.models import (
    ExtractedDocument,
    ExtractionMethod,
    PageSpan,
)

PAGE_SEPARATOR = "\n\n"


def count_words(text: str) -> int:
    return len(text.split())


def document_from_text(text: str, method: ExtractionMethod) -> ExtractedDocument:
    """Build an ExtractedDocument for formats without page boundaries."""
    return ExtractedDocument(
        text=text,
        extraction_method=method,
        word_count=count_words(text),
    )


def document_from_pages(
    pages: list[tuple[int, str]],
    method: ExtractionMethod,
    page_count: int | None = None,
) -> ExtractedDocument:
    """
    Join per-page texts with blank lines and record each page's span.

    Pages whose text is blank are left out of the text but still count
    towards ``page_count``.

    Args:
        pages: (1-based page number, page text) in reading order
        method: Extraction method tag
        page_count: Total pages; defaults to len(pages)
    """
    parts: list[str] = []
    spans: list[PageSpan] = []
    offset = 0
    for page_number, page_text in pages:
        page_text = page_text.strip()
        if not page_text:
            continue
        if parts:
            offset += len(PAGE_SEPARATOR)
        spans.append(
            PageSpan(
                page_number=page_number,
                start_char=offset,
                end_char=offset + len(page_text),
            )
        )
        parts.append(page_text)
        offset += len(page_text)

    text = PAGE_SEPARATOR.join(parts)
    return ExtractedDocument(
        text=text,
        extraction_method=method,
        page_count=page_count if page_count is not None else len(pages),
        word_count=count_words(text),
        page_spans=spans,
    )


class FormatHandler(ABC):
    """One file format family. ``extract`` may raise; the Extractor recovers."""

    method: ExtractionMethod

    @abstractmethod
    def matches(self, mime_type: str, file_name: str) -> bool:
        ...

    def extract_sync(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        raise NotImplementedError

    async def extract(self, data: bytes, file_name: str, mime_type: str) -> ExtractedDocument:
        """Run the blocking parser in a worker thread."""
        return await asyncio.to_thread(self.extract_sync, data, file_name, mime_type)
