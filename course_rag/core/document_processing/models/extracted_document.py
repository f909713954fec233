"""
Extraction result models.

Dependencies: pydantic
System role: Output of the Extractor, input of the Chunker
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field


class ExtractionMethod(str, Enum):
    """Handler that produced an extraction."""

    PDF = "pdf"
    DOCX = "docx"
    PPTX = "pptx"
    PPT_RECORDS = "ppt-records"
    XLSX = "xlsx"
    XLS = "xls"
    GEMINI_OCR = "gemini-ocr"
    TEXT = "text"
    UNSUPPORTED = "unsupported"


class PageSpan(BaseModel):
    """Character range of one page, slide or sheet inside the extracted text."""

    page_number: int = Field(ge=1)
    start_char: int = Field(ge=0)
    end_char: int = Field(ge=0)


class ExtractedDocument(BaseModel):
    """Plain text pulled out of an uploaded file."""

    text: str = Field(default="", description="Full extracted text")
    extraction_method: ExtractionMethod
    page_count: int | None = Field(default=None, description="Pages, slides or sheets")
    word_count: int = Field(default=0, ge=0)
    extracted_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    error: str | None = Field(default=None, description="Set when extraction failed")
    page_spans: list[PageSpan] = Field(default_factory=list)

    @property
    def has_text(self) -> bool:
        return bool(self.text.strip())

    @property
    def failed(self) -> bool:
        return self.error is not None

    def metadata(self) -> dict:
        """Snapshot metadata persisted with the material content."""
        return {
            "extraction_method": self.extraction_method.value,
            "page_count": self.page_count,
            "word_count": self.word_count,
            "extracted_at": self.extracted_at.isoformat(),
            "error": self.error,
        }
