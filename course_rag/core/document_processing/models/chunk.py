"""
Chunk domain model for the ingestion pipeline.

A chunk is a verbatim slice of a material's extracted text.

Dependencies: pydantic
System role: Unit of indexing and retrieval
"""

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """Contiguous slice of extracted text with its position and page."""

    chunk_id: str = Field(description="Identifier unique within the material (chunk_<index>)")
    chunk_index: int = Field(ge=0, description="Zero-based position in the material")
    text: str = Field(description="Chunk text, equal to source[start_char:end_char]")
    start_char: int = Field(ge=0, description="Start offset in the extracted text")
    end_char: int = Field(ge=0, description="End offset (exclusive) in the extracted text")
    page_number: int | None = Field(default=None, description="Page, slide or sheet the chunk starts on")
    word_count: int = Field(ge=0, description="Whitespace-delimited word count")

    @property
    def metadata(self) -> dict:
        """Metadata stored alongside the chunk vector."""
        return {
            "start_char": self.start_char,
            "end_char": self.end_char,
            "page_number": self.page_number,
            "word_count": self.word_count,
        }
