"""
Citation domain model.

Represents a citation to a course material chunk for grounded answers.

Dependencies: pydantic
System role: Citation data structure
"""

import uuid

from pydantic import BaseModel, Field


class Citation(BaseModel):
    """Citation model for source attribution."""

    material_id: uuid.UUID = Field(description="Cited material")
    file_name: str = Field(description="Source file name")
    page: int | None = Field(default=None, description="Page, slide or sheet number")
    chunk_id: str = Field(description="Chunk identifier for tracing")
    similarity: float = Field(ge=0.0, le=1.0, description="Similarity of the cited chunk")
    source_uri: str | None = Field(default=None, description="Storage path of the file")

    @property
    def label(self) -> str:
        """Inline citation as the answer generator must write it."""
        if self.page is not None:
            return f"[Source: {self.file_name}, Page {self.page}]"
        return f"[Source: {self.file_name}]"
