"""
Index store schemas.

Pydantic models exchanged with the chunk index store: material records,
content snapshots, rows to write, search queries and results.

Dependencies: pydantic
System role: Type definitions for index store operations
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from course_rag.boundary.db.models.material_model import MaterialStatus


class MaterialRecord(BaseModel):
    """Stored course material."""

    material_id: uuid.UUID
    course_id: uuid.UUID
    file_name: str
    file_path: str | None = None
    file_type: str
    file_size: int = Field(default=0, ge=0)
    uploaded_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    status: MaterialStatus = MaterialStatus.PENDING
    error_message: str | None = None


class MaterialContent(BaseModel):
    """Latest extraction snapshot of a material."""

    material_id: uuid.UUID
    content_text: str = ""
    content_chunks: list[dict[str, Any]] = Field(default_factory=list)
    metadata: dict[str, Any] = Field(default_factory=dict)


class ChunkRow(BaseModel):
    """One chunk with its vector, ready to be written."""

    chunk_id: str
    chunk_index: int = Field(ge=0)
    chunk_text: str
    page_number: int | None = None
    embedding: list[float]
    metadata: dict[str, Any] = Field(default_factory=dict)


class VectorQuery(BaseModel):
    """Search parameters passed to the index store."""

    embedding: list[float] = Field(description="Query embedding vector")
    top_k: int = Field(default=20, description="Number of results to return", ge=1)
    min_similarity: float = Field(
        default=0.5,
        description="Minimum similarity score (0.0-1.0)",
        ge=0.0,
        le=1.0,
    )
    course_id: uuid.UUID | None = Field(default=None, description="Restrict to one course")
    material_ids: list[uuid.UUID] | None = Field(
        default=None,
        description="Restrict to these materials",
    )
    exclude: tuple[uuid.UUID, str] | None = Field(
        default=None,
        description="(material_id, chunk_id) pair left out of the results",
    )


class SearchResult(BaseModel):
    """Ranked chunk with the material it came from. Never persisted."""

    model_config = ConfigDict(frozen=True)

    material_id: uuid.UUID
    course_id: uuid.UUID
    file_name: str
    file_path: str | None = None
    file_type: str
    uploaded_at: datetime
    chunk_id: str
    chunk_index: int
    chunk_text: str
    page_number: int | None = None
    similarity: float = Field(ge=0.0, le=1.0, description="Clamped cosine similarity")
    metadata: dict[str, Any] | None = None


class MaterialStats(BaseModel):
    """Per-course index totals."""

    course_id: uuid.UUID
    total_materials: int = 0
    materials_with_content: int = 0
    materials_without_content: int = 0
    failed_materials: int = 0
    total_chunks: int = 0
