"""
Ingestion result model.

Dependencies: pydantic
System role: Per-file outcome returned by IngestionPipeline
"""

import uuid
from enum import Enum

from pydantic import BaseModel, Field


class IngestionStage(str, Enum):
    """Last stage an ingestion reached."""

    EXTRACTION = "extraction"
    CHUNKING = "chunking"
    EMBEDDING = "embedding"
    INDEXING = "indexing"
    COMPLETED = "completed"


class IngestionResult(BaseModel):
    """Outcome of ingesting a single material."""

    material_id: uuid.UUID
    file_name: str
    success: bool
    chunk_count: int = Field(default=0, ge=0)
    extraction_method: str | None = None
    stage: IngestionStage
    error: str | None = None
    processing_time_ms: float = Field(default=0.0, ge=0)
