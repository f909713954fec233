"""
Material upload model.

Dependencies: pydantic
System role: Input of the ingestion pipeline
"""

import uuid

from pydantic import BaseModel, ConfigDict, Field


class MaterialUpload(BaseModel):
    """Raw uploaded file plus the identifiers it is filed under."""

    model_config = ConfigDict(frozen=True)

    material_id: uuid.UUID = Field(default_factory=uuid.uuid4)
    course_id: uuid.UUID
    file_name: str = Field(min_length=1)
    mime_type: str = Field(default="application/octet-stream")
    data: bytes = Field(repr=False)
    file_path: str | None = Field(default=None, description="Storage path of the original file")

    @property
    def size_bytes(self) -> int:
        return len(self.data)
