"""
Material content snapshot ORM model.

Holds the latest extraction of a material (text, chunk list, metadata) so a
failed embedding run can be retried without the original file.

Dependencies: sqlalchemy, course_rag.boundary.db.base
System role: Extraction snapshot persistence
"""

import uuid

from sqlalchemy import JSON, ForeignKey, Text
from sqlalchemy.dialects.postgresql import JSONB, UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from course_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin

JSONType = JSON().with_variant(JSONB(), "postgresql")


class MaterialContentModel(Base, UUIDMixin, TimestampMixin):
    """One row per material (unique material_id), replaced on re-extraction."""

    __tablename__ = "course_material_content"

    material_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("course_materials.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    content_text: Mapped[str] = mapped_column(Text, nullable=False, default="")
    content_chunks: Mapped[list] = mapped_column(JSONType, nullable=False, default=list)
    content_metadata: Mapped[dict] = mapped_column("metadata", JSONType, nullable=False, default=dict)

    material = relationship("CourseMaterialModel", back_populates="content")
