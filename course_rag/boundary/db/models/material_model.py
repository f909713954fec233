"""
Course material ORM model.

Represents an uploaded course file and its indexing status.

Dependencies: sqlalchemy, course_rag.boundary.db.base
System role: Material persistence for ingestion tracking
"""

import enum
import uuid
from datetime import datetime

from sqlalchemy import BigInteger, DateTime, Enum, Index, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from course_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin, utc_now


class MaterialStatus(str, enum.Enum):
    """
    Material indexing lifecycle states.

    PENDING: Uploaded, not yet picked up
    PROCESSING: Extraction, chunking or embedding in progress
    COMPLETED: Chunks indexed and searchable (possibly zero chunks)
    FAILED: Extraction or embedding failed; error_message holds details
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


class CourseMaterialModel(Base, UUIDMixin, TimestampMixin):
    """
    Uploaded course file.

    Descriptive columns are written once; only status and error_message
    change afterwards. Deleting a row cascades to its content snapshot and
    chunk embeddings.
    """

    __tablename__ = "course_materials"
    __table_args__ = (Index("ix_course_materials_course_id", "course_id"),)

    course_id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), nullable=False)
    file_name: Mapped[str] = mapped_column(String(255), nullable=False)
    file_path: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    file_type: Mapped[str] = mapped_column(String(255), nullable=False)
    file_size: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)
    uploaded_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=utc_now,
    )
    status: Mapped[MaterialStatus] = mapped_column(
        Enum(MaterialStatus, native_enum=False),
        nullable=False,
        default=MaterialStatus.PENDING,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    content = relationship(
        "MaterialContentModel",
        back_populates="material",
        uselist=False,
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    chunks = relationship(
        "MaterialChunkEmbeddingModel",
        back_populates="material",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
