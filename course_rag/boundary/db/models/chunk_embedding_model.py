"""
Chunk embedding ORM model.

One row per (material_id, chunk_id) with the chunk text and its pgvector
embedding. The serial id records insertion order and breaks similarity ties.

Dependencies: sqlalchemy, pgvector, course_rag.boundary.db.base
System role: Vector index rows
"""

import uuid
from datetime import datetime

from pgvector.sqlalchemy import Vector
from sqlalchemy import BigInteger, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import Mapped, mapped_column, relationship

from course_rag.boundary.db.base import Base, utc_now
from course_rag.boundary.db.models.material_content_model import JSONType
from course_rag.configs import get_settings

EMBEDDING_DIMENSION = get_settings().embedding.dimension


class MaterialChunkEmbeddingModel(Base):
    """Indexed chunk of a course material."""

    __tablename__ = "course_material_embeddings"
    __table_args__ = (
        UniqueConstraint("material_id", "chunk_id", name="uq_material_chunk"),
        Index("ix_course_material_embeddings_material_id", "material_id"),
    )

    id: Mapped[int] = mapped_column(
        BigInteger().with_variant(Integer, "sqlite"),
        primary_key=True,
        autoincrement=True,
    )
    material_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("course_materials.id", ondelete="CASCADE"),
        nullable=False,
    )
    chunk_id: Mapped[str] = mapped_column(String(64), nullable=False)
    chunk_index: Mapped[int] = mapped_column(Integer, nullable=False)
    chunk_text: Mapped[str] = mapped_column(Text, nullable=False)
    page_number: Mapped[int | None] = mapped_column(Integer, nullable=True)
    embedding: Mapped[list[float]] = mapped_column(Vector(EMBEDDING_DIMENSION), nullable=False)
    chunk_metadata: Mapped[dict] = mapped_column("metadata", JSONType, nullable=False, default=dict)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utc_now,
        nullable=False,
    )

    material = relationship("CourseMaterialModel", back_populates="chunks")
