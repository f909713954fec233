"""
Database boundary layer: ORM models, CRUD operations, and connection management.

Exports:
  - Base, UUIDMixin, TimestampMixin: Model building blocks
  - get_async_engine(), get_async_session_factory(), session_scope(), create_tables()
  - CourseMaterialModel, MaterialContentModel, MaterialChunkEmbeddingModel, MaterialStatus
  - material_crud, material_content_crud, chunk_embedding_crud: CRUD singletons

Dependencies: sqlalchemy, pgvector, course_rag.configs
System role: PostgreSQL adapter backing the pgvector index store
"""

from course_rag.boundary.db.base import Base, TimestampMixin, UUIDMixin
from course_rag.boundary.db.connection import (
    create_tables,
    get_async_engine,
    get_async_session_factory,
    session_scope,
)
from course_rag.boundary.db.models import (
    CourseMaterialModel,
    MaterialChunkEmbeddingModel,
    MaterialContentModel,
    MaterialStatus,
)
from course_rag.boundary.db.CRUD import (
    BaseCRUD,
    ChunkEmbeddingCRUD,
    MaterialContentCRUD,
    MaterialCRUD,
    chunk_embedding_crud,
    material_content_crud,
    material_crud,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "UUIDMixin",
    "create_tables",
    "get_async_engine",
    "get_async_session_factory",
    "session_scope",
    "CourseMaterialModel",
    "MaterialChunkEmbeddingModel",
    "MaterialContentModel",
    "MaterialStatus",
    "BaseCRUD",
    "ChunkEmbeddingCRUD",
    "MaterialContentCRUD",
    "MaterialCRUD",
    "chunk_embedding_crud",
    "material_content_crud",
    "material_crud",
]
