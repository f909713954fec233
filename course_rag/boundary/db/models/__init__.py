"""
Database models package.

Exports:
  - CourseMaterialModel, MaterialStatus: Uploaded material and its status enum
  - MaterialContentModel: Latest extraction snapshot per material
  - MaterialChunkEmbeddingModel: Indexed chunk rows with pgvector embeddings

Dependencies: sqlalchemy, pgvector, course_rag.boundary.db.base
System role: Database model definitions for the chunk index
"""

from course_rag.boundary.db.models.material_model import CourseMaterialModel, MaterialStatus
from course_rag.boundary.db.models.material_content_model import MaterialContentModel
from course_rag.boundary.db.models.chunk_embedding_model import MaterialChunkEmbeddingModel

__all__ = [
    "CourseMaterialModel",
    "MaterialStatus",
    "MaterialContentModel",
    "MaterialChunkEmbeddingModel",
]
