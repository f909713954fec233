"""
CRUD operations for the index tables.

Exports the base CRUD class and table-specific implementations with
pre-instantiated singletons.

Usage:
    from course_rag.boundary.db.CRUD import material_crud, chunk_embedding_crud

    material = await material_crud.get_by_id(db, material_id)
"""

from course_rag.boundary.db.CRUD.base_crud import BaseCRUD
from course_rag.boundary.db.CRUD.chunk_embedding_crud import ChunkEmbeddingCRUD, chunk_embedding_crud
from course_rag.boundary.db.CRUD.material_content_crud import MaterialContentCRUD, material_content_crud
from course_rag.boundary.db.CRUD.material_crud import MaterialCRUD, material_crud

__all__ = [
    "BaseCRUD",
    "ChunkEmbeddingCRUD",
    "chunk_embedding_crud",
    "MaterialContentCRUD",
    "material_content_crud",
    "MaterialCRUD",
    "material_crud",
]
