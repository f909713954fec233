"""
Index store interface.

Every backend keeps materials, their latest extraction snapshot and their
chunk vectors, and answers course- or material-scoped similarity queries.

Dependencies: None
System role: Contract between the pipeline and the persistent index
"""

import uuid
from abc import ABC, abstractmethod

from course_rag.boundary.db.models.material_model import MaterialStatus
from course_rag.boundary.vdb.vector_schemas import (
    ChunkRow,
    MaterialContent,
    MaterialRecord,
    MaterialStats,
    SearchResult,
    VectorQuery,
)


class MaterialIndexStore(ABC):
    """Persistent store for materials and their chunk embeddings."""

    @abstractmethod
    async def upsert_material(self, record: MaterialRecord) -> MaterialRecord:
        """Insert a material, or update only status/error of an existing one."""

    @abstractmethod
    async def get_material(self, material_id: uuid.UUID) -> MaterialRecord | None:
        ...

    @abstractmethod
    async def list_materials(self, course_id: uuid.UUID) -> list[MaterialRecord]:
        ...

    @abstractmethod
    async def update_material_status(
        self,
        material_id: uuid.UUID,
        status: MaterialStatus,
        error_message: str | None = None,
    ) -> None:
        """Raises MaterialNotFoundError when the material does not exist."""

    @abstractmethod
    async def save_content(self, content: MaterialContent) -> None:
        """Replace the extraction snapshot of a material."""

    @abstractmethod
    async def get_content(self, material_id: uuid.UUID) -> MaterialContent | None:
        ...

    @abstractmethod
    async def replace_material_chunks(self, material_id: uuid.UUID, rows: list[ChunkRow]) -> int:
        """Atomically swap all chunk rows of a material. Returns rows written."""

    @abstractmethod
    async def get_chunk_vector(self, material_id: uuid.UUID, chunk_id: str) -> list[float] | None:
        ...

    @abstractmethod
    async def count_chunks(self, material_id: uuid.UUID) -> int:
        ...

    @abstractmethod
    async def search(self, query: VectorQuery) -> list[SearchResult]:
        """
        Rank stored chunks by cosine similarity.

        Results have similarity >= ``query.min_similarity`` (clamped to
        [0, 1]), are sorted by similarity descending with ties in insertion
        order, and hold at most ``query.top_k`` entries.
        """

    @abstractmethod
    async def delete_material(self, material_id: uuid.UUID) -> bool:
        """Delete a material with its snapshot and chunks. False when missing."""

    @abstractmethod
    async def course_stats(self, course_id: uuid.UUID) -> MaterialStats:
        ...

    async def close(self) -> None:
        """Release backend resources."""
