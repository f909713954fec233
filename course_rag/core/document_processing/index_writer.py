"""
Index writer.

Pairs chunks with their vectors and replaces the material's rows in the
index store.

Dependencies: course_rag.boundary.vdb
System role: Final stage of material ingestion
"""

import logging
import uuid
from collections.abc import Sequence

from course_rag.boundary.vdb.base_store import MaterialIndexStore
from course_rag.boundary.vdb.vector_schemas import ChunkRow
from course_rag.core.document_processing.models import Chunk
from course_rag.core.exceptions import EmbeddingDimensionError, ValidationError

logger = logging.getLogger(__name__)


class IndexWriter:
    """Write a material's chunk vectors, replacing whatever was there."""

    def __init__(self, store: MaterialIndexStore, dimension: int = 768) -> None:
        """
        Initialize index writer.

        Args:
            store: Target index store
            dimension: Required vector length
        """
        self._store = store
        self.dimension = dimension

    async def write(
        self,
        material_id: uuid.UUID,
        chunks: Sequence[Chunk],
        vectors: Sequence[Sequence[float]],
    ) -> int:
        """
        Replace the material's chunk rows.

        Writing an empty chunk list clears the material from the index.

        Args:
            material_id: Material UUID
            chunks: Chunks in order
            vectors: One vector per chunk, same order

        Returns:
            int: Rows written

        Raises:
            ValidationError: Chunk and vector counts differ
            EmbeddingDimensionError: A vector has the wrong length
        """
        if len(chunks) != len(vectors):
            raise ValidationError(
                "Chunk and vector counts differ",
                field="vectors",
                details={"chunks": len(chunks), "vectors": len(vectors)},
            )
        for vector in vectors:
            if len(vector) != self.dimension:
                raise EmbeddingDimensionError(self.dimension, len(vector))

        rows = [
            ChunkRow(
                chunk_id=chunk.chunk_id,
                chunk_index=chunk.chunk_index,
                chunk_text=chunk.text,
                page_number=chunk.page_number,
                embedding=list(vector),
                metadata=chunk.metadata,
            )
            for chunk, vector in zip(chunks, vectors)
        ]
        written = await self._store.replace_material_chunks(material_id, rows)
        logger.info(
            f"{__name__}:write - Indexed {written} chunks",
            extra={"material_id": str(material_id), "chunk_count": written},
        )
        return written
