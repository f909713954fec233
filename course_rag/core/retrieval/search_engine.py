"""
Semantic search over indexed course materials.

Embeds the query, asks the index store for chunks above a similarity floor
and returns the top results in a deterministic order.

Dependencies: course_rag.boundary.vdb, course_rag.core.embeddings
System role: Retrieval entry point for the tutoring assistant
"""

import logging
import time
import uuid
from collections.abc import Sequence

from course_rag.boundary.vdb.base_store import MaterialIndexStore
from course_rag.boundary.vdb.vector_schemas import SearchResult, VectorQuery
from course_rag.configs.search import SearchSettings
from course_rag.core.embeddings.client import EmbeddingClient
from course_rag.core.exceptions import (
    ChunkNotFoundError,
    EmbeddingDimensionError,
    EmptyQueryError,
    ValidationError,
)
from course_rag.observability.log_utils import elapsed_ms

logger = logging.getLogger(__name__)


class SearchEngine:
    """Course-scoped and material-scoped similarity search."""

    def __init__(
        self,
        store: MaterialIndexStore,
        embedding_client: EmbeddingClient,
        settings: SearchSettings | None = None,
    ) -> None:
        """
        Initialize search engine.

        Args:
            store: Index store holding chunk vectors
            embedding_client: Client used to embed queries
            settings: Search settings (defaults from environment)
        """
        self._store = store
        self._embeddings = embedding_client
        self.settings = settings or SearchSettings()

    def _resolve_top_k(self, top_k: int | None, default: int | None = None) -> int:
        if top_k is None:
            return default if default is not None else self.settings.default_top_k
        if isinstance(top_k, bool) or not isinstance(top_k, int):
            raise ValidationError("top_k must be an integer", field="top_k")
        if not 1 <= top_k <= self.settings.max_top_k:
            raise ValidationError(
                f"top_k must be between 1 and {self.settings.max_top_k}",
                field="top_k",
                details={"top_k": top_k},
            )
        return top_k

    @staticmethod
    def _resolve_min_similarity(min_similarity: float | None, default: float) -> float:
        if min_similarity is None:
            return default
        if not 0.0 <= min_similarity <= 1.0:
            raise ValidationError(
                "min_similarity must be between 0 and 1",
                field="min_similarity",
                details={"min_similarity": min_similarity},
            )
        return float(min_similarity)

    async def _embed_query(self, query: str) -> list[float]:
        if not isinstance(query, str) or not query.strip():
            raise EmptyQueryError()
        return await self._embeddings.embed(query)

    async def _run(self, vector_query: VectorQuery, include_metadata: bool, scope: dict) -> list[SearchResult]:
        start = time.perf_counter()
        results = await self._store.search(vector_query)
        if not include_metadata:
            results = [r.model_copy(update={"metadata": None}) for r in results]

        logger.info(
            f"{__name__}:search - Returned {len(results)} results",
            extra={
                **scope,
                "result_count": len(results),
                "top_k": vector_query.top_k,
                "min_similarity": vector_query.min_similarity,
                "duration_ms": elapsed_ms(start),
            },
        )
        return results

    async def search(
        self,
        course_id: uuid.UUID,
        query: str,
        top_k: int | None = None,
        min_similarity: float | None = None,
        include_metadata: bool = True,
    ) -> list[SearchResult]:
        """
        Search all materials of a course.

        Args:
            course_id: Course to search
            query: Natural-language query
            top_k: Maximum results (1..max_top_k, default default_top_k)
            min_similarity: Similarity floor (0..1, default min_similarity)
            include_metadata: Include chunk metadata in results

        Returns:
            list[SearchResult]: Similarity descending, ties in insertion order

        Raises:
            EmptyQueryError: Query is blank
            ValidationError: top_k or min_similarity out of range
            VectorStoreError: Index store failed
        """
        top_k = self._resolve_top_k(top_k)
        floor = self._resolve_min_similarity(min_similarity, self.settings.min_similarity)
        embedding = await self._embed_query(query)
        return await self._run(
            VectorQuery(embedding=embedding, top_k=top_k, min_similarity=floor, course_id=course_id),
            include_metadata,
            {"course_id": str(course_id)},
        )

    async def high_precision_search(
        self,
        course_id: uuid.UUID,
        query: str,
        top_k: int | None = None,
        include_metadata: bool = True,
    ) -> list[SearchResult]:
        """Course search with the high-precision similarity floor."""
        return await self.search(
            course_id,
            query,
            top_k=top_k,
            min_similarity=self.settings.high_precision_similarity,
            include_metadata=include_metadata,
        )

    async def search_materials(
        self,
        material_ids: Sequence[uuid.UUID],
        query: str,
        top_k: int | None = None,
        min_similarity: float | None = None,
        include_metadata: bool = True,
    ) -> list[SearchResult]:
        """
        Search only the listed materials.

        An empty list returns [] without embedding the query.
        """
        top_k = self._resolve_top_k(top_k)
        floor = self._resolve_min_similarity(min_similarity, self.settings.min_similarity)
        if not material_ids:
            return []
        embedding = await self._embed_query(query)
        return await self._run(
            VectorQuery(
                embedding=embedding,
                top_k=top_k,
                min_similarity=floor,
                material_ids=list(material_ids),
            ),
            include_metadata,
            {"material_count": len(material_ids)},
        )

    async def find_similar_chunks(
        self,
        course_id: uuid.UUID,
        material_id: uuid.UUID,
        chunk_id: str,
        limit: int | None = None,
        min_similarity: float = 0.0,
    ) -> list[SearchResult]:
        """
        Chunks of the course most similar to a stored chunk.

        The source chunk itself, identified by (material_id, chunk_id), is
        excluded; chunks of other materials sharing the chunk id are kept.

        Raises:
            ChunkNotFoundError: The source chunk is not indexed
        """
        top_k = self._resolve_top_k(limit, self.settings.similar_chunks_limit)
        floor = self._resolve_min_similarity(min_similarity, 0.0)

        vector = await self._store.get_chunk_vector(material_id, chunk_id)
        if vector is None:
            raise ChunkNotFoundError(str(material_id), chunk_id)
        if len(vector) != self._embeddings.dimension:
            raise EmbeddingDimensionError(self._embeddings.dimension, len(vector))

        return await self._run(
            VectorQuery(
                embedding=vector,
                top_k=top_k,
                min_similarity=floor,
                course_id=course_id,
                exclude=(material_id, chunk_id),
            ),
            True,
            {"course_id": str(course_id), "material_id": str(material_id), "chunk_id": chunk_id},
        )
