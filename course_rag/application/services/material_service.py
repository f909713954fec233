"""
Material service orchestrator.

Facade over ingestion and retrieval for the course backend: upload,
retry, delete, statistics and search.

Dependencies: course_rag.core, course_rag.boundary.vdb
System role: Course material management orchestration
"""

import logging
import uuid
from collections.abc import Sequence

from course_rag.boundary.vdb.base_store import MaterialIndexStore
from course_rag.boundary.vdb.vector_schemas import MaterialStats, SearchResult
from course_rag.boundary.vdb.vector_store_factory import get_index_store
from course_rag.configs import get_settings
from course_rag.core.citation_builder import CitationBuilder
from course_rag.core.document_processing.entrypoint import IngestionPipeline
from course_rag.core.document_processing.models import IngestionResult, MaterialUpload
from course_rag.core.embeddings.client import EmbeddingClient
from course_rag.core.exceptions import MaterialNotFoundError, ValidationError
from course_rag.core.retrieval.search_engine import SearchEngine

logger = logging.getLogger(__name__)


class MaterialService:
    """
    Course material service.

    Pipeline and search engine are built lazily from settings when not
    injected, sharing one index store and one embedding client.
    """

    def __init__(
        self,
        store: MaterialIndexStore | None = None,
        pipeline: IngestionPipeline | None = None,
        search_engine: SearchEngine | None = None,
        embedding_client: EmbeddingClient | None = None,
        citation_builder: CitationBuilder | None = None,
    ) -> None:
        """
        Initialize material service.

        Args:
            store: Index store (factory default if None)
            pipeline: Ingestion pipeline (created if None)
            search_engine: Search engine (created if None)
            embedding_client: Shared embedding client (created if None)
            citation_builder: Context builder (created if None)
        """
        self._store = store
        self._pipeline = pipeline
        self._search_engine = search_engine
        self._embedding_client = embedding_client
        self.citations = citation_builder or CitationBuilder()

    @property
    def store(self) -> MaterialIndexStore:
        """Lazy-load index store to avoid initialization cost."""
        if self._store is None:
            self._store = get_index_store()
        return self._store

    @property
    def embedding_client(self) -> EmbeddingClient:
        if self._embedding_client is None:
            self._embedding_client = EmbeddingClient.from_settings(get_settings())
        return self._embedding_client

    @property
    def pipeline(self) -> IngestionPipeline:
        """Lazy-load pipeline to avoid initialization cost."""
        if self._pipeline is None:
            self._pipeline = IngestionPipeline.from_settings(
                get_settings(), store=self.store, embedding_client=self.embedding_client
            )
        return self._pipeline

    @property
    def search_engine(self) -> SearchEngine:
        if self._search_engine is None:
            self._search_engine = SearchEngine(
                self.store, self.embedding_client, get_settings().search
            )
        return self._search_engine

    async def upload_materials(
        self,
        course_id: uuid.UUID,
        files: Sequence[tuple[str, str, bytes]],
        file_paths: Sequence[str | None] | None = None,
    ) -> list[IngestionResult]:
        """
        Ingest uploaded files for a course.

        Args:
            course_id: Owning course
            files: (file_name, mime_type, data) per file
            file_paths: Optional storage path per file

        Returns:
            list[IngestionResult]: One result per file, in order

        Raises:
            ValidationError: file_paths length does not match files
        """
        if file_paths is not None and len(file_paths) != len(files):
            raise ValidationError("file_paths must match files", field="file_paths")

        uploads = [
            MaterialUpload(
                course_id=course_id,
                file_name=file_name,
                mime_type=mime_type,
                data=data,
                file_path=file_paths[i] if file_paths is not None else None,
            )
            for i, (file_name, mime_type, data) in enumerate(files)
        ]
        logger.info(
            f"{__name__}:upload_materials - Ingesting {len(uploads)} files",
            extra={"course_id": str(course_id), "file_count": len(uploads)},
        )
        return await self.pipeline.ingest_many(uploads)

    async def retry_failed(self, material_id: uuid.UUID) -> IngestionResult:
        """Re-embed a material from its stored extraction."""
        return await self.pipeline.reembed_material(material_id)

    async def delete_material(self, material_id: uuid.UUID) -> None:
        """
        Delete a material and everything indexed for it.

        Raises:
            MaterialNotFoundError: Unknown material
        """
        if not await self.store.delete_material(material_id):
            raise MaterialNotFoundError(str(material_id))
        logger.info(
            f"{__name__}:delete_material - Deleted material",
            extra={"material_id": str(material_id)},
        )

    async def get_course_stats(self, course_id: uuid.UUID) -> MaterialStats:
        return await self.store.course_stats(course_id)

    async def search(
        self,
        course_id: uuid.UUID,
        query: str,
        top_k: int | None = None,
        min_similarity: float | None = None,
        high_precision: bool = False,
        include_metadata: bool = True,
    ) -> list[SearchResult]:
        """Course search; ``high_precision`` switches to the stricter floor."""
        if high_precision:
            return await self.search_engine.high_precision_search(
                course_id, query, top_k=top_k, include_metadata=include_metadata
            )
        return await self.search_engine.search(
            course_id,
            query,
            top_k=top_k,
            min_similarity=min_similarity,
            include_metadata=include_metadata,
        )

    async def find_similar(
        self,
        course_id: uuid.UUID,
        material_id: uuid.UUID,
        chunk_id: str,
        limit: int | None = None,
    ) -> list[SearchResult]:
        return await self.search_engine.find_similar_chunks(
            course_id, material_id, chunk_id, limit=limit
        )

    async def build_context(
        self,
        course_id: uuid.UUID,
        query: str,
        top_k: int | None = None,
        max_chars: int | None = None,
    ) -> str:
        """Search and render the numbered source context for the answer generator."""
        results = await self.search(course_id, query, top_k=top_k)
        return self.citations.build_context(results, max_chars=max_chars)
