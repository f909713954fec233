"""
Material ingestion pipeline orchestrator.

Coordinates extraction, chunking, embedding and indexing of uploaded course
files and keeps each material's status in the index store current.

Dependencies: extraction, chunker, embeddings, index writer, index store
System role: Pipeline orchestration (coordinates only)
"""

import asyncio
import logging
import time
import uuid
from collections.abc import Sequence

from course_rag.boundary.db.models.material_model import MaterialStatus
from course_rag.boundary.vdb.base_store import MaterialIndexStore
from course_rag.boundary.vdb.vector_schemas import MaterialContent, MaterialRecord
from course_rag.core.document_processing.chunker import Chunker
from course_rag.core.document_processing.extraction import Extractor
from course_rag.core.document_processing.index_writer import IndexWriter
from course_rag.core.document_processing.models import (
    Chunk,
    ExtractedDocument,
    IngestionResult,
    IngestionStage,
    MaterialUpload,
)
from course_rag.core.embeddings.client import EmbeddingClient
from course_rag.core.exceptions import (
    DocumentProcessingError,
    MaterialNotFoundError,
    VectorStoreError,
)
from course_rag.observability.log_utils import elapsed_ms, log_exception_with_context

logger = logging.getLogger(__name__)


def _error_text(error: BaseException) -> str:
    return getattr(error, "message", None) or f"{type(error).__name__}: {error}"


class IngestionPipeline:
    """Orchestrate ingestion: extract -> chunk -> snapshot -> embed -> index."""

    def __init__(
        self,
        store: MaterialIndexStore,
        embedding_client: EmbeddingClient,
        extractor: Extractor | None = None,
        chunker: Chunker | None = None,
        index_writer: IndexWriter | None = None,
    ) -> None:
        """
        Initialize pipeline.

        Args:
            store: Index store for materials, snapshots and chunks
            embedding_client: Client used for chunk embeddings
            extractor: Text extractor (default handlers if None)
            chunker: Chunker (default parameters if None)
            index_writer: Writer bound to ``store`` (created if None)
        """
        self._store = store
        self._embeddings = embedding_client
        self._extractor = extractor or Extractor()
        self._chunker = chunker or Chunker()
        self._writer = index_writer or IndexWriter(store, dimension=embedding_client.dimension)

    @classmethod
    def from_settings(
        cls,
        settings,
        store: MaterialIndexStore,
        embedding_client: EmbeddingClient | None = None,
    ) -> "IngestionPipeline":
        """Build a pipeline from the aggregated Settings."""
        client = embedding_client or EmbeddingClient.from_settings(settings)
        return cls(
            store=store,
            embedding_client=client,
            extractor=Extractor.from_settings(settings),
            chunker=Chunker.from_settings(settings.chunking),
        )

    async def _prepare(self, upload: MaterialUpload) -> tuple[ExtractedDocument, list[Chunk]]:
        """Register the material, extract, chunk and store the snapshot."""
        await self._store.upsert_material(
            MaterialRecord(
                material_id=upload.material_id,
                course_id=upload.course_id,
                file_name=upload.file_name,
                file_path=upload.file_path,
                file_type=upload.mime_type,
                file_size=upload.size_bytes,
                status=MaterialStatus.PROCESSING,
            )
        )

        document = await self._extractor.extract(upload.data, upload.file_name, upload.mime_type)
        chunks = [] if document.failed else self._chunker.chunk_document(document)

        await self._store.save_content(
            MaterialContent(
                material_id=upload.material_id,
                content_text=document.text,
                content_chunks=[chunk.model_dump() for chunk in chunks],
                metadata={**document.metadata(), "chunk_count": len(chunks)},
            )
        )
        return document, chunks

    async def _embed_and_index(
        self,
        material_id: uuid.UUID,
        file_name: str,
        chunks: list[Chunk],
        extraction_method: str | None,
        start: float,
    ) -> IngestionResult:
        """Embed chunk texts and write them; record the outcome on the material."""
        if not chunks:
            await self._writer.write(material_id, [], [])
            await self._store.update_material_status(material_id, MaterialStatus.COMPLETED)
            logger.info(
                f"{__name__}:ingest - No text to index",
                extra={"material_id": str(material_id), "file_name": file_name},
            )
            return IngestionResult(
                material_id=material_id,
                file_name=file_name,
                success=True,
                chunk_count=0,
                extraction_method=extraction_method,
                stage=IngestionStage.COMPLETED,
                processing_time_ms=elapsed_ms(start),
            )

        try:
            vectors = await self._embeddings.embed_batch([chunk.text for chunk in chunks])
        except Exception as e:
            log_exception_with_context(
                logger,
                f"{__name__}:ingest - Embedding failed, text kept for retry",
                e,
                material_id=str(material_id),
                chunk_count=len(chunks),
            )
            await self._writer.write(material_id, [], [])
            await self._store.update_material_status(
                material_id, MaterialStatus.FAILED, f"Embedding failed: {_error_text(e)}"
            )
            return IngestionResult(
                material_id=material_id,
                file_name=file_name,
                success=False,
                chunk_count=len(chunks),
                extraction_method=extraction_method,
                stage=IngestionStage.EMBEDDING,
                error=_error_text(e),
                processing_time_ms=elapsed_ms(start),
            )

        written = await self._writer.write(material_id, chunks, vectors)
        await self._store.update_material_status(material_id, MaterialStatus.COMPLETED)
        logger.info(
            f"{__name__}:ingest - Indexed material",
            extra={
                "material_id": str(material_id),
                "file_name": file_name,
                "chunk_count": written,
                "duration_ms": elapsed_ms(start),
            },
        )
        return IngestionResult(
            material_id=material_id,
            file_name=file_name,
            success=True,
            chunk_count=written,
            extraction_method=extraction_method,
            stage=IngestionStage.COMPLETED,
            processing_time_ms=elapsed_ms(start),
        )

    async def _finish(
        self,
        upload: MaterialUpload,
        document: ExtractedDocument,
        chunks: list[Chunk],
        start: float,
    ) -> IngestionResult:
        method = document.extraction_method.value
        if document.failed:
            await self._writer.write(upload.material_id, [], [])
            await self._store.update_material_status(
                upload.material_id, MaterialStatus.FAILED, document.error
            )
            logger.warning(
                f"{__name__}:ingest - Extraction failed: {document.error}",
                extra={"material_id": str(upload.material_id), "file_name": upload.file_name},
            )
            return IngestionResult(
                material_id=upload.material_id,
                file_name=upload.file_name,
                success=False,
                extraction_method=method,
                stage=IngestionStage.EXTRACTION,
                error=document.error,
                processing_time_ms=elapsed_ms(start),
            )
        return await self._embed_and_index(
            upload.material_id, upload.file_name, chunks, method, start
        )

    def _store_failure(
        self,
        upload: MaterialUpload,
        error: VectorStoreError,
        stage: IngestionStage,
        start: float,
    ) -> IngestionResult:
        log_exception_with_context(
            logger,
            f"{__name__}:ingest - Index store failure",
            error,
            material_id=str(upload.material_id),
            stage=stage.value,
        )
        return IngestionResult(
            material_id=upload.material_id,
            file_name=upload.file_name,
            success=False,
            stage=stage,
            error=_error_text(error),
            processing_time_ms=elapsed_ms(start),
        )

    async def ingest(self, upload: MaterialUpload) -> IngestionResult:
        """
        Ingest one uploaded file.

        Args:
            upload: File bytes with course and material identifiers

        Returns:
            IngestionResult: Per-file outcome; failures are reported, not raised
        """
        start = time.perf_counter()
        try:
            document, chunks = await self._prepare(upload)
        except VectorStoreError as e:
            return self._store_failure(upload, e, IngestionStage.EXTRACTION, start)
        try:
            return await self._finish(upload, document, chunks, start)
        except VectorStoreError as e:
            return self._store_failure(upload, e, IngestionStage.INDEXING, start)

    async def ingest_many(self, uploads: Sequence[MaterialUpload]) -> list[IngestionResult]:
        """
        Ingest several files.

        Extraction and chunking run concurrently; embedding runs one material
        after another so the provider sees a single rate-limited stream.
        Results are returned in upload order.
        """
        starts = [time.perf_counter() for _ in uploads]
        prepared = await asyncio.gather(
            *(self._prepare(upload) for upload in uploads),
            return_exceptions=True,
        )

        results: list[IngestionResult] = []
        for upload, outcome, start in zip(uploads, prepared, starts):
            if isinstance(outcome, VectorStoreError):
                results.append(self._store_failure(upload, outcome, IngestionStage.EXTRACTION, start))
                continue
            if isinstance(outcome, BaseException):
                raise outcome
            document, chunks = outcome
            try:
                results.append(await self._finish(upload, document, chunks, start))
            except VectorStoreError as e:
                results.append(self._store_failure(upload, e, IngestionStage.INDEXING, start))

        succeeded = sum(1 for r in results if r.success)
        logger.info(
            f"{__name__}:ingest_many - Ingested {succeeded}/{len(results)} materials",
            extra={"material_count": len(results), "succeeded": succeeded},
        )
        return results

    async def reembed_material(self, material_id: uuid.UUID) -> IngestionResult:
        """
        Re-run embedding and indexing from the stored snapshot.

        Raises:
            MaterialNotFoundError: Unknown material
            DocumentProcessingError: No usable snapshot is stored
        """
        start = time.perf_counter()
        record = await self._store.get_material(material_id)
        if record is None:
            raise MaterialNotFoundError(str(material_id))

        content = await self._store.get_content(material_id)
        if content is None:
            raise DocumentProcessingError(
                "No extracted content stored for material",
                material_id=str(material_id),
            )
        if content.metadata.get("error"):
            raise DocumentProcessingError(
                "Stored extraction failed; the file must be uploaded again",
                material_id=str(material_id),
                details={"extraction_error": content.metadata["error"]},
            )

        chunks = [Chunk.model_validate(chunk) for chunk in content.content_chunks]
        await self._store.update_material_status(material_id, MaterialStatus.PROCESSING)
        return await self._embed_and_index(
            material_id,
            record.file_name,
            chunks,
            content.metadata.get("extraction_method"),
            start,
        )
