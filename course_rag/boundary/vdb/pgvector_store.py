"""
PostgreSQL + pgvector index store.

Each operation runs in its own transaction through the async session
factory. Database errors surface as VectorStoreError.

Dependencies: sqlalchemy, asyncpg, pgvector, course_rag.boundary.db
System role: Production index store
"""

import logging
import time
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from course_rag.boundary.db.connection import (
    get_async_engine,
    get_async_session_factory,
    session_scope,
)
from course_rag.boundary.db.CRUD import (
    chunk_embedding_crud,
    material_content_crud,
    material_crud,
)
from course_rag.boundary.db.models import CourseMaterialModel, MaterialStatus
from course_rag.boundary.vdb.base_store import MaterialIndexStore
from course_rag.boundary.vdb.vector_schemas import (
    ChunkRow,
    MaterialContent,
    MaterialRecord,
    MaterialStats,
    SearchResult,
    VectorQuery,
)
from course_rag.core.exceptions import MaterialNotFoundError, VectorStoreError
from course_rag.core.retrieval.similarity import clamp_similarity, coerce_vector
from course_rag.observability.log_utils import elapsed_ms

logger = logging.getLogger(__name__)


def _to_record(model: CourseMaterialModel) -> MaterialRecord:
    return MaterialRecord(
        material_id=model.id,
        course_id=model.course_id,
        file_name=model.file_name,
        file_path=model.file_path,
        file_type=model.file_type,
        file_size=model.file_size,
        uploaded_at=model.uploaded_at,
        status=model.status,
        error_message=model.error_message,
    )


class PgVectorIndexStore(MaterialIndexStore):
    """MaterialIndexStore backed by PostgreSQL with the pgvector extension."""

    def __init__(
        self,
        session_factory: async_sessionmaker | None = None,
        engine: AsyncEngine | None = None,
    ) -> None:
        """
        Initialize store.

        Args:
            session_factory: Async session factory (built from settings if omitted)
            engine: Engine to bind a new factory to
        """
        if session_factory is None:
            engine = engine or get_async_engine()
            session_factory = get_async_session_factory(engine)
        self._engine = engine
        self._session_factory = session_factory

    def _wrap(self, operation: str, error: SQLAlchemyError) -> VectorStoreError:
        logger.error(
            f"{__name__}:{operation} - Database error: {type(error).__name__}",
            extra={"operation": operation, "error_type": type(error).__name__},
        )
        return VectorStoreError(
            message=f"Index store operation failed: {operation}",
            operation=operation,
            details={"error": str(error)},
        )

    async def upsert_material(self, record: MaterialRecord) -> MaterialRecord:
        try:
            async with session_scope(self._session_factory) as session:
                existing = await material_crud.get_by_id(session, record.material_id)
                if existing is None:
                    model = await material_crud.create(
                        session,
                        id=record.material_id,
                        course_id=record.course_id,
                        file_name=record.file_name,
                        file_path=record.file_path,
                        file_type=record.file_type,
                        file_size=record.file_size,
                        uploaded_at=record.uploaded_at,
                        status=record.status,
                        error_message=record.error_message,
                    )
                else:
                    model = await material_crud.update_status(
                        session, record.material_id, record.status, record.error_message
                    )
                return _to_record(model)
        except SQLAlchemyError as e:
            raise self._wrap("upsert_material", e) from e

    async def get_material(self, material_id: uuid.UUID) -> MaterialRecord | None:
        try:
            async with session_scope(self._session_factory) as session:
                model = await material_crud.get_by_id(session, material_id)
                return _to_record(model) if model is not None else None
        except SQLAlchemyError as e:
            raise self._wrap("get_material", e) from e

    async def list_materials(self, course_id: uuid.UUID) -> list[MaterialRecord]:
        try:
            async with session_scope(self._session_factory) as session:
                models = await material_crud.get_by_course_id(session, course_id)
                return [_to_record(m) for m in models]
        except SQLAlchemyError as e:
            raise self._wrap("list_materials", e) from e

    async def update_material_status(
        self,
        material_id: uuid.UUID,
        status: MaterialStatus,
        error_message: str | None = None,
    ) -> None:
        try:
            async with session_scope(self._session_factory) as session:
                model = await material_crud.update_status(session, material_id, status, error_message)
        except SQLAlchemyError as e:
            raise self._wrap("update_material_status", e) from e
        if model is None:
            raise MaterialNotFoundError(str(material_id))

    async def save_content(self, content: MaterialContent) -> None:
        try:
            async with session_scope(self._session_factory) as session:
                await material_content_crud.upsert(
                    session,
                    material_id=content.material_id,
                    content_text=content.content_text,
                    content_chunks=content.content_chunks,
                    content_metadata=content.metadata,
                )
        except SQLAlchemyError as e:
            raise self._wrap("save_content", e) from e

    async def get_content(self, material_id: uuid.UUID) -> MaterialContent | None:
        try:
            async with session_scope(self._session_factory) as session:
                model = await material_content_crud.get_by_material_id(session, material_id)
        except SQLAlchemyError as e:
            raise self._wrap("get_content", e) from e
        if model is None:
            return None
        return MaterialContent(
            material_id=model.material_id,
            content_text=model.content_text,
            content_chunks=model.content_chunks or [],
            metadata=model.content_metadata or {},
        )

    async def replace_material_chunks(self, material_id: uuid.UUID, rows: list[ChunkRow]) -> int:
        start = time.perf_counter()
        try:
            async with session_scope(self._session_factory) as session:
                written = await chunk_embedding_crud.replace_for_material(
                    session,
                    material_id,
                    [row.model_dump() for row in rows],
                )
        except SQLAlchemyError as e:
            raise self._wrap("replace_material_chunks", e) from e

        logger.info(
            f"{__name__}:replace_material_chunks - Wrote {written} chunk rows",
            extra={"material_id": str(material_id), "rows": written, "duration_ms": elapsed_ms(start)},
        )
        return written

    async def get_chunk_vector(self, material_id: uuid.UUID, chunk_id: str) -> list[float] | None:
        try:
            async with session_scope(self._session_factory) as session:
                model = await chunk_embedding_crud.get_chunk(session, material_id, chunk_id)
                return coerce_vector(model.embedding) if model is not None else None
        except SQLAlchemyError as e:
            raise self._wrap("get_chunk_vector", e) from e

    async def count_chunks(self, material_id: uuid.UUID) -> int:
        try:
            async with session_scope(self._session_factory) as session:
                return await chunk_embedding_crud.count_for_material(session, material_id)
        except SQLAlchemyError as e:
            raise self._wrap("count_chunks", e) from e

    async def search(self, query: VectorQuery) -> list[SearchResult]:
        try:
            async with session_scope(self._session_factory) as session:
                rows = await chunk_embedding_crud.similarity_search(
                    session,
                    query_vector=query.embedding,
                    min_similarity=query.min_similarity,
                    top_k=query.top_k,
                    course_id=query.course_id,
                    material_ids=query.material_ids,
                    exclude=query.exclude,
                )
        except SQLAlchemyError as e:
            raise self._wrap("search", e) from e

        return [
            SearchResult(
                material_id=material.id,
                course_id=material.course_id,
                file_name=material.file_name,
                file_path=material.file_path,
                file_type=material.file_type,
                uploaded_at=material.uploaded_at,
                chunk_id=chunk.chunk_id,
                chunk_index=chunk.chunk_index,
                chunk_text=chunk.chunk_text,
                page_number=chunk.page_number,
                similarity=clamp_similarity(similarity),
                metadata=dict(chunk.chunk_metadata or {}),
            )
            for chunk, material, similarity in rows
        ]

    async def delete_material(self, material_id: uuid.UUID) -> bool:
        try:
            async with session_scope(self._session_factory) as session:
                return await material_crud.delete_by_id(session, material_id)
        except SQLAlchemyError as e:
            raise self._wrap("delete_material", e) from e

    async def course_stats(self, course_id: uuid.UUID) -> MaterialStats:
        try:
            async with session_scope(self._session_factory) as session:
                totals = await material_crud.course_stats(session, course_id)
        except SQLAlchemyError as e:
            raise self._wrap("course_stats", e) from e
        return MaterialStats(course_id=course_id, **totals)

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()
