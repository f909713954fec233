"""
Chunk embedding CRUD operations.

Replacement of a material's chunk rows and pgvector similarity queries.

Dependencies: sqlalchemy, pgvector, course_rag.boundary.db.models
System role: Vector index persistence and search statements
"""

from collections.abc import Sequence
from typing import Any
from uuid import UUID

from sqlalchemy import Row, and_, delete, func, insert, select
from sqlalchemy.ext.asyncio import AsyncSession

from course_rag.boundary.db.models import CourseMaterialModel, MaterialChunkEmbeddingModel


class ChunkEmbeddingCRUD:
    """Statements over course_material_embeddings (integer-keyed, so no BaseCRUD)."""

    model = MaterialChunkEmbeddingModel

    async def replace_for_material(
        self,
        session: AsyncSession,
        material_id: UUID,
        rows: Sequence[dict[str, Any]],
    ) -> int:
        """
        Delete every chunk row of a material, then insert ``rows``.

        Runs inside the caller's transaction so readers never see a mix of
        old and new chunks.

        Args:
            session: Async database session
            material_id: Material UUID
            rows: Column dicts (chunk_id, chunk_index, chunk_text, page_number,
                embedding, metadata)

        Returns:
            int: Number of rows inserted
        """
        await session.execute(
            delete(MaterialChunkEmbeddingModel).where(
                MaterialChunkEmbeddingModel.material_id == material_id
            )
        )
        if rows:
            await session.execute(
                insert(MaterialChunkEmbeddingModel.__table__),
                [{**row, "material_id": material_id} for row in rows],
            )
        return len(rows)

    async def count_for_material(self, session: AsyncSession, material_id: UUID) -> int:
        stmt = select(func.count(MaterialChunkEmbeddingModel.id)).where(
            MaterialChunkEmbeddingModel.material_id == material_id
        )
        return (await session.execute(stmt)).scalar_one()

    async def get_chunk(
        self,
        session: AsyncSession,
        material_id: UUID,
        chunk_id: str,
    ) -> MaterialChunkEmbeddingModel | None:
        stmt = select(MaterialChunkEmbeddingModel).where(
            MaterialChunkEmbeddingModel.material_id == material_id,
            MaterialChunkEmbeddingModel.chunk_id == chunk_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def similarity_search(
        self,
        session: AsyncSession,
        query_vector: Sequence[float],
        min_similarity: float,
        top_k: int,
        course_id: UUID | None = None,
        material_ids: Sequence[UUID] | None = None,
        exclude: tuple[UUID, str] | None = None,
    ) -> Sequence[Row]:
        """
        Rank chunks by cosine similarity to ``query_vector``.

        Similarity is ``1 - (embedding <=> query)``. Rows are ordered by
        distance, then by insertion id.

        Args:
            session: Async database session
            query_vector: Query embedding
            min_similarity: Rows below this similarity are dropped
            top_k: Maximum rows
            course_id: Restrict to one course
            material_ids: Restrict to these materials
            exclude: (material_id, chunk_id) pair left out of the results

        Returns:
            Rows of (MaterialChunkEmbeddingModel, CourseMaterialModel, similarity)
        """
        distance = MaterialChunkEmbeddingModel.embedding.cosine_distance(list(query_vector))
        similarity = (1 - distance).label("similarity")

        stmt = (
            select(MaterialChunkEmbeddingModel, CourseMaterialModel, similarity)
            .join(
                CourseMaterialModel,
                CourseMaterialModel.id == MaterialChunkEmbeddingModel.material_id,
            )
            .where(1 - distance >= min_similarity)
        )
        if course_id is not None:
            stmt = stmt.where(CourseMaterialModel.course_id == course_id)
        if material_ids is not None:
            stmt = stmt.where(MaterialChunkEmbeddingModel.material_id.in_(list(material_ids)))
        if exclude is not None:
            excluded_material, excluded_chunk = exclude
            stmt = stmt.where(
                ~and_(
                    MaterialChunkEmbeddingModel.material_id == excluded_material,
                    MaterialChunkEmbeddingModel.chunk_id == excluded_chunk,
                )
            )

        stmt = stmt.order_by(distance, MaterialChunkEmbeddingModel.id).limit(top_k)
        result = await session.execute(stmt)
        return result.all()


chunk_embedding_crud = ChunkEmbeddingCRUD()
