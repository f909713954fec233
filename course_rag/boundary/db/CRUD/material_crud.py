"""
Course material CRUD operations.

Adds course filtering, status tracking and per-course statistics to the
generic CRUD.

Dependencies: sqlalchemy, course_rag.boundary.db.models
System role: Material persistence operations
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import and_, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from course_rag.boundary.db.CRUD.base_crud import BaseCRUD
from course_rag.boundary.db.models import (
    CourseMaterialModel,
    MaterialChunkEmbeddingModel,
    MaterialContentModel,
    MaterialStatus,
)


class MaterialCRUD(BaseCRUD[CourseMaterialModel]):
    """CRUD operations for CourseMaterialModel."""

    def __init__(self) -> None:
        super().__init__(CourseMaterialModel)

    async def get_by_course_id(
        self,
        session: AsyncSession,
        course_id: UUID,
    ) -> Sequence[CourseMaterialModel]:
        """
        Retrieve all materials of a course, oldest upload first.

        Args:
            session: Async database session
            course_id: Course UUID

        Returns:
            Sequence of CourseMaterialModels belonging to the course
        """
        stmt = (
            select(CourseMaterialModel)
            .where(CourseMaterialModel.course_id == course_id)
            .order_by(CourseMaterialModel.uploaded_at)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def update_status(
        self,
        session: AsyncSession,
        material_id: UUID,
        status: MaterialStatus,
        error_message: str | None = None,
    ) -> CourseMaterialModel | None:
        """
        Update indexing status.

        The error message is cleared unless the new status is FAILED.

        Args:
            session: Async database session
            material_id: Material UUID
            status: New indexing status
            error_message: Error details when status is FAILED

        Returns:
            Updated CourseMaterialModel if found, None otherwise
        """
        error = error_message if status is MaterialStatus.FAILED else None
        return await self.update_by_id(session, material_id, status=status, error_message=error)

    async def course_stats(self, session: AsyncSession, course_id: UUID) -> dict[str, int]:
        """
        Totals for a course.

        Returns:
            dict with total_materials, materials_with_content,
            materials_without_content, failed_materials, total_chunks
        """
        has_text = and_(
            MaterialContentModel.id.is_not(None),
            func.length(MaterialContentModel.content_text) > 0,
        )
        materials_stmt = (
            select(
                func.count(CourseMaterialModel.id),
                func.count(MaterialContentModel.id).filter(has_text),
                func.count(CourseMaterialModel.id).filter(
                    CourseMaterialModel.status == MaterialStatus.FAILED
                ),
            )
            .select_from(CourseMaterialModel)
            .outerjoin(
                MaterialContentModel,
                MaterialContentModel.material_id == CourseMaterialModel.id,
            )
            .where(CourseMaterialModel.course_id == course_id)
        )
        total, with_content, failed = (await session.execute(materials_stmt)).one()

        chunks_stmt = (
            select(func.count(MaterialChunkEmbeddingModel.id))
            .join(
                CourseMaterialModel,
                CourseMaterialModel.id == MaterialChunkEmbeddingModel.material_id,
            )
            .where(CourseMaterialModel.course_id == course_id)
        )
        total_chunks = (await session.execute(chunks_stmt)).scalar_one()

        return {
            "total_materials": total or 0,
            "materials_with_content": with_content or 0,
            "materials_without_content": (total or 0) - (with_content or 0),
            "failed_materials": failed or 0,
            "total_chunks": total_chunks or 0,
        }


material_crud = MaterialCRUD()
