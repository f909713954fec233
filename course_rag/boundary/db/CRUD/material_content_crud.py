"""
Material content snapshot CRUD operations.

Dependencies: sqlalchemy, course_rag.boundary.db.models
System role: Extraction snapshot persistence operations
"""

from uuid import UUID

from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from course_rag.boundary.db.base import utc_now
from course_rag.boundary.db.CRUD.base_crud import BaseCRUD
from course_rag.boundary.db.models import MaterialContentModel


class MaterialContentCRUD(BaseCRUD[MaterialContentModel]):
    """CRUD operations for MaterialContentModel (one row per material)."""

    def __init__(self) -> None:
        super().__init__(MaterialContentModel, key_column="material_id")

    async def get_by_material_id(
        self,
        session: AsyncSession,
        material_id: UUID,
    ) -> MaterialContentModel | None:
        return await self.get_by_id(session, material_id)

    async def upsert(
        self,
        session: AsyncSession,
        material_id: UUID,
        content_text: str,
        content_chunks: list[dict],
        content_metadata: dict,
    ) -> None:
        """
        Insert or replace the snapshot of a material.

        Args:
            session: Async database session
            material_id: Material UUID
            content_text: Full extracted text
            content_chunks: Serialized chunk list
            content_metadata: Extraction metadata (method, counts, error)
        """
        stmt = insert(MaterialContentModel.__table__).values({
            "material_id": material_id,
            "content_text": content_text,
            "content_chunks": content_chunks,
            "metadata": content_metadata,
        })
        stmt = stmt.on_conflict_do_update(
            index_elements=["material_id"],
            set_={
                "content_text": stmt.excluded["content_text"],
                "content_chunks": stmt.excluded["content_chunks"],
                "metadata": stmt.excluded["metadata"],
                "updated_at": utc_now(),
            },
        )
        await session.execute(stmt)


material_content_crud = MaterialContentCRUD()
