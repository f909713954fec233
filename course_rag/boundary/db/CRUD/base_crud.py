"""
Base CRUD operations for the material tables.

Rows are addressed through a single key column: the primary key for
materials, ``material_id`` for the one-per-material content snapshot.

Dependencies: sqlalchemy
System role: Foundation for material and snapshot CRUD operations
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from course_rag.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Keyed create/read/update/delete for one material table.

    Methods flush but never commit; the index store's session scope owns
    the transaction.

    Attributes:
        model: ORM class of the table
        key_column: Name of the UUID column rows are addressed by
    """

    def __init__(self, model: type[ModelT], key_column: str = "id") -> None:
        self.model = model
        self.key_column = key_column

    @property
    def _key(self) -> Any:
        return getattr(self.model, self.key_column)

    async def create(self, session: AsyncSession, **values) -> ModelT:
        """
        Insert a row and load its server-side defaults.

        Args:
            session: Async database session
            **values: Column values

        Returns:
            The flushed model instance
        """
        row = self.model(**values)
        session.add(row)
        await session.flush()
        await session.refresh(row)
        return row

    async def get_by_id(self, session: AsyncSession, key: UUID) -> ModelT | None:
        result = await session.execute(select(self.model).where(self._key == key))
        return result.scalar_one_or_none()

    async def update_by_id(self, session: AsyncSession, key: UUID, **values) -> ModelT | None:
        """Apply column values to the keyed row; None when no row matched."""
        stmt = (
            update(self.model)
            .where(self._key == key)
            .values(**values)
            .returning(self.model)
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_by_id(self, session: AsyncSession, key: UUID) -> bool:
        """Delete the keyed row. Dependent rows go with it through ON DELETE CASCADE."""
        result = await session.execute(delete(self.model).where(self._key == key))
        return result.rowcount > 0
