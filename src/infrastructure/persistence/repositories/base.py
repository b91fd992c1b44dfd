from abc import ABC
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import object_session

from src.infrastructure.persistence.database import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(ABC, Generic[ModelType]):
    """
    Base repository implementing common CRUD operations (LSP).

    Bulk helpers (update_by_id, delete_by_id) return the affected row count
    so lifecycle steps can tell a no-op from a mutation.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]):
        self.db = db
        self.model = model

    async def get_by_id(self, id: int) -> ModelType | None:
        """Get a single record by ID"""
        # Cast to Any for SQLAlchemy dynamic attribute access (id comes from SerialIdMixin)
        model: Any = self.model
        result = await self.db.execute(select(self.model).where(model.id == id))
        return result.scalar_one_or_none()

    async def get_all(self, skip: int = 0, limit: int = 100) -> list[ModelType]:
        """Get all records with pagination"""
        model: Any = self.model
        result = await self.db.execute(
            select(self.model).order_by(model.id).offset(skip).limit(limit)
        )
        return list(result.scalars().all())

    async def list_ids(self) -> list[int]:
        """All primary keys in ascending order"""
        model: Any = self.model
        result = await self.db.execute(select(model.id).order_by(model.id))
        return list(result.scalars().all())

    async def exists(self, id: int) -> bool:
        model: Any = self.model
        result = await self.db.execute(
            select(func.count()).select_from(self.model).where(model.id == id)
        )
        return result.scalar_one() > 0

    async def create(self, obj: ModelType) -> ModelType:
        """Insert a record and return it refreshed (server defaults loaded)"""
        self.db.add(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """
        Flush changes to an existing record and return it refreshed.

        Handles potentially detached objects by merging back to session.
        """
        # Merge object back to session if detached
        if object_session(obj) is None:
            obj = await self.db.merge(obj)
        await self.db.flush()
        await self.db.refresh(obj)
        return obj

    async def update_by_id(
        self, id: int, values: dict[str, Any], expected_version: int | None = None
    ) -> int:
        """
        Update one row without loading it.

        With expected_version the update only applies if the row still has
        that version, and the version is bumped (optimistic locking).
        """
        model: Any = self.model
        stmt = update(self.model).where(model.id == id)
        if expected_version is not None:
            stmt = stmt.where(model.version == expected_version)
            values = {**values, "version": expected_version + 1}
        result = await self.db.execute(
            stmt.values(**values).execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_by_id(self, id: int, expected_version: int | None = None) -> int:
        """Delete one row without loading it (see update_by_id for expected_version)"""
        model: Any = self.model
        stmt = delete(self.model).where(model.id == id)
        if expected_version is not None:
            stmt = stmt.where(model.version == expected_version)
        result = await self.db.execute(stmt.execution_options(synchronize_session=False))
        return result.rowcount
