from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.history import History
from src.infrastructure.persistence.repositories.base import BaseRepository


class HistoryRepository(BaseRepository[History]):
    """Repository for the operations journal"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, History)

    async def record(
        self,
        operation: str,
        entity_type: str,
        entity_id: int,
        details: str,
        user_id: int | None = None,
    ) -> History:
        return await self.create(
            History(
                operation=operation,
                entity_type=entity_type,
                entity_id=entity_id,
                details=details,
                user_id=user_id,
            )
        )

    async def get_by_entity(self, entity_type: str, entity_id: int) -> list[History]:
        result = await self.db.execute(
            select(History)
            .where(History.entity_type == entity_type, History.entity_id == entity_id)
            .order_by(History.id)
        )
        return list(result.scalars().all())
