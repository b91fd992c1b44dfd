from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.permit_request import PermitRequest
from src.infrastructure.persistence.repositories.base import BaseRepository


class PermitRequestRepository(BaseRepository[PermitRequest]):
    """Repository for PermitRequest operations"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, PermitRequest)

    async def delete_by_hunter(self, hunter_id: int) -> int:
        result = await self.db.execute(
            delete(PermitRequest)
            .where(PermitRequest.hunter_id == hunter_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_by_user(self, user_id: int) -> int:
        result = await self.db.execute(
            delete(PermitRequest)
            .where(PermitRequest.user_id == user_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
