from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.tax import Tax
from src.infrastructure.persistence.repositories.base import BaseRepository


class TaxRepository(BaseRepository[Tax]):
    """Repository for Tax operations (SRP - data access only)"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Tax)

    async def get_by_hunter(self, hunter_id: int) -> list[Tax]:
        result = await self.db.execute(select(Tax).where(Tax.hunter_id == hunter_id).order_by(Tax.id))
        return list(result.scalars().all())

    async def count_by_permit(self, permit_id: int) -> int:
        result = await self.db.execute(
            select(func.count()).select_from(Tax).where(Tax.permit_id == permit_id)
        )
        return result.scalar_one()

    async def delete_by_hunter(self, hunter_id: int) -> int:
        result = await self.db.execute(
            delete(Tax).where(Tax.hunter_id == hunter_id).execution_options(synchronize_session=False)
        )
        return result.rowcount
