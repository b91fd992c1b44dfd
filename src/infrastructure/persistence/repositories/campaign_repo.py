from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.hunting_campaign import \
    HuntingCampaign
from src.infrastructure.persistence.repositories.base import BaseRepository


class CampaignRepository(BaseRepository[HuntingCampaign]):
    """Repository for hunting campaign settings"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, HuntingCampaign)

    async def get_current(self) -> HuntingCampaign | None:
        """The most recently configured campaign"""
        result = await self.db.execute(
            select(HuntingCampaign).order_by(HuntingCampaign.id.desc()).limit(1)
        )
        return result.scalar_one_or_none()
