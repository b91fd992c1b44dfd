from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.hunting_guide import (
    GuideHunterAssociation, HuntingGuide)
from src.infrastructure.persistence.repositories.base import BaseRepository


class HuntingGuideRepository(BaseRepository[HuntingGuide]):
    """Repository for HuntingGuide and guide-hunter associations"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, HuntingGuide)

    async def unlink_user(self, user_id: int) -> int:
        """Clear user_id on guides linked to the account"""
        result = await self.db.execute(
            update(HuntingGuide)
            .where(HuntingGuide.user_id == user_id)
            .values(user_id=None)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # Associations
    async def get_associations(self, guide_id: int) -> list[GuideHunterAssociation]:
        result = await self.db.execute(
            select(GuideHunterAssociation)
            .where(GuideHunterAssociation.guide_id == guide_id)
            .order_by(GuideHunterAssociation.id)
        )
        return list(result.scalars().all())

    async def get_association(self, guide_id: int, hunter_id: int) -> GuideHunterAssociation | None:
        result = await self.db.execute(
            select(GuideHunterAssociation).where(
                GuideHunterAssociation.guide_id == guide_id,
                GuideHunterAssociation.hunter_id == hunter_id,
            )
        )
        return result.scalar_one_or_none()

    async def add_association(self, guide_id: int, hunter_id: int) -> GuideHunterAssociation:
        association = GuideHunterAssociation(guide_id=guide_id, hunter_id=hunter_id)
        self.db.add(association)
        await self.db.flush()
        await self.db.refresh(association)
        return association

    async def remove_association(self, guide_id: int, hunter_id: int) -> int:
        result = await self.db.execute(
            delete(GuideHunterAssociation)
            .where(
                GuideHunterAssociation.guide_id == guide_id,
                GuideHunterAssociation.hunter_id == hunter_id,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_associations_by_guide(self, guide_id: int) -> int:
        result = await self.db.execute(
            delete(GuideHunterAssociation)
            .where(GuideHunterAssociation.guide_id == guide_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_associations_by_hunter(self, hunter_id: int) -> int:
        result = await self.db.execute(
            delete(GuideHunterAssociation)
            .where(GuideHunterAssociation.hunter_id == hunter_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
