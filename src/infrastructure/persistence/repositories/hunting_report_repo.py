from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.hunting_report import (
    HuntedSpecies, HuntingReport)
from src.infrastructure.persistence.repositories.base import BaseRepository


class HuntingReportRepository(BaseRepository[HuntingReport]):
    """Repository for HuntingReport and its species lines"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, HuntingReport)

    async def get_species(self, report_id: int) -> list[HuntedSpecies]:
        result = await self.db.execute(
            select(HuntedSpecies).where(HuntedSpecies.report_id == report_id).order_by(HuntedSpecies.id)
        )
        return list(result.scalars().all())

    async def add_species(self, species: HuntedSpecies) -> HuntedSpecies:
        self.db.add(species)
        await self.db.flush()
        await self.db.refresh(species)
        return species

    async def delete_species_by_hunter(self, hunter_id: int) -> int:
        """Delete species lines of every report filed for the hunter"""
        reports = select(HuntingReport.id).where(HuntingReport.hunter_id == hunter_id)
        result = await self.db.execute(
            delete(HuntedSpecies)
            .where(HuntedSpecies.report_id.in_(reports))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_by_hunter(self, hunter_id: int) -> int:
        result = await self.db.execute(
            delete(HuntingReport)
            .where(HuntingReport.hunter_id == hunter_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
