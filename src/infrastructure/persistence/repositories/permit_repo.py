from datetime import date

from sqlalchemy import or_, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import PermitStatus
from src.infrastructure.persistence.models.permit import Permit
from src.infrastructure.persistence.repositories.base import BaseRepository


class PermitRepository(BaseRepository[Permit]):
    """Repository for Permit operations (SRP - data access only)"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Permit)

    async def get_by_hunter(self, hunter_id: int) -> list[Permit]:
        result = await self.db.execute(
            select(Permit).where(Permit.hunter_id == hunter_id).order_by(Permit.id)
        )
        return list(result.scalars().all())

    async def get_active_by_hunter(self, hunter_id: int, today: date) -> list[Permit]:
        """Permits that are active and not yet past their expiry date"""
        result = await self.db.execute(
            select(Permit)
            .where(
                Permit.hunter_id == hunter_id,
                Permit.status == PermitStatus.ACTIVE.value,
                Permit.expiry_date >= today,
            )
            .order_by(Permit.id)
        )
        return list(result.scalars().all())

    async def get_expired_by_hunter(self, hunter_id: int, today: date) -> list[Permit]:
        """Permits marked expired or whose expiry date has passed (suspended excluded)"""
        result = await self.db.execute(
            select(Permit)
            .where(
                Permit.hunter_id == hunter_id,
                Permit.status != PermitStatus.SUSPENDED.value,
                or_(
                    Permit.status == PermitStatus.EXPIRED.value,
                    Permit.expiry_date < today,
                ),
            )
            .order_by(Permit.id)
        )
        return list(result.scalars().all())

    async def get_by_status(self, status: PermitStatus) -> list[Permit]:
        result = await self.db.execute(
            select(Permit).where(Permit.status == status.value).order_by(Permit.created_at.desc())
        )
        return list(result.scalars().all())

    async def set_status(self, permit_ids: list[int], status: PermitStatus) -> int:
        """Set the status of several permits at once"""
        if not permit_ids:
            return 0
        result = await self.db.execute(
            update(Permit)
            .where(Permit.id.in_(permit_ids))
            .values(status=status.value)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
