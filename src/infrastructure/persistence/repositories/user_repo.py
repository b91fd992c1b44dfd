from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.user import User
from src.infrastructure.persistence.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """Repository for User operations (SRP - data access only)"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, User)

    async def detach_hunter(self, hunter_id: int) -> int:
        """Clear hunter_id on every account referencing the hunter"""
        result = await self.db.execute(
            update(User)
            .where(User.hunter_id == hunter_id)
            .values(hunter_id=None)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def clear_hunter_reference(self, user_id: int) -> int:
        """Clear the hunter back-reference of a single account"""
        return await self.update_by_id(user_id, {"hunter_id": None})

    async def set_suspended_for_hunter(self, hunter_id: int, is_suspended: bool) -> int:
        """Suspend or restore every account referencing the hunter"""
        result = await self.db.execute(
            update(User)
            .where(User.hunter_id == hunter_id)
            .values(is_suspended=is_suspended)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
