from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.models.hunter import Hunter
from src.infrastructure.persistence.repositories.base import BaseRepository


class HunterRepository(BaseRepository[Hunter]):
    """Repository for Hunter operations (SRP - data access only)"""

    def __init__(self, db: AsyncSession):
        super().__init__(db, Hunter)

    async def set_active(self, hunter_id: int, is_active: bool, expected_version: int) -> int:
        """Flip the is_active flag if the hunter still has the expected version"""
        return await self.update_by_id(
            hunter_id, {"is_active": is_active}, expected_version=expected_version
        )
