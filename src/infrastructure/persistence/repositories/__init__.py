from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from src.infrastructure.persistence.repositories.base import BaseRepository
from src.infrastructure.persistence.repositories.campaign_repo import \
    CampaignRepository
from src.infrastructure.persistence.repositories.history_repo import \
    HistoryRepository
from src.infrastructure.persistence.repositories.hunter_repo import \
    HunterRepository
from src.infrastructure.persistence.repositories.hunting_guide_repo import \
    HuntingGuideRepository
from src.infrastructure.persistence.repositories.hunting_report_repo import \
    HuntingReportRepository
from src.infrastructure.persistence.repositories.permit_repo import \
    PermitRepository
from src.infrastructure.persistence.repositories.permit_request_repo import \
    PermitRequestRepository
from src.infrastructure.persistence.repositories.sequence_repo import (
    DEPENDENT_REFERENCES, SEQUENCED_MODELS, SequenceRepository, resolve_table)
from src.infrastructure.persistence.repositories.tax_repo import TaxRepository
from src.infrastructure.persistence.repositories.user_repo import \
    UserRepository


class Repositories:
    """All table repositories bound to one session (one transaction)"""

    def __init__(self, db: AsyncSession):
        self.db = db
        self.hunters = HunterRepository(db)
        self.users = UserRepository(db)
        self.permits = PermitRepository(db)
        self.taxes = TaxRepository(db)
        self.permit_requests = PermitRequestRepository(db)
        self.hunting_reports = HuntingReportRepository(db)
        self.guides = HuntingGuideRepository(db)
        self.campaigns = CampaignRepository(db)
        self.history = HistoryRepository(db)

    @asynccontextmanager
    async def savepoint(self):
        """Nested transaction; rolled back alone if the block raises"""
        async with self.db.begin_nested():
            yield self


__all__ = [
    "BaseRepository",
    "Repositories",
    "HunterRepository",
    "UserRepository",
    "PermitRepository",
    "TaxRepository",
    "PermitRequestRepository",
    "HuntingReportRepository",
    "HuntingGuideRepository",
    "CampaignRepository",
    "HistoryRepository",
    "SequenceRepository",
    "SEQUENCED_MODELS",
    "DEPENDENT_REFERENCES",
    "resolve_table",
]
