"""
Primary-key sequencing against the live tables.

The table set is closed (SequencedTable); names reaching SQL text are
always quoted through the dialect's identifier preparer.
"""

from sqlalchemy import func, select, text, update
from sqlalchemy.ext.asyncio import AsyncSession

from src.domain.enums import EntityType, SequencedTable
from src.domain.exceptions import UnknownTableException
from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models import (GuideHunterAssociation,
                                                   History, HuntedSpecies,
                                                   Hunter, HuntingCampaign,
                                                   HuntingGuide, HuntingReport,
                                                   Permit, PermitRequest, Tax,
                                                   User)

SEQUENCED_MODELS: dict[SequencedTable, type[Base]] = {
    SequencedTable.USERS: User,
    SequencedTable.HUNTERS: Hunter,
    SequencedTable.PERMITS: Permit,
    SequencedTable.TAXES: Tax,
    SequencedTable.PERMIT_REQUESTS: PermitRequest,
    SequencedTable.HUNTING_REPORTS: HuntingReport,
    SequencedTable.HUNTED_SPECIES: HuntedSpecies,
    SequencedTable.HUNTING_GUIDES: HuntingGuide,
    SequencedTable.GUIDE_HUNTER_ASSOCIATIONS: GuideHunterAssociation,
    SequencedTable.HUNTING_CAMPAIGNS: HuntingCampaign,
    SequencedTable.HISTORY: History,
}

# (model, column) pairs in other tables holding ids of the keyed table
DEPENDENT_REFERENCES: dict[SequencedTable, list[tuple[type[Base], str]]] = {
    SequencedTable.HUNTERS: [
        (User, "hunter_id"),
        (Permit, "hunter_id"),
        (Tax, "hunter_id"),
        (PermitRequest, "hunter_id"),
        (HuntingReport, "hunter_id"),
        (GuideHunterAssociation, "hunter_id"),
    ],
    SequencedTable.PERMITS: [(Tax, "permit_id"), (HuntingReport, "permit_id")],
    SequencedTable.USERS: [
        (PermitRequest, "user_id"),
        (HuntingReport, "user_id"),
        (HuntingGuide, "user_id"),
        (History, "user_id"),
    ],
    SequencedTable.HUNTING_REPORTS: [(HuntedSpecies, "report_id")],
    SequencedTable.HUNTING_GUIDES: [(GuideHunterAssociation, "guide_id")],
}

# entity_type under which the history journal records rows of each table
JOURNAL_ENTITY_TYPES: dict[SequencedTable, str] = {
    SequencedTable.USERS: EntityType.USER.value,
    SequencedTable.HUNTERS: EntityType.HUNTER.value,
    SequencedTable.PERMITS: EntityType.PERMIT.value,
    SequencedTable.TAXES: EntityType.TAX.value,
    SequencedTable.PERMIT_REQUESTS: EntityType.PERMIT_REQUEST.value,
    SequencedTable.HUNTING_REPORTS: EntityType.HUNTING_REPORT.value,
    SequencedTable.HUNTED_SPECIES: EntityType.HUNTED_SPECIES.value,
    SequencedTable.HUNTING_GUIDES: EntityType.HUNTING_GUIDE.value,
    SequencedTable.GUIDE_HUNTER_ASSOCIATIONS: EntityType.GUIDE_ASSOCIATION.value,
    SequencedTable.HUNTING_CAMPAIGNS: "hunting_campaign",
}


def resolve_table(table: SequencedTable | str) -> SequencedTable:
    """Map a table name to the closed enum, rejecting anything else"""
    if isinstance(table, SequencedTable):
        return table
    try:
        return SequencedTable(table)
    except ValueError:
        raise UnknownTableException(str(table)) from None


class SequenceRepository:
    """Reads and rewrites the integer ids of one sequenced table"""

    def __init__(self, db: AsyncSession, table: SequencedTable):
        self.db = db
        self.table = table
        self.model = SEQUENCED_MODELS[table]

    @property
    def is_postgresql(self) -> bool:
        return self.db.bind.dialect.name == "postgresql"

    def _quoted_table(self) -> str:
        return self.db.bind.dialect.identifier_preparer.quote(self.table.value)

    async def lock(self, mode: str) -> None:
        """Take a table lock (PostgreSQL only; SQLite serialises writers itself)"""
        if self.is_postgresql:
            await self.db.execute(text(f"LOCK TABLE {self._quoted_table()} IN {mode} MODE"))

    async def list_ids(self) -> list[int]:
        result = await self.db.execute(select(self.model.id).order_by(self.model.id))
        return list(result.scalars().all())

    async def count_references(self, moving_ids: list[int]) -> list[tuple[str, int]]:
        """(dependent table, rows) for each dependent column pointing at a moving id"""
        found = []
        for model, column in DEPENDENT_REFERENCES.get(self.table, []):
            result = await self.db.execute(
                select(func.count())
                .select_from(model)
                .where(getattr(model, column).in_(moving_ids))
            )
            count = result.scalar_one()
            if count:
                found.append((f"{model.__tablename__}.{column}", count))
        return found

    async def retire_journal_entries(self) -> int:
        """
        Negate the journal ids of rows that no longer exist.

        Renumbered rows take over vacated ids, so entries of removed rows
        must not stay under a positive id. get_history(type, -id) still
        finds them.
        """
        entity_type = JOURNAL_ENTITY_TYPES.get(self.table)
        if entity_type is None:
            return 0
        result = await self.db.execute(
            update(History)
            .where(
                History.entity_type == entity_type,
                History.entity_id > 0,
                History.entity_id.not_in(select(self.model.id)),
            )
            .values(entity_id=-History.entity_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def move(self, old_id: int, new_id: int) -> None:
        """Renumber one row; its journal entries follow it"""
        await self.db.execute(
            update(self.model)
            .where(self.model.id == old_id)
            .values(id=new_id)
            .execution_options(synchronize_session=False)
        )
        entity_type = JOURNAL_ENTITY_TYPES.get(self.table)
        if entity_type is not None:
            await self.db.execute(
                update(History)
                .where(History.entity_type == entity_type, History.entity_id == old_id)
                .values(entity_id=new_id)
                .execution_options(synchronize_session=False)
            )

    async def sync_sequence(self, max_id: int) -> None:
        """Point the serial sequence after max_id (PostgreSQL only)"""
        if not self.is_postgresql:
            return
        if max_id:
            stmt = text("SELECT setval(pg_get_serial_sequence(:table, 'id'), :value, true)")
            params = {"table": self.table.value, "value": max_id}
        else:
            stmt = text("SELECT setval(pg_get_serial_sequence(:table, 'id'), 1, false)")
            params = {"table": self.table.value}
        await self.db.execute(stmt, params)
