"""
RegistryStorage: the storage contract used by the API.

Every public coroutine runs in its own transaction. Lifecycle operations
(suspend, reactivate, delete) go through the LifecycleOrchestrator; batch
operations run one transaction per item so a failing item never undoes
the others.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from src.application.dtos import (CampaignSettings, HunterCreate, HunterPatch,
                                  HuntingGuideCreate, HuntingGuidePatch,
                                  HuntingReportCreate, HuntingReportPatch,
                                  PermitCreate, PermitPatch,
                                  PermitRequestCreate, PermitRequestPatch,
                                  TaxCreate, TaxPatch, UserCreate, UserPatch)
from src.application.services.campaign_validator import (
    CampaignValidation, CampaignWindowValidator)
from src.application.services.cascade_resolver import CascadePlan
from src.application.services.identity_sequencer import IdentitySequencer
from src.application.services.lifecycle_orchestrator import (
    CascadeReport, LifecycleOrchestrator)
from src.domain.enums import (EntityType, LifecycleOperation, PermitStatus,
                              SequencedTable)
from src.domain.exceptions import (CampaignWindowException,
                                   PreconditionFailedException,
                                   ReferentialIntegrityException,
                                   RegistryException,
                                   ResourceNotFoundException,
                                   ValidationException)
from src.domain.value_objects.campaign import CampaignWindow
from src.infrastructure.persistence.models import (GuideHunterAssociation,
                                                   History, HuntedSpecies,
                                                   Hunter, HuntingCampaign,
                                                   HuntingGuide, HuntingReport,
                                                   Permit, PermitRequest, Tax,
                                                   User)
from src.infrastructure.persistence.repositories import (BaseRepository,
                                                         Repositories,
                                                         SequenceRepository,
                                                         resolve_table)
from src.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


@dataclass
class BatchResult:
    """Outcome of a batch operation; failures keep (id, reason) pairs"""

    successful: int = 0
    failed: int = 0
    failures: list[tuple[int, str]] = field(default_factory=list)

    def record_failure(self, item_id: int, reason: str) -> None:
        self.failed += 1
        self.failures.append((item_id, reason))


class RegistryStorage:
    """Transactional facade over the registry tables"""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
        self.sequencer = IdentitySequencer()
        self.campaign_validator = CampaignWindowValidator()

    @asynccontextmanager
    async def unit_of_work(self) -> AsyncIterator[Repositories]:
        """One session, one transaction; commits on success, rolls back on error"""
        async with self.session_factory() as session:
            async with session.begin():
                yield Repositories(session)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def run_lifecycle(
        self,
        root_type: EntityType,
        root_id: int,
        operation: LifecycleOperation,
        force: bool = False,
        actor_id: int | None = None,
    ) -> CascadeReport:
        """
        Plan and apply one cascade in a single transaction.

        A rejected plan (missing root, blocking precondition) is returned,
        not raised. A root that disappears mid-cascade is reported the same
        way. Concurrent modification and store failures of the root step
        raise after the transaction is rolled back.
        """
        root_type = EntityType(root_type)
        operation = LifecycleOperation(operation)
        try:
            async with self.unit_of_work() as repos:
                report = await LifecycleOrchestrator(repos).run(
                    root_type, root_id, operation, force=force
                )
                if report.completed:
                    await self._record(
                        repos, operation.value, root_type, root_id, report.summary(), actor_id
                    )
        except ResourceNotFoundException as e:
            logger.info("%s %s:%s aborted: %s", operation.value, root_type.value, root_id, e)
            return CascadeReport(CascadePlan(root_type, root_id, operation, rejection=e))
        return report

    async def delete_hunter(self, hunter_id: int, force: bool = False) -> bool:
        report = await self.run_lifecycle(
            EntityType.HUNTER, hunter_id, LifecycleOperation.DELETE, force=force
        )
        return report.completed

    async def suspend_hunter(self, hunter_id: int) -> Hunter | None:
        report = await self.run_lifecycle(
            EntityType.HUNTER, hunter_id, LifecycleOperation.SUSPEND
        )
        if not report.completed:
            return None
        return await self.get_hunter(hunter_id)

    async def reactivate_hunter(self, hunter_id: int) -> Hunter | None:
        """Reactivate the hunter and its accounts; permits stay as they are"""
        report = await self.run_lifecycle(
            EntityType.HUNTER, hunter_id, LifecycleOperation.REACTIVATE
        )
        if not report.completed:
            return None
        return await self.get_hunter(hunter_id)

    async def delete_user(self, user_id: int) -> bool:
        report = await self.run_lifecycle(EntityType.USER, user_id, LifecycleOperation.DELETE)
        return report.completed

    async def delete_hunting_guide(self, guide_id: int) -> bool:
        report = await self.run_lifecycle(
            EntityType.HUNTING_GUIDE, guide_id, LifecycleOperation.DELETE
        )
        return report.completed

    async def delete_permit(self, permit_id: int) -> bool:
        """Delete a permit; always refused while a tax references it"""
        report = await self.run_lifecycle(
            EntityType.PERMIT, permit_id, LifecycleOperation.DELETE
        )
        return report.completed

    async def delete_all_hunting_guides(self) -> BatchResult:
        async with self.unit_of_work() as repos:
            guide_ids = await repos.guides.list_ids()
        return await self._run_batch(EntityType.HUNTING_GUIDE, guide_ids)

    async def delete_all_hunters(self, force: bool = False) -> BatchResult:
        async with self.unit_of_work() as repos:
            hunter_ids = await repos.hunters.list_ids()
        return await self._run_batch(EntityType.HUNTER, hunter_ids, force=force)

    async def delete_all_suspended_permits(self) -> BatchResult:
        """Delete suspended permits; those with taxes are counted as failed"""
        async with self.unit_of_work() as repos:
            permits = await repos.permits.get_by_status(PermitStatus.SUSPENDED)
        return await self._run_batch(EntityType.PERMIT, [p.id for p in permits])

    async def _run_batch(
        self, root_type: EntityType, ids: list[int], force: bool = False
    ) -> BatchResult:
        result = BatchResult()
        for root_id in ids:
            try:
                report = await self.run_lifecycle(
                    root_type, root_id, LifecycleOperation.DELETE, force=force
                )
            except (RegistryException, SQLAlchemyError) as e:
                logger.warning("Batch delete of %s:%s failed: %s", root_type.value, root_id, e)
                result.record_failure(root_id, str(e))
                continue
            if report.completed:
                result.successful += 1
            else:
                result.record_failure(root_id, report.rejection.message)
        logger.info(
            "Batch delete of %s: %s succeeded, %s failed",
            root_type.value,
            result.successful,
            result.failed,
        )
        return result

    # ------------------------------------------------------------------
    # Identity sequencing
    # ------------------------------------------------------------------

    async def get_next_available_id(self, table: SequencedTable | str) -> int:
        table = resolve_table(table)
        async with self.unit_of_work() as repos:
            sequence = SequenceRepository(repos.db, table)
            await sequence.lock("SHARE")
            return self.sequencer.next_available_id(await sequence.list_ids())

    async def resequence_ids(self, table: SequencedTable | str) -> None:
        """
        Renumber a table's ids to exactly [1..N] in one transaction.

        Refused when a dependent table references an id that would move.
        History entries follow their rows; entries of removed rows are
        kept under the negated id.
        Any failure rolls the whole table back.
        """
        table = resolve_table(table)
        async with self.unit_of_work() as repos:
            sequence = SequenceRepository(repos.db, table)
            await sequence.lock("ACCESS EXCLUSIVE")
            ids = await sequence.list_ids()
            moves = self.sequencer.renumbering(ids)
            if moves:
                references = await sequence.count_references([old for old, _ in moves])
                if references:
                    dependent, count = references[0]
                    raise ReferentialIntegrityException(table.value, dependent, count)
                await sequence.retire_journal_entries()
                for old_id, new_id in moves:
                    await sequence.move(old_id, new_id)
            await sequence.sync_sequence(len(ids))
        logger.info("Resequenced %s: %s row(s) moved, %s row(s) total", table.value, len(moves), len(ids))

    # ------------------------------------------------------------------
    # Campaign
    # ------------------------------------------------------------------

    async def get_hunting_campaign_settings(self) -> CampaignSettings | None:
        """Latest campaign, or None when none is configured (no defaults)"""
        async with self.unit_of_work() as repos:
            campaign = await repos.campaigns.get_current()
        if campaign is None:
            return None
        return CampaignSettings(
            start_date=campaign.start_date,
            end_date=campaign.end_date,
            year=campaign.year,
            is_active=campaign.is_active,
        )

    async def save_hunting_campaign_settings(
        self, settings: CampaignSettings, actor_id: int | None = None
    ) -> CampaignSettings:
        is_active = settings.is_active
        if is_active is None:
            is_active = CampaignWindow.is_open_on(
                settings.start_date, settings.end_date, date.today()
            )
        async with self.unit_of_work() as repos:
            campaign = await repos.campaigns.create(
                HuntingCampaign(
                    start_date=settings.start_date,
                    end_date=settings.end_date,
                    year=settings.year,
                    is_active=is_active,
                )
            )
            await self._record(
                repos,
                "update",
                "hunting_campaign",
                campaign.id,
                f"Campaign {campaign.year}: {campaign.start_date} to {campaign.end_date}",
                actor_id,
            )
        return settings.model_copy(update={"is_active": is_active})

    async def validate_campaign_date(self, candidate: date) -> CampaignValidation:
        async with self.unit_of_work() as repos:
            window = await self._current_window(repos)
        return self.campaign_validator.validate_date(window, candidate)

    async def validate_campaign_period(self, start_date: date, end_date: date) -> CampaignValidation:
        async with self.unit_of_work() as repos:
            window = await self._current_window(repos)
        return self.campaign_validator.validate_period(window, start_date, end_date)

    async def _current_window(self, repos: Repositories) -> CampaignWindow | None:
        campaign = await repos.campaigns.get_current()
        if campaign is None:
            return None
        return CampaignWindow(
            start_date=campaign.start_date,
            end_date=campaign.end_date,
            year=campaign.year,
        )

    # ------------------------------------------------------------------
    # Hunters, users, guides
    # ------------------------------------------------------------------

    async def create_hunter(self, data: HunterCreate) -> Hunter:
        async with self._writing("hunter"):
            async with self.unit_of_work() as repos:
                hunter = await repos.hunters.create(Hunter(**data.model_dump()))
                await self._record_created(repos, EntityType.HUNTER, hunter.id)
        return hunter

    async def get_hunter(self, hunter_id: int) -> Hunter | None:
        async with self.unit_of_work() as repos:
            return await repos.hunters.get_by_id(hunter_id)

    async def list_hunters(self, skip: int = 0, limit: int = 100) -> list[Hunter]:
        async with self.unit_of_work() as repos:
            return await repos.hunters.get_all(skip=skip, limit=limit)

    async def patch_hunter(self, hunter_id: int, patch: HunterPatch) -> Hunter | None:
        async with self._writing("hunter"):
            async with self.unit_of_work() as repos:
                return await self._apply_patch(repos, repos.hunters, EntityType.HUNTER, hunter_id, patch)

    async def create_user(self, data: UserCreate) -> User:
        async with self._writing("user"):
            async with self.unit_of_work() as repos:
                if data.hunter_id is not None:
                    await self._require(repos.hunters, data.hunter_id, "hunter_id")
                user = await repos.users.create(User(**data.model_dump()))
                await self._record_created(repos, EntityType.USER, user.id)
        return user

    async def get_user(self, user_id: int) -> User | None:
        async with self.unit_of_work() as repos:
            return await repos.users.get_by_id(user_id)

    async def list_users(self, skip: int = 0, limit: int = 100) -> list[User]:
        async with self.unit_of_work() as repos:
            return await repos.users.get_all(skip=skip, limit=limit)

    async def patch_user(self, user_id: int, patch: UserPatch) -> User | None:
        async with self._writing("user"):
            async with self.unit_of_work() as repos:
                hunter_id = patch.changes().get("hunter_id")
                if hunter_id is not None:
                    await self._require(repos.hunters, hunter_id, "hunter_id")
                return await self._apply_patch(repos, repos.users, EntityType.USER, user_id, patch)

    async def create_hunting_guide(self, data: HuntingGuideCreate) -> HuntingGuide:
        async with self._writing("hunting guide"):
            async with self.unit_of_work() as repos:
                if data.user_id is not None:
                    await self._require(repos.users, data.user_id, "user_id")
                guide = await repos.guides.create(HuntingGuide(**data.model_dump()))
                await self._record_created(repos, EntityType.HUNTING_GUIDE, guide.id)
        return guide

    async def get_hunting_guide(self, guide_id: int) -> HuntingGuide | None:
        async with self.unit_of_work() as repos:
            return await repos.guides.get_by_id(guide_id)

    async def list_hunting_guides(self, skip: int = 0, limit: int = 100) -> list[HuntingGuide]:
        async with self.unit_of_work() as repos:
            return await repos.guides.get_all(skip=skip, limit=limit)

    async def patch_hunting_guide(
        self, guide_id: int, patch: HuntingGuidePatch
    ) -> HuntingGuide | None:
        async with self._writing("hunting guide"):
            async with self.unit_of_work() as repos:
                user_id = patch.changes().get("user_id")
                if user_id is not None:
                    await self._require(repos.users, user_id, "user_id")
                return await self._apply_patch(
                    repos, repos.guides, EntityType.HUNTING_GUIDE, guide_id, patch
                )

    async def associate_hunter_to_guide(
        self, guide_id: int, hunter_id: int
    ) -> GuideHunterAssociation:
        """Link a hunter to a guide; linking twice returns the existing link"""
        async with self.unit_of_work() as repos:
            if not await repos.guides.exists(guide_id):
                raise ResourceNotFoundException(EntityType.HUNTING_GUIDE.value, guide_id)
            if not await repos.hunters.exists(hunter_id):
                raise ResourceNotFoundException(EntityType.HUNTER.value, hunter_id)
            existing = await repos.guides.get_association(guide_id, hunter_id)
            if existing is not None:
                return existing
            return await repos.guides.add_association(guide_id, hunter_id)

    async def remove_hunter_association(self, guide_id: int, hunter_id: int) -> bool:
        async with self.unit_of_work() as repos:
            return await repos.guides.remove_association(guide_id, hunter_id) > 0

    async def get_guide_hunter_associations(self, guide_id: int) -> list[GuideHunterAssociation]:
        async with self.unit_of_work() as repos:
            return await repos.guides.get_associations(guide_id)

    # ------------------------------------------------------------------
    # Permits and taxes
    # ------------------------------------------------------------------

    async def create_permit(self, data: PermitCreate) -> Permit:
        async with self._writing("permit"):
            async with self.unit_of_work() as repos:
                await self._require(repos.hunters, data.hunter_id, "hunter_id")
                permit = await repos.permits.create(
                    Permit(**data.model_dump(), status=PermitStatus.ACTIVE.value)
                )
                await self._record_created(repos, EntityType.PERMIT, permit.id)
        return permit

    async def get_permit(self, permit_id: int) -> Permit | None:
        async with self.unit_of_work() as repos:
            return await repos.permits.get_by_id(permit_id)

    async def list_permits(self, skip: int = 0, limit: int = 100) -> list[Permit]:
        async with self.unit_of_work() as repos:
            return await repos.permits.get_all(skip=skip, limit=limit)

    async def patch_permit(self, permit_id: int, patch: PermitPatch) -> Permit | None:
        async with self._writing("permit"):
            async with self.unit_of_work() as repos:
                return await self._apply_patch(repos, repos.permits, EntityType.PERMIT, permit_id, patch)

    async def get_permits_by_hunter(self, hunter_id: int) -> list[Permit]:
        async with self.unit_of_work() as repos:
            return await repos.permits.get_by_hunter(hunter_id)

    async def get_active_permits_by_hunter(self, hunter_id: int) -> list[Permit]:
        async with self.unit_of_work() as repos:
            return await repos.permits.get_active_by_hunter(hunter_id, date.today())

    async def get_expired_permits_by_hunter(self, hunter_id: int) -> list[Permit]:
        async with self.unit_of_work() as repos:
            return await repos.permits.get_expired_by_hunter(hunter_id, date.today())

    async def get_suspended_permits(self) -> list[Permit]:
        async with self.unit_of_work() as repos:
            return await repos.permits.get_by_status(PermitStatus.SUSPENDED)

    async def suspend_permit(self, permit_id: int, actor_id: int | None = None) -> Permit | None:
        async with self.unit_of_work() as repos:
            permit = await repos.permits.get_by_id(permit_id)
            if permit is None:
                return None
            entity = permit.to_entity()
            try:
                entity.suspend()
            except ValueError as e:
                raise PreconditionFailedException(str(e), EntityType.PERMIT.value, permit_id) from e
            permit.status = entity.status.value
            permit = await repos.permits.update(permit)
            await self._record(
                repos, "suspend", EntityType.PERMIT, permit_id, f"Permit {permit.permit_number} suspended", actor_id
            )
        return permit

    async def renew_permit(
        self, permit_id: int, expiry_date: date, actor_id: int | None = None
    ) -> Permit | None:
        """Return a permit to active with a new, future expiry date"""
        async with self.unit_of_work() as repos:
            permit = await repos.permits.get_by_id(permit_id)
            if permit is None:
                return None
            entity = permit.to_entity()
            try:
                entity.renew(expiry_date, date.today())
            except ValueError as e:
                raise ValidationException(str(e), field="expiry_date") from e
            permit.expiry_date = entity.expiry_date
            permit.status = entity.status.value
            permit = await repos.permits.update(permit)
            await self._record(
                repos,
                "renew",
                EntityType.PERMIT,
                permit_id,
                f"Permit {permit.permit_number} renewed until {expiry_date.isoformat()}",
                actor_id,
            )
        return permit

    async def create_tax(self, data: TaxCreate) -> Tax:
        async with self._writing("tax"):
            async with self.unit_of_work() as repos:
                await self._require(repos.hunters, data.hunter_id, "hunter_id")
                if data.permit_id is not None:
                    await self._require(repos.permits, data.permit_id, "permit_id")
                tax = await repos.taxes.create(Tax(**data.model_dump()))
                await self._record_created(repos, EntityType.TAX, tax.id)
        return tax

    async def get_tax(self, tax_id: int) -> Tax | None:
        async with self.unit_of_work() as repos:
            return await repos.taxes.get_by_id(tax_id)

    async def get_taxes_by_hunter(self, hunter_id: int) -> list[Tax]:
        async with self.unit_of_work() as repos:
            return await repos.taxes.get_by_hunter(hunter_id)

    async def patch_tax(self, tax_id: int, patch: TaxPatch) -> Tax | None:
        async with self.unit_of_work() as repos:
            return await self._apply_patch(repos, repos.taxes, EntityType.TAX, tax_id, patch)

    # ------------------------------------------------------------------
    # Permit requests and hunting reports
    # ------------------------------------------------------------------

    async def create_permit_request(self, data: PermitRequestCreate) -> PermitRequest:
        async with self.unit_of_work() as repos:
            await self._require(repos.users, data.user_id, "user_id")
            await self._require(repos.hunters, data.hunter_id, "hunter_id")
            request = await repos.permit_requests.create(PermitRequest(**data.model_dump()))
            await self._record_created(repos, EntityType.PERMIT_REQUEST, request.id)
        return request

    async def get_permit_request(self, request_id: int) -> PermitRequest | None:
        async with self.unit_of_work() as repos:
            return await repos.permit_requests.get_by_id(request_id)

    async def patch_permit_request(
        self, request_id: int, patch: PermitRequestPatch
    ) -> PermitRequest | None:
        async with self.unit_of_work() as repos:
            return await self._apply_patch(
                repos, repos.permit_requests, EntityType.PERMIT_REQUEST, request_id, patch
            )

    async def create_hunting_report(self, data: HuntingReportCreate) -> HuntingReport:
        """
        File a hunting report with its species lines.

        The report date must fall inside the current campaign.
        """
        async with self.unit_of_work() as repos:
            validation = self.campaign_validator.validate_date(
                await self._current_window(repos), data.report_date
            )
            if not validation.accepted:
                raise CampaignWindowException(validation.reason, field="report_date")
            await self._require(repos.users, data.user_id, "user_id")
            await self._require(repos.hunters, data.hunter_id, "hunter_id")
            await self._require(repos.permits, data.permit_id, "permit_id")

            report = await repos.hunting_reports.create(
                HuntingReport(**data.model_dump(exclude={"species"}))
            )
            for line in data.species:
                await repos.hunting_reports.add_species(
                    HuntedSpecies(report_id=report.id, **line.model_dump())
                )
            await self._record_created(repos, EntityType.HUNTING_REPORT, report.id)
        return report

    async def get_hunting_report(self, report_id: int) -> HuntingReport | None:
        async with self.unit_of_work() as repos:
            return await repos.hunting_reports.get_by_id(report_id)

    async def get_hunted_species(self, report_id: int) -> list[HuntedSpecies]:
        async with self.unit_of_work() as repos:
            return await repos.hunting_reports.get_species(report_id)

    async def patch_hunting_report(
        self, report_id: int, patch: HuntingReportPatch
    ) -> HuntingReport | None:
        async with self.unit_of_work() as repos:
            return await self._apply_patch(
                repos, repos.hunting_reports, EntityType.HUNTING_REPORT, report_id, patch
            )

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    async def get_history(self, entity_type: str, entity_id: int) -> list[History]:
        async with self.unit_of_work() as repos:
            return await repos.history.get_by_entity(entity_type, entity_id)

    async def _record(
        self,
        repos: Repositories,
        operation: str,
        entity_type: EntityType | str,
        entity_id: int,
        details: str,
        actor_id: int | None = None,
    ) -> None:
        """Journal an operation; a journal failure never undoes the operation"""
        entity_type = entity_type.value if isinstance(entity_type, EntityType) else entity_type
        try:
            async with repos.savepoint():
                await repos.history.record(operation, entity_type, entity_id, details, actor_id)
        except SQLAlchemyError as e:
            logger.warning(
                "History entry for %s %s:%s not recorded: %s", operation, entity_type, entity_id, e
            )

    async def _record_created(self, repos: Repositories, entity_type: EntityType, entity_id: int) -> None:
        await self._record(repos, "create", entity_type, entity_id, f"{entity_type.value} {entity_id} created")

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _writing(self, label: str) -> AsyncIterator[None]:
        """Turn unique-constraint violations into validation errors"""
        try:
            yield
        except IntegrityError as e:
            logger.info("Rejected %s write: %s", label, e.orig)
            raise ValidationException(f"A {label} with the same unique values already exists") from e

    async def _require(self, repo: BaseRepository, row_id: int, field_name: str) -> None:
        if not await repo.exists(row_id):
            raise ValidationException(f"{field_name} {row_id} does not exist", field=field_name)

    async def _apply_patch(self, repos: Repositories, repo: BaseRepository, entity_type: EntityType, row_id: int, patch):
        row = await repo.get_by_id(row_id)
        if row is None:
            return None
        changes = patch.changes()
        for name, value in changes.items():
            setattr(row, name, value)
        row = await repo.update(row)
        if changes:
            await self._record(
                repos, "update", entity_type, row_id, f"Updated fields: {', '.join(sorted(changes))}"
            )
        return row
