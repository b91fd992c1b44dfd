"""
Lifecycle orchestration: load a snapshot, plan the cascade, apply it.

Runs inside the caller's transaction. Non-critical steps are isolated in
savepoints so a failing dependent cleanup is skipped and reported while
the rest of the cascade proceeds. The critical root step is not isolated:
its failure raises and the caller's transaction rolls everything back.
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError

from src.application.services.cascade_resolver import (CascadePlan,
                                                       CascadeResolver,
                                                       CascadeSnapshot,
                                                       CascadeStep,
                                                       PermitSnapshot,
                                                       StepAction)
from src.domain.enums import EntityType, LifecycleOperation, PermitStatus
from src.domain.exceptions import (CascadeIntegrityException,
                                   ConcurrentModificationException,
                                   RegistryException,
                                   ResourceNotFoundException)
from src.infrastructure.persistence.repositories import Repositories
from src.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class StepOutcome(str, Enum):
    OK = "ok"
    SKIPPED = "skipped"
    FATAL = "fatal"


@dataclass
class StepResult:
    step: CascadeStep
    outcome: StepOutcome
    affected: int = 0
    reason: str | None = None


@dataclass
class CascadeReport:
    """Outcome of one lifecycle operation"""

    plan: CascadePlan
    results: list[StepResult] = field(default_factory=list)

    @property
    def rejection(self) -> RegistryException | None:
        return self.plan.rejection

    @property
    def completed(self) -> bool:
        return self.rejection is None and all(
            r.outcome != StepOutcome.FATAL for r in self.results
        )

    @property
    def skipped(self) -> list[StepResult]:
        return [r for r in self.results if r.outcome == StepOutcome.SKIPPED]

    def affected(self, action: StepAction) -> int:
        return sum(r.affected for r in self.results if r.step.action == action)

    def summary(self) -> str:
        parts = [f"{r.step.describe()}={r.outcome.value}:{r.affected}" for r in self.results]
        return ", ".join(parts)


class LifecycleOrchestrator:
    """Executes cascade plans against one unit of work"""

    def __init__(self, repos: Repositories, resolver: CascadeResolver | None = None):
        self.repos = repos
        self.resolver = resolver or CascadeResolver()
        self._handlers = {
            StepAction.SUSPEND_PERMITS: self._suspend_permits,
            StepAction.DETACH_USERS: lambda s: self.repos.users.detach_hunter(s.target_id),
            StepAction.CLEAR_HUNTER_REFERENCE: lambda s: self.repos.users.clear_hunter_reference(
                s.target_id
            ),
            StepAction.UNLINK_GUIDES: lambda s: self.repos.guides.unlink_user(s.target_id),
            StepAction.DELETE_TAXES: lambda s: self.repos.taxes.delete_by_hunter(s.target_id),
            StepAction.DELETE_PERMIT_REQUESTS: lambda s: self.repos.permit_requests.delete_by_hunter(
                s.target_id
            ),
            StepAction.DELETE_USER_PERMIT_REQUESTS: lambda s: self.repos.permit_requests.delete_by_user(
                s.target_id
            ),
            StepAction.DELETE_HUNTED_SPECIES: lambda s: self.repos.hunting_reports.delete_species_by_hunter(
                s.target_id
            ),
            StepAction.DELETE_HUNTING_REPORTS: lambda s: self.repos.hunting_reports.delete_by_hunter(
                s.target_id
            ),
            StepAction.DELETE_GUIDE_ASSOCIATIONS: lambda s: self.repos.guides.delete_associations_by_guide(
                s.target_id
            ),
            StepAction.DELETE_HUNTER_ASSOCIATIONS: lambda s: self.repos.guides.delete_associations_by_hunter(
                s.target_id
            ),
            StepAction.DELETE_LINKED_USER: lambda s: self.repos.users.delete_by_id(s.target_id),
            StepAction.DEACTIVATE_HUNTER: lambda s: self.repos.hunters.set_active(
                s.target_id, False, s.expected_version
            ),
            StepAction.ACTIVATE_HUNTER: lambda s: self.repos.hunters.set_active(
                s.target_id, True, s.expected_version
            ),
            StepAction.SUSPEND_USERS: lambda s: self.repos.users.set_suspended_for_hunter(
                s.target_id, True
            ),
            StepAction.UNSUSPEND_USERS: lambda s: self.repos.users.set_suspended_for_hunter(
                s.target_id, False
            ),
            StepAction.DELETE_ROOT: self._delete_root,
        }

    def _root_repo(self, entity: EntityType):
        return {
            EntityType.HUNTER: self.repos.hunters,
            EntityType.USER: self.repos.users,
            EntityType.HUNTING_GUIDE: self.repos.guides,
            EntityType.PERMIT: self.repos.permits,
        }[entity]

    async def run(
        self,
        root_type: EntityType,
        root_id: int,
        operation: LifecycleOperation,
        force: bool = False,
        today: date | None = None,
    ) -> CascadeReport:
        snapshot = await self.load_snapshot(root_type, root_id, today or date.today())
        plan = self.resolver.resolve(snapshot, operation, force=force)
        return await self.execute(plan)

    async def load_snapshot(self, root_type: EntityType, root_id: int, today: date) -> CascadeSnapshot:
        """Read the root and what its cascade rules depend on"""
        if root_type not in (
            EntityType.HUNTER,
            EntityType.USER,
            EntityType.HUNTING_GUIDE,
            EntityType.PERMIT,
        ):
            return CascadeSnapshot(root_type, root_id, exists=True)

        root = await self._root_repo(root_type).get_by_id(root_id)
        if root is None:
            return CascadeSnapshot(root_type, root_id, exists=False)

        snapshot = CascadeSnapshot(
            root_type, root_id, exists=True, version=getattr(root, "version", None)
        )
        if root_type == EntityType.HUNTER:
            permits = await self.repos.permits.get_by_hunter(root_id)
            snapshot.permits = [
                PermitSnapshot(p.id, p.effective_status(today)) for p in permits
            ]
        elif root_type == EntityType.HUNTING_GUIDE:
            snapshot.linked_user_id = root.user_id
        elif root_type == EntityType.PERMIT:
            snapshot.tax_count = await self.repos.taxes.count_by_permit(root_id)
        return snapshot

    async def execute(self, plan: CascadePlan) -> CascadeReport:
        report = CascadeReport(plan)
        if plan.is_rejected:
            logger.info(
                "%s %s:%s rejected: %s",
                plan.operation.value,
                plan.root_type.value,
                plan.root_id,
                plan.rejection.message,
            )
            return report

        try:
            for step in plan.steps:
                if step.critical:
                    report.results.append(await self._run_critical(step, report))
                else:
                    report.results.append(await self._run_isolated(step))
        except RegistryException as e:
            e.details["steps"] = report.summary()
            raise

        logger.info(
            "%s %s:%s completed [%s]",
            plan.operation.value,
            plan.root_type.value,
            plan.root_id,
            report.summary(),
        )
        return report

    async def _run_isolated(self, step: CascadeStep) -> StepResult:
        try:
            async with self.repos.savepoint():
                affected = await self._handlers[step.action](step)
        except SQLAlchemyError as e:
            logger.warning("Cascade step %s skipped: %s", step.describe(), e)
            return StepResult(step, StepOutcome.SKIPPED, reason=str(e))
        logger.debug("Cascade step %s affected %s row(s)", step.describe(), affected)
        return StepResult(step, StepOutcome.OK, affected=affected)

    async def _run_critical(self, step: CascadeStep, report: CascadeReport) -> StepResult:
        try:
            affected = await self._handlers[step.action](step)
        except SQLAlchemyError as e:
            logger.error("Critical cascade step %s failed: %s", step.describe(), e)
            report.results.append(StepResult(step, StepOutcome.FATAL, reason=str(e)))
            raise CascadeIntegrityException(
                step.entity.value, step.target_id, step.action.value, str(e)
            ) from e

        if affected == 0:
            logger.error("Critical cascade step %s matched no row", step.describe())
            report.results.append(StepResult(step, StepOutcome.FATAL, reason="no matching row"))
            if not await self._root_repo(step.entity).exists(step.target_id):
                raise ResourceNotFoundException(step.entity.value, step.target_id)
            raise ConcurrentModificationException(
                step.entity.value, step.target_id, step.expected_version
            )
        return StepResult(step, StepOutcome.OK, affected=affected)

    async def _suspend_permits(self, step: CascadeStep) -> int:
        return await self.repos.permits.set_status(list(step.ids), PermitStatus.SUSPENDED)

    async def _delete_root(self, step: CascadeStep) -> int:
        return await self._root_repo(step.entity).delete_by_id(
            step.target_id, expected_version=step.expected_version
        )
