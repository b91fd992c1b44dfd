"""
Cascade resolution for entity lifecycle operations.

Turns a snapshot of a root entity and its dependents into an ordered plan
of mutation steps. Nothing here touches the database: the orchestrator
loads the snapshot and executes the plan.
"""

from dataclasses import dataclass, field
from enum import Enum

from src.domain.enums import EntityType, LifecycleOperation, PermitStatus
from src.domain.exceptions import (PreconditionFailedException,
                                   RegistryException,
                                   ResourceNotFoundException,
                                   ValidationException)


class StepAction(str, Enum):
    SUSPEND_PERMITS = "suspend_permits"
    DETACH_USERS = "detach_users"
    CLEAR_HUNTER_REFERENCE = "clear_hunter_reference"
    UNLINK_GUIDES = "unlink_guides"
    DELETE_TAXES = "delete_taxes"
    DELETE_PERMIT_REQUESTS = "delete_permit_requests"
    DELETE_USER_PERMIT_REQUESTS = "delete_user_permit_requests"
    DELETE_HUNTED_SPECIES = "delete_hunted_species"
    DELETE_HUNTING_REPORTS = "delete_hunting_reports"
    DELETE_GUIDE_ASSOCIATIONS = "delete_guide_associations"
    DELETE_HUNTER_ASSOCIATIONS = "delete_hunter_associations"
    DELETE_LINKED_USER = "delete_linked_user"
    DEACTIVATE_HUNTER = "deactivate_hunter"
    ACTIVATE_HUNTER = "activate_hunter"
    SUSPEND_USERS = "suspend_users"
    UNSUSPEND_USERS = "unsuspend_users"
    DELETE_ROOT = "delete_root"


@dataclass(frozen=True)
class PermitSnapshot:
    id: int
    status: PermitStatus


@dataclass
class CascadeSnapshot:
    """
    State of a root entity and its dependents at planning time.

    version is the optimistic-lock counter read with the root; permit
    status is the effective one (expired when past its expiry date).
    """

    root_type: EntityType
    root_id: int
    exists: bool
    version: int | None = None
    permits: list[PermitSnapshot] = field(default_factory=list)
    linked_user_id: int | None = None
    tax_count: int = 0

    @property
    def active_permit_ids(self) -> list[int]:
        return [p.id for p in self.permits if p.status == PermitStatus.ACTIVE]


@dataclass(frozen=True)
class CascadeStep:
    """
    One mutation of a plan.

    target_id is the key the step filters on (a hunter, user or guide id);
    ids lists explicit rows for permit status changes. Critical steps are
    the root mutation: their failure aborts the whole cascade.
    """

    action: StepAction
    entity: EntityType
    target_id: int
    ids: tuple[int, ...] = ()
    critical: bool = False
    expected_version: int | None = None

    def describe(self) -> str:
        return f"{self.action.value}({self.entity.value}:{self.target_id})"


@dataclass
class CascadePlan:
    root_type: EntityType
    root_id: int
    operation: LifecycleOperation
    steps: list[CascadeStep] = field(default_factory=list)
    rejection: RegistryException | None = None

    @property
    def is_rejected(self) -> bool:
        return self.rejection is not None


class CascadeResolver:
    """
    Pure planner for suspend / reactivate / delete cascades.

    Rules per root:
    - hunter delete: blocked by active permits unless forced; permits are
      suspended and retained, dependents removed, hunter row last
    - hunter suspend/reactivate: flags on hunter and referencing users;
      reactivation never reactivates permits
    - user delete: detach from hunter and guides, drop own requests
    - guide delete: drop linked account (unlinking every guide using it)
      and associations, guide row last
    - permit delete: refused while any tax references it
    """

    def resolve(
        self,
        snapshot: CascadeSnapshot,
        operation: LifecycleOperation,
        force: bool = False,
    ) -> CascadePlan:
        plan = CascadePlan(snapshot.root_type, snapshot.root_id, operation)
        if not snapshot.exists:
            plan.rejection = ResourceNotFoundException(snapshot.root_type.value, snapshot.root_id)
            return plan

        planner = self._planners().get((snapshot.root_type, operation))
        if planner is None:
            plan.rejection = ValidationException(
                f"Operation '{operation.value}' is not supported for {snapshot.root_type.value}",
                field="operation",
            )
            return plan

        planner(plan, snapshot, force)
        return plan

    def _planners(self):
        return {
            (EntityType.HUNTER, LifecycleOperation.DELETE): self._delete_hunter,
            (EntityType.HUNTER, LifecycleOperation.SUSPEND): self._suspend_hunter,
            (EntityType.HUNTER, LifecycleOperation.REACTIVATE): self._reactivate_hunter,
            (EntityType.USER, LifecycleOperation.DELETE): self._delete_user,
            (EntityType.HUNTING_GUIDE, LifecycleOperation.DELETE): self._delete_guide,
            (EntityType.PERMIT, LifecycleOperation.DELETE): self._delete_permit,
        }

    def _delete_hunter(self, plan: CascadePlan, snapshot: CascadeSnapshot, force: bool) -> None:
        active = snapshot.active_permit_ids
        if active and not force:
            plan.rejection = PreconditionFailedException(
                f"Hunter {snapshot.root_id} has {len(active)} active permit(s)",
                EntityType.HUNTER.value,
                snapshot.root_id,
                active_permit_ids=active,
            )
            return

        hunter_id = snapshot.root_id
        to_suspend = tuple(
            p.id for p in snapshot.permits if p.status != PermitStatus.SUSPENDED
        )
        plan.steps = [
            # Permits are retained as suspended records, never removed here
            CascadeStep(StepAction.SUSPEND_PERMITS, EntityType.PERMIT, hunter_id, ids=to_suspend),
            CascadeStep(StepAction.DETACH_USERS, EntityType.USER, hunter_id),
            CascadeStep(StepAction.DELETE_TAXES, EntityType.TAX, hunter_id),
            CascadeStep(StepAction.DELETE_PERMIT_REQUESTS, EntityType.PERMIT_REQUEST, hunter_id),
            CascadeStep(StepAction.DELETE_HUNTED_SPECIES, EntityType.HUNTED_SPECIES, hunter_id),
            CascadeStep(StepAction.DELETE_HUNTING_REPORTS, EntityType.HUNTING_REPORT, hunter_id),
            CascadeStep(
                StepAction.DELETE_HUNTER_ASSOCIATIONS, EntityType.GUIDE_ASSOCIATION, hunter_id
            ),
            CascadeStep(
                StepAction.DELETE_ROOT,
                EntityType.HUNTER,
                hunter_id,
                critical=True,
                expected_version=snapshot.version,
            ),
        ]

    def _suspend_hunter(self, plan: CascadePlan, snapshot: CascadeSnapshot, force: bool) -> None:
        hunter_id = snapshot.root_id
        plan.steps = [
            CascadeStep(
                StepAction.SUSPEND_PERMITS,
                EntityType.PERMIT,
                hunter_id,
                ids=tuple(snapshot.active_permit_ids),
            ),
            CascadeStep(
                StepAction.DEACTIVATE_HUNTER,
                EntityType.HUNTER,
                hunter_id,
                critical=True,
                expected_version=snapshot.version,
            ),
            CascadeStep(StepAction.SUSPEND_USERS, EntityType.USER, hunter_id),
        ]

    def _reactivate_hunter(self, plan: CascadePlan, snapshot: CascadeSnapshot, force: bool) -> None:
        hunter_id = snapshot.root_id
        plan.steps = [
            CascadeStep(
                StepAction.ACTIVATE_HUNTER,
                EntityType.HUNTER,
                hunter_id,
                critical=True,
                expected_version=snapshot.version,
            ),
            CascadeStep(StepAction.UNSUSPEND_USERS, EntityType.USER, hunter_id),
        ]

    def _delete_user(self, plan: CascadePlan, snapshot: CascadeSnapshot, force: bool) -> None:
        user_id = snapshot.root_id
        plan.steps = [
            CascadeStep(StepAction.CLEAR_HUNTER_REFERENCE, EntityType.USER, user_id),
            CascadeStep(StepAction.UNLINK_GUIDES, EntityType.HUNTING_GUIDE, user_id),
            CascadeStep(
                StepAction.DELETE_USER_PERMIT_REQUESTS, EntityType.PERMIT_REQUEST, user_id
            ),
            CascadeStep(
                StepAction.DELETE_ROOT,
                EntityType.USER,
                user_id,
                critical=True,
                expected_version=snapshot.version,
            ),
        ]

    def _delete_guide(self, plan: CascadePlan, snapshot: CascadeSnapshot, force: bool) -> None:
        guide_id = snapshot.root_id
        steps = []
        if snapshot.linked_user_id is not None:
            user_id = snapshot.linked_user_id
            steps += [
                CascadeStep(
                    StepAction.DELETE_USER_PERMIT_REQUESTS, EntityType.PERMIT_REQUEST, user_id
                ),
                # other guides may share the account
                CascadeStep(StepAction.UNLINK_GUIDES, EntityType.HUNTING_GUIDE, user_id),
                CascadeStep(StepAction.DELETE_LINKED_USER, EntityType.USER, user_id),
            ]
        steps += [
            CascadeStep(
                StepAction.DELETE_GUIDE_ASSOCIATIONS, EntityType.GUIDE_ASSOCIATION, guide_id
            ),
            CascadeStep(
                StepAction.DELETE_ROOT,
                EntityType.HUNTING_GUIDE,
                guide_id,
                critical=True,
                expected_version=snapshot.version,
            ),
        ]
        plan.steps = steps

    def _delete_permit(self, plan: CascadePlan, snapshot: CascadeSnapshot, force: bool) -> None:
        # force never lifts the tax rule
        if snapshot.tax_count > 0:
            plan.rejection = PreconditionFailedException(
                f"Permit {snapshot.root_id} is referenced by {snapshot.tax_count} tax record(s)",
                EntityType.PERMIT.value,
                snapshot.root_id,
                tax_count=snapshot.tax_count,
            )
            return
        plan.steps = [
            CascadeStep(StepAction.DELETE_ROOT, EntityType.PERMIT, snapshot.root_id, critical=True)
        ]
