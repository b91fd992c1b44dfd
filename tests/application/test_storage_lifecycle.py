"""Lifecycle cascades against a real database"""

from datetime import date, timedelta

import pytest
from sqlalchemy import delete, text

from src.application.services.cascade_resolver import (CascadeResolver,
                                                       StepAction)
from src.application.services.lifecycle_orchestrator import \
    LifecycleOrchestrator
from src.domain.enums import EntityType, LifecycleOperation, PermitStatus
from src.domain.exceptions import ConcurrentModificationException
from src.infrastructure.persistence.models import Tax
from src.infrastructure.persistence.repositories.tax_repo import TaxRepository


class TestDeleteHunter:
    @pytest.mark.asyncio
    async def test_active_permit_blocks_unforced_delete(self, storage, make_hunter, make_permit):
        """
        GIVEN a hunter with an active permit
        WHEN deleting without force
        THEN the call returns False and nothing changes
        """
        hunter = await make_hunter()
        permit = await make_permit(hunter.id)

        assert await storage.delete_hunter(hunter.id) is False

        assert await storage.get_hunter(hunter.id) is not None
        unchanged = await storage.get_permit(permit.id)
        assert unchanged.status == PermitStatus.ACTIVE.value

    @pytest.mark.asyncio
    async def test_forced_delete_retains_permits_as_suspended(
        self, storage, make_hunter, make_permit, make_tax
    ):
        """
        GIVEN a hunter with a taxed active permit
        WHEN deleting with force
        THEN the hunter is gone, the permit is kept and suspended
        AND the hunter's taxes are removed
        """
        hunter = await make_hunter()
        permit = await make_permit(hunter.id)
        await make_tax(hunter.id, permit.id)

        assert await storage.delete_hunter(hunter.id, force=True) is True

        assert await storage.get_hunter(hunter.id) is None
        retained = await storage.get_permit(permit.id)
        assert retained is not None
        assert retained.status == PermitStatus.SUSPENDED.value
        assert await storage.get_taxes_by_hunter(hunter.id) == []

    @pytest.mark.asyncio
    async def test_hunter_without_active_permits_needs_no_force(
        self, storage, make_hunter, make_permit
    ):
        hunter = await make_hunter()
        await make_permit(
            hunter.id,
            issue_date=date.today() - timedelta(days=400),
            expiry_date=date.today() - timedelta(days=35),
        )

        assert await storage.delete_hunter(hunter.id) is True

    @pytest.mark.asyncio
    async def test_referencing_users_detached_with_hunter_removal(
        self, storage, make_hunter, make_user
    ):
        """
        GIVEN a user pointing at a hunter
        WHEN the hunter is deleted
        THEN the user survives with no hunter reference
        AND detachment precedes the hunter row removal in the cascade
        """
        hunter = await make_hunter()
        user = await make_user(hunter_id=hunter.id, role="hunter")

        report = await storage.run_lifecycle(
            EntityType.HUNTER, hunter.id, LifecycleOperation.DELETE
        )

        assert report.completed
        order = [r.step.action for r in report.results]
        assert order.index(StepAction.DETACH_USERS) < order.index(StepAction.DELETE_ROOT)
        assert report.affected(StepAction.DETACH_USERS) == 1
        survivor = await storage.get_user(user.id)
        assert survivor is not None
        assert survivor.hunter_id is None

    @pytest.mark.asyncio
    async def test_dependents_are_removed(
        self, storage, make_hunter, make_user, make_guide, make_permit_request
    ):
        hunter = await make_hunter()
        user = await make_user()
        guide = await make_guide()
        request = await make_permit_request(user.id, hunter.id)
        await storage.associate_hunter_to_guide(guide.id, hunter.id)

        assert await storage.delete_hunter(hunter.id) is True

        assert await storage.get_permit_request(request.id) is None
        assert await storage.get_guide_hunter_associations(guide.id) == []
        assert await storage.get_hunting_guide(guide.id) is not None

    @pytest.mark.asyncio
    async def test_missing_hunter_returns_false(self, storage):
        assert await storage.delete_hunter(999, force=True) is False

    @pytest.mark.asyncio
    async def test_delete_is_journaled(self, storage, make_hunter):
        hunter = await make_hunter()

        await storage.delete_hunter(hunter.id)

        operations = [h.operation for h in await storage.get_history("hunter", hunter.id)]
        assert operations == ["create", "delete"]

    @pytest.mark.asyncio
    async def test_delete_all_hunters_counts_blocked_ones(
        self, storage, make_hunter, make_permit
    ):
        free = await make_hunter()
        blocked = await make_hunter()
        await make_permit(blocked.id)

        result = await storage.delete_all_hunters()

        assert (result.successful, result.failed) == (1, 1)
        assert result.failures[0][0] == blocked.id
        assert await storage.get_hunter(free.id) is None


class TestConcurrentModification:
    @pytest.mark.asyncio
    async def test_version_change_after_snapshot_rolls_back_cascade(
        self, storage, make_hunter, make_permit
    ):
        """
        GIVEN a snapshot of a hunter taken before another lifecycle change
        WHEN the planned delete reaches the root row
        THEN ConcurrentModificationException is raised
        AND the whole cascade is rolled back
        """
        hunter = await make_hunter()
        permit = await make_permit(hunter.id)

        with pytest.raises(ConcurrentModificationException):
            async with storage.unit_of_work() as repos:
                orchestrator = LifecycleOrchestrator(repos)
                snapshot = await orchestrator.load_snapshot(
                    EntityType.HUNTER, hunter.id, date.today()
                )
                # A competing suspend bumps the version
                await repos.hunters.set_active(hunter.id, False, snapshot.version)
                plan = CascadeResolver().resolve(snapshot, LifecycleOperation.DELETE, force=True)
                await orchestrator.execute(plan)

        assert await storage.get_hunter(hunter.id) is not None
        assert (await storage.get_permit(permit.id)).status == PermitStatus.ACTIVE.value


class TestFailingDependentStep:
    @pytest.mark.asyncio
    async def test_failed_step_is_rolled_back_to_its_savepoint(
        self, storage, monkeypatch, make_hunter, make_user, make_permit, make_tax,
        make_permit_request,
    ):
        """
        GIVEN a tax cleanup that deletes rows and then hits a store error
        WHEN force-deleting the hunter
        THEN the cleanup is skipped with its partial delete undone
        AND every other step and the hunter removal still commit
        """
        hunter = await make_hunter()
        user = await make_user(hunter_id=hunter.id)
        permit = await make_permit(hunter.id)
        tax = await make_tax(hunter.id, permit.id)
        request = await make_permit_request(user.id, hunter.id)

        async def delete_then_fail(self, hunter_id):
            await self.db.execute(delete(Tax).where(Tax.hunter_id == hunter_id))
            await self.db.execute(text("DELETE FROM no_such_table"))

        monkeypatch.setattr(TaxRepository, "delete_by_hunter", delete_then_fail)

        report = await storage.run_lifecycle(
            EntityType.HUNTER, hunter.id, LifecycleOperation.DELETE, force=True
        )

        assert report.completed is True
        assert [r.step.action for r in report.skipped] == [StepAction.DELETE_TAXES]
        assert await storage.get_hunter(hunter.id) is None
        assert [t.id for t in await storage.get_taxes_by_hunter(hunter.id)] == [tax.id]
        assert await storage.get_permit_request(request.id) is None
        assert (await storage.get_user(user.id)).hunter_id is None
        assert (await storage.get_permit(permit.id)).status == PermitStatus.SUSPENDED.value


class TestSuspendAndReactivate:
    @pytest.mark.asyncio
    async def test_suspend_cascades_to_active_permits_and_users(
        self, storage, make_hunter, make_permit, make_user
    ):
        hunter = await make_hunter()
        active = await make_permit(hunter.id)
        expired = await make_permit(
            hunter.id,
            issue_date=date.today() - timedelta(days=400),
            expiry_date=date.today() - timedelta(days=35),
        )
        user = await make_user(hunter_id=hunter.id, role="hunter")

        suspended = await storage.suspend_hunter(hunter.id)

        assert suspended.is_active is False
        assert suspended.version == hunter.version + 1
        assert (await storage.get_permit(active.id)).status == PermitStatus.SUSPENDED.value
        assert (await storage.get_permit(expired.id)).status == PermitStatus.ACTIVE.value
        assert (await storage.get_user(user.id)).is_suspended is True

    @pytest.mark.asyncio
    async def test_reactivate_leaves_permits_suspended(
        self, storage, make_hunter, make_permit, make_user
    ):
        """
        GIVEN a suspended hunter whose permit was suspended with it
        WHEN the hunter is reactivated
        THEN hunter and accounts are active again but the permit stays suspended
        """
        hunter = await make_hunter()
        permit = await make_permit(hunter.id)
        user = await make_user(hunter_id=hunter.id, role="hunter")
        await storage.suspend_hunter(hunter.id)

        reactivated = await storage.reactivate_hunter(hunter.id)

        assert reactivated.is_active is True
        assert (await storage.get_user(user.id)).is_suspended is False
        assert (await storage.get_permit(permit.id)).status == PermitStatus.SUSPENDED.value

    @pytest.mark.asyncio
    async def test_suspend_missing_hunter_returns_none(self, storage):
        assert await storage.suspend_hunter(404) is None
        assert await storage.reactivate_hunter(404) is None


class TestDeleteUser:
    @pytest.mark.asyncio
    async def test_user_delete_detaches_without_deleting_hunter(
        self, storage, make_hunter, make_user, make_guide, make_permit_request
    ):
        hunter = await make_hunter()
        user = await make_user(hunter_id=hunter.id, role="hunting-guide")
        guide = await make_guide(user_id=user.id)
        request = await make_permit_request(user.id, hunter.id)

        assert await storage.delete_user(user.id) is True

        assert await storage.get_user(user.id) is None
        assert await storage.get_hunter(hunter.id) is not None
        assert (await storage.get_hunting_guide(guide.id)).user_id is None
        assert await storage.get_permit_request(request.id) is None

    @pytest.mark.asyncio
    async def test_deleting_twice_is_a_no_op_failure(self, storage, make_user):
        user = await make_user()

        assert await storage.delete_user(user.id) is True
        assert await storage.delete_user(user.id) is False


class TestDeleteHuntingGuide:
    @pytest.mark.asyncio
    async def test_guide_delete_removes_account_and_associations(
        self, storage, make_hunter, make_user, make_guide, make_permit_request
    ):
        hunter = await make_hunter()
        account = await make_user(role="hunting-guide")
        guide = await make_guide(user_id=account.id)
        request = await make_permit_request(account.id, hunter.id)
        await storage.associate_hunter_to_guide(guide.id, hunter.id)

        assert await storage.delete_hunting_guide(guide.id) is True

        assert await storage.get_hunting_guide(guide.id) is None
        assert await storage.get_user(account.id) is None
        assert await storage.get_permit_request(request.id) is None
        assert await storage.get_guide_hunter_associations(guide.id) == []
        assert await storage.get_hunter(hunter.id) is not None

    @pytest.mark.asyncio
    async def test_guides_sharing_the_deleted_account_are_unlinked(
        self, storage, make_user, make_guide
    ):
        """
        GIVEN two guides linked to the same account
        WHEN one guide is deleted with the account
        THEN the other guide survives with no account reference
        """
        account = await make_user(role="hunting-guide")
        deleted = await make_guide(user_id=account.id)
        sharing = await make_guide(user_id=account.id)

        assert await storage.delete_hunting_guide(deleted.id) is True

        assert await storage.get_user(account.id) is None
        survivor = await storage.get_hunting_guide(sharing.id)
        assert survivor is not None
        assert survivor.user_id is None

    @pytest.mark.asyncio
    async def test_delete_all_hunting_guides(self, storage, make_guide):
        await make_guide()
        await make_guide()

        result = await storage.delete_all_hunting_guides()

        assert (result.successful, result.failed) == (2, 0)
        assert await storage.list_hunting_guides() == []


class TestDeletePermit:
    @pytest.mark.asyncio
    async def test_taxed_permit_never_deleted(self, storage, make_hunter, make_permit, make_tax):
        hunter = await make_hunter()
        permit = await make_permit(hunter.id)
        await make_tax(hunter.id, permit.id)

        assert await storage.delete_permit(permit.id) is False
        assert await storage.get_permit(permit.id) is not None

    @pytest.mark.asyncio
    async def test_untaxed_permit_deleted(self, storage, make_hunter, make_permit):
        hunter = await make_hunter()
        permit = await make_permit(hunter.id)

        assert await storage.delete_permit(permit.id) is True
        assert await storage.get_permit(permit.id) is None

    @pytest.mark.asyncio
    async def test_delete_all_suspended_permits_skips_taxed(
        self, storage, make_hunter, make_permit, make_tax
    ):
        hunter = await make_hunter()
        taxed = await make_permit(hunter.id)
        free = await make_permit(hunter.id)
        await make_tax(hunter.id, taxed.id)
        await storage.suspend_permit(taxed.id)
        await storage.suspend_permit(free.id)

        result = await storage.delete_all_suspended_permits()

        assert (result.successful, result.failed) == (1, 1)
        assert [p.id for p in await storage.get_suspended_permits()] == [taxed.id]
