"""Create / read / patch operations of RegistryStorage"""

from datetime import date, timedelta
from decimal import Decimal

import pytest
from pydantic import ValidationError

from src.application.dtos import (HunterPatch, HuntingGuidePatch,
                                  PermitCreate, PermitPatch, TaxPatch,
                                  UserPatch)
from src.domain.enums import PermitStatus
from src.domain.exceptions import (PreconditionFailedException,
                                   ResourceNotFoundException,
                                   ValidationException)


class TestPatches:
    @pytest.mark.asyncio
    async def test_patch_changes_only_sent_fields(self, storage, make_hunter):
        hunter = await make_hunter(phone="+237677000000")

        patched = await storage.patch_hunter(hunter.id, HunterPatch(zone="Lom-et-Djerem"))

        assert patched.zone == "Lom-et-Djerem"
        assert patched.phone == "+237677000000"
        history = await storage.get_history("hunter", hunter.id)
        assert history[-1].details == "Updated fields: zone"

    def test_lifecycle_flags_are_not_patchable(self):
        """
        GIVEN a patch trying to set a lifecycle flag
        WHEN validating it
        THEN the patch is refused (flags change only through lifecycle operations)
        """
        with pytest.raises(ValidationError):
            HunterPatch(is_active=False)
        with pytest.raises(ValidationError):
            UserPatch(is_suspended=True)
        with pytest.raises(ValidationError):
            PermitPatch(status="active")

    @pytest.mark.parametrize(
        "patch_type, fields",
        [
            (TaxPatch, {"amount": None}),
            (HunterPatch, {"last_name": None}),
            (HuntingGuidePatch, {"zone": None, "phone": "+237699000000"}),
            (PermitPatch, {"price": None}),
        ],
    )
    def test_required_columns_cannot_be_nulled(self, patch_type, fields):
        with pytest.raises(ValidationError) as exc_info:
            patch_type(**fields)

        assert "cannot be null" in str(exc_info.value)

    def test_nullable_columns_can_be_cleared(self):
        assert HunterPatch(phone=None).changes() == {"phone": None}
        assert TaxPatch().changes() == {}

    @pytest.mark.asyncio
    async def test_tax_patch_leaves_amount_when_omitted(
        self, storage, make_hunter, make_permit, make_tax
    ):
        hunter = await make_hunter()
        permit = await make_permit(hunter.id)
        tax = await make_tax(hunter.id, permit.id)

        patched = await storage.patch_tax(tax.id, TaxPatch(location="Mayo-Rey"))

        assert patched.location == "Mayo-Rey"
        assert patched.amount == tax.amount

    @pytest.mark.asyncio
    async def test_patch_missing_row_returns_none(self, storage):
        assert await storage.patch_hunter(404, HunterPatch(zone="Mayo-Rey")) is None

    @pytest.mark.asyncio
    async def test_user_patch_rejects_unknown_hunter(self, storage, make_user):
        user = await make_user()

        with pytest.raises(ValidationException):
            await storage.patch_user(user.id, UserPatch(hunter_id=404))


class TestCreateValidation:
    @pytest.mark.asyncio
    async def test_duplicate_identity_number_rejected(self, storage, make_hunter):
        await make_hunter(id_number="CM-DUPLICATE")

        with pytest.raises(ValidationException):
            await make_hunter(id_number="CM-DUPLICATE")

    @pytest.mark.asyncio
    async def test_permit_requires_existing_hunter(self, storage, future_date):
        with pytest.raises(ValidationException) as exc_info:
            await storage.create_permit(
                PermitCreate(
                    permit_number="P-ORPHAN",
                    hunter_id=404,
                    issue_date=date.today(),
                    expiry_date=future_date,
                    price=Decimal("1000"),
                )
            )

        assert exc_info.value.details == {"field": "hunter_id"}

    def test_permit_expiry_before_issue_invalid(self):
        with pytest.raises(ValidationError):
            PermitCreate(
                permit_number="P-1",
                hunter_id=1,
                issue_date=date(2025, 5, 1),
                expiry_date=date(2025, 4, 1),
                price=Decimal("1000"),
            )


class TestPermitState:
    @pytest.mark.asyncio
    async def test_active_and_expired_queries(self, storage, make_hunter, make_permit):
        hunter = await make_hunter()
        active = await make_permit(hunter.id)
        expired = await make_permit(
            hunter.id,
            issue_date=date.today() - timedelta(days=400),
            expiry_date=date.today() - timedelta(days=1),
        )
        suspended = await make_permit(hunter.id)
        await storage.suspend_permit(suspended.id)

        assert [p.id for p in await storage.get_active_permits_by_hunter(hunter.id)] == [active.id]
        assert [p.id for p in await storage.get_expired_permits_by_hunter(hunter.id)] == [expired.id]
        assert len(await storage.get_permits_by_hunter(hunter.id)) == 3

    @pytest.mark.asyncio
    async def test_suspending_twice_is_a_precondition_failure(
        self, storage, make_hunter, make_permit
    ):
        hunter = await make_hunter()
        permit = await make_permit(hunter.id)
        await storage.suspend_permit(permit.id)

        with pytest.raises(PreconditionFailedException):
            await storage.suspend_permit(permit.id)

    @pytest.mark.asyncio
    async def test_renew_returns_suspended_permit_to_active(
        self, storage, make_hunter, make_permit
    ):
        hunter = await make_hunter()
        permit = await make_permit(hunter.id)
        await storage.suspend_permit(permit.id)
        new_expiry = date.today() + timedelta(days=365)

        renewed = await storage.renew_permit(permit.id, new_expiry)

        assert renewed.status == PermitStatus.ACTIVE.value
        assert renewed.expiry_date == new_expiry

    @pytest.mark.asyncio
    async def test_renew_requires_future_date(self, storage, make_hunter, make_permit):
        hunter = await make_hunter()
        permit = await make_permit(hunter.id)
        await storage.suspend_permit(permit.id)

        with pytest.raises(ValidationException):
            await storage.renew_permit(permit.id, date.today())

        assert (await storage.get_permit(permit.id)).status == PermitStatus.SUSPENDED.value


class TestGuideAssociations:
    @pytest.mark.asyncio
    async def test_association_is_idempotent(self, storage, make_guide, make_hunter):
        guide = await make_guide()
        hunter = await make_hunter()

        first = await storage.associate_hunter_to_guide(guide.id, hunter.id)
        second = await storage.associate_hunter_to_guide(guide.id, hunter.id)

        assert first.id == second.id
        assert len(await storage.get_guide_hunter_associations(guide.id)) == 1

    @pytest.mark.asyncio
    async def test_association_requires_both_ends(self, storage, make_guide):
        guide = await make_guide()

        with pytest.raises(ResourceNotFoundException):
            await storage.associate_hunter_to_guide(guide.id, 404)

    @pytest.mark.asyncio
    async def test_remove_association(self, storage, make_guide, make_hunter):
        guide = await make_guide()
        hunter = await make_hunter()
        await storage.associate_hunter_to_guide(guide.id, hunter.id)

        assert await storage.remove_hunter_association(guide.id, hunter.id) is True
        assert await storage.remove_hunter_association(guide.id, hunter.id) is False
