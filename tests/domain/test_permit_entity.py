"""Unit tests for the permit status state machine"""

from datetime import date

import pytest
from freezegun import freeze_time

from src.domain.entities.permit import PermitEntity
from src.domain.enums import PermitStatus


def make_permit(status=PermitStatus.ACTIVE, expiry=date(2025, 6, 30)) -> PermitEntity:
    return PermitEntity(id=1, hunter_id=1, expiry_date=expiry, status=status)


class TestEffectiveStatus:
    def test_active_before_expiry(self):
        assert make_permit().effective_status(date(2025, 6, 30)) == PermitStatus.ACTIVE

    def test_active_past_expiry_is_observed_expired(self):
        """
        GIVEN an active permit whose expiry date has passed
        WHEN reading its status
        THEN it is reported expired without being rewritten
        """
        permit = make_permit()

        assert permit.effective_status(date(2025, 7, 1)) == PermitStatus.EXPIRED
        assert permit.status == PermitStatus.ACTIVE

    def test_suspended_stays_suspended_after_expiry(self):
        permit = make_permit(status=PermitStatus.SUSPENDED)

        assert permit.effective_status(date(2026, 1, 1)) == PermitStatus.SUSPENDED


class TestTransitions:
    def test_suspend_active_permit(self):
        permit = make_permit()

        permit.suspend()

        assert permit.status == PermitStatus.SUSPENDED

    def test_suspend_twice_rejected(self):
        permit = make_permit(status=PermitStatus.SUSPENDED)

        with pytest.raises(ValueError):
            permit.suspend()

    @freeze_time("2025-08-01")
    def test_renew_suspended_permit_with_future_date(self):
        permit = make_permit(status=PermitStatus.SUSPENDED)

        permit.renew(date(2026, 6, 30), today=date.today())

        assert permit.status == PermitStatus.ACTIVE
        assert permit.expiry_date == date(2026, 6, 30)
        assert permit.is_active_on(date.today())

    @freeze_time("2025-08-01")
    def test_renew_with_past_date_rejected(self):
        permit = make_permit(status=PermitStatus.SUSPENDED)

        with pytest.raises(ValueError):
            permit.renew(date(2025, 8, 1), today=date.today())

        assert permit.status == PermitStatus.SUSPENDED
