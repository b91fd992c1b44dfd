"""
Permit domain entity.

This represents the business concept of a hunting permit, independent of
how it's stored in the database.
"""

from dataclasses import dataclass
from datetime import date

from src.domain.enums import PermitStatus


@dataclass
class PermitEntity:
    """
    Domain entity for Permit (status state machine)

    active --(suspend)--> suspended
    active --(expiry date passed)--> expired, observed at query time only
    suspended --(renew)--> active, with a new expiry date
    """

    id: int
    hunter_id: int
    expiry_date: date
    status: PermitStatus

    def effective_status(self, today: date) -> PermitStatus:
        """
        Status as seen on a given day.

        No background process expires permits: an active permit whose
        expiry date is in the past is reported as expired.
        """
        if self.status == PermitStatus.ACTIVE and self.expiry_date < today:
            return PermitStatus.EXPIRED
        return self.status

    def is_active_on(self, today: date) -> bool:
        return self.effective_status(today) == PermitStatus.ACTIVE

    def suspend(self) -> None:
        """
        Suspend permit.
        Suspension is terminal with respect to automatic transitions.
        """
        if self.status == PermitStatus.SUSPENDED:
            raise ValueError("Permit is already suspended")
        self.status = PermitStatus.SUSPENDED

    def renew(self, new_expiry_date: date, today: date) -> None:
        """
        Renew permit with a new expiry date.
        The only way back to ACTIVE for a suspended or expired permit.
        """
        if new_expiry_date <= today:
            raise ValueError("Renewal expiry date must be in the future")
        self.expiry_date = new_expiry_date
        self.status = PermitStatus.ACTIVE
