"""Campaign window validation for date-bounded records."""

from dataclasses import dataclass
from datetime import date

from src.domain.value_objects.campaign import CampaignWindow


@dataclass(frozen=True)
class CampaignValidation:
    accepted: bool
    reason: str | None = None


class CampaignWindowValidator:
    """
    Accepts dates inside the current campaign's [start, end] window.

    Only the window decides; the stored is_active flag is informational.
    An unconfigured campaign rejects everything.
    """

    NO_CAMPAIGN = "No hunting campaign is configured"

    def validate_date(self, window: CampaignWindow | None, candidate: date) -> CampaignValidation:
        refusal = self._refuse_window(window)
        if refusal:
            return refusal
        if not window.contains(candidate):
            return CampaignValidation(
                False,
                f"{candidate.isoformat()} is outside the {window.year} campaign "
                f"({window.describe()})",
            )
        return CampaignValidation(True)

    def validate_period(
        self, window: CampaignWindow | None, start_date: date, end_date: date
    ) -> CampaignValidation:
        """Validate a sub-season: both bounds inside the campaign, start <= end"""
        refusal = self._refuse_window(window)
        if refusal:
            return refusal
        if end_date < start_date:
            return CampaignValidation(
                False,
                f"Period end {end_date.isoformat()} precedes its start {start_date.isoformat()}",
            )
        for bound in (start_date, end_date):
            result = self.validate_date(window, bound)
            if not result.accepted:
                return result
        return CampaignValidation(True)

    def _refuse_window(self, window: CampaignWindow | None) -> CampaignValidation | None:
        if window is None:
            return CampaignValidation(False, self.NO_CAMPAIGN)
        return None
