"""Hunting campaign value objects."""

from dataclasses import dataclass
from datetime import date


@dataclass(frozen=True)
class CampaignWindow:
    """Inclusive [start_date, end_date] window of a hunting campaign"""

    start_date: date
    end_date: date
    year: str

    def __post_init__(self):
        if self.end_date < self.start_date:
            raise ValueError(
                f"Campaign end date {self.end_date} precedes start date {self.start_date}"
            )

    def contains(self, candidate: date) -> bool:
        return self.start_date <= candidate <= self.end_date

    def describe(self) -> str:
        return f"{self.start_date.isoformat()} to {self.end_date.isoformat()}"

    @staticmethod
    def is_open_on(start_date: date, end_date: date, today: date) -> bool:
        """Whether a campaign with these bounds is running on a given day"""
        return start_date <= today <= end_date
