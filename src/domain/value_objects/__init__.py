"""Domain value objects."""

from src.domain.value_objects.campaign import CampaignWindow

__all__ = [
    "CampaignWindow",
]
