from src.infrastructure.persistence.models.history import History
from src.infrastructure.persistence.models.hunter import Hunter
from src.infrastructure.persistence.models.hunting_campaign import \
    HuntingCampaign
from src.infrastructure.persistence.models.hunting_guide import (
    GuideHunterAssociation, HuntingGuide)
from src.infrastructure.persistence.models.hunting_report import (
    HuntedSpecies, HuntingReport)
# Mixins for model composition
from src.infrastructure.persistence.models.mixins import (
    CreatedAtMixin, LifecycleRootModel, RegistryModel, SerialIdMixin,
    TimestampMixin, VersionedMixin)
from src.infrastructure.persistence.models.permit import Permit
from src.infrastructure.persistence.models.permit_request import PermitRequest
from src.infrastructure.persistence.models.tax import Tax
from src.infrastructure.persistence.models.user import User

__all__ = [
    # Models
    "Hunter",
    "User",
    "Permit",
    "Tax",
    "PermitRequest",
    "HuntingReport",
    "HuntedSpecies",
    "HuntingGuide",
    "GuideHunterAssociation",
    "HuntingCampaign",
    "History",
    # Mixins
    "SerialIdMixin",
    "CreatedAtMixin",
    "TimestampMixin",
    "VersionedMixin",
    "RegistryModel",
    "LifecycleRootModel",
]
