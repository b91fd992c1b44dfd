"""Application services."""

from src.application.services.campaign_validator import (
    CampaignValidation, CampaignWindowValidator)
from src.application.services.cascade_resolver import (CascadePlan,
                                                       CascadeResolver,
                                                       CascadeSnapshot,
                                                       CascadeStep,
                                                       PermitSnapshot,
                                                       StepAction)
from src.application.services.identity_sequencer import IdentitySequencer
from src.application.services.lifecycle_orchestrator import (
    CascadeReport, LifecycleOrchestrator, StepOutcome, StepResult)

__all__ = [
    "IdentitySequencer",
    "CascadeResolver",
    "CascadeSnapshot",
    "CascadePlan",
    "CascadeStep",
    "PermitSnapshot",
    "StepAction",
    "LifecycleOrchestrator",
    "CascadeReport",
    "StepOutcome",
    "StepResult",
    "CampaignWindowValidator",
    "CampaignValidation",
]
