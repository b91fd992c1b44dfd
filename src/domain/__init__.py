"""
Domain layer - Enterprise Business Rules.

This is the innermost layer containing business entities, value objects,
and domain exceptions. It has no dependencies on other layers.
"""

from src.domain.entities import PermitEntity
from src.domain.enums import (EntityType, HunterCategory, LifecycleOperation,
                              PermitRequestStatus, PermitStatus,
                              SequencedTable, UserRole)
from src.domain.exceptions import (CampaignWindowException,
                                   CascadeIntegrityException,
                                   ConcurrentModificationException,
                                   MaintenanceDisabledException,
                                   PreconditionFailedException,
                                   ReferentialIntegrityException,
                                   RegistryException,
                                   ResourceNotFoundException,
                                   UnknownTableException, ValidationException)
from src.domain.value_objects import CampaignWindow

__all__ = [
    # Entities
    "PermitEntity",
    # Value Objects
    "CampaignWindow",
    # Enums
    "EntityType",
    "HunterCategory",
    "LifecycleOperation",
    "PermitRequestStatus",
    "PermitStatus",
    "SequencedTable",
    "UserRole",
    # Exceptions
    "RegistryException",
    "ValidationException",
    "ResourceNotFoundException",
    "UnknownTableException",
    "PreconditionFailedException",
    "ConcurrentModificationException",
    "CascadeIntegrityException",
    "ReferentialIntegrityException",
    "CampaignWindowException",
    "MaintenanceDisabledException",
]
