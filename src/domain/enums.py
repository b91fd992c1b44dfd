"""Domain enumerations for the Hunting Permits Registry."""

from enum import Enum


class HunterCategory(str, Enum):
    """Hunter category enumeration"""

    RESIDENT = "resident"
    CUSTOMARY = "coutumier"
    TOURIST = "touriste"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [category.value for category in cls]


class UserRole(str, Enum):
    """User account role enumeration"""

    ADMIN = "admin"
    AGENT = "agent"
    SUB_AGENT = "sub-agent"
    HUNTER = "hunter"
    HUNTING_GUIDE = "hunting-guide"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [role.value for role in cls]


class PermitStatus(str, Enum):
    """Permit status enumeration"""

    ACTIVE = "active"
    SUSPENDED = "suspended"
    EXPIRED = "expired"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [status.value for status in cls]


class PermitRequestStatus(str, Enum):
    """Permit request status enumeration"""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [status.value for status in cls]


class EntityType(str, Enum):
    """Entity types touched by lifecycle cascades"""

    HUNTER = "hunter"
    USER = "user"
    HUNTING_GUIDE = "hunting_guide"
    PERMIT = "permit"
    TAX = "tax"
    PERMIT_REQUEST = "permit_request"
    HUNTING_REPORT = "hunting_report"
    HUNTED_SPECIES = "hunted_species"
    GUIDE_ASSOCIATION = "guide_association"


class LifecycleOperation(str, Enum):
    """Operations accepted by the lifecycle orchestrator"""

    SUSPEND = "suspend"
    REACTIVATE = "reactivate"
    DELETE = "delete"


class SequencedTable(str, Enum):
    """
    Tables whose integer primary keys can be resequenced.

    Closed set: table names never reach SQL from free-form input.
    """

    USERS = "users"
    HUNTERS = "hunters"
    PERMITS = "permits"
    TAXES = "taxes"
    PERMIT_REQUESTS = "permit_requests"
    HUNTING_REPORTS = "hunting_reports"
    HUNTED_SPECIES = "hunted_species"
    HUNTING_GUIDES = "hunting_guides"
    GUIDE_HUNTER_ASSOCIATIONS = "guide_hunter_associations"
    HUNTING_CAMPAIGNS = "hunting_campaigns"
    HISTORY = "history"

    @classmethod
    def values(cls) -> list[str]:
        """Get all valid values"""
        return [table.value for table in cls]
