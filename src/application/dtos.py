"""
Input models for registry writes.

Create models carry every required column; patch models list only the
fields an update may touch. Lifecycle flags (is_active, is_suspended,
status) are absent from patches: they change only through the
lifecycle operations.
"""

from datetime import date
from decimal import Decimal
from typing import Any, ClassVar

from pydantic import BaseModel, ConfigDict, Field, model_validator

from src.domain.enums import HunterCategory, PermitRequestStatus, UserRole


class _Input(BaseModel):
    model_config = ConfigDict(extra="forbid", use_enum_values=True, validate_default=True)


class _Patch(_Input):
    # Fields backed by NOT NULL columns: they may be omitted, never nulled
    not_nullable: ClassVar[frozenset[str]] = frozenset()

    @model_validator(mode="after")
    def reject_nulls(self) -> "_Patch":
        nulled = sorted(
            name
            for name in self.model_fields_set & self.not_nullable
            if getattr(self, name) is None
        )
        if nulled:
            raise ValueError(f"{', '.join(nulled)} cannot be null")
        return self

    def changes(self) -> dict[str, Any]:
        """Only the fields the caller actually sent"""
        return self.model_dump(exclude_unset=True)


# Hunters
class HunterCreate(_Input):
    last_name: str = Field(..., min_length=1, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=255)
    date_of_birth: date
    id_number: str = Field(..., min_length=1, max_length=100)
    phone: str | None = None
    address: str = Field(..., min_length=1)
    experience: int = Field(0, ge=0)
    profession: str = Field(..., min_length=1)
    category: HunterCategory
    nationality: str | None = None
    region: str | None = None
    zone: str | None = None
    weapon_type: str | None = None
    weapon_caliber: str | None = None
    is_minor: bool = False


class HunterPatch(_Patch):
    not_nullable = frozenset(
        {"last_name", "first_name", "address", "experience", "profession", "category"}
    )

    last_name: str | None = Field(None, min_length=1, max_length=255)
    first_name: str | None = Field(None, min_length=1, max_length=255)
    phone: str | None = None
    address: str | None = Field(None, min_length=1)
    experience: int | None = Field(None, ge=0)
    profession: str | None = None
    category: HunterCategory | None = None
    nationality: str | None = None
    region: str | None = None
    zone: str | None = None
    weapon_type: str | None = None
    weapon_caliber: str | None = None


# Users
class UserCreate(_Input):
    username: str = Field(..., min_length=3, max_length=100)
    email: str = Field(..., min_length=3, max_length=255)
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    region: str | None = None
    zone: str | None = None
    role: UserRole = UserRole.HUNTER
    hunter_id: int | None = None


class UserPatch(_Patch):
    not_nullable = frozenset({"email", "role"})

    email: str | None = Field(None, min_length=3, max_length=255)
    first_name: str | None = None
    last_name: str | None = None
    phone: str | None = None
    region: str | None = None
    zone: str | None = None
    role: UserRole | None = None
    hunter_id: int | None = None


# Hunting guides
class HuntingGuideCreate(_Input):
    last_name: str = Field(..., min_length=1)
    first_name: str = Field(..., min_length=1)
    phone: str = Field(..., min_length=1)
    zone: str = Field(..., min_length=1)
    region: str = Field(..., min_length=1)
    id_number: str = Field(..., min_length=1)
    user_id: int | None = None


class HuntingGuidePatch(_Patch):
    not_nullable = frozenset({"last_name", "first_name", "phone", "zone", "region"})

    last_name: str | None = None
    first_name: str | None = None
    phone: str | None = None
    zone: str | None = None
    region: str | None = None
    user_id: int | None = None


# Permits
class PermitCreate(_Input):
    permit_number: str = Field(..., min_length=1)
    hunter_id: int
    issue_date: date
    expiry_date: date
    price: Decimal = Field(..., ge=0)
    type: str | None = None
    category_id: str | None = None
    receipt_number: str | None = None
    area: str | None = None

    @model_validator(mode="after")
    def validate_dates(self) -> "PermitCreate":
        if self.expiry_date < self.issue_date:
            raise ValueError("expiry_date must not precede issue_date")
        return self


class PermitPatch(_Patch):
    not_nullable = frozenset({"price"})

    price: Decimal | None = Field(None, ge=0)
    type: str | None = None
    category_id: str | None = None
    receipt_number: str | None = None
    area: str | None = None


class PermitRenewal(_Input):
    expiry_date: date


# Taxes
class TaxCreate(_Input):
    tax_number: str = Field(..., min_length=1)
    hunter_id: int
    permit_id: int | None = None
    amount: Decimal = Field(..., ge=0)
    issue_date: date
    animal_type: str = Field(..., min_length=1)
    quantity: int = Field(..., ge=1)
    location: str = Field(..., min_length=1)
    external_hunter_name: str | None = None
    external_hunter_region: str | None = None


class TaxPatch(_Patch):
    not_nullable = frozenset({"amount", "animal_type", "quantity", "location"})

    amount: Decimal | None = Field(None, ge=0)
    animal_type: str | None = None
    quantity: int | None = Field(None, ge=1)
    location: str | None = None


# Permit requests
class PermitRequestCreate(_Input):
    user_id: int
    hunter_id: int
    requested_type: str = Field(..., min_length=1)
    requested_category: str = Field(..., min_length=1)
    region: str | None = None
    notes: str | None = None


class PermitRequestPatch(_Patch):
    not_nullable = frozenset({"status"})

    status: PermitRequestStatus | None = None
    reason: str | None = None
    notes: str | None = None


# Hunting reports
class HuntedSpeciesCreate(_Input):
    species_name: str = Field(..., min_length=1)
    quantity: int = Field(1, ge=1)
    notes: str | None = None


class HuntingReportCreate(_Input):
    user_id: int
    hunter_id: int
    permit_id: int
    report_date: date
    location: str = Field(..., min_length=1)
    latitude: Decimal | None = None
    longitude: Decimal | None = None
    species: list[HuntedSpeciesCreate] = Field(default_factory=list)


class HuntingReportPatch(_Patch):
    not_nullable = frozenset({"location"})

    location: str | None = None
    latitude: Decimal | None = None
    longitude: Decimal | None = None


# Campaign
class CampaignSettings(_Input):
    """Current hunting campaign; is_active is derived from today when omitted"""

    start_date: date
    end_date: date
    year: str = Field(..., min_length=4, max_length=9)
    is_active: bool | None = None

    @model_validator(mode="after")
    def validate_window(self) -> "CampaignSettings":
        if self.end_date < self.start_date:
            raise ValueError("end_date must not precede start_date")
        return self
