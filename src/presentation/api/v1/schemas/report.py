from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class PermitRequestResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    hunter_id: int
    requested_type: str
    requested_category: str
    region: str | None
    status: str
    reason: str | None
    notes: str | None
    created_at: datetime
    updated_at: datetime


class HuntedSpeciesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    species_name: str
    quantity: int
    notes: str | None


class HuntingReportResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    hunter_id: int
    permit_id: int
    report_date: date
    location: str
    latitude: Decimal | None
    longitude: Decimal | None
    created_at: datetime
    species: list[HuntedSpeciesResponse] = []
