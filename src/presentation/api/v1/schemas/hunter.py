from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class HunterResponse(BaseModel):
    """Schema for hunter response"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    last_name: str
    first_name: str
    date_of_birth: date
    id_number: str
    phone: str | None
    address: str
    experience: int
    profession: str
    category: str
    nationality: str | None
    region: str | None
    zone: str | None
    weapon_type: str | None
    weapon_caliber: str | None
    is_minor: bool
    is_active: bool
    version: int
    created_at: datetime
