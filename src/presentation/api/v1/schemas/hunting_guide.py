from datetime import datetime

from pydantic import BaseModel, ConfigDict


class HuntingGuideResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    last_name: str
    first_name: str
    phone: str
    zone: str
    region: str
    id_number: str
    user_id: int | None
    is_active: bool
    version: int
    created_at: datetime


class GuideAssociationResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    guide_id: int
    hunter_id: int
    associated_at: datetime
