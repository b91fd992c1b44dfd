from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UserResponse(BaseModel):
    """Schema for user account response"""

    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str
    first_name: str | None
    last_name: str | None
    phone: str | None
    region: str | None
    zone: str | None
    role: str
    hunter_id: int | None
    is_active: bool
    is_suspended: bool
    version: int
    created_at: datetime
