from datetime import date, datetime
from decimal import Decimal

from pydantic import BaseModel, ConfigDict


class PermitResponse(BaseModel):
    """
    Schema for permit response.

    status is the stored status; effective_status reports an active
    permit past its expiry date as expired.
    """

    model_config = ConfigDict(from_attributes=True)

    id: int
    permit_number: str
    hunter_id: int
    issue_date: date
    expiry_date: date
    status: str
    effective_status: str
    price: Decimal
    type: str | None
    category_id: str | None
    receipt_number: str | None
    area: str | None
    created_at: datetime

    @classmethod
    def from_orm_model(cls, permit, today: date | None = None) -> "PermitResponse":
        today = today or date.today()
        return cls.model_validate(
            {
                **{name: getattr(permit, name) for name in cls.model_fields if name != "effective_status"},
                "effective_status": permit.effective_status(today).value,
            }
        )


class TaxResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    tax_number: str
    hunter_id: int
    permit_id: int | None
    amount: Decimal
    issue_date: date
    animal_type: str
    quantity: int
    location: str
    external_hunter_name: str | None
    external_hunter_region: str | None
    created_at: datetime
