from sqlalchemy import CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.enums import PermitRequestStatus
from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import SerialIdMixin, TimestampMixin


class PermitRequest(SerialIdMixin, TimestampMixin, Base):
    """Permit request filed by a user on behalf of a hunter"""

    __tablename__ = "permit_requests"

    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    hunter_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    requested_type: Mapped[str] = mapped_column(String, nullable=False)
    requested_category: Mapped[str] = mapped_column(String, nullable=False)
    region: Mapped[str | None] = mapped_column(String, nullable=True)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=PermitRequestStatus.PENDING.value
    )
    reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint(
            f"status IN {tuple(PermitRequestStatus.values())}",
            name="permit_request_status_check",
        ),
    )
