from datetime import date

from sqlalchemy import Boolean, CheckConstraint, Date, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import SerialIdMixin, TimestampMixin


class HuntingCampaign(SerialIdMixin, TimestampMixin, Base):
    """
    Hunting campaign settings.

    Saving settings inserts a new row; the row with the highest id is the
    current campaign.
    """

    __tablename__ = "hunting_campaigns"

    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)
    year: Mapped[str] = mapped_column(String, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("end_date >= start_date", name="campaign_window_check"),
    )
