from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import (RegistryModel,
                                                          SerialIdMixin,
                                                          TimestampMixin)


class HuntingReport(SerialIdMixin, TimestampMixin, Base):
    """Declaration of game taken under a permit"""

    __tablename__ = "hunting_reports"

    user_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    hunter_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    permit_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    report_date: Mapped[date] = mapped_column(Date, nullable=False)
    location: Mapped[str] = mapped_column(String, nullable=False)
    latitude: Mapped[Decimal | None] = mapped_column(Numeric(9, 6), nullable=True)
    longitude: Mapped[Decimal | None] = mapped_column(Numeric(9, 6), nullable=True)


class HuntedSpecies(RegistryModel, Base):
    """Species line of a hunting report"""

    __tablename__ = "hunted_species"

    report_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    species_name: Mapped[str] = mapped_column(String, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
