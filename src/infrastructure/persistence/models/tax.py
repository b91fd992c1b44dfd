from datetime import date
from decimal import Decimal

from sqlalchemy import Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import RegistryModel


class Tax(RegistryModel, Base):
    """
    Hunting tax (e.g. warthog) paid by a hunter.

    permit_id is empty for externally-taxed hunters; a permit with at
    least one tax can never be hard-deleted.
    """

    __tablename__ = "taxes"

    tax_number: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    hunter_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    permit_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    animal_type: Mapped[str] = mapped_column(String, nullable=False)
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    location: Mapped[str] = mapped_column(String, nullable=False)
    external_hunter_name: Mapped[str | None] = mapped_column(String, nullable=True)
    external_hunter_region: Mapped[str | None] = mapped_column(String, nullable=True)
