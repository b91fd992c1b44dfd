from datetime import date
from decimal import Decimal

from sqlalchemy import CheckConstraint, Date, Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.entities.permit import PermitEntity
from src.domain.enums import PermitStatus
from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import RegistryModel


class Permit(RegistryModel, Base):
    """
    Hunting permit owned by exactly one hunter.

    hunter_id is not a database foreign key: the cascade rules keep it
    consistent (see LifecycleOrchestrator).
    """

    __tablename__ = "permits"

    permit_number: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    hunter_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    issue_date: Mapped[date] = mapped_column(Date, nullable=False)
    expiry_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(
        String, nullable=False, default=PermitStatus.ACTIVE.value, index=True
    )
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    type: Mapped[str | None] = mapped_column(String, nullable=True)
    category_id: Mapped[str | None] = mapped_column(String, nullable=True)
    receipt_number: Mapped[str | None] = mapped_column(String, nullable=True)
    area: Mapped[str | None] = mapped_column(String, nullable=True)

    __table_args__ = (
        CheckConstraint(f"status IN {tuple(PermitStatus.values())}", name="permit_status_check"),
    )

    def to_entity(self) -> PermitEntity:
        return PermitEntity(
            id=self.id,
            hunter_id=self.hunter_id,
            expiry_date=self.expiry_date,
            status=PermitStatus(self.status),
        )

    def effective_status(self, today: date) -> PermitStatus:
        return self.to_entity().effective_status(today)
