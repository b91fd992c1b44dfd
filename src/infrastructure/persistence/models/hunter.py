from datetime import date

from sqlalchemy import Boolean, CheckConstraint, Date, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from src.domain.enums import HunterCategory
from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import LifecycleRootModel


class Hunter(LifecycleRootModel, Base):
    """
    Registered hunter.

    Owns permits, taxes, permit requests and hunting reports. Users and
    guide associations reference it weakly through hunter_id.
    """

    __tablename__ = "hunters"

    last_name: Mapped[str] = mapped_column(String, nullable=False)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    date_of_birth: Mapped[date] = mapped_column(Date, nullable=False)
    id_number: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String, nullable=True)
    address: Mapped[str] = mapped_column(String, nullable=False)
    experience: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    profession: Mapped[str] = mapped_column(String, nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    nationality: Mapped[str | None] = mapped_column(String, nullable=True)
    region: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    zone: Mapped[str | None] = mapped_column(String, nullable=True, index=True)
    weapon_type: Mapped[str | None] = mapped_column(String, nullable=True)
    weapon_caliber: Mapped[str | None] = mapped_column(String, nullable=True)
    is_minor: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    __table_args__ = (
        CheckConstraint(
            f"category IN {tuple(HunterCategory.values())}", name="hunter_category_check"
        ),
    )
