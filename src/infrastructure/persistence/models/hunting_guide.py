from datetime import datetime

from sqlalchemy import Boolean, DateTime, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from src.infrastructure.persistence.database import Base
from src.infrastructure.persistence.models.mixins import (LifecycleRootModel,
                                                          SerialIdMixin)


class HuntingGuide(LifecycleRootModel, Base):
    """
    Hunting guide, optionally linked to one user account.

    Deleting a guide deletes its account and its hunter associations.
    """

    __tablename__ = "hunting_guides"

    last_name: Mapped[str] = mapped_column(String, nullable=False)
    first_name: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String, nullable=False)
    zone: Mapped[str] = mapped_column(String, nullable=False)
    region: Mapped[str] = mapped_column(String, nullable=False, index=True)
    id_number: Mapped[str] = mapped_column(String, unique=True, nullable=False, index=True)
    user_id: Mapped[int | None] = mapped_column(Integer, nullable=True, index=True)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)


class GuideHunterAssociation(SerialIdMixin, Base):
    """Many-to-many link between guides and the hunters they accompany"""

    __tablename__ = "guide_hunter_associations"

    guide_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    hunter_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    associated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )

    __table_args__ = (
        UniqueConstraint("guide_id", "hunter_id", name="uq_guide_hunter"),
    )
