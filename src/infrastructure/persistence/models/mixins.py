"""
SQLAlchemy mixins for common model patterns.

These mixins provide reusable column definitions to follow DRY principles
and ensure consistency across all models.
"""
from datetime import datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func


class SerialIdMixin:
    """
    Mixin for models using a serial integer primary key.

    Provides:
        - id: Integer primary key allocated by the database

    Ids are displayed to operators and can be made contiguous again
    with the sequencing maintenance operation.
    """

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(Integer, primary_key=True, autoincrement=True)


class CreatedAtMixin:
    """
    Mixin for creation timestamp.

    Provides:
        - created_at: Timestamp set on creation (server-side default)
    """

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )


class TimestampMixin(CreatedAtMixin):
    """
    Mixin for timestamp tracking.

    Provides:
        - created_at: Timestamp set on creation (server-side default)
        - updated_at: Timestamp updated on modification (server-side default + onupdate)
    """

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class VersionedMixin:
    """
    Optimistic locking with version tracking.

    Provides:
        - version: Integer counter incremented on each lifecycle mutation

    Root mutations are conditional on the version read in the cascade snapshot:
        result = await db.execute(
            update(Model)
            .where(Model.id == id, Model.version == old_version)
            .values(data, version=old_version + 1)
        )
        if result.rowcount == 0:
            raise ConcurrentModificationException(...)
    """

    @declared_attr
    def version(cls) -> Mapped[int]:
        return mapped_column(Integer, default=1, server_default="1", nullable=False)


class RegistryModel(SerialIdMixin, CreatedAtMixin):
    """
    Complete mixin for standard registry tables.

    Combines:
        - SerialIdMixin: serial integer primary key
        - CreatedAtMixin: creation timestamp
    """

    __abstract__ = True


class LifecycleRootModel(SerialIdMixin, CreatedAtMixin, VersionedMixin):
    """
    Mixin for entities that can be the root of a cascade (hunter, user, guide).

    Combines:
        - SerialIdMixin: serial integer primary key
        - CreatedAtMixin: creation timestamp
        - VersionedMixin: optimistic locking counter
    """

    __abstract__ = True
