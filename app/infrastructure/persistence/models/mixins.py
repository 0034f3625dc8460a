"""SQLAlchemy mixins for common model patterns (DRY).

Provides: IntegerIdMixin, TimestampMixin, and the combined OrgChartModel.
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer
from sqlalchemy.orm import Mapped, declared_attr, mapped_column
from sqlalchemy.sql import func


class IntegerIdMixin:
    """Mixin for models keyed by an autoincrement integer id."""

    @declared_attr
    def id(cls) -> Mapped[int]:
        return mapped_column(Integer, primary_key=True, autoincrement=True)


class TimestampMixin:
    """Mixin for created_at and updated_at (server defaults, timezone-aware)."""

    @declared_attr
    def created_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True), server_default=func.now(), nullable=False
        )

    @declared_attr
    def updated_at(cls) -> Mapped[datetime]:
        return mapped_column(
            DateTime(timezone=True),
            server_default=func.now(),
            onupdate=func.now(),
            nullable=False,
        )


class OrgChartModel(IntegerIdMixin, TimestampMixin):
    """Combined mixin: integer id + created_at/updated_at. Common for all tables."""

    __abstract__ = True
