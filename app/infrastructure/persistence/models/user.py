"""User ORM model: account, credential, and unit membership."""

from datetime import datetime

from sqlalchemy import Boolean, DateTime, ForeignKey, Integer, String, text
from sqlalchemy.orm import Mapped, mapped_column

from app.domain.enums import DEFAULT_ROLE
from app.infrastructure.persistence.database import Base
from app.infrastructure.persistence.models.mixins import OrgChartModel


class User(OrgChartModel, Base):
    """User model. Table: users.

    role mirrors the assigned unit's role (sdm when unassigned); assigned_at
    is set exactly when unit_id is set. Unique email, username, employee_id.
    """

    __tablename__ = "users"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    username: Mapped[str | None] = mapped_column(String(100), unique=True, nullable=True)
    employee_id: Mapped[str | None] = mapped_column(
        String(50), unique=True, nullable=True
    )
    phone: Mapped[str | None] = mapped_column(String(20), nullable=True)
    avatar: Mapped[str | None] = mapped_column(String(255), nullable=True)
    hashed_password: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(
        String(20), nullable=False, default=DEFAULT_ROLE.value, index=True
    )
    unit_id: Mapped[int | None] = mapped_column(
        Integer,
        ForeignKey("units.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    assigned_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True
    )
    is_active: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
