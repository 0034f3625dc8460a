"""User and unit read schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class UnitResponse(BaseModel):
    """Unit fields as stored."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    code: str
    name: str
    type: str
    role: str
    parent_unit_id: int | None = None
    description: str | None = None
    position_x: int | None = None
    position_y: int | None = None
    is_active: bool


class UserResponse(BaseModel):
    """User response (no password). avatar_url is the public URL of avatar."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    username: str | None = None
    employee_id: str | None = None
    phone: str | None = None
    role: str
    unit_id: int | None = None
    assigned_at: datetime | None = None
    is_active: bool
    avatar: str | None = None
    avatar_url: str | None = None


class ProfileResponse(UserResponse):
    """Current user with the unit it belongs to."""

    unit: UnitResponse | None = None
