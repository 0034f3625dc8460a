"""Organizational chart API schemas: units, admin user management, chart tree."""

from typing import Literal

from pydantic import BaseModel, EmailStr, Field, ValidationInfo, field_validator

from app.schemas.common import blank_to_none
from app.schemas.user import UnitResponse, UserResponse

UnitTypeValue = Literal["wadek_i", "wadek_ii", "unit", "sdm"]
RoleValue = Literal["admin", "dekan", "wadek", "unit", "sdm"]


class UnitWriteRequest(BaseModel):
    """Request body for creating or replacing a unit."""

    code: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    type: UnitTypeValue
    role: RoleValue
    parent_unit_id: int | None = None
    description: str | None = Field(default=None, max_length=1000)
    position_x: int | None = None
    position_y: int | None = None
    is_active: bool = True


class UserCreateRequest(BaseModel):
    """Request body for POST /organizational-chart/users. Role is always sdm."""

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    username: str | None = Field(default=None, max_length=100)
    employee_id: str | None = Field(default=None, max_length=50)
    phone: str | None = Field(default=None, max_length=20)
    password: str = Field(..., min_length=8)
    password_confirmation: str

    @field_validator("username", "employee_id", "phone", mode="before")
    @classmethod
    def blank_identifiers_to_none(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str, info: ValidationInfo) -> str:
        if "password" in info.data and v != info.data["password"]:
            raise ValueError("The password confirmation does not match.")
        return v


class UserUpdateRequest(BaseModel):
    """Request body for PUT /organizational-chart/users/{id}.

    An empty or absent password leaves the stored one unchanged.
    """

    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    username: str | None = Field(default=None, max_length=100)
    employee_id: str | None = Field(default=None, max_length=50)
    phone: str | None = Field(default=None, max_length=20)
    password: str | None = None
    password_confirmation: str | None = None

    @field_validator("username", "employee_id", "phone", mode="before")
    @classmethod
    def blank_identifiers_to_none(cls, v: object) -> object:
        return blank_to_none(v)

    @field_validator("password")
    @classmethod
    def password_length(cls, v: str | None) -> str | None:
        if v and len(v) < 8:
            raise ValueError("The password must be at least 8 characters.")
        return v

    @field_validator("password_confirmation")
    @classmethod
    def passwords_match(cls, v: str | None, info: ValidationInfo) -> str | None:
        password = info.data.get("password")
        if password and v != password:
            raise ValueError("The password confirmation does not match.")
        return v


class AssignUserRequest(BaseModel):
    """Request body for PUT /organizational-chart/users/{id}/assign. null unassigns."""

    unit_id: int | None = None
    position_x: int | None = None
    position_y: int | None = None


class UnitNodeResponse(UnitResponse):
    """A unit in the chart tree with its members and child units."""

    users: list[UserResponse] = Field(default_factory=list)
    children: list["UnitNodeResponse"] = Field(default_factory=list)


class OrgChartResponse(BaseModel):
    """Root unit nodes plus users waiting for assignment."""

    units: list[UnitNodeResponse]
    unassigned_users: list[UserResponse]


class UnitDeleteResponse(BaseModel):
    """Count of members moved back to unassigned."""

    unassigned_users: int
