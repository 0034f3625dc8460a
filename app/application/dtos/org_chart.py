"""DTOs for unit management and chart assembly."""

from dataclasses import dataclass, field
from typing import Any

from app.application.dtos.user import UserResult


@dataclass(frozen=True)
class UnitResult:
    """Unit read-model."""

    id: int
    code: str
    name: str
    type: str
    role: str
    parent_unit_id: int | None
    description: str | None
    position_x: int | None
    position_y: int | None
    is_active: bool


def unit_to_result(u: Any) -> UnitResult:
    """Map a unit entity to UnitResult."""
    return UnitResult(
        id=u.id,
        code=u.code,
        name=u.name,
        type=u.type,
        role=u.role,
        parent_unit_id=u.parent_unit_id,
        description=u.description,
        position_x=u.position_x,
        position_y=u.position_y,
        is_active=u.is_active,
    )


@dataclass
class UnitNode:
    """A unit in the assembled chart with its members and child units."""

    unit: UnitResult
    users: list[UserResult] = field(default_factory=list)
    children: list["UnitNode"] = field(default_factory=list)


@dataclass(frozen=True)
class OrgChartResult:
    """Whole chart: root unit nodes plus users waiting for assignment."""

    units: list[UnitNode]
    unassigned_users: list[UserResult]
