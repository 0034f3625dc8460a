"""Organizational chart API (admin only): chart tree, units, user membership."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import (
    get_org_chart_service,
    get_storage,
    require_roles,
)
from app.api.v1.endpoints._responses import (
    unit_node_response,
    unit_response,
    user_response,
)
from app.application.interfaces.services import IStorageService
from app.application.services import OrgChartService
from app.core.limiter import limit_writes
from app.domain.enums import UserRole
from app.schemas.common import DataResponse, ErrorResponse, MessageResponse
from app.schemas.org_chart import (
    AssignUserRequest,
    OrgChartResponse,
    UnitDeleteResponse,
    UnitWriteRequest,
    UserCreateRequest,
    UserUpdateRequest,
)
from app.schemas.user import UnitResponse, UserResponse

router = APIRouter(
    dependencies=[Depends(require_roles(UserRole.ADMIN))],
    responses={403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)

OrgChart = Annotated[OrgChartService, Depends(get_org_chart_service)]
Storage = Annotated[IStorageService, Depends(get_storage)]


@router.get("", response_model=DataResponse[OrgChartResponse])
async def get_org_chart(org_chart: OrgChart, storage: Storage):
    """Active units as a tree with their members, plus unassigned users."""
    chart = await org_chart.get_chart()
    return DataResponse(
        data=OrgChartResponse(
            units=[unit_node_response(n, storage) for n in chart.units],
            unassigned_users=[user_response(u, storage) for u in chart.unassigned_users],
        )
    )


# ---- units ----


@router.post("/units", response_model=DataResponse[UnitResponse], status_code=201)
@limit_writes
async def create_unit(
    request: Request,
    body: UnitWriteRequest,
    org_chart: OrgChart,
):
    """Create a unit."""
    unit = await org_chart.create_unit(body.model_dump())
    return DataResponse(message="Unit created.", data=unit_response(unit))


@router.put("/units/{unit_id}", response_model=DataResponse[UnitResponse])
@limit_writes
async def update_unit(
    request: Request,
    unit_id: int,
    body: UnitWriteRequest,
    org_chart: OrgChart,
):
    """Replace a unit's fields. A role change is applied to all its members."""
    unit = await org_chart.update_unit(unit_id, body.model_dump(exclude_unset=True))
    return DataResponse(message="Unit updated.", data=unit_response(unit))


@router.delete(
    "/units/{unit_id}",
    response_model=DataResponse[UnitDeleteResponse],
    responses={422: {"description": "Unit still has child units", "model": ErrorResponse}},
)
@limit_writes
async def delete_unit(
    request: Request,
    unit_id: int,
    org_chart: OrgChart,
):
    """Delete a childless unit; its members become unassigned (role sdm)."""
    released = await org_chart.delete_unit(unit_id)
    return DataResponse(
        message="Unit deleted. Its users have been moved back to unassigned.",
        data=UnitDeleteResponse(unassigned_users=released),
    )


@router.get("/units/{unit_id}/descendants", response_model=DataResponse[list[UnitResponse]])
async def get_unit_descendants(unit_id: int, org_chart: OrgChart):
    """All units below unit_id, depth-first."""
    units = await org_chart.get_descendants(unit_id)
    return DataResponse(data=[unit_response(u) for u in units])


@router.get("/units/{unit_id}/ancestors", response_model=DataResponse[list[UnitResponse]])
async def get_unit_ancestors(unit_id: int, org_chart: OrgChart):
    """Units from unit_id's parent up to the root."""
    units = await org_chart.get_ancestors(unit_id)
    return DataResponse(data=[unit_response(u) for u in units])


# ---- users ----


@router.post("/users", response_model=DataResponse[UserResponse], status_code=201)
@limit_writes
async def create_user(
    request: Request,
    body: UserCreateRequest,
    org_chart: OrgChart,
    storage: Storage,
):
    """Create an unassigned user with role sdm."""
    user = await org_chart.create_user(
        body.model_dump(exclude={"password_confirmation"})
    )
    return DataResponse(message="User created.", data=user_response(user, storage))


@router.put("/users/{user_id}", response_model=DataResponse[UserResponse])
@limit_writes
async def update_user(
    request: Request,
    user_id: int,
    body: UserUpdateRequest,
    org_chart: OrgChart,
    storage: Storage,
):
    """Update a non-admin user. An empty password keeps the current one."""
    user = await org_chart.update_user(
        user_id, body.model_dump(exclude={"password_confirmation"}, exclude_unset=True)
    )
    return DataResponse(message="User updated.", data=user_response(user, storage))


@router.put("/users/{user_id}/assign", response_model=DataResponse[UserResponse])
@limit_writes
async def assign_user(
    request: Request,
    user_id: int,
    body: AssignUserRequest,
    org_chart: OrgChart,
    storage: Storage,
):
    """Assign a user to a unit (taking its role) or unassign with unit_id null."""
    user = await org_chart.assign_user(
        user_id,
        body.unit_id,
        position_x=body.position_x,
        position_y=body.position_y,
    )
    message = (
        "User assigned to unit." if user.unit_id is not None else "User unassigned from unit."
    )
    return DataResponse(message=message, data=user_response(user, storage))


@router.delete("/users/{user_id}", response_model=MessageResponse)
@limit_writes
async def delete_user(
    request: Request,
    user_id: int,
    org_chart: OrgChart,
):
    """Delete a non-admin user and its avatar file."""
    await org_chart.delete_user(user_id)
    return MessageResponse(message="User deleted.")
