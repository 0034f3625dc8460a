"""Mapping from application DTOs to API response schemas."""

from app.application.dtos.org_chart import UnitNode, UnitResult
from app.application.dtos.session import SessionInfo
from app.application.dtos.user import UserResult
from app.application.interfaces.services import IStorageService
from app.schemas.auth import SessionResponse
from app.schemas.org_chart import UnitNodeResponse
from app.schemas.user import UnitResponse, UserResponse


def user_response(user: UserResult, storage: IStorageService) -> UserResponse:
    """UserResponse with avatar_url resolved through storage."""
    response = UserResponse.model_validate(user, from_attributes=True)
    if user.avatar:
        response.avatar_url = storage.url(user.avatar)
    return response


def unit_response(unit: UnitResult) -> UnitResponse:
    return UnitResponse.model_validate(unit, from_attributes=True)


def session_response(session: SessionInfo) -> SessionResponse:
    return SessionResponse.model_validate(session, from_attributes=True)


def unit_node_response(node: UnitNode, storage: IStorageService) -> UnitNodeResponse:
    """Recursively map a chart node and its subtree."""
    return UnitNodeResponse(
        **unit_response(node.unit).model_dump(),
        users=[user_response(u, storage) for u in node.users],
        children=[unit_node_response(c, storage) for c in node.children],
    )
