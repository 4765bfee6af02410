from uuid import UUID

from fastapi import APIRouter
from pydantic import Field

from watchhub.core.modules.session.models import DEVICE_MAX_LENGTH, SessionView
from watchhub.web.deps import AppDep, AuthorizationDep
from watchhub.web.openapi import ErrorResponse
from watchhub.web.schemas import CamelModel

router = APIRouter(tags=["sessions"])


class UpdateSessionRequest(CamelModel):
    device_name: str | None = Field(None, min_length=1, max_length=DEVICE_MAX_LENGTH)


class DeletedSessionResponse(CamelModel):
    id: UUID


@router.patch(
    "/sessions/{session_id}",
    summary="Rename session",
    description="Change the device label of one of the caller's sessions.",
    operation_id="updateSession",
    responses={
        200: {"description": "Updated session"},
        400: {"model": ErrorResponse, "description": "Invalid request body"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Session belongs to another user"},
        404: {"model": ErrorResponse, "description": "Session not found"},
    },
)
async def update_session(
    session_id: UUID, body: UpdateSessionRequest, app: AppDep, authorization: AuthorizationDep
) -> SessionView:
    session, current = await app.update_session(authorization, session_id, body.device_name)
    return SessionView.from_domain(session, current.id)


@router.delete(
    "/sessions/{session_id}",
    summary="Revoke session",
    description="Delete one of the caller's sessions. Deleting an unknown session succeeds.",
    operation_id="deleteSession",
    responses={
        200: {"description": "Session revoked"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Session belongs to another user"},
    },
)
async def delete_session(session_id: UUID, app: AppDep, authorization: AuthorizationDep) -> DeletedSessionResponse:
    await app.delete_session(authorization, session_id)
    return DeletedSessionResponse(id=session_id)
