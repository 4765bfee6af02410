from uuid import UUID

from fastapi import APIRouter

from watchhub.core.modules.session.models import SessionView
from watchhub.core.modules.user.models import UserProfile, UserView
from watchhub.web.deps import AppDep, AuthorizationDep
from watchhub.web.openapi import ErrorResponse
from watchhub.web.schemas import CamelModel, CurrentUserResponse

router = APIRouter(tags=["users"])


class UpdateUserRequest(CamelModel):
    profile: UserProfile


@router.get(
    "/users/@me",
    summary="Get current user",
    description="Return the authenticated user and the session used for this request.",
    operation_id="getCurrentUser",
    responses={
        200: {"description": "Current user and session"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        404: {"model": ErrorResponse, "description": "User not found"},
    },
)
async def get_current_user(app: AppDep, authorization: AuthorizationDep) -> CurrentUserResponse:
    user, session = await app.get_current_user(authorization)
    return CurrentUserResponse(user=UserView.from_domain(user), session=SessionView.from_domain(session))


@router.patch(
    "/users/{user_id}",
    summary="Update user profile",
    description="Replace the profile icon and colors of the authenticated user.",
    operation_id="updateUser",
    responses={
        200: {"description": "Updated user"},
        400: {"model": ErrorResponse, "description": "Invalid profile data"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Cannot modify other users"},
    },
)
async def update_user(user_id: UUID, body: UpdateUserRequest, app: AppDep, authorization: AuthorizationDep) -> UserView:
    user = await app.update_user_profile(authorization, user_id, body.profile)
    return UserView.from_domain(user)


@router.get(
    "/users/{user_id}/sessions",
    summary="List sessions",
    description="List the user's active sessions. The session used for the request is flagged as current.",
    operation_id="listUserSessions",
    responses={
        200: {"description": "Active sessions"},
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Cannot access sessions for other users"},
    },
)
async def list_user_sessions(user_id: UUID, app: AppDep, authorization: AuthorizationDep) -> list[SessionView]:
    sessions, current = await app.get_user_sessions(authorization, user_id)
    return [SessionView.from_domain(session, current.id) for session in sessions]
