from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from playguard.core.modules.session.models import SessionDescriptor
from playguard.web.deps import AppDep
from playguard.web.error_handlers import ErrorResponse

router = APIRouter(tags=["sessions"])


class LoginRequest(BaseModel):
    """Authentication request."""

    email: str = Field(..., description="Email for authentication")
    password: str = Field(..., description="Password for authentication")


@router.post(
    "/sessions/login",
    summary="Open session",
    description="Authenticate with email and password. Any session the player still has open is closed first.",
    operation_id="login",
    responses={
        200: {"description": "Session opened"},
        401: {"model": ErrorResponse, "description": "Invalid credentials"},
        403: {"model": ErrorResponse, "description": "Daily time limit exceeded"},
    },
)
async def login(login_data: LoginRequest, app: AppDep) -> SessionDescriptor:
    return await app.login(login_data.email, login_data.password)


@router.post(
    "/sessions/logout/{session_id}",
    summary="Close session",
    description="Close an open session and add its duration to today's playtime.",
    operation_id="logout",
    status_code=204,
    responses={
        204: {"description": "Session closed"},
        404: {"model": ErrorResponse, "description": "No open session with this id"},
    },
)
async def logout(session_id: UUID, app: AppDep) -> None:
    await app.logout(session_id)
