from datetime import date
from uuid import UUID

from fastapi import APIRouter
from pydantic import BaseModel, Field

from playguard.core.modules.account.models import AccountView
from playguard.web.deps import AppDep
from playguard.web.error_handlers import ErrorResponse

router = APIRouter(tags=["players"])


class RegisterRequest(BaseModel):
    """Request to register a new player."""

    email: str = Field(..., min_length=3, description="Login email, must be unique")
    password: str = Field(..., min_length=1, description="Password for the new account")
    name: str = Field(..., min_length=1, description="First name")
    surname: str = Field(..., min_length=1, description="Last name")
    date_of_birth: date = Field(..., description="Date of birth, must be in the past")
    address: str = Field(..., min_length=1, description="Postal address")


class TimeLimitRequest(BaseModel):
    """Request to set a daily playtime limit."""

    account_id: UUID = Field(..., description="Account ID")
    daily_limit_minutes: int = Field(..., gt=0, description="Daily playtime limit in minutes")


@router.post(
    "/players/register",
    summary="Register player",
    description="Create a new player account. The account starts without a time limit.",
    operation_id="registerPlayer",
    status_code=201,
    responses={
        201: {"description": "Player registered"},
        400: {"model": ErrorResponse, "description": "Invalid registration data"},
        409: {"model": ErrorResponse, "description": "Email already registered"},
    },
)
async def register(register_data: RegisterRequest, app: AppDep) -> AccountView:
    return await app.register(
        register_data.email,
        register_data.password,
        register_data.name,
        register_data.surname,
        register_data.date_of_birth,
        register_data.address,
    )


@router.post(
    "/players/time-limit",
    summary="Set daily time limit",
    description="Set the daily playtime limit of a player. The player must currently be logged in.",
    operation_id="setTimeLimit",
    responses={
        200: {"description": "Limit updated"},
        400: {"model": ErrorResponse, "description": "Player is not logged in"},
        404: {"model": ErrorResponse, "description": "Player not found"},
    },
)
async def set_time_limit(limit_data: TimeLimitRequest, app: AppDep) -> AccountView:
    return await app.set_time_limit(limit_data.account_id, limit_data.daily_limit_minutes)


@router.get(
    "/players/{account_id}",
    summary="Get player",
    description="Get a player's account and today's playtime usage.",
    operation_id="getPlayer",
    responses={
        200: {"description": "Player details"},
        404: {"model": ErrorResponse, "description": "Player not found"},
    },
)
async def get_player(account_id: UUID, app: AppDep) -> AccountView:
    return await app.get_account(account_id)
