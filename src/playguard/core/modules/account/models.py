from datetime import date, datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from playguard.core.db import MongoModel
from playguard.utils import now


class Account(MongoModel):
    """Registered player with credentials and a daily playtime budget.

    `active` is true exactly while the account owns an open session.
    `used_today_seconds` belongs to the calendar day of `last_reset`.
    """

    email: str
    password_hash: str  # bcrypt hash
    name: str
    surname: str
    date_of_birth: date
    address: str
    active: bool = False
    daily_limit_minutes: int | None = None  # None means unlimited
    used_today_seconds: int = 0
    last_reset: datetime | None = None
    last_session_start: datetime | None = None
    created_at: datetime = Field(default_factory=now)

    def to_mongo(self) -> dict[str, Any]:
        data = super().to_mongo()
        data["date_of_birth"] = self.date_of_birth.isoformat()  # BSON has no date-only type
        return data


class AccountView(BaseModel):
    """Account information (API representation)."""

    id: UUID = Field(..., description="Account ID")
    email: str = Field(..., description="Login email")
    name: str = Field(..., description="First name")
    surname: str = Field(..., description="Last name")
    date_of_birth: date = Field(..., description="Date of birth")
    address: str = Field(..., description="Postal address")
    active: bool = Field(..., description="Whether the account has an open session")
    daily_limit_minutes: int | None = Field(None, description="Daily playtime limit in minutes, null for unlimited")
    used_today_seconds: int = Field(..., description="Playtime already used today, in seconds")

    @classmethod
    def from_domain(cls, account: Account) -> "AccountView":
        """Create view model from domain model."""
        return cls(
            id=account.id,
            email=account.email,
            name=account.name,
            surname=account.surname,
            date_of_birth=account.date_of_birth,
            address=account.address,
            active=account.active,
            daily_limit_minutes=account.daily_limit_minutes,
            used_today_seconds=account.used_today_seconds,
        )
