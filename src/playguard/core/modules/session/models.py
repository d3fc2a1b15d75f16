"""Play session models."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field

from playguard.core.db import MongoModel


class Session(MongoModel):
    """One continuous authenticated interval of an account.

    Open while `logged_out_at` is None. Once closed it is never reopened.
    Indexed on (account_id, logged_out_at) and logged_out_at.
    """

    account_id: UUID
    created_at: datetime
    expires_at: datetime
    logged_out_at: datetime | None = None

    @property
    def is_open(self) -> bool:
        return self.logged_out_at is None


class SessionDescriptor(BaseModel):
    """Session handed back to the caller after login."""

    session_id: UUID = Field(..., description="Session ID, used for logout")
    email: str = Field(..., description="Email of the account owning the session")
    created_at: datetime = Field(..., description="When the session was opened")
    expires_at: datetime = Field(..., description="Hard expiry of the session")
