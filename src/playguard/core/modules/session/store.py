"""Session persistence."""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from playguard.core.modules.session.models import Session


class SessionStore(ABC):
    """Durable create/read/update of sessions. Every call may suspend."""

    async def on_start(self) -> None:
        """Prepare the store on application startup."""

    async def on_stop(self) -> None:
        """Release store resources on application shutdown."""

    @abstractmethod
    async def find_open_by_id(self, session_id: UUID) -> Session | None: ...

    @abstractmethod
    async def find_open_by_account(self, account_id: UUID) -> list[Session]: ...

    @abstractmethod
    async def find_all_open(self) -> list[Session]: ...

    @abstractmethod
    async def save(self, session: Session) -> Session: ...


class MongoSessionStore(SessionStore):
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection = database.get_collection("sessions")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        # Open sessions of one account, used on login
        await self._collection.create_index([("account_id", 1), ("logged_out_at", 1)])
        # All open sessions, used by the sweeper
        await self._collection.create_index([("logged_out_at", 1)])

    async def find_open_by_id(self, session_id: UUID) -> Session | None:
        return Session.from_mongo(await self._collection.find_one({"_id": session_id, "logged_out_at": None}))

    async def find_open_by_account(self, account_id: UUID) -> list[Session]:
        cursor = self._collection.find({"account_id": account_id, "logged_out_at": None})
        return [Session.model_validate(doc) async for doc in cursor]

    async def find_all_open(self) -> list[Session]:
        cursor = self._collection.find({"logged_out_at": None}).sort("created_at", 1)
        return [Session.model_validate(doc) async for doc in cursor]

    async def save(self, session: Session) -> Session:
        await self._collection.replace_one({"_id": session.id}, session.to_mongo(), upsert=True)
        return session
