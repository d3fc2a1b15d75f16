"""Account persistence."""

from abc import ABC, abstractmethod
from typing import Any
from uuid import UUID

from pymongo.asynchronous.database import AsyncDatabase

from playguard.core.modules.account.models import Account


class AccountStore(ABC):
    """Durable lookup and update of accounts. Every call may suspend."""

    async def on_start(self) -> None:
        """Prepare the store on application startup."""

    async def on_stop(self) -> None:
        """Release store resources on application shutdown."""

    @abstractmethod
    async def find_by_id(self, account_id: UUID) -> Account | None: ...

    @abstractmethod
    async def find_by_email(self, email: str) -> Account | None: ...

    @abstractmethod
    async def exists_by_email(self, email: str) -> bool: ...

    @abstractmethod
    async def save(self, account: Account) -> Account: ...


class MongoAccountStore(AccountStore):
    def __init__(self, database: AsyncDatabase[dict[str, Any]]) -> None:
        self._collection = database.get_collection("accounts")

    async def on_start(self) -> None:
        """Create indexes on startup."""
        await self._collection.create_index([("email", 1)], unique=True)

    async def find_by_id(self, account_id: UUID) -> Account | None:
        return Account.from_mongo(await self._collection.find_one({"_id": account_id}))

    async def find_by_email(self, email: str) -> Account | None:
        return Account.from_mongo(await self._collection.find_one({"email": email}))

    async def exists_by_email(self, email: str) -> bool:
        return await self._collection.count_documents({"email": email}, limit=1) > 0

    async def save(self, account: Account) -> Account:
        await self._collection.replace_one({"_id": account.id}, account.to_mongo(), upsert=True)
        return account
