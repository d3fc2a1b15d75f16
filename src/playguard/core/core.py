from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import timedelta
from typing import Any
from urllib.parse import urlparse

from pymongo import AsyncMongoClient

from playguard.config import Config
from playguard.core.modules.account.service import AccountService
from playguard.core.modules.account.store import AccountStore, MongoAccountStore
from playguard.core.modules.session.service import SessionManager
from playguard.core.modules.session.store import MongoSessionStore, SessionStore
from playguard.core.modules.session.sweeper import EnforcementSweeper
from playguard.core.service import Service
from playguard.utils import Clock, SystemClock


class Services:
    """Service registry, wired explicitly from the stores and the clock."""

    account: AccountService
    session: SessionManager
    sweeper: EnforcementSweeper

    def __init__(self, config: Config, accounts: AccountStore, sessions: SessionStore, clock: Clock) -> None:
        self.account = AccountService(accounts, clock)
        self.session = SessionManager(accounts, sessions, clock, session_ttl=timedelta(hours=config.session_ttl_hours))
        self.sweeper = EnforcementSweeper(
            self.session,
            accounts,
            sessions,
            clock,
            interval_seconds=config.sweep_interval_seconds,
            close_expired=config.close_expired_sessions,
        )
        # Order matters: stores are ready before the sweeper starts reading them
        self._services: list[Service] = [self.account, self.session, self.sweeper]

    async def start_all(self) -> None:
        for service in self._services:
            await service.on_start()

    async def stop_all(self) -> None:
        for service in reversed(self._services):
            await service.on_stop()


class Core:
    """Container providing config, stores, clock, and all service instances.

    Stores default to MongoDB; tests pass their own.
    """

    config: Config
    clock: Clock
    mongo_client: AsyncMongoClient[dict[str, Any]] | None
    services: Services

    def __init__(
        self,
        config: Config,
        accounts: AccountStore | None = None,
        sessions: SessionStore | None = None,
        clock: Clock | None = None,
    ) -> None:
        self.config = config
        self.clock = clock or SystemClock(config.timezone)
        self.mongo_client = None
        if accounts is None or sessions is None:
            self.mongo_client = AsyncMongoClient(config.database_url, uuidRepresentation="standard", tz_aware=True)
            database = self.mongo_client.get_database(urlparse(config.database_url).path[1:])
            accounts = accounts or MongoAccountStore(database)
            sessions = sessions or MongoSessionStore(database)
        self.services = Services(config, accounts, sessions, self.clock)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Manage application lifecycle - startup and shutdown."""
        await self.on_start()
        try:
            yield
        finally:
            await self.on_stop()

    async def on_start(self) -> None:
        await self.services.start_all()

    async def on_stop(self) -> None:
        """Stop services and close MongoDB connection on shutdown."""
        await self.services.stop_all()
        if self.mongo_client is not None:
            await self.mongo_client.aclose()
