from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from datetime import date
from uuid import UUID

import structlog

from playguard.config import Config
from playguard.core.core import Core
from playguard.core.modules.account.models import AccountView
from playguard.core.modules.account.store import AccountStore
from playguard.core.modules.session.models import SessionDescriptor
from playguard.core.modules.session.store import SessionStore
from playguard.errors import AccountNotFoundError, InvalidCredentialsError
from playguard.utils import Clock

logger = structlog.get_logger(__name__)


class App:
    """Facade for all application operations exposed to the transport layer."""

    def __init__(
        self,
        config: Config,
        accounts: AccountStore | None = None,
        sessions: SessionStore | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._core = Core(config, accounts, sessions, clock)

    @asynccontextmanager
    async def lifespan(self) -> AsyncGenerator[None]:
        """Application lifespan management - delegates to Core."""
        async with self._core.lifespan():
            yield

    async def register(
        self, email: str, password: str, name: str, surname: str, date_of_birth: date, address: str
    ) -> AccountView:
        """Register a new player account."""
        account = await self._core.services.account.register(email, password, name, surname, date_of_birth, address)
        return AccountView.from_domain(account)

    async def get_account(self, account_id: UUID) -> AccountView:
        account = await self._core.services.session.get_account(account_id)
        return AccountView.from_domain(account)

    async def login(self, email: str, password: str) -> SessionDescriptor:
        """Authenticate and open a session. Unknown emails look exactly like wrong passwords."""
        try:
            return await self._core.services.session.login(email, password)
        except AccountNotFoundError:
            logger.info("login_unknown_email")
            raise InvalidCredentialsError from None

    async def logout(self, session_id: UUID) -> None:
        await self._core.services.session.logout(session_id)

    async def set_time_limit(self, account_id: UUID, minutes: int) -> AccountView:
        """Set the daily playtime limit (account must have an open session)."""
        account = await self._core.services.session.set_time_limit(account_id, minutes)
        return AccountView.from_domain(account)
