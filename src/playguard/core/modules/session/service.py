import asyncio
from collections.abc import Callable, Coroutine
from datetime import datetime, timedelta
from typing import Any, TypeVar
from uuid import UUID

import structlog

from playguard.core.locks import KeyedLock
from playguard.core.modules.account.models import Account
from playguard.core.modules.account.security import check_password
from playguard.core.modules.account.store import AccountStore
from playguard.core.modules.budget.tracker import (
    accumulate,
    apply_daily_reset_if_needed,
    effective_start,
    elapsed_seconds,
    has_exceeded,
)
from playguard.core.modules.session.models import Session, SessionDescriptor
from playguard.core.modules.session.store import SessionStore
from playguard.core.service import Service
from playguard.errors import (
    AccountInactiveError,
    AccountNotFoundError,
    InvalidCredentialsError,
    SessionNotFoundError,
    TimeLimitExceededError,
)
from playguard.utils import Clock

T = TypeVar("T")

logger = structlog.get_logger(__name__)

# Decides, from the current account and session state, whether a close should go ahead
ClosePredicate = Callable[[Account, Session, datetime], bool]


class SessionManager(Service):
    """Opens and closes play sessions and books their time against the daily budget.

    Every mutation of an account and its sessions runs under that account's
    lock, so an interactive logout and a sweeper logout of the same session
    cannot both count the same interval. Different accounts never wait on
    each other.
    """

    def __init__(
        self,
        accounts: AccountStore,
        sessions: SessionStore,
        clock: Clock,
        session_ttl: timedelta = timedelta(hours=24),
    ) -> None:
        self._accounts = accounts
        self._sessions = sessions
        self._clock = clock
        self._session_ttl = session_ttl
        self._locks = KeyedLock()
        self._detached: set[asyncio.Task[Any]] = set()

    async def on_start(self) -> None:
        await self._sessions.on_start()

    async def on_stop(self) -> None:
        await self._sessions.on_stop()

    async def login(self, email: str, password: str) -> SessionDescriptor:
        """Authenticate and open a new session, closing any session the account still has open.

        Raises:
            AccountNotFoundError: No account with this email
            InvalidCredentialsError: Wrong password
            TimeLimitExceededError: Today's budget is already used up
        """
        # Shielded: a caller that goes away must not leave a half-opened session behind
        return await asyncio.shield(self._detach(self._login(email, password)))

    async def logout(self, session_id: UUID, reason: str = "logout", only_if: ClosePredicate | None = None) -> bool:
        """Close an open session and book its elapsed time.

        `only_if` is re-evaluated under the account lock against fresh state;
        when it returns False the session stays open and False is returned.

        Raises:
            SessionNotFoundError: No open session with this id (unknown or already closed)
        """
        return await asyncio.shield(self._detach(self._logout(session_id, reason, only_if)))

    async def get_account(self, account_id: UUID) -> Account:
        """Load an account with today's budget, persisting a pending daily reset."""
        async with self._locks.hold(account_id):
            account = await self._require_account(account_id)
            return await self._reset_if_needed(account, self._clock.now())

    async def set_time_limit(self, account_id: UUID, minutes: int) -> Account:
        """Set the daily limit of an account that currently has an open session."""
        async with self._locks.hold(account_id):
            account = await self._require_account(account_id)
            if not account.active:
                raise AccountInactiveError
            account = apply_daily_reset_if_needed(account, self._clock.now())
            account = account.model_copy(update={"daily_limit_minutes": minutes})
            await self._accounts.save(account)
        logger.info("time_limit_set", account_id=account_id, daily_limit_minutes=minutes)
        return account

    def _detach(self, coro: Coroutine[Any, Any, T]) -> asyncio.Task[T]:
        """Run `coro` as its own task that outlives a cancelled caller."""
        task = asyncio.create_task(coro)
        self._detached.add(task)
        task.add_done_callback(self._on_detached_done)
        return task

    def _on_detached_done(self, task: asyncio.Task[Any]) -> None:
        self._detached.discard(task)
        # Retrieve here so an abandoned caller does not leave the error unobserved
        if not task.cancelled() and (exc := task.exception()) is not None:
            logger.debug("session_operation_failed", error=type(exc).__name__)

    async def _reset_if_needed(self, account: Account, now: datetime) -> Account:
        reset = apply_daily_reset_if_needed(account, now)
        if reset is account:
            return account
        logger.debug("daily_budget_reset", account_id=account.id)
        return await self._accounts.save(reset)

    async def _login(self, email: str, password: str) -> SessionDescriptor:
        found = await self._accounts.find_by_email(email.strip().lower())
        if found is None:
            raise AccountNotFoundError(f"Account not found with email: {email}")
        if not check_password(password, found.password_hash):
            raise InvalidCredentialsError

        async with self._locks.hold(found.id):
            now = self._clock.now()
            account = await self._reset_if_needed(await self._require_account(found.id), now)

            if has_exceeded(account, now):
                logger.info("login_refused_time_limit", account_id=account.id, used_today=account.used_today_seconds)
                raise TimeLimitExceededError

            for stale in await self._sessions.find_open_by_account(account.id):
                account = await self._close(stale, account, now, "replaced")

            session = Session(account_id=account.id, created_at=now, expires_at=now + self._session_ttl)
            await self._sessions.save(session)
            account = account.model_copy(update={"active": True, "last_session_start": now})
            await self._accounts.save(account)

        logger.info("session_opened", session_id=session.id, account_id=account.id)
        return SessionDescriptor(
            session_id=session.id, email=account.email, created_at=session.created_at, expires_at=session.expires_at
        )

    async def _logout(self, session_id: UUID, reason: str, only_if: ClosePredicate | None) -> bool:
        session = await self._sessions.find_open_by_id(session_id)
        if session is None:
            raise SessionNotFoundError(f"Active session not found with id: {session_id}")

        async with self._locks.hold(session.account_id):
            # Someone else may have closed it while we waited for the lock
            session = await self._sessions.find_open_by_id(session_id)
            if session is None:
                raise SessionNotFoundError(f"Active session not found with id: {session_id}")
            account = await self._require_account(session.account_id)
            now = self._clock.now()
            if only_if is not None and not only_if(account, session, now):
                logger.debug("session_close_skipped", session_id=session_id, reason=reason)
                return False
            await self._close(session, account, now, reason)
        return True

    async def _close(self, session: Session, account: Account, now: datetime, reason: str) -> Account:
        """Close `session` and fold its time into `account`. Caller must hold the account lock."""
        await self._sessions.save(session.model_copy(update={"logged_out_at": now}))

        elapsed = elapsed_seconds(effective_start(account, session), now)
        account = accumulate(account, elapsed, now).model_copy(update={"active": False, "last_session_start": None})
        await self._accounts.save(account)

        logger.info(
            "session_closed",
            session_id=session.id,
            account_id=account.id,
            reason=reason,
            elapsed_seconds=elapsed,
            used_today=account.used_today_seconds,
        )
        return account

    async def _require_account(self, account_id: UUID) -> Account:
        account = await self._accounts.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account not found with id: {account_id}")
        return account
