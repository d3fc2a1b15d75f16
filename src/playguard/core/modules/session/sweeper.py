"""Background enforcement of daily playtime limits."""

import asyncio
import contextlib
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from uuid import UUID

import structlog

from playguard.core.modules.account.models import Account
from playguard.core.modules.account.store import AccountStore
from playguard.core.modules.budget.tracker import limit_seconds, live_usage_seconds
from playguard.core.modules.session.models import Session
from playguard.core.modules.session.service import SessionManager
from playguard.core.modules.session.store import SessionStore
from playguard.core.service import Service
from playguard.errors import SessionNotFoundError
from playguard.utils import Clock

logger = structlog.get_logger(__name__)


class SweepState(StrEnum):
    IDLE = "idle"
    SCANNING = "scanning"


@dataclass
class SweepReport:
    """Outcome of one scan over the open sessions."""

    scanned: int = 0
    closed: list[UUID] = field(default_factory=list)
    already_closed: int = 0  # closed by someone else between listing and logout
    spared: int = 0  # no longer due for closing once re-checked under the account lock
    failed: int = 0


class EnforcementSweeper(Service):
    """Periodically force-closes sessions of accounts that ran out of playtime.

    Closing goes through SessionManager.logout, so forced and voluntary
    logouts book time identically. Only one scan runs at a time: a tick
    that comes due while a scan is in progress is dropped, the next one
    picks up whatever it missed.
    """

    def __init__(
        self,
        session_manager: SessionManager,
        accounts: AccountStore,
        sessions: SessionStore,
        clock: Clock,
        interval_seconds: float = 60.0,
        close_expired: bool = True,
    ) -> None:
        self._session_manager = session_manager
        self._accounts = accounts
        self._sessions = sessions
        self._clock = clock
        self._interval = interval_seconds
        self._close_expired = close_expired
        self._state = SweepState.IDLE
        self._loop_task: asyncio.Task[None] | None = None
        self._scan_task: asyncio.Task[SweepReport | None] | None = None

    @property
    def state(self) -> SweepState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._loop_task is not None and not self._loop_task.done()

    async def on_start(self) -> None:
        self.start()

    async def on_stop(self) -> None:
        await self.stop()

    def start(self) -> None:
        """Start the periodic loop. Calling it on a running sweeper does nothing."""
        if self.is_running:
            return
        self._loop_task = asyncio.create_task(self._run(), name="enforcement-sweeper")
        logger.info("sweeper_started", interval_seconds=self._interval)

    async def stop(self) -> None:
        """Stop the loop and wait for an in-flight scan to finish."""
        if self._loop_task is not None:
            self._loop_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._loop_task
            self._loop_task = None
        if self._scan_task is not None:
            await asyncio.gather(self._scan_task, return_exceptions=True)
            self._scan_task = None
        logger.info("sweeper_stopped")

    async def run_once(self) -> SweepReport | None:
        """Scan all open sessions once. Returns None if a scan was already in progress."""
        if self._state is SweepState.SCANNING:
            logger.warning("sweep_tick_skipped")
            return None

        self._state = SweepState.SCANNING
        try:
            report = await self._scan()
        finally:
            self._state = SweepState.IDLE

        if report.closed or report.failed:
            logger.info(
                "sweep_completed",
                scanned=report.scanned,
                closed=len(report.closed),
                already_closed=report.already_closed,
                spared=report.spared,
                failed=report.failed,
            )
        return report

    async def _run(self) -> None:
        loop = asyncio.get_running_loop()
        next_due = loop.time() + self._interval
        while True:
            await asyncio.sleep(max(0.0, next_due - loop.time()))
            next_due += self._interval
            if self._state is SweepState.SCANNING:
                logger.warning("sweep_tick_skipped", interval_seconds=self._interval)
                continue
            self._scan_task = asyncio.create_task(self.run_once())
            self._scan_task.add_done_callback(self._log_scan_failure)

    @staticmethod
    def _log_scan_failure(task: asyncio.Task[SweepReport | None]) -> None:
        if not task.cancelled() and task.exception() is not None:
            logger.error("sweep_failed", exc_info=task.exception())

    async def _scan(self) -> SweepReport:
        report = SweepReport()
        now = self._clock.now()
        for session in await self._sessions.find_all_open():
            report.scanned += 1
            try:
                account = await self._accounts.find_by_id(session.account_id)
                if account is None:
                    logger.warning("sweep_orphan_session", session_id=session.id, account_id=session.account_id)
                    continue

                reason = self._close_reason(account, session, now)
                if reason is None:
                    continue

                # The snapshot above was read without the account lock, so decide again on fresh state
                closed = await self._session_manager.logout(session.id, reason=reason, only_if=self._should_close)
                if closed:
                    report.closed.append(session.id)
                else:
                    report.spared += 1
            except SessionNotFoundError:
                report.already_closed += 1
                logger.debug("sweep_session_already_closed", session_id=session.id)
            except Exception:
                # One broken account must not stop reconciliation of the others
                report.failed += 1
                logger.exception("sweep_logout_failed", session_id=session.id, account_id=session.account_id)
        return report

    def _should_close(self, account: Account, session: Session, now: datetime) -> bool:
        return self._close_reason(account, session, now) is not None

    def _close_reason(self, account: Account, session: Session, now: datetime) -> str | None:
        if self._close_expired and session.expires_at <= now:
            return "expired"
        limit = limit_seconds(account)
        if limit is None:
            return None
        if live_usage_seconds(account, session, now) >= limit:
            return "time_limit"
        return None
