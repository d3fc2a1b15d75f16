"""Daily playtime budget rules.

Pure functions over an Account snapshot and the current time. Nothing here
touches a store: when a function returns a changed copy, persisting it is
the caller's job.

The daily reset is folded into every read and write instead of running as
a separate midnight job, so a session that is being closed around midnight
can never have its time attributed against a counter that is about to be
wiped.
"""

from datetime import date, datetime

from playguard.core.modules.account.models import Account
from playguard.core.modules.session.models import Session


def _calendar_day(moment: datetime, reference: datetime) -> date:
    """Calendar date of `moment` as seen in the timezone of `reference`."""
    if moment.tzinfo is not None and reference.tzinfo is not None:
        moment = moment.astimezone(reference.tzinfo)
    return moment.date()


def needs_daily_reset(account: Account, now: datetime) -> bool:
    """Check whether the account's counter belongs to an earlier day."""
    if account.last_reset is None:
        return True
    return _calendar_day(account.last_reset, now) != now.date()


def apply_daily_reset_if_needed(account: Account, now: datetime) -> Account:
    """Return a copy with the counter zeroed if `last_reset` is not today, else the account itself."""
    if not needs_daily_reset(account, now):
        return account
    return account.model_copy(update={"used_today_seconds": 0, "last_reset": now})


def limit_seconds(account: Account) -> int | None:
    if account.daily_limit_minutes is None:
        return None
    return account.daily_limit_minutes * 60


def has_exceeded(account: Account, now: datetime) -> bool:
    """Check whether today's banked usage has reached the limit.

    Reaching the limit exactly counts as exceeded.
    """
    limit = limit_seconds(account)
    if limit is None:
        return False
    current = apply_daily_reset_if_needed(account, now)
    return current.used_today_seconds >= limit


def accumulate(account: Account, elapsed_seconds: int, now: datetime) -> Account:
    """Return a copy with `elapsed_seconds` added to today's usage."""
    if elapsed_seconds < 0:
        raise ValueError(f"elapsed_seconds must be non-negative, got {elapsed_seconds}")
    current = apply_daily_reset_if_needed(account, now)
    return current.model_copy(update={"used_today_seconds": current.used_today_seconds + elapsed_seconds})


def effective_start(account: Account, session: Session) -> datetime:
    """Moment from which a session's playtime is counted.

    Falls back to the session's creation time for accounts that never
    recorded a session start.
    """
    if account.last_session_start is not None:
        return account.last_session_start
    return session.created_at


def elapsed_seconds(start: datetime, now: datetime) -> int:
    """Whole seconds between `start` and `now`, never negative."""
    return max(0, int((now - start).total_seconds()))


def live_usage_seconds(account: Account, session: Session, now: datetime) -> int:
    """Today's banked usage plus the time spent so far in the open session."""
    current = apply_daily_reset_if_needed(account, now)
    return current.used_today_seconds + elapsed_seconds(effective_start(account, session), now)
