import re
from datetime import UTC, datetime
from typing import Protocol
from zoneinfo import ZoneInfo

EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def is_email(value: str) -> bool:
    return bool(EMAIL_RE.fullmatch(value))


def now() -> datetime:
    return datetime.now(UTC)


class Clock(Protocol):
    """Source of the current time. Must return timezone-aware datetimes."""

    def now(self) -> datetime: ...


class SystemClock:
    """Wall clock in a fixed timezone; the zone decides where a calendar day starts."""

    def __init__(self, timezone: str = "UTC") -> None:
        self._tz = ZoneInfo(timezone)

    def now(self) -> datetime:
        return datetime.now(self._tz)
