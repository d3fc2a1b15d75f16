"""Tests for daily budget rules."""

from datetime import UTC, date, datetime, timedelta
from uuid import uuid4
from zoneinfo import ZoneInfo

import pytest

from playguard.core.modules.account.models import Account
from playguard.core.modules.budget.tracker import (
    accumulate,
    apply_daily_reset_if_needed,
    effective_start,
    elapsed_seconds,
    has_exceeded,
    live_usage_seconds,
)
from playguard.core.modules.session.models import Session

NOW = datetime(2026, 3, 10, 15, 0, tzinfo=UTC)


def make_account(**overrides) -> Account:
    fields = {
        "email": "player@example.com",
        "password_hash": "hash",
        "name": "Test",
        "surname": "Player",
        "date_of_birth": date(1990, 1, 1),
        "address": "1 Main Street",
        "last_reset": NOW,
    }
    fields.update(overrides)
    return Account(**fields)


class TestDailyReset:
    """Tests for apply_daily_reset_if_needed."""

    def test_same_day_returns_input(self):
        account = make_account(used_today_seconds=500, last_reset=NOW - timedelta(hours=5))
        assert apply_daily_reset_if_needed(account, NOW) is account

    def test_previous_day_zeroes_counter(self):
        account = make_account(used_today_seconds=500, last_reset=NOW - timedelta(days=1))
        result = apply_daily_reset_if_needed(account, NOW)
        assert result.used_today_seconds == 0
        assert result.last_reset == NOW
        # Input snapshot untouched
        assert account.used_today_seconds == 500

    def test_reset_is_idempotent(self):
        account = make_account(used_today_seconds=500, last_reset=NOW - timedelta(days=3))
        once = apply_daily_reset_if_needed(account, NOW)
        twice = apply_daily_reset_if_needed(once, NOW)
        assert twice == once
        assert twice is once

    def test_missing_last_reset_triggers_reset(self):
        account = make_account(used_today_seconds=42, last_reset=None)
        result = apply_daily_reset_if_needed(account, NOW)
        assert result.used_today_seconds == 0
        assert result.last_reset == NOW

    def test_day_boundary_follows_now_timezone(self):
        """A UTC timestamp late in the evening is already the next day in Berlin."""
        berlin = ZoneInfo("Europe/Berlin")
        last_reset = datetime(2026, 3, 10, 23, 30, tzinfo=UTC)  # 00:30 on 11 March in Berlin
        now = datetime(2026, 3, 11, 8, 0, tzinfo=berlin)
        account = make_account(used_today_seconds=900, last_reset=last_reset)
        assert apply_daily_reset_if_needed(account, now) is account

    def test_one_second_after_midnight_resets(self):
        account = make_account(used_today_seconds=900, last_reset=datetime(2026, 3, 10, 23, 59, 59, tzinfo=UTC))
        now = datetime(2026, 3, 11, 0, 0, 0, tzinfo=UTC)
        assert apply_daily_reset_if_needed(account, now).used_today_seconds == 0


class TestHasExceeded:
    """Tests for has_exceeded."""

    def test_no_limit_never_exceeded(self):
        account = make_account(daily_limit_minutes=None, used_today_seconds=10 * 3600)
        assert has_exceeded(account, NOW) is False

    def test_equal_to_limit_is_exceeded(self):
        account = make_account(daily_limit_minutes=60, used_today_seconds=3600)
        assert has_exceeded(account, NOW) is True

    def test_one_second_below_limit_is_not_exceeded(self):
        account = make_account(daily_limit_minutes=60, used_today_seconds=3599)
        assert has_exceeded(account, NOW) is False

    def test_usage_from_previous_day_does_not_count(self):
        account = make_account(daily_limit_minutes=60, used_today_seconds=7200, last_reset=NOW - timedelta(days=1))
        assert has_exceeded(account, NOW) is False

    def test_check_does_not_mutate_account(self):
        account = make_account(daily_limit_minutes=60, used_today_seconds=7200, last_reset=NOW - timedelta(days=1))
        has_exceeded(account, NOW)
        assert account.used_today_seconds == 7200


class TestAccumulate:
    """Tests for accumulate."""

    def test_adds_elapsed(self):
        account = make_account(used_today_seconds=100)
        assert accumulate(account, 50, NOW).used_today_seconds == 150

    def test_zero_elapsed_keeps_value(self):
        account = make_account(used_today_seconds=100)
        assert accumulate(account, 0, NOW).used_today_seconds == 100

    def test_resets_before_adding(self):
        account = make_account(used_today_seconds=5000, last_reset=NOW - timedelta(days=1))
        result = accumulate(account, 30, NOW)
        assert result.used_today_seconds == 30
        assert result.last_reset == NOW

    def test_negative_elapsed_rejected(self):
        with pytest.raises(ValueError, match="non-negative"):
            accumulate(make_account(), -1, NOW)


class TestElapsed:
    """Tests for elapsed time helpers."""

    def test_whole_seconds(self):
        assert elapsed_seconds(NOW, NOW + timedelta(seconds=90, milliseconds=900)) == 90

    def test_clock_skew_floors_at_zero(self):
        assert elapsed_seconds(NOW, NOW - timedelta(minutes=5)) == 0

    def test_effective_start_prefers_account_start(self):
        start = NOW - timedelta(minutes=10)
        account = make_account(last_session_start=start)
        session = Session(account_id=account.id, created_at=NOW - timedelta(hours=1), expires_at=NOW)
        assert effective_start(account, session) == start

    def test_effective_start_falls_back_to_session_creation(self):
        account = make_account(last_session_start=None)
        created = NOW - timedelta(hours=1)
        session = Session(account_id=uuid4(), created_at=created, expires_at=NOW)
        assert effective_start(account, session) == created

    def test_live_usage_adds_banked_and_session_time(self):
        account = make_account(used_today_seconds=30, last_session_start=NOW - timedelta(seconds=45))
        session = Session(account_id=account.id, created_at=NOW - timedelta(seconds=45), expires_at=NOW + timedelta(days=1))
        assert live_usage_seconds(account, session, NOW) == 75
