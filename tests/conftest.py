"""Shared pytest fixtures."""

from datetime import UTC, date, datetime

import pytest

from playguard.core.modules.account.models import Account
from playguard.core.modules.account.security import hash_password
from playguard.core.modules.session.service import SessionManager
from tests.fakes import InMemoryAccountStore, InMemorySessionStore, ManualClock

PASSWORD = "correct-horse"
START = datetime(2026, 3, 10, 10, 0, tzinfo=UTC)


@pytest.fixture(scope="session")
def password_hash():
    """Hash once per test run, bcrypt is slow on purpose."""
    return hash_password(PASSWORD)


@pytest.fixture
def clock():
    return ManualClock(START)


@pytest.fixture
def accounts():
    return InMemoryAccountStore()


@pytest.fixture
def sessions():
    return InMemorySessionStore()


@pytest.fixture
def manager(accounts, sessions, clock):
    return SessionManager(accounts, sessions, clock)


@pytest.fixture
def make_account(accounts, clock, password_hash):
    """Factory that stores an account directly, bypassing registration."""

    async def _make(email: str = "player@example.com", **overrides) -> Account:
        fields = {
            "email": email,
            "password_hash": password_hash,
            "name": "Test",
            "surname": "Player",
            "date_of_birth": date(1990, 5, 17),
            "address": "1 Main Street",
            "last_reset": clock.now(),
        }
        fields.update(overrides)
        account = Account(**fields)
        await accounts.save(account)
        return account

    return _make
