from datetime import date
from uuid import UUID

import structlog

from playguard.core.modules.account.models import Account
from playguard.core.modules.account.security import check_password, hash_password
from playguard.core.modules.account.store import AccountStore
from playguard.core.modules.account.validators import (
    validate_date_of_birth,
    validate_email,
    validate_password,
    validate_required,
)
from playguard.core.service import Service
from playguard.errors import AccountNotFoundError, AlreadyExistsError
from playguard.utils import Clock

logger = structlog.get_logger(__name__)


class AccountService(Service):
    """Registration and lookup of player accounts."""

    def __init__(self, accounts: AccountStore, clock: Clock) -> None:
        self._accounts = accounts
        self._clock = clock

    async def register(
        self, email: str, password: str, name: str, surname: str, date_of_birth: date, address: str
    ) -> Account:
        """Create an inactive account with an empty budget for today."""
        email = email.strip().lower()
        validate_email(email)
        if await self._accounts.exists_by_email(email):
            raise AlreadyExistsError(f"Account with email '{email}' already exists")

        validate_password(password)
        validate_required(name=name, surname=surname, address=address)
        now = self._clock.now()
        validate_date_of_birth(date_of_birth, now.date())

        account = Account(
            email=email,
            password_hash=hash_password(password),
            name=name,
            surname=surname,
            date_of_birth=date_of_birth,
            address=address,
            last_reset=now,
            created_at=now,
        )
        await self._accounts.save(account)
        logger.info("account_registered", account_id=account.id)
        return account

    async def get_account(self, account_id: UUID) -> Account:
        account = await self._accounts.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(f"Account not found with id: {account_id}")
        return account

    async def get_account_by_email(self, email: str) -> Account:
        account = await self._accounts.find_by_email(email.strip().lower())
        if account is None:
            raise AccountNotFoundError(f"Account not found with email: {email}")
        return account

    def verify_password(self, account: Account, password: str) -> bool:
        """Verify password against stored hash."""
        return check_password(password, account.password_hash)

    async def on_start(self) -> None:
        await self._accounts.on_start()

    async def on_stop(self) -> None:
        await self._accounts.on_stop()
