"""
Account repository, the credential store.

All reads and writes of Account rows go through this class. Writes are
committed before the method returns.

Uniqueness:
  The accounts.email UNIQUE index is the real guard against duplicate
  signups. create_account() translates the IntegrityError raised when two
  signups race past the service's existence check into DuplicateEmailError.

Password hashes:
  find_by_email() loads the hash (login needs it). find_by_id() defers the
  column with raiseload, so any code path that touches the hash of an
  account fetched by id fails loudly instead of silently loading it.
"""

import logging
import uuid
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import defer

from artisan_auth.exceptions import (
    AccountNotFoundError,
    DuplicateEmailError,
    StorageFailureError,
)
from artisan_auth.models.account import Account


logger = logging.getLogger(__name__)


def _is_duplicate_email(exc: IntegrityError) -> bool:
    # SQLite: "UNIQUE constraint failed: accounts.email"
    # PostgreSQL: duplicate key value violates unique constraint "ix_accounts_email"
    message = str(exc.orig).lower()
    return "unique" in message and "email" in message


# Columns a profile update may touch. id, email, hash, verification flag and
# timestamps are set elsewhere or not at all
MUTABLE_FIELDS = frozenset({
    "first_name",
    "last_name",
    "business_name",
    "business_type",
    "phone",
    "location",
})


class AccountRepository:
    """SQLAlchemy-backed store of Account records."""

    def __init__(self, db: AsyncSession):
        self._db = db

    async def create_account(
        self,
        email: str,
        hashed_password: str,
        first_name: str,
        last_name: str,
        **profile: Any,
    ) -> Account:
        """
        Persist a new account.

        Args:
            email: Already-normalised email.
            hashed_password: Argon2 hash, never the plaintext.
            profile: Optional business_name, business_type, phone, location.

        Raises:
            DuplicateEmailError: The email is already taken.
            StorageFailureError: Any other database error.
        """
        account = Account(
            email=email,
            hashed_password=hashed_password,
            first_name=first_name,
            last_name=last_name,
            **{key: value for key, value in profile.items() if key in MUTABLE_FIELDS},
        )
        self._db.add(account)
        try:
            await self._db.commit()
        except SQLAlchemyError as exc:
            await self._db.rollback()
            if isinstance(exc, IntegrityError) and _is_duplicate_email(exc):
                logger.info("Signup for %s lost the unique-email race", email)
                raise DuplicateEmailError(email) from exc
            logger.error("create_account failed for %s", email)
            raise StorageFailureError("create_account", email) from exc
        return account

    async def find_by_email(self, email: str) -> Account | None:
        """Return the account (hash included) for a normalised email."""
        try:
            result = await self._db.execute(
                select(Account).where(Account.email == email)
            )
        except SQLAlchemyError as exc:
            logger.error("find_by_email failed for %s", email)
            raise StorageFailureError("find_by_email", email) from exc
        return result.scalar_one_or_none()

    async def find_by_id(self, account_id: uuid.UUID) -> Account | None:
        """Return the account for an id, with the password hash not loaded."""
        try:
            result = await self._db.execute(
                select(Account)
                .options(defer(Account.hashed_password, raiseload=True))
                .where(Account.id == account_id)
            )
        except SQLAlchemyError as exc:
            logger.error("find_by_id failed for %s", account_id)
            raise StorageFailureError("find_by_id", str(account_id)) from exc
        return result.scalar_one_or_none()

    async def update_by_id(
        self,
        account_id: uuid.UUID,
        changes: dict[str, Any],
    ) -> Account:
        """
        Apply profile changes to an account.

        Keys outside MUTABLE_FIELDS are ignored, so an attempt to change the
        email, id or password through this path has no effect.

        Raises:
            AccountNotFoundError: No account has this id.
            StorageFailureError: The write failed.
        """
        account = await self.find_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)

        for field, value in changes.items():
            if field in MUTABLE_FIELDS:
                setattr(account, field, value)

        try:
            await self._db.commit()
        except SQLAlchemyError as exc:
            await self._db.rollback()
            logger.error("update_by_id failed for %s", account_id)
            raise StorageFailureError("update_by_id", str(account_id)) from exc
        return account

    async def count(self) -> int:
        result = await self._db.execute(select(func.count()).select_from(Account))
        return result.scalar_one()

    async def most_recent(self, limit: int = 5) -> list[Account]:
        result = await self._db.execute(
            select(Account)
            .options(defer(Account.hashed_password, raiseload=True))
            .order_by(Account.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars().all())
