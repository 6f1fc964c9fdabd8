"""
Authentication service — signup, login and profile business logic.

This module contains the core auth logic, separated from HTTP concerns.
The router validates the body into a request schema and calls these
functions; they never see raw JSON.

Signup flow:
  1. Check if the email is already registered (friendly 409)
  2. Hash the password with Argon2id
  3. Insert the account; the unique index catches a concurrent duplicate
  4. Return a JWT so the user is immediately logged in

Login flow:
  1. Look up the account by email
  2. Verify the password against the stored hash
  3. Return a JWT

Argon2 is deliberately slow, so hashing and verification run in the
threadpool instead of on the event loop.

Security notes:
  - Login returns the same error for "wrong password" and "email not found"
    to prevent user enumeration attacks
  - Plaintext passwords and tokens are never logged
  - JWT tokens are stateless, so logout only records an audit event
"""

import logging
import uuid

from fastapi.concurrency import run_in_threadpool
from sqlalchemy.ext.asyncio import AsyncSession

from artisan_auth.exceptions import (
    AccountNotFoundError,
    DuplicateEmailError,
    InvalidCredentialsError,
)
from artisan_auth.models.account import Account
from artisan_auth.repositories import AccountRepository
from artisan_auth.schemas.auth import LoginRequest, ProfileUpdateRequest, SignupRequest
from artisan_auth.security import TokenIssuer, hash_password, verify_password


audit_logger = logging.getLogger("artisan_auth.audit")


async def signup(
    db: AsyncSession,
    tokens: TokenIssuer,
    request: SignupRequest,
) -> tuple[Account, str]:
    """
    Register a new account.

    Args:
        db: Database session.
        tokens: Issuer used to mint the session token.
        request: Validated signup body (email already normalised).

    Returns:
        Tuple of (Account instance, JWT token string).

    Raises:
        DuplicateEmailError: If the email is already registered.
    """
    repository = AccountRepository(db)

    if await repository.find_by_email(request.email) is not None:
        raise DuplicateEmailError(request.email)

    hashed = await run_in_threadpool(hash_password, request.password)
    account = await repository.create_account(
        email=request.email,
        hashed_password=hashed,
        **request.model_dump(exclude={"email", "password"}, exclude_none=True),
    )

    token = tokens.issue(account.id, account.email)
    audit_logger.info("account.signup id=%s email=%s", account.id, account.email)
    return account, token


async def login(
    db: AsyncSession,
    tokens: TokenIssuer,
    request: LoginRequest,
) -> tuple[Account, str]:
    """
    Authenticate an account and return a JWT token.

    Returns:
        Tuple of (Account instance, JWT token string).

    Raises:
        InvalidCredentialsError: If email doesn't exist or password is wrong.
    """
    account = await AccountRepository(db).find_by_email(request.email)

    # Same error for both cases — prevents user enumeration
    if account is None or not await run_in_threadpool(
        verify_password, request.password, account.hashed_password
    ):
        audit_logger.info("account.login_failed email=%s", request.email)
        raise InvalidCredentialsError()

    token = tokens.issue(account.id, account.email)
    audit_logger.info("account.login id=%s email=%s", account.id, account.email)
    return account, token


async def get_profile(db: AsyncSession, account_id: uuid.UUID) -> Account:
    """
    Fetch the account behind a session.

    Raises:
        AccountNotFoundError: The account was removed after the token was issued.
    """
    account = await AccountRepository(db).find_by_id(account_id)
    if account is None:
        raise AccountNotFoundError(account_id)
    return account


async def update_profile(
    db: AsyncSession,
    account_id: uuid.UUID,
    request: ProfileUpdateRequest,
) -> Account:
    """
    Apply a partial profile update.

    Only fields the client actually sent are written; the schema has no
    email, password, id or createdAt field, so those never get here.

    Raises:
        AccountNotFoundError: If the account does not exist.
    """
    changes = request.model_dump(exclude_unset=True)
    account = await AccountRepository(db).update_by_id(account_id, changes)
    audit_logger.info(
        "account.profile_updated id=%s fields=%s", account_id, sorted(changes),
    )
    return account


def logout(account_id: uuid.UUID) -> None:
    """Record a logout. Tokens are stateless, so nothing is invalidated."""
    audit_logger.info("account.logout id=%s", account_id)
