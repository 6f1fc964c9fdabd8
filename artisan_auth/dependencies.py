"""
FastAPI dependencies for session authentication.

Dependencies are reusable functions that FastAPI injects into route handlers:

  get_token_issuer  (app.state -> TokenIssuer)
  get_current_identity  (Authorization header -> Identity)

get_current_identity walks each request through the session checks:

  no bearer token          -> AuthMissingError
  token fails verification -> TokenMalformedError / TokenInvalidError / TokenExpiredError
  account no longer exists -> SessionAccountNotFoundError
  otherwise                -> Identity attached to request.state.identity

All failures surface as the same 401; the exception handler logs which one
it was.
"""

import uuid
from dataclasses import dataclass

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from artisan_auth.database import get_db
from artisan_auth.exceptions import AuthMissingError, SessionAccountNotFoundError
from artisan_auth.repositories import AccountRepository
from artisan_auth.security import TokenIssuer


# auto_error=False so a missing header reaches our own AuthMissingError
# instead of FastAPI's default 403
bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller, as resolved by get_current_identity."""
    account_id: uuid.UUID
    email: str


def get_token_issuer(request: Request) -> TokenIssuer:
    """Return the TokenIssuer built at application startup."""
    return request.app.state.token_issuer


async def get_current_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    tokens: TokenIssuer = Depends(get_token_issuer),
    db: AsyncSession = Depends(get_db),
) -> Identity:
    """
    Verify the bearer token and confirm its account still exists.

    Returns:
        The caller's Identity.

    Raises:
        AuthenticationError subclasses, all answered with 401.
    """
    if credentials is None or not credentials.credentials:
        raise AuthMissingError("no bearer token")

    claims = tokens.verify(credentials.credentials)

    account = await AccountRepository(db).find_by_id(claims.account_id)
    if account is None:
        raise SessionAccountNotFoundError(str(claims.account_id))

    identity = Identity(account_id=account.id, email=account.email)
    request.state.identity = identity
    return identity
