"""
Security utilities: password hashing and JWT session tokens.

This module centralizes all cryptographic operations so they're easy to
audit and update.

1. PASSWORD HASHING (Argon2)
   - Passwords are never stored in plaintext
   - Argon2id is memory-hard and time-hard, and every hash embeds its own
     random salt, so hashing the same password twice gives different strings
   - passlib's CryptContext provides the high-level hash/verify operations

2. JWT TOKENS
   - After signup or login the client receives a signed JWT carrying the
     account id ("sub") and email, scoped by issuer and audience tags
   - Tokens are signed with SECRET_KEY using HS256 and expire after
     ACCESS_TOKEN_EXPIRE_MINUTES (default: 7 days)
   - The server is stateless: tokens are not stored, and logout cannot
     revoke one
"""

import uuid
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from artisan_auth.config import Settings
from artisan_auth.exceptions import (
    TokenExpiredError,
    TokenInvalidError,
    TokenMalformedError,
)


# ---------------------------------------------------------------------------
# 1. Password Hashing (Argon2)
# ---------------------------------------------------------------------------

pwd_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(plain_password: str) -> str:
    """
    Hash a plaintext password using Argon2id.

    Args:
        plain_password: The user's raw password input.

    Returns:
        An Argon2 hash string (e.g., "$argon2id$v=19$m=65536,t=3,p=4$...").
    """
    return pwd_context.hash(plain_password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Verify a plaintext password against a stored Argon2 hash.

    The digest comparison is constant-time. A hash string that passlib
    cannot parse counts as a mismatch rather than an error.

    Returns:
        True if the password matches, False otherwise.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


# ---------------------------------------------------------------------------
# 2. JWT Tokens
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TokenClaims:
    """The identity a verified token vouches for."""
    account_id: uuid.UUID
    email: str


class TokenIssuer:
    """
    Issues and verifies signed session tokens.

    Built once from the process settings; the secret, issuer and audience
    are captured at construction and never re-read.
    """

    def __init__(self, config: Settings):
        self._secret = config.SECRET_KEY
        self._algorithm = config.ALGORITHM
        self._issuer = config.JWT_ISSUER
        self._audience = config.JWT_AUDIENCE
        self._lifetime = timedelta(minutes=config.ACCESS_TOKEN_EXPIRE_MINUTES)

    def issue(
        self,
        account_id: uuid.UUID,
        email: str,
        expires_delta: timedelta | None = None,
    ) -> str:
        """
        Create a signed JWT for an account.

        Args:
            account_id: Stored as the "sub" claim.
            email: Stored as the "email" claim.
            expires_delta: Optional custom lifetime. Defaults to
                           ACCESS_TOKEN_EXPIRE_MINUTES from settings.

        Returns:
            An encoded JWT string.
        """
        now = datetime.now(timezone.utc)
        claims = {
            "sub": str(account_id),
            "email": email,
            "iss": self._issuer,
            "aud": self._audience,
            "iat": now,
            "exp": now + (expires_delta if expires_delta is not None else self._lifetime),
        }
        return jwt.encode(claims, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenClaims:
        """
        Decode and verify a JWT.

        Raises:
            TokenMalformedError: The string is not a parseable JWT, or its
                claims are missing or mistyped.
            TokenExpiredError: Signature is good but "exp" has passed.
            TokenInvalidError: Signature, issuer or audience check failed.
        """
        try:
            jwt.get_unverified_header(token)
        except JWTError as exc:
            raise TokenMalformedError(str(exc)) from exc

        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                audience=self._audience,
                issuer=self._issuer,
            )
        except ExpiredSignatureError as exc:
            raise TokenExpiredError(str(exc)) from exc
        except JWTError as exc:
            raise TokenInvalidError(str(exc)) from exc

        subject = payload.get("sub")
        email = payload.get("email")
        if not isinstance(subject, str) or not isinstance(email, str):
            raise TokenMalformedError("token is missing sub or email")
        try:
            account_id = uuid.UUID(subject)
        except ValueError as exc:
            raise TokenMalformedError("sub is not an account id") from exc

        return TokenClaims(account_id=account_id, email=email)
