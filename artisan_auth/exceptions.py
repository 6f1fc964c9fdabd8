"""
Custom exception classes and FastAPI exception handlers.

The service layer raises domain-specific errors without importing HTTP
concepts; the handlers registered here translate them into the API's
failure envelope:

    {"success": false, "message": "...", "errors": [{"field": ..., "msg": ...}]}

Request bodies that fail their schema arrive as FastAPI's
RequestValidationError and are reported as 400 "Validation failed" with one
{field, msg} entry per bad field.

Exception hierarchy:
    ArtisanAuthError (base)
    ├── DuplicateEmailError       — 409
    ├── InvalidCredentialsError   — 401, same message for unknown email and wrong password
    ├── AuthenticationError       — 401, uniform "Not authorized" externally
    │   ├── AuthMissingError
    │   ├── TokenMalformedError
    │   ├── TokenInvalidError
    │   ├── TokenExpiredError
    │   └── SessionAccountNotFoundError
    ├── AccountNotFoundError      — 404
    └── StorageFailureError       — 500, generic message

Anything else that escapes a route is turned into a generic 500 by the
middleware installed in register_exception_handlers().
"""

import logging
import uuid

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from artisan_auth.config import Settings


logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Base exception
# ---------------------------------------------------------------------------

class ArtisanAuthError(Exception):
    """Base exception for all Artisan Auth domain errors."""

    status_code = 400
    error_type = "error"

    def __init__(self, detail: str = "An error occurred"):
        self.detail = detail
        super().__init__(self.detail)


# ---------------------------------------------------------------------------
# Domain exceptions
# ---------------------------------------------------------------------------

class DuplicateEmailError(ArtisanAuthError):
    """Raised when attempting to register with an email that's already in use."""

    status_code = 409
    error_type = "duplicate_email"

    def __init__(self, email: str):
        self.email = email
        super().__init__("User with this email already exists")


class InvalidCredentialsError(ArtisanAuthError):
    """Raised when login credentials are incorrect."""

    status_code = 401
    error_type = "invalid_credentials"

    def __init__(self):
        super().__init__("Invalid email or password")


class AuthenticationError(ArtisanAuthError):
    """
    Base for every way a session token can fail.

    Subclasses differ only in error_type, which is logged. Clients always see
    the same message so they cannot tell which check failed.
    """

    status_code = 401
    error_type = "token_invalid"

    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__("Not authorized")


class AuthMissingError(AuthenticationError):
    error_type = "auth_missing"


class TokenMalformedError(AuthenticationError):
    error_type = "token_malformed"


class TokenInvalidError(AuthenticationError):
    error_type = "token_invalid"


class TokenExpiredError(AuthenticationError):
    error_type = "token_expired"


class SessionAccountNotFoundError(AuthenticationError):
    """The token verified but its account no longer exists."""
    error_type = "account_not_found"


class AccountNotFoundError(ArtisanAuthError):
    """Raised when a requested account does not exist."""

    status_code = 404
    error_type = "account_not_found"

    def __init__(self, account_id: uuid.UUID):
        self.account_id = account_id
        super().__init__("User not found")


class StorageFailureError(ArtisanAuthError):
    """
    Raised when the persistence layer fails unexpectedly.

    Attributes:
        operation: Name of the store operation that failed (e.g. "create_account").
        context: Email or account id the operation was working on.
    """

    status_code = 500
    error_type = "storage_failure"

    def __init__(self, operation: str, context: str = ""):
        self.operation = operation
        self.context = context
        super().__init__(f"{operation} failed")


# Generic client-facing messages for 500s, keyed by route path
_SERVER_ERROR_MESSAGES = {
    "/auth/signup": "Server error during registration",
    "/auth/login": "Server error during login",
    "/auth/me": "Server error while fetching profile",
    "/auth/profile": "Server error while updating profile",
}


def _error_response(
    status_code: int,
    message: str,
    errors: list[dict] | None = None,
    headers: dict | None = None,
) -> JSONResponse:
    content = {"success": False, "message": message}
    if errors:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def _field_name(loc: tuple) -> str:
    # loc is ("body", "firstName", ...); a body that is not an object is just ("body",)
    return ".".join(str(part) for part in loc[1:]) or "body"


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def register_exception_handlers(app: FastAPI, config: Settings) -> None:
    """
    Register custom exception handlers with the FastAPI application.

    config decides whether 500s are logged with their traceback (never in
    production). This is called once during app creation in main.py.
    """

    def server_error_response(request: Request, exc: Exception) -> JSONResponse:
        message = _SERVER_ERROR_MESSAGES.get(request.url.path, "Internal server error")
        if config.is_production:
            logger.error(
                "%s %s failed: %s", request.method, request.url.path, type(exc).__name__,
            )
        else:
            logger.error(
                "%s %s failed", request.method, request.url.path, exc_info=exc,
            )
        return _error_response(500, message)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        errors = [
            {"field": _field_name(tuple(err.get("loc", ()))), "msg": err.get("msg", "Invalid value")}
            for err in exc.errors()
        ]
        return _error_response(400, "Validation failed", errors=errors)

    @app.exception_handler(AuthenticationError)
    async def authentication_handler(
        request: Request, exc: AuthenticationError
    ) -> JSONResponse:
        logger.info(
            "Rejected %s %s: %s %s",
            request.method, request.url.path, exc.error_type, exc.reason,
        )
        return _error_response(
            exc.status_code,
            exc.detail,
            headers={"WWW-Authenticate": "Bearer"},
        )

    @app.exception_handler(StorageFailureError)
    async def storage_failure_handler(
        request: Request, exc: StorageFailureError
    ) -> JSONResponse:
        return server_error_response(request, exc)

    @app.exception_handler(ArtisanAuthError)
    async def domain_error_handler(
        request: Request, exc: ArtisanAuthError
    ) -> JSONResponse:
        return _error_response(exc.status_code, exc.detail)

    # An exception_handler(Exception) would run in Starlette's outermost
    # middleware, which re-raises after responding; catch inside the app instead
    @app.middleware("http")
    async def unhandled_error_middleware(request: Request, call_next):
        try:
            return await call_next(request)
        except Exception as exc:
            return server_error_response(request, exc)
