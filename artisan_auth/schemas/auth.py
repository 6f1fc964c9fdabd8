"""
Pydantic schemas for the auth endpoints (requests and response envelopes).

Request bodies use camelCase keys on the wire (firstName, businessType, ...)
and snake_case attributes in Python. Each field rule raises a
PydanticCustomError carrying the user-facing message, so a failed request
reports every bad field at once:

    {"success": false, "message": "Validation failed",
     "errors": [{"field": "password", "msg": "Password must be at least 6 characters long"}]}

Keys a model does not declare (email on a profile update, id, createdAt...)
are ignored.

Every successful response has the shape:

    {"success": true, "message": "...", "data": {...}}
"""

import re
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    ValidationError,
    ValidatorFunctionWrapHandler,
    field_validator,
)
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from artisan_auth.config import settings
from artisan_auth.schemas.user import DebugUserSummary, UserResponse


# ASCII digits only; Python's \d would also accept other scripts' digits
PHONE_PATTERN = re.compile(r"^[+]?[\d\s\-()]{10,15}$", re.ASCII)

FIRST_NAME_MESSAGE = "First name is required and must be less than 50 characters"
LAST_NAME_MESSAGE = "Last name is required and must be less than 50 characters"


def _check_name(value: str | None, message: str) -> str:
    if value is None:
        raise PydanticCustomError("name_invalid", message)
    value = value.strip()
    if not 1 <= len(value) <= 50:
        raise PydanticCustomError("name_invalid", message)
    return value


def _check_optional_text(value: str | None, message: str) -> str | None:
    if value is None:
        return None
    value = value.strip()
    if len(value) > 100:
        raise PydanticCustomError("too_long", message, {"max_length": 100})
    return value


class _ProfileFields(BaseModel):
    """Optional business profile shared by signup and profile update."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    business_name: str | None = None
    business_type: str | None = None
    phone: str | None = None
    location: str | None = None

    @field_validator("business_name")
    @classmethod
    def validate_business_name(cls, value: str | None) -> str | None:
        return _check_optional_text(value, "Business name must be less than 100 characters")

    @field_validator("location")
    @classmethod
    def validate_location(cls, value: str | None) -> str | None:
        return _check_optional_text(value, "Location must be less than 100 characters")

    @field_validator("business_type")
    @classmethod
    def validate_business_type(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if settings.RESTRICT_BUSINESS_TYPES:
            if value not in settings.BUSINESS_TYPES:
                raise PydanticCustomError(
                    "business_type_invalid",
                    "Invalid business type",
                    {"allowed": ", ".join(settings.BUSINESS_TYPES)},
                )
            return value
        return _check_optional_text(value, "Invalid business type")

    @field_validator("phone")
    @classmethod
    def validate_phone(cls, value: str | None) -> str | None:
        if value is None:
            return None
        if not PHONE_PATTERN.match(value):
            raise PydanticCustomError(
                "phone_invalid",
                "Please provide a valid phone number",
                {"pattern": PHONE_PATTERN.pattern},
            )
        return value


def _normalize_email(value: Any, handler: ValidatorFunctionWrapHandler) -> str:
    if isinstance(value, str):
        value = value.strip()
    try:
        return handler(value).lower()
    except ValidationError:
        raise PydanticCustomError("email_invalid", "Please provide a valid email") from None


class SignupRequest(_ProfileFields):
    """Request body for POST /auth/signup."""
    email: EmailStr
    password: str
    first_name: str
    last_name: str

    @field_validator("email", mode="wrap")
    @classmethod
    def validate_email(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> str:
        return _normalize_email(value, handler)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if len(value) < 6:
            raise PydanticCustomError(
                "password_too_short",
                "Password must be at least 6 characters long",
                {"min_length": 6},
            )
        return value

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, value: str) -> str:
        return _check_name(value, FIRST_NAME_MESSAGE)

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, value: str) -> str:
        return _check_name(value, LAST_NAME_MESSAGE)


class LoginRequest(BaseModel):
    """Request body for POST /auth/login."""
    email: EmailStr
    password: str  # No length rule on login

    @field_validator("email", mode="wrap")
    @classmethod
    def validate_email(cls, value: Any, handler: ValidatorFunctionWrapHandler) -> str:
        return _normalize_email(value, handler)

    @field_validator("password")
    @classmethod
    def validate_password(cls, value: str) -> str:
        if not value:
            raise PydanticCustomError("missing", "Password is required")
        return value


class ProfileUpdateRequest(_ProfileFields):
    """
    Request body for PUT /auth/profile (all fields optional).

    Use model_dump(exclude_unset=True) so only the fields the client sent
    are applied. null clears an optional field but not a name.
    """
    first_name: str | None = None
    last_name: str | None = None

    @field_validator("first_name")
    @classmethod
    def validate_first_name(cls, value: str | None) -> str:
        return _check_name(value, FIRST_NAME_MESSAGE)

    @field_validator("last_name")
    @classmethod
    def validate_last_name(cls, value: str | None) -> str:
        return _check_name(value, LAST_NAME_MESSAGE)


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------

class AuthData(BaseModel):
    """Payload returned by signup and login: projection + JWT."""
    user: UserResponse
    token: str


class UserData(BaseModel):
    user: UserResponse


class AuthResponse(BaseModel):
    """Response body for POST /auth/signup and POST /auth/login."""
    success: bool = True
    message: str
    data: AuthData


class ProfileResponse(BaseModel):
    """Response body for GET /auth/me and PUT /auth/profile."""
    success: bool = True
    message: str | None = None
    data: UserData


class LogoutResponse(BaseModel):
    """Response body for POST /auth/logout."""
    success: bool = True
    message: str
    data: dict = Field(default_factory=dict)


class DebugUsersResponse(BaseModel):
    success: bool = True
    count: int
    recent: list[DebugUserSummary]
