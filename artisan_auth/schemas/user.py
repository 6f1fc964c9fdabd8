"""
Pydantic schemas for account responses.

These schemas control what account data is exposed through the API.
hashed_password is NEVER included in any response schema; this is the
projection every endpoint returns.

Field names are snake_case in Python and camelCase on the wire
(firstName, isEmailVerified, createdAt, ...).
"""

import uuid
from datetime import datetime, timezone
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


def _as_utc(value: datetime) -> datetime:
    # SQLite hands timestamps back without tzinfo; they were written as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class UserResponse(BaseModel):
    """Public representation of an Account."""
    id: uuid.UUID
    email: str
    first_name: str
    last_name: str
    business_name: str | None = None
    business_type: str | None = None
    phone: str | None = None
    location: str | None = None
    is_email_verified: bool
    created_at: UtcDatetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class DebugUserSummary(BaseModel):
    """Row of the development-only recent-accounts listing."""
    id: uuid.UUID
    email: str
    created_at: UtcDatetime

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )
