"""
Development-only endpoints.

Mounted by create_app() only when the environment is not production.

Endpoints:
  GET /auth/debug-users  — Account count and the five newest accounts
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from artisan_auth.database import get_db
from artisan_auth.repositories import AccountRepository
from artisan_auth.schemas.auth import DebugUsersResponse
from artisan_auth.schemas.user import DebugUserSummary

router = APIRouter()


@router.get(
    "/debug-users",
    response_model=DebugUsersResponse,
    summary="List recently created accounts (development only)",
)
async def debug_users(db: AsyncSession = Depends(get_db)):
    repository = AccountRepository(db)
    recent = await repository.most_recent(limit=5)
    return DebugUsersResponse(
        count=await repository.count(),
        recent=[DebugUserSummary.model_validate(account) for account in recent],
    )
