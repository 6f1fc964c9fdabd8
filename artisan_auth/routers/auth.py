"""
Authentication router — signup, login, profile and logout endpoints.

Endpoints:
  POST /auth/signup       — Register a new account and get a token
  POST /auth/login        — Authenticate and get a token
  GET  /auth/me           — Current account's profile          [Bearer]
  PUT  /auth/profile      — Update profile fields              [Bearer]
  POST /auth/logout       — Record a logout                    [Bearer]

Security audit notes:
  - Plaintext passwords exist only in memory during request processing;
    they are hashed before any database operation and never logged.
  - JWT tokens appear only in response bodies and Authorization headers,
    neither of which is logged.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from artisan_auth.database import get_db
from artisan_auth.dependencies import Identity, get_current_identity, get_token_issuer
from artisan_auth.schemas.auth import (
    AuthData,
    AuthResponse,
    LoginRequest,
    LogoutResponse,
    ProfileResponse,
    ProfileUpdateRequest,
    SignupRequest,
    UserData,
)
from artisan_auth.schemas.user import UserResponse
from artisan_auth.security import TokenIssuer
from artisan_auth.services import auth_service

router = APIRouter()


@router.post(
    "/signup",
    response_model=AuthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a new account",
)
async def signup(
    request: SignupRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """
    Register a new artisan account and log it in.

    - **email**: Valid email, not already registered (case-insensitive)
    - **password**: Minimum 6 characters
    - **firstName** / **lastName**: Required, 1-50 characters
    - **businessName**, **businessType**, **phone**, **location**: Optional
    """
    account, token = await auth_service.signup(db=db, tokens=tokens, request=request)
    return AuthResponse(
        message="User registered successfully",
        data=AuthData(user=UserResponse.model_validate(account), token=token),
    )


@router.post(
    "/login",
    response_model=AuthResponse,
    summary="Authenticate and get a token",
)
async def login(
    request: LoginRequest,
    db: AsyncSession = Depends(get_db),
    tokens: TokenIssuer = Depends(get_token_issuer),
):
    """
    Authenticate with email and password.

    Returns a JWT bearer token that must be included in the Authorization
    header for all subsequent requests:

        Authorization: Bearer <token>
    """
    account, token = await auth_service.login(db=db, tokens=tokens, request=request)
    return AuthResponse(
        message="Login successful",
        data=AuthData(user=UserResponse.model_validate(account), token=token),
    )


@router.get(
    "/me",
    response_model=ProfileResponse,
    summary="Get current account's profile",
)
async def get_me(
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    account = await auth_service.get_profile(db, identity.account_id)
    return ProfileResponse(data=UserData(user=UserResponse.model_validate(account)))


@router.put(
    "/profile",
    response_model=ProfileResponse,
    summary="Update profile fields",
)
async def update_profile(
    updates: ProfileUpdateRequest,
    identity: Identity = Depends(get_current_identity),
    db: AsyncSession = Depends(get_db),
):
    """
    Update the authenticated account's profile.

    Only fields present in the body are updated; omitted fields remain
    unchanged. email and password cannot be changed here.
    """
    account = await auth_service.update_profile(db, identity.account_id, updates)
    return ProfileResponse(
        message="Profile updated successfully",
        data=UserData(user=UserResponse.model_validate(account)),
    )


@router.post(
    "/logout",
    response_model=LogoutResponse,
    summary="Log out",
)
async def logout(identity: Identity = Depends(get_current_identity)):
    """The client discards its token; the server only records the event."""
    auth_service.logout(identity.account_id)
    return LogoutResponse(message="Logged out successfully")

