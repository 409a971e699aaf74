"""
Auth API routes — register, login, me.

Route prefix: /api/v1/auth
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status

from auth.dependencies import get_auth_service, get_current_user
from auth.errors import DuplicateIdentity, InvalidInput, StorageUnavailable, Unauthorized
from auth.models import (
    CurrentUser,
    LoginRequest,
    PublicUser,
    RegisterRequest,
    TokenResponse,
)
from auth.service import AuthService

router = APIRouter(tags=["auth"])


def _storage_error(exc: StorageUnavailable) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        detail=exc.message,
    )


@router.post(
    "/register",
    response_model=PublicUser,
    status_code=status.HTTP_201_CREATED,
)
async def register(
    req: RegisterRequest,
    service: AuthService = Depends(get_auth_service),
) -> PublicUser:
    """Register a new user."""
    try:
        return await service.register(req.email, req.password)
    except DuplicateIdentity as exc:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=exc.message,
        ) from exc
    except InvalidInput as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=exc.message,
        ) from exc
    except StorageUnavailable as exc:
        raise _storage_error(exc) from exc


@router.post("/login", response_model=TokenResponse)
async def login(
    req: LoginRequest,
    service: AuthService = Depends(get_auth_service),
) -> TokenResponse:
    """Login with email + password."""
    try:
        token = await service.login(req.email, req.password)
    except Unauthorized as exc:
        # Same response whether the email is unknown or the password is wrong.
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    except StorageUnavailable as exc:
        raise _storage_error(exc) from exc

    return TokenResponse(access_token=token)


@router.get("/me", response_model=CurrentUser)
async def me(user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
    """Return the identity asserted by the bearer token."""
    return user
