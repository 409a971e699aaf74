"""
FastAPI dependencies for authentication.

Provides ``get_auth_service`` (the wired service) and ``get_current_user``
(bearer-token check) for route handlers.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from auth.config import AuthConfig
from auth.errors import InvalidToken
from auth.models import CurrentUser
from auth.service import AuthService
from auth.store import SqlCredentialStore
from config.settings import config
from database.session import async_session_factory

_bearer_scheme = HTTPBearer(auto_error=False)


@lru_cache
def get_auth_service() -> AuthService:
    """Build the service once per process from the global settings."""
    return AuthService(
        SqlCredentialStore(async_session_factory),
        AuthConfig.from_settings(config),
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    service: AuthService = Depends(get_auth_service),
) -> CurrentUser:
    """
    Extract and verify the Bearer token, returning the identity it
    asserts.
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing Bearer token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    try:
        claims = service.authenticate_token(credentials.credentials)
    except InvalidToken as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=exc.message,
            headers={"WWW-Authenticate": "Bearer"},
        ) from exc
    return CurrentUser(id=claims.subject, email=claims.email)
