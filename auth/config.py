"""
Explicit configuration threaded into ``AuthService`` at construction.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from auth.password import DEFAULT_ROUNDS
from config.settings import Settings


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class AuthConfig:
    secret_key: str = field(repr=False)
    algorithm: str = "HS256"
    token_expiry_seconds: int = 3600
    bcrypt_rounds: int = DEFAULT_ROUNDS
    clock: Callable[[], datetime] = _utcnow

    @classmethod
    def from_settings(cls, settings: Settings) -> "AuthConfig":
        return cls(
            secret_key=settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
            token_expiry_seconds=settings.jwt_expiry_seconds,
            bcrypt_rounds=settings.bcrypt_rounds,
        )
