"""
Access-token creation and verification.

Tokens are JWTs signed with the server-held secret from ``AuthConfig``
(HS256 unless configured otherwise).  Claims carry the user id as ``sub``,
the user's ``email``, and standard ``iat`` / ``exp`` timestamps.  Nothing
is stored server-side.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import jwt

from auth.config import AuthConfig
from auth.errors import InvalidToken
from auth.models import PublicUser, TokenClaims

_REQUIRED_CLAIMS = ["exp", "iat", "sub"]


class TokenIssuer:
    def __init__(self, auth_config: AuthConfig) -> None:
        self._config = auth_config

    def issue(self, user: PublicUser) -> str:
        """Create a signed token for ``user`` expiring after the configured window."""
        now = self._config.clock()
        payload: Dict[str, Any] = {
            "sub": str(user.id),
            "email": user.email,
            "iat": now,
            "exp": now + timedelta(seconds=self._config.token_expiry_seconds),
        }
        return jwt.encode(
            payload, self._config.secret_key, algorithm=self._config.algorithm
        )

    def decode(self, token: str) -> TokenClaims:
        """
        Verify ``token`` and return its claims.

        Raises ``InvalidToken`` on a bad signature, a missing claim,
        or an expired token.
        """
        try:
            payload = jwt.decode(
                token,
                self._config.secret_key,
                algorithms=[self._config.algorithm],
                options={"require": _REQUIRED_CLAIMS, "verify_iat": False},
            )
            return TokenClaims(
                subject=uuid.UUID(payload["sub"]),
                email=payload["email"],
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except jwt.ExpiredSignatureError as exc:
            raise InvalidToken("token expired") from exc
        except jwt.InvalidTokenError as exc:
            raise InvalidToken(str(exc)) from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidToken("malformed claims") from exc
