"""
Authentication service — register, validate credentials, login.

Sits between untrusted input and the credential store.  bcrypt work is
CPU-bound, so hashing and verification run in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import secrets
from typing import Optional

from auth.config import AuthConfig
from auth.errors import InvalidInput, Unauthorized
from auth.models import PublicUser, TokenClaims
from auth.password import MAX_PASSWORD_BYTES, hash_password, verify_password
from auth.store import CredentialStore
from auth.tokens import TokenIssuer

logger = logging.getLogger(__name__)


def _is_utf8(value: str) -> bool:
    try:
        value.encode()
    except UnicodeEncodeError:
        return False
    return True


class AuthService:
    def __init__(self, store: CredentialStore, auth_config: AuthConfig) -> None:
        self._store = store
        self._config = auth_config
        self._tokens = TokenIssuer(auth_config)
        # Verified against when the email is unknown so that path costs
        # the same bcrypt work as a wrong password.
        self._dummy_hash = hash_password(
            secrets.token_urlsafe(16), auth_config.bcrypt_rounds
        )

    async def register(self, email: str, password: str) -> PublicUser:
        """
        Create an account and return its public projection.

        Raises ``DuplicateIdentity`` if the email is already registered.
        """
        for field_name, value in (("email", email), ("password", password)):
            if not value:
                raise InvalidInput(field_name, "must not be empty")
            if not _is_utf8(value):
                raise InvalidInput(field_name, "must be valid UTF-8")
        if len(password.encode()) > MAX_PASSWORD_BYTES:
            raise InvalidInput(
                "password", f"must be at most {MAX_PASSWORD_BYTES} bytes"
            )

        password_hash = await asyncio.to_thread(
            hash_password, password, self._config.bcrypt_rounds
        )
        record = await self._store.create(email, password_hash)
        logger.info("Registered user %s", record.id)
        return record.public()

    async def validate_credentials(
        self, email: str, password: str
    ) -> Optional[PublicUser]:
        """Return the user's projection on a match, ``None`` otherwise."""
        # Lone surrogates cannot reach the store; treat them as unknown.
        record = await self._store.find_by_email(email) if _is_utf8(email) else None
        if record is None:
            await asyncio.to_thread(verify_password, password, self._dummy_hash)
            return None

        matched = await asyncio.to_thread(
            verify_password, password, record.password_hash
        )
        return record.public() if matched else None

    async def login(self, email: str, password: str) -> str:
        """Validate credentials and issue a signed access token."""
        user = await self.validate_credentials(email, password)
        if user is None:
            logger.info("Login rejected")
            raise Unauthorized()

        token = self._tokens.issue(user)
        logger.info("Login: %s", user.id)
        return token

    def authenticate_token(self, token: str) -> TokenClaims:
        """Decode a bearer token issued by ``login``.  Raises ``InvalidToken``."""
        return self._tokens.decode(token)
