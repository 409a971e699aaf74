"""
Credential store — durable storage and lookup of user records.

Two implementations share the ``CredentialStore`` protocol:

  • ``SqlCredentialStore``: async SQLAlchemy, uniqueness enforced by the
    ``users.email`` unique constraint.
  • ``InMemoryCredentialStore``: process-local dict, for tests and embedding.

Email lookups are exact-match and case-sensitive.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Optional, Protocol

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, InterfaceError, OperationalError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from auth.errors import DuplicateIdentity, StorageUnavailable
from auth.models import PublicUser
from database.models import User

logger = logging.getLogger(__name__)

_CONNECTION_ERRORS = (OperationalError, InterfaceError, OSError)


@dataclass(frozen=True)
class UserRecord:
    id: uuid.UUID
    email: str
    password_hash: str = field(repr=False)
    created_at: datetime

    def public(self) -> PublicUser:
        """Outward projection: everything except the password hash."""
        return PublicUser(id=self.id, email=self.email, created_at=self.created_at)


class CredentialStore(Protocol):
    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        ...

    async def create(self, email: str, password_hash: str) -> UserRecord:
        ...


def _to_record(row: User) -> UserRecord:
    created_at = row.created_at
    # SQLite drops the offset on read; values are always written in UTC.
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    return UserRecord(
        id=row.user_id,
        email=row.email,
        password_hash=row.password_hash,
        created_at=created_at,
    )


class SqlCredentialStore:
    """Each call runs in its own session and transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        try:
            async with self._session_factory() as session:
                result = await session.execute(
                    select(User).where(User.email == email)
                )
                row = result.scalar_one_or_none()
        except _CONNECTION_ERRORS as exc:
            logger.exception("Credential store unreachable during lookup")
            raise StorageUnavailable("Credential store unavailable") from exc

        return _to_record(row) if row is not None else None

    async def create(self, email: str, password_hash: str) -> UserRecord:
        record = UserRecord(
            id=uuid.uuid4(),
            email=email,
            password_hash=password_hash,
            created_at=datetime.now(timezone.utc),
        )
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(
                        User(
                            user_id=record.id,
                            email=record.email,
                            password_hash=record.password_hash,
                            created_at=record.created_at,
                        )
                    )
        except IntegrityError as exc:
            raise DuplicateIdentity(email) from exc
        except _CONNECTION_ERRORS as exc:
            logger.exception("Credential store unreachable during create")
            raise StorageUnavailable("Credential store unavailable") from exc

        return record


class InMemoryCredentialStore:
    def __init__(self) -> None:
        self._records: Dict[str, UserRecord] = {}
        self._lock = asyncio.Lock()

    async def find_by_email(self, email: str) -> Optional[UserRecord]:
        return self._records.get(email)

    async def create(self, email: str, password_hash: str) -> UserRecord:
        async with self._lock:
            if email in self._records:
                raise DuplicateIdentity(email)
            record = UserRecord(
                id=uuid.uuid4(),
                email=email,
                password_hash=password_hash,
                created_at=datetime.now(timezone.utc),
            )
            self._records[email] = record
        return record

    def __len__(self) -> int:
        return len(self._records)
