"""
Persistence for credential records and journal entries.

The auth flows only need IdentityStore (insert + lookup by email).
SqlIdentityStore and SqlJournalStore implement it over an AsyncSession.
Every call is bounded by a timeout so a stalled database surfaces as a
StoreError instead of hanging the request.
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Awaitable, List, Optional, Protocol, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import DEFAULT_STORE_TIMEOUT_SECONDS
from app.core.exceptions import DuplicateIdentity, StoreError
from app.models.journal import JournalEntry
from app.models.user import User

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class CredentialRecord:
    """Read-only view of a stored user."""
    id: int
    email: str
    username: str
    password_hash: str


class IdentityStore(Protocol):
    """What the credential flows need from persistence."""

    async def create_user(self, email: str, username: str, password_hash: str) -> int:
        ...

    async def find_by_email(self, email: str) -> Optional[CredentialRecord]:
        ...


class _SqlStore:
    def __init__(self, session: AsyncSession, timeout: float = DEFAULT_STORE_TIMEOUT_SECONDS):
        self._session = session
        self._timeout = timeout

    async def _bounded(self, awaitable: Awaitable[T], operation: str) -> T:
        try:
            return await asyncio.wait_for(awaitable, timeout=self._timeout)
        except asyncio.TimeoutError as e:
            logger.error("Store operation %s timed out after %.1fs", operation, self._timeout)
            raise StoreError(f"{operation} timed out") from e


class SqlIdentityStore(_SqlStore):
    """IdentityStore backed by the users table."""

    async def create_user(self, email: str, username: str, password_hash: str) -> int:
        user = User(email=email, username=username, password_hash=password_hash)
        self._session.add(user)
        try:
            await self._bounded(self._session.commit(), "create_user")
        except IntegrityError as e:
            await self._session.rollback()
            raise DuplicateIdentity(email) from e
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.exception("Error saving user")
            raise StoreError("Error saving user") from e
        except StoreError:
            await self._session.rollback()
            raise
        return user.id

    async def find_by_email(self, email: str) -> Optional[CredentialRecord]:
        try:
            result = await self._bounded(
                self._session.execute(select(User).where(User.email == email)),
                "find_by_email",
            )
        except SQLAlchemyError as e:
            logger.exception("Error looking up user")
            raise StoreError("Error looking up user") from e

        user = result.scalar_one_or_none()
        if user is None:
            return None
        return CredentialRecord(
            id=user.id,
            email=user.email,
            username=user.username,
            password_hash=user.password_hash,
        )


class SqlJournalStore(_SqlStore):
    """Journal entries, always scoped to one owner."""

    async def add_entry(
        self,
        user_id: int,
        title: str,
        entry: str,
        score: int,
        mood: str,
        date: Optional[datetime] = None,
    ) -> JournalEntry:
        row = JournalEntry(user_id=user_id, title=title, entry=entry, score=score, mood=mood)
        if date is not None:
            row.date = date
        self._session.add(row)
        try:
            await self._bounded(self._session.commit(), "add_entry")
        except SQLAlchemyError as e:
            await self._session.rollback()
            logger.exception("Error saving journal entry")
            raise StoreError("Error saving journal entry") from e
        except StoreError:
            await self._session.rollback()
            raise
        return row

    async def list_entries(self, user_id: int) -> List[JournalEntry]:
        """Entries owned by user_id, newest first."""
        query = (
            select(JournalEntry)
            .where(JournalEntry.user_id == user_id)
            .order_by(JournalEntry.date.desc(), JournalEntry.id.desc())
        )
        try:
            result = await self._bounded(self._session.execute(query), "list_entries")
        except SQLAlchemyError as e:
            logger.exception("Error fetching journal entries")
            raise StoreError("Error fetching journal entries") from e
        return list(result.scalars().all())
