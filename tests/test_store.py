"""
Tests for the SQLAlchemy-backed identity and journal stores.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from app.core.config import DEFAULT_STORE_TIMEOUT_SECONDS, load_settings
from app.core.exceptions import DuplicateIdentity, StoreError
from app.core.store import SqlIdentityStore, SqlJournalStore


@pytest.mark.asyncio
async def test_create_and_find_user(session):
    store = SqlIdentityStore(session)
    user_id = await store.create_user("a@x.com", "Alice", "$argon2id$hash")

    record = await store.find_by_email("a@x.com")
    assert record.id == user_id
    assert record.username == "Alice"
    assert record.password_hash == "$argon2id$hash"


@pytest.mark.asyncio
async def test_find_unknown_user_returns_none(session):
    assert await SqlIdentityStore(session).find_by_email("nobody@x.com") is None


@pytest.mark.asyncio
async def test_unique_email_constraint(session):
    store = SqlIdentityStore(session)
    await store.create_user("a@x.com", "Alice", "h1")
    with pytest.raises(DuplicateIdentity) as exc_info:
        await store.create_user("a@x.com", "Alice 2", "h2")
    assert isinstance(exc_info.value, StoreError)

    # Session is still usable after the rollback
    assert (await store.find_by_email("a@x.com")).username == "Alice"


@pytest.mark.asyncio
async def test_journal_entries_scoped_and_newest_first(session):
    users = SqlIdentityStore(session)
    alice = await users.create_user("a@x.com", "Alice", "h")
    bob = await users.create_user("b@x.com", "Bob", "h")

    journal = SqlJournalStore(session)
    start = datetime(2026, 3, 1, tzinfo=timezone.utc)
    await journal.add_entry(alice, "old", "first", 3, "meh", date=start)
    await journal.add_entry(alice, "new", "second", 8, "happy", date=start + timedelta(days=1))
    await journal.add_entry(bob, "bob's", "private", 5, "ok", date=start)

    entries = await journal.list_entries(alice)
    assert [e.title for e in entries] == ["new", "old"]
    assert all(e.user_id == alice for e in entries)

    assert [e.title for e in await journal.list_entries(bob)] == ["bob's"]


@pytest.mark.asyncio
async def test_stalled_store_call_times_out(session):
    store = SqlIdentityStore(session, timeout=0.01)

    async def stall():
        await asyncio.sleep(1)

    with pytest.raises(StoreError):
        await store._bounded(stall(), "stall")


@pytest.mark.asyncio
async def test_default_timeout_matches_settings(session):
    settings = load_settings({"DATABASE_URL": "sqlite+aiosqlite:///:memory:", "JWT_SECRET": "s"})
    assert SqlIdentityStore(session)._timeout == settings.store_timeout_seconds
    assert SqlJournalStore(session)._timeout == DEFAULT_STORE_TIMEOUT_SECONDS
