"""Unit tests for the in-memory session and credential repositories."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from tollgate_auth.persistence.memory import (
    InMemorySessionRepository,
    InMemoryUserCredentialRepository,
)
from tollgate_auth.schemas import SessionMetadata


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class TestInMemorySessionRepository:
    """Tests for InMemorySessionRepository."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock(datetime(2026, 1, 1, tzinfo=timezone.utc))
        self.repo = InMemorySessionRepository(clock=self.clock)
        self.expires_at = self.clock.now + timedelta(days=7)

    async def _create(self, user_id: str = "user_01", **kwargs):
        return await self.repo.create(
            user_id=user_id,
            metadata=SessionMetadata(user_agent="ua", ip_address="10.0.0.1"),
            expires_at=kwargs.pop("expires_at", self.expires_at),
            **kwargs,
        )

    @pytest.mark.asyncio
    async def test_new_session_starts_own_family(self):
        """A fresh session is the first member of its family."""
        session = await self._create()

        assert session.id.startswith("sess_")
        assert session.family_id == session.id
        assert session.ip_address == "10.0.0.1"

    @pytest.mark.asyncio
    async def test_get_ignores_expired_sessions(self):
        """Expired sessions are invisible to reads."""
        session = await self._create()
        self.clock.advance(days=7)

        assert await self.repo.get(session.id) is None

    @pytest.mark.asyncio
    async def test_delete_is_idempotent(self):
        """Deleting twice is not an error."""
        session = await self._create()

        assert await self.repo.delete(session.id) is True
        assert await self.repo.delete(session.id) is False

    @pytest.mark.asyncio
    async def test_list_active_newest_first(self):
        """Listing returns unexpired sessions of the user, newest first."""
        first = await self._create()
        self.clock.advance(minutes=1)
        second = await self._create()
        await self._create(user_id="user_02")
        await self._create(expires_at=self.clock.now + timedelta(seconds=30))
        self.clock.advance(minutes=1)

        sessions = await self.repo.list_active_for_user("user_01")

        assert [s.id for s in sessions] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_rotate_replaces_session(self):
        """Rotation deletes the old record and keeps user, family and metadata."""
        session = await self._create()
        new_expiry = self.expires_at + timedelta(hours=1)

        successor = await self.repo.rotate(session.id, new_expiry)

        assert successor is not None
        assert successor.id != session.id
        assert successor.family_id == session.family_id
        assert successor.user_agent == session.user_agent
        assert successor.expires_at == new_expiry
        assert await self.repo.get(session.id) is None

    @pytest.mark.asyncio
    async def test_rotate_missing_or_expired_returns_none(self):
        """Nothing is created when the session is gone or expired."""
        session = await self._create()
        self.clock.advance(days=8)

        assert await self.repo.rotate(session.id, self.clock.now) is None
        assert await self.repo.rotate("sess_missing", self.clock.now) is None
        assert await self.repo.list_active_for_user("user_01") == []

    @pytest.mark.asyncio
    async def test_concurrent_rotate_has_one_winner(self):
        """Of concurrent rotations of one session exactly one succeeds."""
        session = await self._create()

        results = await asyncio.gather(
            *(self.repo.rotate(session.id, self.expires_at) for _ in range(5)),
        )

        assert sum(r is not None for r in results) == 1

    @pytest.mark.asyncio
    async def test_delete_family(self):
        """Deleting a family removes every rotation of it."""
        session = await self._create()
        successor = await self.repo.rotate(session.id, self.expires_at)
        other = await self._create()

        removed = await self.repo.delete_family(session.family_id)

        assert removed == 1
        assert await self.repo.get(successor.id) is None
        assert await self.repo.get(other.id) is not None

    @pytest.mark.asyncio
    async def test_delete_all_for_user_and_purge(self):
        """Bulk deletes report how many records were removed."""
        await self._create()
        await self._create()
        await self._create(user_id="user_02", expires_at=self.clock.now)

        assert await self.repo.delete_all_for_user("user_01") == 2
        assert await self.repo.purge_expired() == 1


class TestInMemoryUserCredentialRepository:
    """Tests for failed-attempt tracking and lockout."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock(datetime(2026, 1, 1, tzinfo=timezone.utc))
        self.repo = InMemoryUserCredentialRepository(clock=self.clock)

    @pytest.mark.asyncio
    async def test_save_and_update_hash(self):
        """Saving again replaces the hash but keeps the counters."""
        await self.repo.save("user_01", "hash-1")
        await self.repo.increment_failed_attempts("user_01")

        credential = await self.repo.save("user_01", "hash-2")

        assert credential.password_hash == "hash-2"
        assert credential.failed_login_attempts == 1

    @pytest.mark.asyncio
    async def test_lockout_after_max_attempts(self):
        """The account locks on the fifth failure for 15 minutes."""
        await self.repo.save("user_01", "hash")

        for _ in range(4):
            await self.repo.increment_failed_attempts("user_01")
        assert await self.repo.is_account_locked("user_01") == (False, None)

        await self.repo.increment_failed_attempts("user_01")
        locked, until = await self.repo.is_account_locked("user_01")

        assert locked is True
        assert until == self.clock.now + timedelta(minutes=15)

    @pytest.mark.asyncio
    async def test_lock_expires(self):
        """A lock ends by itself once locked_until has passed."""
        await self.repo.save("user_01", "hash")
        for _ in range(5):
            await self.repo.increment_failed_attempts("user_01")

        self.clock.advance(minutes=15)

        assert await self.repo.is_account_locked("user_01") == (False, None)

    @pytest.mark.asyncio
    async def test_reset_clears_lock(self):
        """Resetting clears the counter and the lock."""
        await self.repo.save("user_01", "hash")
        for _ in range(5):
            await self.repo.increment_failed_attempts("user_01")

        await self.repo.reset_failed_attempts("user_01")
        credential = await self.repo.find_by_user_id("user_01")

        assert credential.failed_login_attempts == 0
        assert credential.locked_until is None

    @pytest.mark.asyncio
    async def test_unknown_user(self):
        """Users without a password have no credential record."""
        assert await self.repo.find_by_user_id("user_missing") is None
        assert await self.repo.increment_failed_attempts("user_missing") == 0
        assert await self.repo.delete("user_missing") is False

    @pytest.mark.asyncio
    async def test_update_last_login(self):
        """The last login timestamp comes from the clock."""
        await self.repo.save("user_01", "hash")

        await self.repo.update_last_login("user_01")

        credential = await self.repo.find_by_user_id("user_01")
        assert credential.last_login_at == self.clock.now
