"""Tests for the in-memory identity repositories and OAuth state store."""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from tollgate_auth import EmailTakenError, OAuthAccountConflictError
from tollgate_identity.domain.oauth import OAuthAccount, OAuthProvider, OAuthStateData
from tollgate_identity.domain.user import User
from tollgate_identity.infrastructure.persistence.memory import (
    InMemoryOAuthAccountRepository,
    InMemoryOAuthStateStore,
    InMemoryUserRepository,
)

NOW = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


def _state(value: str, ttl: timedelta = timedelta(minutes=10)) -> OAuthStateData:
    return OAuthStateData(
        state=value,
        provider=OAuthProvider.GOOGLE,
        code_verifier="verifier",
        created_at=NOW,
        expires_at=NOW + ttl,
    )


class TestInMemoryOAuthStateStore:
    """Tests for InMemoryOAuthStateStore."""

    def setup_method(self):
        """Set up test fixtures."""
        self.clock = FakeClock(NOW)
        self.store = InMemoryOAuthStateStore(clock=self.clock)

    @pytest.mark.asyncio
    async def test_consume_once(self):
        """A state is returned exactly once."""
        await self.store.save(_state("abc"))

        first = await self.store.consume("abc")
        second = await self.store.consume("abc")

        assert first.code_verifier == "verifier"
        assert second is None

    @pytest.mark.asyncio
    async def test_concurrent_consume_single_winner(self):
        """Of concurrent consumers only one receives the state."""
        await self.store.save(_state("abc"))

        results = await asyncio.gather(*(self.store.consume("abc") for _ in range(5)))

        assert sum(r is not None for r in results) == 1

    @pytest.mark.asyncio
    async def test_expired_state_not_returned(self):
        """Expired states are dropped on consume."""
        await self.store.save(_state("abc"))
        self.clock.now = NOW + timedelta(minutes=10)

        assert await self.store.consume("abc") is None
        assert len(self.store) == 0

    @pytest.mark.asyncio
    async def test_purge_expired(self):
        """Only expired states are purged."""
        await self.store.save(_state("short", ttl=timedelta(minutes=1)))
        await self.store.save(_state("long", ttl=timedelta(minutes=30)))
        self.clock.now = NOW + timedelta(minutes=5)

        removed = await self.store.purge_expired()

        assert removed == 1
        assert await self.store.consume("long") is not None


class TestInMemoryUserRepository:
    """Tests for InMemoryUserRepository."""

    def setup_method(self):
        """Set up test fixtures."""
        self.repo = InMemoryUserRepository()

    @pytest.mark.asyncio
    async def test_find_by_email_normalizes(self):
        user = User.create("ada@example.com", name="Ada")
        await self.repo.save(user)

        assert await self.repo.find_by_email("  ADA@example.com") == user
        assert await self.repo.exists_by_email("ada@example.com")

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected(self):
        """Two users cannot share an email."""
        await self.repo.save(User.create("ada@example.com", name="Ada"))

        with pytest.raises(EmailTakenError):
            await self.repo.save(User.create("ada@example.com", name="Other"))

    @pytest.mark.asyncio
    async def test_save_existing_user_updates(self):
        user = User.create("ada@example.com", name="Ada")
        await self.repo.save(user)
        user.update_profile(name="Ada L.")

        await self.repo.save(user)

        assert (await self.repo.find_by_id(user.id)).name == "Ada L."
        assert await self.repo.count() == 1

    @pytest.mark.asyncio
    async def test_delete(self):
        user = User.create("ada@example.com", name="Ada")
        await self.repo.save(user)

        assert await self.repo.delete(user.id) is True
        assert await self.repo.delete(user.id) is False


class TestInMemoryOAuthAccountRepository:
    """Tests for InMemoryOAuthAccountRepository."""

    def setup_method(self):
        """Set up test fixtures."""
        self.repo = InMemoryOAuthAccountRepository()

    @pytest.mark.asyncio
    async def test_provider_account_linked_once(self):
        """A provider account belongs to one user."""
        await self.repo.save(
            OAuthAccount.link("usr_a", OAuthProvider.GOOGLE, "acct-1"),
        )

        with pytest.raises(OAuthAccountConflictError):
            await self.repo.save(
                OAuthAccount.link("usr_b", OAuthProvider.GOOGLE, "acct-1"),
            )

    @pytest.mark.asyncio
    async def test_one_account_per_provider_per_user(self):
        await self.repo.save(
            OAuthAccount.link("usr_a", OAuthProvider.GOOGLE, "acct-1"),
        )

        with pytest.raises(OAuthAccountConflictError):
            await self.repo.save(
                OAuthAccount.link("usr_a", OAuthProvider.GOOGLE, "acct-2"),
            )

    @pytest.mark.asyncio
    async def test_same_account_id_at_different_providers(self):
        """Account ids are only unique within a provider."""
        await self.repo.save(
            OAuthAccount.link("usr_a", OAuthProvider.GOOGLE, "42"),
        )
        await self.repo.save(
            OAuthAccount.link("usr_b", OAuthProvider.TWITTER, "42"),
        )

        google = await self.repo.find_by_provider_account(OAuthProvider.GOOGLE, "42")
        assert google.user_id == "usr_a"

    @pytest.mark.asyncio
    async def test_delete_all_for_user(self):
        await self.repo.save(
            OAuthAccount.link("usr_a", OAuthProvider.GOOGLE, "acct-1"),
        )
        await self.repo.save(
            OAuthAccount.link("usr_a", OAuthProvider.TWITTER, "acct-2"),
        )

        assert await self.repo.delete_all_for_user("usr_a") == 2
        assert await self.repo.list_for_user("usr_a") == []
