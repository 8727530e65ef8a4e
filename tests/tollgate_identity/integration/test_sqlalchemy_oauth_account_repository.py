"""Integration tests for OAuthAccountRepositorySQLAlchemy on SQLite."""

from datetime import datetime, timezone

import pytest
import pytest_asyncio

from tollgate_auth import OAuthAccountConflictError
from tollgate_identity.domain.oauth import OAuthAccount, OAuthProvider
from tollgate_identity.domain.user import User
from tollgate_identity.infrastructure.persistence.sqlalchemy import (
    OAuthAccountRepositorySQLAlchemy,
    UserRepositorySQLAlchemy,
)

pytestmark = pytest.mark.integration


@pytest_asyncio.fixture
async def saved_users(db_session) -> tuple[User, User]:
    """Two persisted users to link accounts to."""
    users = UserRepositorySQLAlchemy(db_session)
    ada = User.create("ada@example.com", name="Ada")
    grace = User.create("grace@example.com", name="Grace")
    await users.save(ada)
    await users.save(grace)
    return ada, grace


class TestOAuthAccountRepositorySQLAlchemy:
    """Linked provider accounts and their uniqueness rules."""

    @pytest.fixture(autouse=True)
    def _setup(self, db_session, saved_users):
        self.session = db_session
        self.repo = OAuthAccountRepositorySQLAlchemy(db_session)
        self.ada, self.grace = saved_users

    @pytest.mark.asyncio
    async def test_link_and_find(self):
        """A linked account is found by provider account and by user."""
        expires_at = datetime(2026, 6, 1, tzinfo=timezone.utc)
        account = OAuthAccount.link(
            self.ada.id,
            OAuthProvider.GOOGLE,
            "g-1",
            expires_at=expires_at,
        )

        await self.repo.save(account)
        self.session.expunge_all()

        by_provider = await self.repo.find_by_provider_account(
            OAuthProvider.GOOGLE,
            "g-1",
        )
        by_user = await self.repo.find_by_user_and_provider(
            self.ada.id,
            OAuthProvider.GOOGLE,
        )
        assert by_provider == account == by_user
        assert by_provider.provider is OAuthProvider.GOOGLE
        assert by_provider.expires_at == expires_at

    @pytest.mark.asyncio
    async def test_unknown_account(self):
        found = await self.repo.find_by_provider_account(OAuthProvider.TWITTER, "x")

        assert found is None

    @pytest.mark.asyncio
    async def test_touch_updates_expiry(self):
        """Saving a known account updates its expiry."""
        account = OAuthAccount.link(self.ada.id, OAuthProvider.GOOGLE, "g-1")
        await self.repo.save(account)
        new_expiry = datetime(2026, 7, 1, tzinfo=timezone.utc)

        account.touch(new_expiry)
        await self.repo.save(account)
        self.session.expunge_all()

        found = await self.repo.find_by_provider_account(OAuthProvider.GOOGLE, "g-1")
        assert found.expires_at == new_expiry

    @pytest.mark.asyncio
    async def test_provider_account_belongs_to_one_user(self):
        await self.repo.save(
            OAuthAccount.link(self.ada.id, OAuthProvider.GOOGLE, "g-1"),
        )

        with pytest.raises(OAuthAccountConflictError):
            await self.repo.save(
                OAuthAccount.link(self.grace.id, OAuthProvider.GOOGLE, "g-1"),
            )

    @pytest.mark.asyncio
    async def test_one_account_per_provider(self):
        await self.repo.save(
            OAuthAccount.link(self.ada.id, OAuthProvider.GOOGLE, "g-1"),
        )

        with pytest.raises(OAuthAccountConflictError):
            await self.repo.save(
                OAuthAccount.link(self.ada.id, OAuthProvider.GOOGLE, "g-2"),
            )

    @pytest.mark.asyncio
    async def test_list_and_delete_for_user(self):
        """Accounts are listed per user and deleted together."""
        await self.repo.save(
            OAuthAccount.link(self.ada.id, OAuthProvider.GOOGLE, "g-1"),
        )
        await self.repo.save(
            OAuthAccount.link(self.ada.id, OAuthProvider.TWITTER, "t-1"),
        )
        await self.repo.save(
            OAuthAccount.link(self.grace.id, OAuthProvider.GOOGLE, "g-2"),
        )

        accounts = await self.repo.list_for_user(self.ada.id)
        assert {a.provider for a in accounts} == {
            OAuthProvider.GOOGLE,
            OAuthProvider.TWITTER,
        }

        assert await self.repo.delete_all_for_user(self.ada.id) == 2
        assert await self.repo.list_for_user(self.ada.id) == []
        assert len(await self.repo.list_for_user(self.grace.id)) == 1
