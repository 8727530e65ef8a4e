"""In-memory implementation of UserRepository."""

import logging
from typing import Union

from tollgate_auth.exceptions import EmailTakenError
from tollgate_identity.domain.user import Email, User, UserRepository, normalize_email

logger = logging.getLogger(__name__)


class InMemoryUserRepository(UserRepository):
    def __init__(self) -> None:
        self._users: dict[str, User] = {}

    async def find_by_id(self, user_id: str) -> User | None:
        return self._users.get(user_id)

    async def find_by_email(self, email: Union[str, Email]) -> User | None:
        value = email.value if isinstance(email, Email) else normalize_email(email)
        return next((u for u in self._users.values() if u.email == value), None)

    async def exists_by_email(self, email: Union[str, Email]) -> bool:
        return await self.find_by_email(email) is not None

    async def save(self, user: User) -> None:
        holder = await self.find_by_email(user.email)
        if holder is not None and holder.id != user.id:
            raise EmailTakenError(user.email)
        if user.id not in self._users:
            logger.info("Created user: %s", user.id)
        self._users[user.id] = user

    async def delete(self, user_id: str) -> bool:
        return self._users.pop(user_id, None) is not None

    async def count(self) -> int:
        return len(self._users)
