"""UserRepository Protocol: the User Store contract the order core depends on."""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ec_gateway.user.models import User


class UserRepositoryProtocol(Protocol):
    async def get_by_username(self, db: AsyncSession, username: str) -> User | None: ...

