"""UserRepository: read-only raw SQL lookups against the users table.

User creation and credential handling live in the auth service.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ec_common.enums import UserRole
from src.ec_gateway.user.models import User

_USER_COLUMNS = "id, username, email, role, is_active"

_GET_BY_USERNAME_SQL = text(f"SELECT {_USER_COLUMNS} FROM users WHERE username = :username")


def _row_to_user(row: object) -> User:
    return User(
        id=row.id,  # type: ignore[attr-defined]
        username=row.username,  # type: ignore[attr-defined]
        email=row.email,  # type: ignore[attr-defined]
        role=UserRole(row.role),  # type: ignore[attr-defined]
        is_active=row.is_active,  # type: ignore[attr-defined]
    )


class UserRepository:
    """Concrete implementation of UserRepositoryProtocol."""

    async def get_by_username(self, db: AsyncSession, username: str) -> User | None:
        result = await db.execute(_GET_BY_USERNAME_SQL, {"username": username})
        row = result.fetchone()
        return _row_to_user(row) if row else None
