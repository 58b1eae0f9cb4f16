"""Unit tests for UserRepository using MagicMock AsyncSession."""

from unittest.mock import AsyncMock, MagicMock

from src.ec_common.enums import UserRole
from src.ec_gateway.user.persistence import UserRepository


def _make_row(role: str = "USER", is_active: bool = True) -> MagicMock:
    row = MagicMock()
    row.id = 2
    row.username = "user"
    row.email = "user@example.com"
    row.role = role
    row.is_active = is_active
    return row


def _db_returning(row: MagicMock | None) -> AsyncMock:
    db = AsyncMock()
    result = MagicMock()
    result.fetchone.return_value = row
    db.execute.return_value = result
    return db


async def test_get_by_username() -> None:
    db = _db_returning(_make_row(role="ADMIN"))

    user = await UserRepository().get_by_username(db, "user")

    assert user is not None
    assert user.id == 2
    assert user.role == UserRole.ADMIN
    assert db.execute.await_args.args[1] == {"username": "user"}


async def test_get_by_username_missing() -> None:
    db = _db_returning(None)
    assert await UserRepository().get_by_username(db, "nobody") is None


async def test_inactive_flag_is_mapped() -> None:
    db = _db_returning(_make_row(is_active=False))

    user = await UserRepository().get_by_username(db, "user")

    assert user is not None
    assert user.is_active is False
