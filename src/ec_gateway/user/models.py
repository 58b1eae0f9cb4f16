"""User as consumed by the order core: pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass

from src.ec_common.enums import UserRole


@dataclass
class User:
    id: int
    username: str
    email: str
    role: UserRole = UserRole.USER
    is_active: bool = True
