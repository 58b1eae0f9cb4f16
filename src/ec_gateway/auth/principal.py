"""The authenticated caller, as seen by routers."""

from dataclasses import dataclass

from src.ec_common.enums import UserRole


@dataclass(frozen=True)
class Principal:
    username: str
    role: UserRole

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN
