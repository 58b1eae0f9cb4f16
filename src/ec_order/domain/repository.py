# src/ec_order/domain/repository.py
"""OrderRepository Protocol: the Order Ledger contract."""
from datetime import datetime
from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ec_common.enums import OrderStatus
from src.ec_order.domain.models import Order, StatusSummary


class OrderRepositoryProtocol(Protocol):
    async def save(self, db: AsyncSession, order: Order) -> Order: ...

    async def get_by_id(
        self, db: AsyncSession, order_id: int, for_update: bool = False
    ) -> Order | None: ...

    async def list_by_username(self, db: AsyncSession, username: str) -> list[Order]: ...

    async def list_by_user_id(self, db: AsyncSession, user_id: int) -> list[Order]: ...

    async def list_all(
        self, db: AsyncSession, status: OrderStatus | None = None
    ) -> list[Order]: ...

    async def update_status(self, db: AsyncSession, order: Order) -> datetime: ...

    async def delete(self, db: AsyncSession, order_id: int) -> None: ...

    async def summarize_by_status(self, db: AsyncSession) -> list[StatusSummary]: ...
