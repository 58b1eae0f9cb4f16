"""ProductRepository Protocol: the Product Store contract the order core depends on.

Unit tests inject an in-memory fake conforming to this Protocol.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.ec_catalog.domain.models import Product


class ProductRepositoryProtocol(Protocol):
    async def lock_for_update(
        self, db: AsyncSession, product_ids: list[int]
    ) -> dict[int, Product]: ...

    async def decrement_stock(
        self, db: AsyncSession, product_id: int, quantity: int
    ) -> Product | None: ...

    async def increment_stock(
        self, db: AsyncSession, product_id: int, quantity: int
    ) -> Product: ...
