"""ProductRepository: concrete implementation of ProductRepositoryProtocol.

Stock mutations are single atomic UPDATE ... RETURNING statements. The
decrement carries its own guard (stock_quantity >= :quantity); zero rows
returned means the guard failed and the caller decides what to raise.

Transaction ownership: the CALLER (OrderService) opens, commits and rolls back.
Row locks taken by lock_for_update are held until that transaction ends.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ec_catalog.domain.models import Product
from src.ec_common.errors import ProductNotFoundError

# ---------------------------------------------------------------------------
# SQL
# ---------------------------------------------------------------------------

_PRODUCT_COLUMNS = "id, name, price, stock_quantity, base64_image"

# Ascending id order: every transaction acquires product locks in the same
# sequence, so two multi-line orders cannot deadlock on each other.
_LOCK_PRODUCTS_SQL = text(f"""
    SELECT {_PRODUCT_COLUMNS}
    FROM products
    WHERE id = ANY(CAST(:product_ids AS BIGINT[]))
    ORDER BY id
    FOR UPDATE
""")

_DECREMENT_STOCK_SQL = text(f"""
    UPDATE products
    SET stock_quantity = stock_quantity - :quantity,
        updated_at = NOW()
    WHERE id = :product_id AND stock_quantity >= :quantity
    RETURNING {_PRODUCT_COLUMNS}
""")

_INCREMENT_STOCK_SQL = text(f"""
    UPDATE products
    SET stock_quantity = stock_quantity + :quantity,
        updated_at = NOW()
    WHERE id = :product_id
    RETURNING {_PRODUCT_COLUMNS}
""")


def _row_to_product(row: object) -> Product:
    return Product(
        id=row.id,  # type: ignore[attr-defined]
        name=row.name,  # type: ignore[attr-defined]
        price=row.price,  # type: ignore[attr-defined]
        stock_quantity=row.stock_quantity,  # type: ignore[attr-defined]
        base64_image=row.base64_image,  # type: ignore[attr-defined]
    )


class ProductRepository:
    """Concrete repository: all operations atomic at the SQL level."""

    async def lock_for_update(
        self, db: AsyncSession, product_ids: list[int]
    ) -> dict[int, Product]:
        """Lock and load the given product rows.

        This is the product lookup the order core uses; ids that do not exist
        are simply absent and the caller raises ProductNotFoundError.
        """
        if not product_ids:
            return {}
        result = await db.execute(
            _LOCK_PRODUCTS_SQL, {"product_ids": sorted(set(product_ids))}
        )
        return {row.id: _row_to_product(row) for row in result.fetchall()}

    async def decrement_stock(
        self, db: AsyncSession, product_id: int, quantity: int
    ) -> Product | None:
        result = await db.execute(
            _DECREMENT_STOCK_SQL, {"product_id": product_id, "quantity": quantity}
        )
        row = result.fetchone()
        return _row_to_product(row) if row else None

    async def increment_stock(
        self, db: AsyncSession, product_id: int, quantity: int
    ) -> Product:
        result = await db.execute(
            _INCREMENT_STOCK_SQL, {"product_id": product_id, "quantity": quantity}
        )
        row = result.fetchone()
        if row is None:
            raise ProductNotFoundError(product_id)
        return _row_to_product(row)
