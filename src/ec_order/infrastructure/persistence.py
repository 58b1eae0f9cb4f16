# src/ec_order/infrastructure/persistence.py
"""OrderRepository: raw SQL persistence for orders and order_items.

Orders are read in two queries: the order rows (joined to users for the
username), then all of their lines in one batch (joined to products for name
and image). Lines are attached in insertion order.

asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
"""
from collections import defaultdict
from datetime import datetime
from typing import Any

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.ec_common.enums import OrderStatus
from src.ec_common.errors import InternalError
from src.ec_order.domain.models import Order, OrderLine, StatusSummary

# ---------------------------------------------------------------------------
# SQL statements
# ---------------------------------------------------------------------------

_INSERT_ORDER_SQL = text("""
    INSERT INTO orders (user_id, order_date, status, total_amount, shipping_address)
    VALUES (:user_id, :order_date, :status, :total_amount, :shipping_address)
    RETURNING id, created_at, updated_at
""")

_INSERT_ORDER_ITEM_SQL = text("""
    INSERT INTO order_items (order_id, product_id, quantity, unit_price, total_price)
    VALUES (:order_id, :product_id, :quantity, :unit_price, :total_price)
    RETURNING id
""")

_UPDATE_STATUS_SQL = text("""
    UPDATE orders
    SET status = :status, updated_at = NOW()
    WHERE id = :id
    RETURNING updated_at
""")

# order_items rows go with it (ON DELETE CASCADE)
_DELETE_ORDER_SQL = text("DELETE FROM orders WHERE id = :id")

_SELECT_ORDER_COLUMNS = """
    o.id, o.user_id, u.username, o.order_date, o.status,
    o.total_amount, o.shipping_address, o.created_at, o.updated_at
"""

_ORDER_BY = "ORDER BY o.order_date DESC, o.id DESC"

_GET_ORDER_BY_ID_SQL = text(f"""
    SELECT {_SELECT_ORDER_COLUMNS}
    FROM orders o JOIN users u ON u.id = o.user_id
    WHERE o.id = :id
""")

_GET_ORDER_BY_ID_FOR_UPDATE_SQL = text(f"""
    SELECT {_SELECT_ORDER_COLUMNS}
    FROM orders o JOIN users u ON u.id = o.user_id
    WHERE o.id = :id
    FOR UPDATE OF o
""")

_LIST_BY_USERNAME_SQL = text(f"""
    SELECT {_SELECT_ORDER_COLUMNS}
    FROM orders o JOIN users u ON u.id = o.user_id
    WHERE u.username = :username
    {_ORDER_BY}
""")

_LIST_BY_USER_ID_SQL = text(f"""
    SELECT {_SELECT_ORDER_COLUMNS}
    FROM orders o JOIN users u ON u.id = o.user_id
    WHERE o.user_id = :user_id
    {_ORDER_BY}
""")

_LIST_ALL_SQL = text(f"""
    SELECT {_SELECT_ORDER_COLUMNS}
    FROM orders o JOIN users u ON u.id = o.user_id
    WHERE (CAST(:status AS TEXT) IS NULL OR o.status = CAST(:status AS TEXT))
    {_ORDER_BY}
""")

_LIST_ITEMS_SQL = text("""
    SELECT oi.id, oi.order_id, oi.product_id,
           p.name AS product_name, p.base64_image AS product_image,
           oi.quantity, oi.unit_price, oi.total_price
    FROM order_items oi JOIN products p ON p.id = oi.product_id
    WHERE oi.order_id = ANY(CAST(:order_ids AS BIGINT[]))
    ORDER BY oi.order_id, oi.id
""")

_SUMMARY_BY_STATUS_SQL = text("""
    SELECT status,
           COUNT(*) AS order_count,
           COALESCE(SUM(total_amount), 0) AS total_amount
    FROM orders
    GROUP BY status
""")


# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_order(row: Any) -> Order:
    """Convert a DB result row to an Order domain object (lines attached later)."""
    return Order(
        id=row.id,
        user_id=row.user_id,
        username=row.username,
        order_date=row.order_date,
        status=OrderStatus(row.status),
        shipping_address=row.shipping_address,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _row_to_line(row: Any) -> OrderLine:
    return OrderLine(
        id=row.id,
        product_id=row.product_id,
        product_name=row.product_name,
        product_image=row.product_image,
        quantity=row.quantity,
        unit_price=row.unit_price,
        total_price=row.total_price,
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class OrderRepository:
    """Concrete implementation of OrderRepositoryProtocol using raw SQL."""

    async def save(self, db: AsyncSession, order: Order) -> Order:
        """Insert the order and its lines; fills in the generated ids and timestamps."""
        result = await db.execute(
            _INSERT_ORDER_SQL,
            {
                "user_id": order.user_id,
                "order_date": order.order_date,
                "status": order.status.value,
                "total_amount": order.total_amount,
                "shipping_address": order.shipping_address,
            },
        )
        row = result.fetchone()
        if row is None:
            raise InternalError("Order insert returned no rows")
        order.id = row.id
        order.created_at = row.created_at
        order.updated_at = row.updated_at

        for line in order.lines:
            item_result = await db.execute(
                _INSERT_ORDER_ITEM_SQL,
                {
                    "order_id": order.id,
                    "product_id": line.product_id,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                    "total_price": line.total_price,
                },
            )
            line.id = item_result.scalar_one()
        return order

    async def get_by_id(
        self, db: AsyncSession, order_id: int, for_update: bool = False
    ) -> Order | None:
        sql = _GET_ORDER_BY_ID_FOR_UPDATE_SQL if for_update else _GET_ORDER_BY_ID_SQL
        result = await db.execute(sql, {"id": order_id})
        row = result.fetchone()
        if row is None:
            return None
        orders = await self._attach_lines(db, [_row_to_order(row)])
        return orders[0]

    async def list_by_username(self, db: AsyncSession, username: str) -> list[Order]:
        result = await db.execute(_LIST_BY_USERNAME_SQL, {"username": username})
        return await self._attach_lines(db, [_row_to_order(r) for r in result.fetchall()])

    async def list_by_user_id(self, db: AsyncSession, user_id: int) -> list[Order]:
        result = await db.execute(_LIST_BY_USER_ID_SQL, {"user_id": user_id})
        return await self._attach_lines(db, [_row_to_order(r) for r in result.fetchall()])

    async def list_all(
        self, db: AsyncSession, status: OrderStatus | None = None
    ) -> list[Order]:
        result = await db.execute(
            _LIST_ALL_SQL, {"status": status.value if status else None}
        )
        return await self._attach_lines(db, [_row_to_order(r) for r in result.fetchall()])

    async def update_status(self, db: AsyncSession, order: Order) -> datetime:
        result = await db.execute(
            _UPDATE_STATUS_SQL, {"id": order.id, "status": order.status.value}
        )
        return result.scalar_one()

    async def delete(self, db: AsyncSession, order_id: int) -> None:
        await db.execute(_DELETE_ORDER_SQL, {"id": order_id})

    async def summarize_by_status(self, db: AsyncSession) -> list[StatusSummary]:
        result = await db.execute(_SUMMARY_BY_STATUS_SQL)
        return [
            StatusSummary(
                status=OrderStatus(row.status),
                order_count=row.order_count,
                total_amount=row.total_amount,
            )
            for row in result.fetchall()
        ]

    async def _attach_lines(self, db: AsyncSession, orders: list[Order]) -> list[Order]:
        if not orders:
            return orders
        result = await db.execute(
            _LIST_ITEMS_SQL, {"order_ids": [o.id for o in orders]}
        )
        lines_by_order: dict[int, list[OrderLine]] = defaultdict(list)
        for row in result.fetchall():
            lines_by_order[row.order_id].append(_row_to_line(row))
        for order in orders:
            order.lines = lines_by_order.get(order.id, [])  # type: ignore[arg-type]
        return orders
