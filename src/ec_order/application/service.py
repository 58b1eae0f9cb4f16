# src/ec_order/application/service.py
"""OrderService: order placement and order lifecycle.

Every mutating method owns one transaction on the injected session: commit on
success, rollback on any exception, then re-raise. Stock changes and the order
write therefore land together or not at all.

Product rows are locked (SELECT ... FOR UPDATE, ascending id) before stock is
checked, and the decrement itself is guarded in SQL, so two concurrent orders
cannot both spend the same units.

Read-only methods run without an explicit transaction.
"""
import logging
from collections.abc import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from src.ec_catalog.domain.repository import ProductRepositoryProtocol
from src.ec_catalog.infrastructure.persistence import ProductRepository
from src.ec_common.datetime_utils import utc_now
from src.ec_common.enums import OrderStatus
from src.ec_common.errors import (
    AccountDisabledError,
    EmptyOrderError,
    InsufficientStockError,
    OrderNotFoundError,
    UserNotFoundError,
)
from src.ec_common.money import ZERO, money_to_display
from src.ec_gateway.user.models import User
from src.ec_gateway.user.persistence import UserRepository
from src.ec_gateway.user.repository import UserRepositoryProtocol
from src.ec_order.application.schemas import (
    OrderItemRequest,
    OrderListResponse,
    OrderResponse,
    OrderStatsResponse,
)
from src.ec_order.domain.models import Order, OrderLine
from src.ec_order.domain.repository import OrderRepositoryProtocol
from src.ec_order.domain.reservation import plan_reservation
from src.ec_order.infrastructure.persistence import OrderRepository

logger = logging.getLogger(__name__)


def _to_list_response(orders: list[Order]) -> OrderListResponse:
    return OrderListResponse(
        items=[OrderResponse.from_domain(o) for o in orders],
        count=len(orders),
    )


class OrderService:
    def __init__(
        self,
        order_repo: OrderRepositoryProtocol | None = None,
        product_repo: ProductRepositoryProtocol | None = None,
        user_repo: UserRepositoryProtocol | None = None,
    ) -> None:
        self._order_repo: OrderRepositoryProtocol = order_repo or OrderRepository()
        self._product_repo: ProductRepositoryProtocol = product_repo or ProductRepository()
        self._user_repo: UserRepositoryProtocol = user_repo or UserRepository()

    # --- Placement -------------------------------------------------------------

    async def create_order(
        self,
        db: AsyncSession,
        identity: str,
        shipping_address: str | None,
        items: Sequence[OrderItemRequest],
    ) -> OrderResponse:
        """Place a PENDING order for ``identity`` and reserve its stock.

        Raises:
            EmptyOrderError: no items.
            UserNotFoundError / AccountDisabledError: identity does not resolve
                to an active user.
            ProductNotFoundError: a referenced product does not exist.
            InsufficientStockError: a product cannot cover the requested units.
        """
        try:
            order = await self._place_order(db, identity, shipping_address, items)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info(
            "Order %s created for %s: %d line(s), total %s",
            order.id,
            order.username,
            len(order.lines),
            order.total_amount,
        )
        return OrderResponse.from_domain(order)

    async def _place_order(
        self,
        db: AsyncSession,
        identity: str,
        shipping_address: str | None,
        items: Sequence[OrderItemRequest],
    ) -> Order:
        if not items:
            raise EmptyOrderError()
        user = await self._resolve_user(db, identity)

        requested = [(item.product_id, item.quantity) for item in items]

        # Phase 1: lock and validate, nothing written yet
        products = await self._product_repo.lock_for_update(
            db, [product_id for product_id, _ in requested]
        )
        plan = plan_reservation(requested, products)

        lines = [
            OrderLine.snapshot(products[product_id], quantity)
            for product_id, quantity in requested
        ]
        order = Order.place(user, shipping_address, lines, order_date=utc_now())

        # Phase 2: reserve stock, then record the order
        for product_id in sorted(plan):
            reserved = await self._product_repo.decrement_stock(db, product_id, plan[product_id])
            if reserved is None:
                product = products[product_id]
                raise InsufficientStockError(
                    product.name, plan[product_id], product.stock_quantity
                )

        return await self._order_repo.save(db, order)

    async def _resolve_user(self, db: AsyncSession, identity: str) -> User:
        user = await self._user_repo.get_by_username(db, identity)
        if user is None:
            raise UserNotFoundError(identity)
        if not user.is_active:
            raise AccountDisabledError()
        return user

    # --- Queries -----------------------------------------------------------------

    async def get_order_by_id(
        self, db: AsyncSession, order_id: int, identity: str
    ) -> OrderResponse:
        """Return the order only if ``identity`` owns it.

        Someone else's order is reported exactly like a missing one.
        """
        order = await self._order_repo.get_by_id(db, order_id)
        if order is None or order.username != identity:
            raise OrderNotFoundError(order_id)
        return OrderResponse.from_domain(order)

    async def get_orders_for_current_user(
        self, db: AsyncSession, identity: str
    ) -> OrderListResponse:
        orders = await self._order_repo.list_by_username(db, identity)
        return _to_list_response(orders)

    async def get_orders_for_user(self, db: AsyncSession, user_id: int) -> OrderListResponse:
        orders = await self._order_repo.list_by_user_id(db, user_id)
        return _to_list_response(orders)

    async def list_all_orders(self, db: AsyncSession) -> OrderListResponse:
        orders = await self._order_repo.list_all(db)
        return _to_list_response(orders)

    async def list_orders_by_status(
        self, db: AsyncSession, status: OrderStatus
    ) -> OrderListResponse:
        orders = await self._order_repo.list_all(db, status=status)
        return _to_list_response(orders)

    async def get_order_stats(self, db: AsyncSession) -> OrderStatsResponse:
        summaries = await self._order_repo.summarize_by_status(db)
        by_status = {status.value: 0 for status in OrderStatus}
        revenue = ZERO
        for summary in summaries:
            by_status[summary.status.value] = summary.order_count
            if summary.status != OrderStatus.CANCELLED:
                revenue += summary.total_amount
        return OrderStatsResponse(
            total_orders=sum(by_status.values()),
            orders_by_status=by_status,
            total_revenue=revenue,
            total_revenue_display=money_to_display(revenue),
        )

    # --- Lifecycle ---------------------------------------------------------------

    async def update_status(
        self, db: AsyncSession, order_id: int, new_status: OrderStatus
    ) -> OrderResponse:
        """Move an order along the status graph.

        Cancelling gives the order's stock back in the same transaction.

        Raises:
            OrderNotFoundError: no such order.
            InvalidStatusTransitionError: edge not allowed from the current status.
        """
        try:
            order = await self._order_repo.get_by_id(db, order_id, for_update=True)
            if order is None:
                raise OrderNotFoundError(order_id)
            previous = order.status
            order.transition_to(new_status)
            if new_status == OrderStatus.CANCELLED:
                await self._restore_stock(db, order)
            order.updated_at = await self._order_repo.update_status(db, order)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Order %s status %s → %s", order_id, previous.value, new_status.value)
        return OrderResponse.from_domain(order)

    async def delete_order(self, db: AsyncSession, order_id: int) -> None:
        """Restore the order's stock, then delete it with its lines.

        A cancelled order already returned its stock and restores nothing here.
        """
        try:
            order = await self._order_repo.get_by_id(db, order_id, for_update=True)
            if order is None:
                raise OrderNotFoundError(order_id)
            if order.holds_stock:
                await self._restore_stock(db, order)
            await self._order_repo.delete(db, order_id)
            await db.commit()
        except Exception:
            await db.rollback()
            raise

        logger.info("Order %s deleted (status was %s)", order_id, order.status.value)

    async def _restore_stock(self, db: AsyncSession, order: Order) -> None:
        quantities = order.reserved_quantities
        await self._product_repo.lock_for_update(db, list(quantities))
        for product_id in sorted(quantities):
            await self._product_repo.increment_stock(db, product_id, quantities[product_id])
