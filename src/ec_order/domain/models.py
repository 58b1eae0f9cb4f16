"""Order domain model: pure dataclasses, no SQLAlchemy dependency.

The Order owns its lines. total_amount is derived from the lines and never
assigned. Status moves only along ALLOWED_TRANSITIONS.
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from src.ec_catalog.domain.models import Product
from src.ec_common.enums import OrderStatus
from src.ec_common.errors import EmptyOrderError, InvalidStatusTransitionError
from src.ec_common.money import ZERO, line_total
from src.ec_gateway.user.models import User

ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.SHIPPED, OrderStatus.CANCELLED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset(),
    OrderStatus.CANCELLED: frozenset(),
}


@dataclass
class OrderLine:
    product_id: int
    quantity: int
    unit_price: Decimal     # price snapshot at order time, never re-read from the product
    total_price: Decimal    # unit_price * quantity
    product_name: str = ""
    product_image: str | None = None
    id: int | None = None

    @classmethod
    def snapshot(cls, product: Product, quantity: int) -> "OrderLine":
        return cls(
            product_id=product.id,
            quantity=quantity,
            unit_price=product.price,
            total_price=line_total(product.price, quantity),
            product_name=product.name,
            product_image=product.base64_image,
        )


@dataclass
class Order:
    id: int | None
    user_id: int
    username: str
    order_date: datetime
    status: OrderStatus
    shipping_address: str | None
    lines: list[OrderLine] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def place(
        cls,
        user: User,
        shipping_address: str | None,
        lines: list[OrderLine],
        order_date: datetime,
    ) -> "Order":
        """Build a new PENDING order. Use this for new orders only."""
        if not lines:
            raise EmptyOrderError()
        return cls(
            id=None,
            user_id=user.id,
            username=user.username,
            order_date=order_date,
            status=OrderStatus.PENDING,
            shipping_address=shipping_address,
            lines=list(lines),
        )

    @property
    def total_amount(self) -> Decimal:
        return sum((line.total_price for line in self.lines), ZERO)

    @property
    def reserved_quantities(self) -> dict[int, int]:
        """product_id -> units this order took out of stock."""
        totals: dict[int, int] = defaultdict(int)
        for line in self.lines:
            totals[line.product_id] += line.quantity
        return dict(totals)

    @property
    def holds_stock(self) -> bool:
        """False once cancelled: cancellation already gave the stock back."""
        return self.status != OrderStatus.CANCELLED

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in ALLOWED_TRANSITIONS[self.status]

    def transition_to(self, target: OrderStatus) -> None:
        if not self.can_transition_to(target):
            raise InvalidStatusTransitionError(self.id, self.status.value, target.value)
        self.status = target


@dataclass
class StatusSummary:
    """Aggregate row for one status: how many orders and their summed totals."""

    status: OrderStatus
    order_count: int
    total_amount: Decimal
