# src/ec_order/application/schemas.py
from datetime import datetime
from decimal import Decimal

from pydantic import BaseModel, Field, field_validator

from config.settings import settings
from src.ec_common.database import BIGINT_MAX, INT_MAX
from src.ec_common.money import money_to_display
from src.ec_order.domain.models import Order, OrderLine


class OrderItemRequest(BaseModel):
    product_id: int = Field(..., gt=0, le=BIGINT_MAX)
    quantity: int = Field(..., gt=0, le=INT_MAX)


class CreateOrderRequest(BaseModel):
    shipping_address: str | None = Field(None, max_length=500)
    order_items: list[OrderItemRequest] = Field(..., min_length=1)

    @field_validator("order_items")
    @classmethod
    def within_line_limit(cls, v: list[OrderItemRequest]) -> list[OrderItemRequest]:
        if len(v) > settings.ORDER_MAX_LINES:
            raise ValueError(f"Maximum {settings.ORDER_MAX_LINES} items per order")
        return v

    @field_validator("shipping_address")
    @classmethod
    def strip_address(cls, v: str | None) -> str | None:
        if v is None:
            return None
        return v.strip() or None


class OrderItemResponse(BaseModel):
    id: int | None
    product_id: int
    product_name: str
    product_image: str | None = None
    quantity: int
    unit_price: Decimal
    total_price: Decimal

    @classmethod
    def from_domain(cls, line: OrderLine) -> "OrderItemResponse":
        return cls(
            id=line.id,
            product_id=line.product_id,
            product_name=line.product_name,
            product_image=line.product_image,
            quantity=line.quantity,
            unit_price=line.unit_price,
            total_price=line.total_price,
        )


class OrderResponse(BaseModel):
    id: int | None
    user_id: int
    username: str
    order_date: datetime
    status: str
    total_amount: Decimal
    total_amount_display: str
    shipping_address: str | None = None
    order_items: list[OrderItemResponse]
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_domain(cls, order: Order) -> "OrderResponse":
        total = order.total_amount
        return cls(
            id=order.id,
            user_id=order.user_id,
            username=order.username,
            order_date=order.order_date,
            status=order.status.value,
            total_amount=total,
            total_amount_display=money_to_display(total),
            shipping_address=order.shipping_address,
            order_items=[OrderItemResponse.from_domain(line) for line in order.lines],
            created_at=order.created_at,
            updated_at=order.updated_at,
        )


class OrderListResponse(BaseModel):
    items: list[OrderResponse]
    count: int


class OrderStatsResponse(BaseModel):
    total_orders: int
    orders_by_status: dict[str, int]
    total_revenue: Decimal
    total_revenue_display: str
