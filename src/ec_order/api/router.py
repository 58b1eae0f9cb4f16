# src/ec_order/api/router.py
"""Order REST endpoints.

POST   /orders                     place an order (201)
GET    /orders/my-orders           caller's orders, newest first
GET    /orders/admin/all           [admin] every order, optional ?status=
GET    /orders/admin/pending       [admin] PENDING orders
GET    /orders/admin/stats         [admin] counts per status + revenue
GET    /orders/user/{user_id}      [admin] one user's orders
GET    /orders/{order_id}          one order, only if the caller owns it
PUT    /orders/{order_id}/status   [admin] move along the status graph
DELETE /orders/{order_id}          [admin] restore stock and delete (204)

Fixed paths are declared before /{order_id} so they are matched first.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Path, Query, Request, Response, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.ec_common.database import BIGINT_MAX, get_db_session
from src.ec_common.enums import OrderStatus
from src.ec_common.response import ApiResponse, success_response
from src.ec_gateway.auth.dependencies import get_current_principal, require_admin
from src.ec_gateway.auth.principal import Principal
from src.ec_order.application.schemas import CreateOrderRequest
from src.ec_order.application.service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])

RowId = Annotated[int, Path(gt=0, le=BIGINT_MAX)]

_service = OrderService()


def get_order_service() -> OrderService:
    return _service


def _wrap(request: Request, data: object, message: str = "success") -> ApiResponse:
    resp = success_response(data, message=message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    return resp


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_order(
    body: CreateOrderRequest,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> ApiResponse:
    order = await service.create_order(
        db, principal.username, body.shipping_address, body.order_items
    )
    return _wrap(request, order.model_dump(mode="json"), "Order created")


@router.get("/my-orders")
async def get_my_orders(
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> ApiResponse:
    result = await service.get_orders_for_current_user(db, principal.username)
    return _wrap(request, result.model_dump(mode="json"))


@router.get("/admin/all")
async def list_all_orders(
    request: Request,
    _admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderService, Depends(get_order_service)],
    status_filter: OrderStatus | None = Query(
        None, alias="status", description="Only orders in this status"
    ),
) -> ApiResponse:
    if status_filter is None:
        result = await service.list_all_orders(db)
    else:
        result = await service.list_orders_by_status(db, status_filter)
    return _wrap(request, result.model_dump(mode="json"))


@router.get("/admin/pending")
async def list_pending_orders(
    request: Request,
    _admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> ApiResponse:
    result = await service.list_orders_by_status(db, OrderStatus.PENDING)
    return _wrap(request, result.model_dump(mode="json"))


@router.get("/admin/stats")
async def get_order_stats(
    request: Request,
    _admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> ApiResponse:
    result = await service.get_order_stats(db)
    return _wrap(request, result.model_dump(mode="json"))


@router.get("/user/{user_id}")
async def get_user_orders(
    user_id: RowId,
    request: Request,
    _admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> ApiResponse:
    result = await service.get_orders_for_user(db, user_id)
    return _wrap(request, result.model_dump(mode="json"))


@router.get("/{order_id}")
async def get_order(
    order_id: RowId,
    request: Request,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> ApiResponse:
    order = await service.get_order_by_id(db, order_id, principal.username)
    return _wrap(request, order.model_dump(mode="json"))


@router.put("/{order_id}/status")
async def update_order_status(
    order_id: RowId,
    request: Request,
    _admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderService, Depends(get_order_service)],
    new_status: OrderStatus = Query(..., alias="status"),
) -> ApiResponse:
    order = await service.update_status(db, order_id, new_status)
    return _wrap(request, order.model_dump(mode="json"), "Order status updated")


@router.delete("/{order_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_order(
    order_id: RowId,
    _admin: Annotated[Principal, Depends(require_admin)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[OrderService, Depends(get_order_service)],
) -> Response:
    await service.delete_order(db, order_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
