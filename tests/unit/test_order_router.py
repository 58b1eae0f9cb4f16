"""HTTP-level tests for the order router.

The DB session is an AsyncMock and OrderService runs on the in-memory fakes,
so these exercise routing, auth, status codes and the response envelope.
"""

from collections.abc import Iterator
from decimal import Decimal
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient

from src.ec_catalog.domain.models import Product
from src.ec_common.enums import UserRole
from src.ec_gateway.auth.jwt_handler import create_access_token
from src.ec_gateway.user.models import User
from src.ec_order.api.router import get_order_service
from src.ec_order.application.service import OrderService
from src.main import app
from tests.fakes import FakeOrderRepository, FakeProductRepository, FakeUserRepository

_ALICE = {"Authorization": f"Bearer {create_access_token('alice')}"}
_BOB = {"Authorization": f"Bearer {create_access_token('bob')}"}
_ADMIN = {"Authorization": f"Bearer {create_access_token('admin', UserRole.ADMIN)}"}


@pytest.fixture
def products() -> FakeProductRepository:
    return FakeProductRepository([
        Product(id=1, name="Book", price=Decimal("10.00"), stock_quantity=5),
        Product(id=2, name="Shirt", price=Decimal("2.50"), stock_quantity=10),
    ])


@pytest.fixture
def service(products: FakeProductRepository, override_db: AsyncMock) -> Iterator[OrderService]:
    svc = OrderService(
        order_repo=FakeOrderRepository(),
        product_repo=products,
        user_repo=FakeUserRepository([
            User(id=1, username="alice", email="alice@example.com"),
            User(id=2, username="bob", email="bob@example.com"),
            User(id=3, username="admin", email="admin@example.com", role=UserRole.ADMIN),
        ]),
    )
    app.dependency_overrides[get_order_service] = lambda: svc
    yield svc
    app.dependency_overrides.pop(get_order_service, None)


async def _place(client: AsyncClient, headers: dict[str, str], *pairs: tuple[int, int]) -> dict:
    resp = await client.post(
        "/api/v1/orders",
        json={
            "shipping_address": "1 Main St",
            "order_items": [{"product_id": p, "quantity": q} for p, q in pairs],
        },
        headers=headers,
    )
    assert resp.status_code == 201, resp.text
    return resp.json()["data"]


class TestCreateOrder:
    async def test_created(self, client: AsyncClient, service: OrderService) -> None:
        resp = await client.post(
            "/api/v1/orders",
            json={"order_items": [{"product_id": 1, "quantity": 2}, {"product_id": 2, "quantity": 2}]},
            headers=_ALICE,
        )

        assert resp.status_code == 201
        body = resp.json()
        assert body["code"] == 0
        assert body["request_id"] == resp.headers["X-Request-ID"]
        assert body["data"]["status"] == "PENDING"
        assert body["data"]["total_amount"] == "25.00"
        assert len(body["data"]["order_items"]) == 2

    async def test_insufficient_stock_is_400(
        self, client: AsyncClient, service: OrderService, products: FakeProductRepository
    ) -> None:
        resp = await client.post(
            "/api/v1/orders",
            json={"order_items": [{"product_id": 1, "quantity": 6}]},
            headers=_ALICE,
        )
        assert resp.status_code == 400
        assert resp.json()["code"] == 2002
        assert products.stock_of(1) == 5

    async def test_unknown_product_is_404(self, client: AsyncClient, service: OrderService) -> None:
        resp = await client.post(
            "/api/v1/orders",
            json={"order_items": [{"product_id": 99, "quantity": 1}]},
            headers=_ALICE,
        )
        assert resp.status_code == 404
        assert resp.json()["code"] == 2001

    async def test_empty_items_is_400(self, client: AsyncClient, service: OrderService) -> None:
        resp = await client.post("/api/v1/orders", json={"order_items": []}, headers=_ALICE)
        assert resp.status_code == 400
        body = resp.json()
        assert body["code"] == 9003
        assert "order_items" in body["message"]
        assert body["data"] is None

    async def test_requires_token(self, client: AsyncClient, service: OrderService) -> None:
        resp = await client.post(
            "/api/v1/orders", json={"order_items": [{"product_id": 1, "quantity": 1}]}
        )
        assert resp.status_code == 401
        body = resp.json()
        assert body["code"] == 1003
        assert body["data"] is None
        assert body["request_id"] == resp.headers["X-Request-ID"]
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    async def test_bad_token_uses_error_envelope(
        self, client: AsyncClient, service: OrderService
    ) -> None:
        resp = await client.get(
            "/api/v1/orders/my-orders", headers={"Authorization": "Bearer nope"}
        )
        assert resp.status_code == 401
        body = resp.json()
        assert body["code"] == 1003
        assert body["message"] == "Invalid or expired token"
        assert body["data"] is None
        assert resp.headers["WWW-Authenticate"] == "Bearer"

    @pytest.mark.parametrize(
        "payload",
        [
            {"order_items": [{"product_id": 2**63, "quantity": 1}]},
            {"order_items": [{"product_id": 1, "quantity": 2**31}]},
        ],
    )
    async def test_out_of_range_ids_are_400(
        self, client: AsyncClient, service: OrderService, payload: dict
    ) -> None:
        resp = await client.post("/api/v1/orders", json=payload, headers=_ALICE)
        assert resp.status_code == 400
        assert resp.json()["code"] == 9003


class TestReadOrders:
    async def test_owner_reads_order(self, client: AsyncClient, service: OrderService) -> None:
        order = await _place(client, _ALICE, (1, 1))
        resp = await client.get(f"/api/v1/orders/{order['id']}", headers=_ALICE)
        assert resp.status_code == 200
        assert resp.json()["data"]["id"] == order["id"]

    async def test_other_user_gets_404(self, client: AsyncClient, service: OrderService) -> None:
        order = await _place(client, _ALICE, (1, 1))
        resp = await client.get(f"/api/v1/orders/{order['id']}", headers=_BOB)
        assert resp.status_code == 404
        assert resp.json()["code"] == 4004

    async def test_my_orders(self, client: AsyncClient, service: OrderService) -> None:
        await _place(client, _ALICE, (1, 1))
        await _place(client, _BOB, (2, 1))
        resp = await client.get("/api/v1/orders/my-orders", headers=_ALICE)
        assert resp.status_code == 200
        data = resp.json()["data"]
        assert data["count"] == 1
        assert data["items"][0]["username"] == "alice"


class TestAdminEndpoints:
    @pytest.mark.parametrize(
        "path",
        ["/api/v1/orders/admin/all", "/api/v1/orders/admin/pending", "/api/v1/orders/admin/stats",
         "/api/v1/orders/user/1"],
    )
    async def test_non_admin_forbidden(
        self, client: AsyncClient, service: OrderService, path: str
    ) -> None:
        resp = await client.get(path, headers=_ALICE)
        assert resp.status_code == 403
        assert resp.json()["code"] == 1007

    async def test_list_all_with_status_filter(
        self, client: AsyncClient, service: OrderService
    ) -> None:
        first = await _place(client, _ALICE, (1, 1))
        await _place(client, _BOB, (2, 1))
        await client.put(
            f"/api/v1/orders/{first['id']}/status", params={"status": "CONFIRMED"}, headers=_ADMIN
        )

        all_resp = await client.get("/api/v1/orders/admin/all", headers=_ADMIN)
        confirmed = await client.get(
            "/api/v1/orders/admin/all", params={"status": "CONFIRMED"}, headers=_ADMIN
        )
        pending = await client.get("/api/v1/orders/admin/pending", headers=_ADMIN)

        assert all_resp.json()["data"]["count"] == 2
        assert [o["id"] for o in confirmed.json()["data"]["items"]] == [first["id"]]
        assert [o["username"] for o in pending.json()["data"]["items"]] == ["bob"]

    async def test_user_orders(self, client: AsyncClient, service: OrderService) -> None:
        await _place(client, _BOB, (2, 3))
        resp = await client.get("/api/v1/orders/user/2", headers=_ADMIN)
        assert resp.json()["data"]["count"] == 1

    async def test_stats(self, client: AsyncClient, service: OrderService) -> None:
        await _place(client, _ALICE, (1, 2))
        resp = await client.get("/api/v1/orders/admin/stats", headers=_ADMIN)
        data = resp.json()["data"]
        assert data["total_orders"] == 1
        assert data["orders_by_status"]["PENDING"] == 1
        assert data["total_revenue"] == "20.00"

    async def test_status_update_and_invalid_transition(
        self, client: AsyncClient, service: OrderService
    ) -> None:
        order = await _place(client, _ALICE, (1, 1))
        url = f"/api/v1/orders/{order['id']}/status"

        ok = await client.put(url, params={"status": "CONFIRMED"}, headers=_ADMIN)
        bad = await client.put(url, params={"status": "DELIVERED"}, headers=_ADMIN)

        assert ok.status_code == 200
        assert ok.json()["data"]["status"] == "CONFIRMED"
        assert bad.status_code == 422
        assert bad.json()["code"] == 4007

    async def test_status_update_requires_admin(
        self, client: AsyncClient, service: OrderService
    ) -> None:
        order = await _place(client, _ALICE, (1, 1))
        resp = await client.put(
            f"/api/v1/orders/{order['id']}/status", params={"status": "CANCELLED"}, headers=_ALICE
        )
        assert resp.status_code == 403

    async def test_unknown_status_value_is_400(
        self, client: AsyncClient, service: OrderService
    ) -> None:
        order = await _place(client, _ALICE, (1, 1))
        resp = await client.put(
            f"/api/v1/orders/{order['id']}/status", params={"status": "LOST"}, headers=_ADMIN
        )
        assert resp.status_code == 400

    async def test_delete_restores_stock(
        self, client: AsyncClient, service: OrderService, products: FakeProductRepository
    ) -> None:
        order = await _place(client, _ALICE, (1, 3))
        assert products.stock_of(1) == 2

        resp = await client.delete(f"/api/v1/orders/{order['id']}", headers=_ADMIN)

        assert resp.status_code == 204
        assert products.stock_of(1) == 5
        missing = await client.delete(f"/api/v1/orders/{order['id']}", headers=_ADMIN)
        assert missing.status_code == 404


@pytest.mark.parametrize(
    "path",
    [f"/api/v1/orders/{2**63}", f"/api/v1/orders/user/{2**63}", "/api/v1/orders/0"],
)
async def test_out_of_range_path_ids_are_400(
    client: AsyncClient, service: OrderService, path: str
) -> None:
    resp = await client.get(path, headers=_ADMIN)
    assert resp.status_code == 400
    assert resp.json()["code"] == 9003


async def test_unknown_route_uses_error_envelope(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/nowhere")
    assert resp.status_code == 404
    body = resp.json()
    assert body["code"] == 9001
    assert body["data"] is None


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"
