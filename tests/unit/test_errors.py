"""Tests for ec_common.errors and ec_common.response."""

from src.ec_common.errors import (
    HTTP_STATUS_ERROR_CODES,
    AdminRequiredError,
    AppError,
    EmptyOrderError,
    InsufficientStockError,
    InvalidCredentialsError,
    InvalidStatusTransitionError,
    OrderNotFoundError,
    ProductNotFoundError,
    RequestValidationFailedError,
    UserNotFoundError,
)
from src.ec_common.response import ApiResponse, error_response, success_response


class TestAppError:
    def test_base_error(self) -> None:
        err = AppError(code=9002, message="Internal error")
        assert err.code == 9002
        assert err.message == "Internal error"
        assert err.http_status == 500

    def test_is_exception(self) -> None:
        assert isinstance(AppError(code=1, message="x"), Exception)


class TestSpecificErrors:
    def test_insufficient_stock(self) -> None:
        err = InsufficientStockError("Gaming Laptop", requested=12, available=10)
        assert err.code == 2002
        assert err.http_status == 400
        assert "Gaming Laptop" in err.message
        assert "12" in err.message
        assert "10" in err.message

    def test_product_not_found(self) -> None:
        err = ProductNotFoundError(17)
        assert err.code == 2001
        assert err.http_status == 404

    def test_order_not_found(self) -> None:
        err = OrderNotFoundError(3)
        assert err.code == 4004
        assert err.http_status == 404
        assert "3" in err.message

    def test_stock_and_missing_product_are_distinct(self) -> None:
        assert not isinstance(InsufficientStockError("x", 1, 0), ProductNotFoundError)

    def test_invalid_transition(self) -> None:
        err = InvalidStatusTransitionError(5, "DELIVERED", "CANCELLED")
        assert err.code == 4007
        assert err.http_status == 422
        assert "DELIVERED" in err.message
        assert "CANCELLED" in err.message

    def test_user_not_found(self) -> None:
        err = UserNotFoundError("mallory")
        assert err.http_status == 404
        assert "mallory" in err.message

    def test_empty_order(self) -> None:
        assert EmptyOrderError().http_status == 400

    def test_validation(self) -> None:
        err = RequestValidationFailedError("order_items: too short")
        assert err.code == 9003
        assert err.http_status == 400


class TestApiResponse:
    def test_success_response(self) -> None:
        resp = success_response({"id": 1}, message="Order created")
        assert resp.code == 0
        assert resp.message == "Order created"
        assert resp.data == {"id": 1}
        assert resp.request_id.startswith("req_")

    def test_error_response(self) -> None:
        resp = error_response(4004, "Order not found: 1")
        assert isinstance(resp, ApiResponse)
        assert resp.code == 4004
        assert resp.data is None


class TestHttpStatusCodes:
    def test_unauthorized_shares_credentials_code(self) -> None:
        assert HTTP_STATUS_ERROR_CODES[401] == InvalidCredentialsError().code

    def test_forbidden_shares_admin_code(self) -> None:
        assert HTTP_STATUS_ERROR_CODES[403] == AdminRequiredError().code
