"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Auth/User
  2xxx: Catalog/Stock
  4xxx: Order
  9xxx: System
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Auth/User ---

class InvalidCredentialsError(AppError):
    def __init__(self) -> None:
        super().__init__(1003, "Invalid or expired token", 401)


class AccountDisabledError(AppError):
    def __init__(self) -> None:
        super().__init__(1004, "Account is disabled", 403)


class UserNotFoundError(AppError):
    def __init__(self, identity: str) -> None:
        super().__init__(1006, f"User not found: {identity}", 404)


class AdminRequiredError(AppError):
    def __init__(self) -> None:
        super().__init__(1007, "Administrator role required", 403)


# --- 2xxx: Catalog/Stock ---

class ProductNotFoundError(AppError):
    def __init__(self, product_id: int) -> None:
        super().__init__(2001, f"Product not found: {product_id}", 404)


class InsufficientStockError(AppError):
    """A business-rule violation, deliberately separate from ProductNotFoundError."""

    def __init__(self, product_name: str, requested: int, available: int) -> None:
        self.requested = requested
        self.available = available
        super().__init__(
            2002,
            f"Insufficient stock for product {product_name}: "
            f"requested {requested}, available {available}",
            400,
        )


# --- 4xxx: Order ---

class OrderNotFoundError(AppError):
    """Also raised when the order exists but belongs to someone else."""

    def __init__(self, order_id: int) -> None:
        super().__init__(4004, f"Order not found: {order_id}", 404)


class InvalidStatusTransitionError(AppError):
    def __init__(self, order_id: int | None, current: str, target: str) -> None:
        super().__init__(
            4007,
            f"Order {order_id} cannot move from {current} to {target}",
            422,
        )


class EmptyOrderError(AppError):
    def __init__(self) -> None:
        super().__init__(4008, "Order must contain at least one item", 400)


# --- 9xxx: System ---

class InternalError(AppError):
    def __init__(self, detail: str = "Internal server error") -> None:
        super().__init__(9002, detail, 500)


class RequestValidationFailedError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Invalid request: {detail}", 400)


# Framework-raised HTTP errors (missing bearer token, unknown route, wrong
# method) carry no AppError; they are reported under these codes.
HTTP_STATUS_ERROR_CODES: dict[int, int] = {
    401: 1003,  # same code as InvalidCredentialsError
    403: 1007,
}
HTTP_ERROR_FALLBACK_CODE = 9001
