"""Stock reservation planning.

Validate-then-mutate: plan_reservation checks every requested line against
the locked product rows before anything is written. It walks the lines in the
caller's order, so the first bad line decides the error, and it counts the
same product across lines cumulatively.
"""

from collections.abc import Sequence

from src.ec_catalog.domain.models import Product
from src.ec_common.errors import InsufficientStockError, ProductNotFoundError


def plan_reservation(
    requested: Sequence[tuple[int, int]], products: dict[int, Product]
) -> dict[int, int]:
    """Return product_id -> total quantity to take out of stock.

    Args:
        requested: (product_id, quantity) pairs in caller order.
        products: product rows already locked for this transaction.

    Raises:
        ProductNotFoundError: a product id is not in ``products``.
        InsufficientStockError: the running total for a product exceeds its stock.
    """
    plan: dict[int, int] = {}
    for product_id, quantity in requested:
        product = products.get(product_id)
        if product is None:
            raise ProductNotFoundError(product_id)
        wanted = plan.get(product_id, 0) + quantity
        if not product.has_stock_for(wanted):
            raise InsufficientStockError(product.name, wanted, product.stock_quantity)
        plan[product_id] = wanted
    return plan
