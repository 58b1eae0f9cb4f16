"""Product as consumed by the order core: pure dataclass, no SQLAlchemy dependency."""

from dataclasses import dataclass
from decimal import Decimal


@dataclass
class Product:
    id: int
    name: str
    price: Decimal          # >= 0, two decimal places
    stock_quantity: int     # >= 0, enforced by the reservation path and a DB CHECK
    base64_image: str | None = None

    def has_stock_for(self, quantity: int) -> bool:
        return self.stock_quantity >= quantity
