"""003: create products table

Revision ID: 003
Revises: 002
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE products (
            id              BIGSERIAL       PRIMARY KEY,
            name            VARCHAR(255)    NOT NULL,
            description     TEXT,
            price           NUMERIC(12, 2)  NOT NULL,
            stock_quantity  INT             NOT NULL DEFAULT 0,
            base64_image    TEXT,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_products_price_gte_0 CHECK (price >= 0),
            CONSTRAINT ck_products_stock_gte_0 CHECK (stock_quantity >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_products_updated_at
            BEFORE UPDATE ON products
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)
    op.execute("COMMENT ON TABLE products IS 'Catalog products: stock_quantity is reserved by orders';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS products CASCADE;")
