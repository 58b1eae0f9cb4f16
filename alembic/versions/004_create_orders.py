"""004: create orders and order_items tables

Revision ID: 004
Revises: 003
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE orders (
            id                  BIGSERIAL       PRIMARY KEY,
            user_id             BIGINT          NOT NULL REFERENCES users (id) ON DELETE RESTRICT,
            order_date          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            status              VARCHAR(20)     NOT NULL DEFAULT 'PENDING',
            total_amount        NUMERIC(12, 2)  NOT NULL,
            shipping_address    TEXT,
            created_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            updated_at          TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_orders_total_gte_0 CHECK (total_amount >= 0),
            CONSTRAINT ck_orders_status      CHECK (
                status IN ('PENDING', 'CONFIRMED', 'SHIPPED', 'DELIVERED', 'CANCELLED')
            )
        );
    """)
    op.execute("CREATE INDEX idx_orders_user_date ON orders (user_id, order_date DESC, id DESC);")
    op.execute("CREATE INDEX idx_orders_status_date ON orders (status, order_date DESC, id DESC);")
    op.execute("""
        CREATE TRIGGER trg_orders_updated_at
            BEFORE UPDATE ON orders
            FOR EACH ROW EXECUTE FUNCTION fn_touch_updated_at();
    """)

    op.execute("""
        CREATE TABLE order_items (
            id              BIGSERIAL       PRIMARY KEY,
            order_id        BIGINT          NOT NULL REFERENCES orders (id) ON DELETE CASCADE,
            product_id      BIGINT          NOT NULL REFERENCES products (id) ON DELETE RESTRICT,
            quantity        INT             NOT NULL,
            unit_price      NUMERIC(12, 2)  NOT NULL,
            total_price     NUMERIC(12, 2)  NOT NULL,
            CONSTRAINT ck_order_items_quantity_gt_0 CHECK (quantity > 0),
            CONSTRAINT ck_order_items_unit_price    CHECK (unit_price >= 0),
            CONSTRAINT ck_order_items_total_price   CHECK (total_price = unit_price * quantity)
        );
    """)
    op.execute("CREATE INDEX idx_order_items_order ON order_items (order_id, id);")
    op.execute("CREATE INDEX idx_order_items_product ON order_items (product_id);")
    op.execute("COMMENT ON TABLE orders IS 'Customer orders: total_amount is the sum of order_items.total_price';")
    op.execute("COMMENT ON TABLE order_items IS 'Order lines: unit_price is a snapshot, not a live product reference';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS order_items CASCADE;")
    op.execute("DROP TABLE IF EXISTS orders CASCADE;")
