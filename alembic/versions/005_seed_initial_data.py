"""005: seed initial data

Revision ID: 005
Revises: 004
Create Date: 2026-10-17
"""

from typing import Sequence, Union

from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        INSERT INTO users (username, email, role) VALUES
            ('admin', 'admin@example.com', 'ADMIN'),
            ('user',  'user@example.com',  'USER');
    """)

    op.execute("""
        INSERT INTO products (name, description, price, stock_quantity) VALUES
            ('Java Programming Guide', 'Complete guide to Java programming for beginners and experts', 29.99, 50),
            ('Spring Boot in Action', 'Learn Spring Boot framework with practical examples', 39.99, 30),
            ('Gaming Laptop', 'High-performance laptop for gaming and development', 1299.99, 10),
            ('Smartphone', 'Latest smartphone with advanced features', 699.99, 25),
            ('Cotton T-Shirt', 'Comfortable 100% cotton t-shirt', 19.99, 100),
            ('Denim Jeans', 'Classic blue denim jeans', 49.99, 75);
    """)


def downgrade() -> None:
    op.execute("""
        DELETE FROM products WHERE name IN (
            'Java Programming Guide', 'Spring Boot in Action', 'Gaming Laptop',
            'Smartphone', 'Cotton T-Shirt', 'Denim Jeans'
        );
    """)
    op.execute("DELETE FROM users WHERE username IN ('admin', 'user');")
