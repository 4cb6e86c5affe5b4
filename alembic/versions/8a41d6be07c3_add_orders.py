"""add orders, order items and ingredient modifications

Revision ID: 8a41d6be07c3
Revises: 3c9e51f0a2d7
Create Date: 2026-09-29 21:05:37.208915
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8a41d6be07c3'
down_revision: Union[str, Sequence[str], None] = '3c9e51f0a2d7'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

order_status = sa.Enum("received", "preparing", "ready", "collected", "cancelled", name="order_status")
email_status = sa.Enum("pending", "sent", "failed", "skipped", name="email_status")


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "orders",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("customer_name", sa.String(255), nullable=False, server_default=""),
        sa.Column("phone_number", sa.String(32), nullable=False, server_default=""),
        sa.Column("email", sa.String(255), nullable=False, server_default=""),
        sa.Column("location_id", sa.Integer, sa.ForeignKey("locations.id"), nullable=False),
        sa.Column("order_time", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("status", order_status, nullable=False, server_default="received"),
        sa.Column("pickup_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("stripe_session_id", sa.String(255), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("confirmation_email_status", email_status, nullable=False, server_default="pending"),
    )
    op.create_index("ix_orders_id", "orders", ["id"])
    # один заказ на одну сессию оплаты
    op.create_index("ix_orders_stripe_session_id", "orders", ["stripe_session_id"], unique=True)

    op.create_table(
        "order_items",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_id", sa.Integer, sa.ForeignKey("orders.id", ondelete="CASCADE"), nullable=False),
        sa.Column("menu_item_id", sa.Integer, sa.ForeignKey("menu_items.id"), nullable=False),
        sa.Column("quantity", sa.Integer, nullable=False, server_default="1"),
        sa.Column("base_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
    )
    op.create_index("ix_order_items_id", "order_items", ["id"])

    op.create_table(
        "order_item_ingredients",
        sa.Column("id", sa.Integer, primary_key=True),
        sa.Column("order_item_id", sa.Integer, sa.ForeignKey("order_items.id", ondelete="CASCADE"), nullable=False),
        sa.Column("ingredient_id", sa.Integer, sa.ForeignKey("ingredients.id"), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False, server_default="0"),
        sa.Column("extra", sa.Boolean, nullable=False, server_default=sa.false()),
        sa.Column("removed", sa.Boolean, nullable=False, server_default=sa.false()),
    )
    op.create_index("ix_order_item_ingredients_id", "order_item_ingredients", ["id"])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table("order_item_ingredients")
    op.drop_table("order_items")
    op.drop_table("orders")
    order_status.drop(op.get_bind(), checkfirst=True)
    email_status.drop(op.get_bind(), checkfirst=True)
