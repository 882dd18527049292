"""create customers and reservations

Revision ID: 0001
Revises:
Create Date: 2026-10-19

"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    insp = inspect(bind)
    existing_tables = set(insp.get_table_names())

    def _has_index(table: str, name: str) -> bool:
        return any(ix.get("name") == name for ix in insp.get_indexes(table))

    if "customers" not in existing_tables:
        op.create_table(
            "customers",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("first_name", sa.Text(), nullable=False),
            sa.Column("last_name", sa.Text(), nullable=False),
            sa.Column("phone", sa.Text(), nullable=True),
            sa.Column("notes", sa.Text(), nullable=True),
        )
        existing_tables.add("customers")

    if not _has_index("customers", "idx_customers_name"):
        op.create_index("idx_customers_name", "customers", ["last_name", "first_name"])

    if "reservations" not in existing_tables:
        op.create_table(
            "reservations",
            sa.Column("id", sa.Integer(), primary_key=True, nullable=False),
            sa.Column("customer_id", sa.Integer(), nullable=False),
            sa.Column("num_guests", sa.Integer(), nullable=False),
            sa.Column("start_at", sa.DateTime(timezone=False), nullable=False),
            sa.Column("notes", sa.Text(), nullable=True),
            sa.ForeignKeyConstraint(["customer_id"], ["customers.id"]),
        )
        existing_tables.add("reservations")

    insp = inspect(op.get_bind())
    if not _has_index("reservations", "idx_reservations_customer_id"):
        op.create_index("idx_reservations_customer_id", "reservations", ["customer_id"])


def downgrade() -> None:
    op.drop_index("idx_reservations_customer_id", table_name="reservations")
    op.drop_table("reservations")

    op.drop_index("idx_customers_name", table_name="customers")
    op.drop_table("customers")
