"""Create products table

Revision ID: 001
Revises: None
Create Date: 2026-10-19 00:00:00.000000+00:00

Creates products(id, name, category, created_at, updated_at).
Rollback: downgrade() drops the table and its data.
"""

from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "products",
        sa.Column(
            "id",
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment="Database-assigned identifier",
        ),
        sa.Column("name", sa.String(255), nullable=False, comment="Product display name"),
        sa.Column("category", sa.String(255), nullable=False, comment="Free-text product category"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="When the row was inserted (UTC)",
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            comment="When the row was last written (UTC)",
        ),
        sa.PrimaryKeyConstraint("id"),
    )


def downgrade() -> None:
    op.drop_table("products")
