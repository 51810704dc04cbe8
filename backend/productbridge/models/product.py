"""
ProductBridge Backend — Product SQLAlchemy Model
==================================================

What:  ORM mapping of the `products` table.
Who:   Alembic (autogenerate) and the test suite (create_all). Request
       handling does not go through the ORM; it executes the SQL templates
       in `productbridge.statements` against this same table.

Table:
    products(id, name, category, created_at, updated_at)

    - id: integer identity assigned by the database; immutable
    - created_at / updated_at: bound by the application on insert/update,
      equal on insert
"""

from datetime import datetime

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from productbridge.database import Base


class Product(Base):
    """A product row. No lifecycle beyond insert, update and delete."""

    __tablename__ = "products"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
        comment="Database-assigned identifier",
    )

    name: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Product display name",
    )

    category: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Free-text product category",
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When the row was inserted (UTC)",
    )

    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        comment="When the row was last written (UTC)",
    )

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name='{self.name}', category='{self.category}')>"
