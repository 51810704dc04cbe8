"""
ProductBridge Backend — SQL Statement Templates
=================================================

What:  The fixed SQL the API runs, one template per route, plus builders
       that bind request values into them.
How:   Templates are SQLAlchemy `text()` clauses with named bind parameters.
       Request values are never interpolated into the SQL string, so names
       like "O'Brien" or "1; drop table products" are stored verbatim.

Template → route:
    SELECT_QUERY      GET    /products
    SELECT_ONE_QUERY  GET    /products/{id}
    INSERT_QUERY      POST   /products
    UPDATE_QUERY      PUT    /products/{id}
    DELETE_QUERY      DELETE /products/{id}

Timestamps are bound as typed parameters so every dialect stores and
returns real datetimes (SQLite has no native timestamp type).
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict

from sqlalchemy import DateTime, Integer, String, bindparam, text
from sqlalchemy.sql.expression import Executable

SELECT_QUERY = "select * from products"
SELECT_ONE_QUERY = "select * from products where id = :id"
INSERT_QUERY = (
    "insert into products (name, category, created_at, updated_at) "
    "values (:name, :category, :created_at, :updated_at) returning id"
)
UPDATE_QUERY = (
    "update products set name = :name, category = :category, "
    "updated_at = :updated_at where id = :id"
)
DELETE_QUERY = "delete from products where id = :id"

# Result typing for `select *`; matched by column name
_PRODUCT_COLUMNS = {
    "id": Integer,
    "name": String,
    "category": String,
    "created_at": DateTime(timezone=True),
    "updated_at": DateTime(timezone=True),
}


@dataclass(frozen=True)
class SqlStatement:
    """
    A fully built statement ready for the datastore.

    Attributes:
        operation:  select, insert, update or delete
        clause:     the executable text() clause
        params:     bound values, keyed by bind parameter name
        returns_id: True when the statement yields the new row id
    """
    operation: str
    clause: Executable
    params: Dict[str, Any] = field(default_factory=dict)
    returns_id: bool = False

    @property
    def sql(self) -> str:
        """The SQL text with placeholders, safe to log."""
        return str(self.clause)


def select_all() -> SqlStatement:
    return SqlStatement(
        operation="select",
        clause=text(SELECT_QUERY).columns(**_PRODUCT_COLUMNS),
    )


def select_one(product_id: int) -> SqlStatement:
    return SqlStatement(
        operation="select",
        clause=text(SELECT_ONE_QUERY).columns(**_PRODUCT_COLUMNS),
        params={"id": product_id},
    )


def insert(name: str, category: str, now: datetime) -> SqlStatement:
    """Both timestamps come from the same clock read so they compare equal."""
    clause = text(INSERT_QUERY).bindparams(
        bindparam("created_at", type_=DateTime(timezone=True)),
        bindparam("updated_at", type_=DateTime(timezone=True)),
    )
    return SqlStatement(
        operation="insert",
        clause=clause,
        params={"name": name, "category": category, "created_at": now, "updated_at": now},
        returns_id=True,
    )


def update(product_id: int, name: str, category: str, now: datetime) -> SqlStatement:
    clause = text(UPDATE_QUERY).bindparams(
        bindparam("updated_at", type_=DateTime(timezone=True)),
    )
    return SqlStatement(
        operation="update",
        clause=clause,
        params={"id": product_id, "name": name, "category": category, "updated_at": now},
    )


def delete(product_id: int) -> SqlStatement:
    return SqlStatement(
        operation="delete",
        clause=text(DELETE_QUERY),
        params={"id": product_id},
    )
