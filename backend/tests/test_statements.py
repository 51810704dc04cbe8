"""
ProductBridge Backend — SQL Statement Builder Tests
=====================================================

What:  Each builder binds request values as parameters, never into the SQL.
"""

from datetime import datetime, timezone

from productbridge import statements


NOW = datetime(2026, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


class TestReadStatements:

    def test_select_all_is_fixed_query(self):
        statement = statements.select_all()
        assert statement.operation == "select"
        assert statement.sql == "select * from products"
        assert statement.params == {}

    def test_select_one_binds_id(self):
        statement = statements.select_one(42)
        assert ":id" in statement.sql
        assert statement.params == {"id": 42}


class TestWriteStatements:

    def test_insert_uses_same_timestamp_for_both_columns(self):
        statement = statements.insert("Widget", "Tools", NOW)
        assert statement.operation == "insert"
        assert statement.returns_id is True
        assert statement.params["created_at"] == statement.params["updated_at"] == NOW
        assert statement.params["name"] == "Widget"
        assert statement.params["category"] == "Tools"

    def test_update_sets_updated_at_only(self):
        statement = statements.update(3, "X", "Y", NOW)
        assert statement.operation == "update"
        assert "created_at" not in statement.params
        assert statement.params == {"id": 3, "name": "X", "category": "Y", "updated_at": NOW}

    def test_delete_binds_id(self):
        statement = statements.delete(9)
        assert statement.operation == "delete"
        assert statement.sql == "delete from products where id = :id"
        assert statement.params == {"id": 9}
        assert statement.returns_id is False

    def test_quoted_values_stay_out_of_sql_text(self):
        """A name that would break string-built SQL is only a bound value."""
        hostile = "x'); drop table products; --"
        statement = statements.insert(hostile, "Tools", NOW)
        assert hostile not in statement.sql
        assert statement.params["name"] == hostile
