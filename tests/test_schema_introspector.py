from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import ProgrammingError

from database import Dialect, QueryError, SchemaIntrospector, get_dialect
from database.schema_introspector import SchemaColumn, format_schema, group_columns


def fake_connection(rows):
    connection = MagicMock()
    connection.execute.return_value.mappings.return_value.all.return_value = rows
    return connection


def pg_row(table, column, data_type, nullable, pk):
    return {"table_name": table, "column_name": column, "data_type": data_type,
            "is_nullable": nullable, "column_key": pk}


def mysql_row(table, column, data_type, nullable, key):
    return {"table_name": table, "column_name": column, "data_type": data_type,
            "is_nullable": nullable, "column_key": key}


def test_postgres_round_trip() -> None:
    conn = fake_connection([
        pg_row("users", "id", "integer", False, True),
        pg_row("users", "name", "text", True, False),
    ])
    report = SchemaIntrospector(get_dialect(Dialect.POSTGRES)).introspect(conn, "shop")

    assert report.table_names == ["users"]
    id_col, name_col = report.tables[0].columns
    assert (id_col.name, id_col.is_primary_key, id_col.nullable) == ("id", True, False)
    assert (name_col.name, name_col.is_primary_key, name_col.nullable) == ("name", False, True)

    _, params = conn.execute.call_args[0]
    assert params == {}


def test_mysql_round_trip_binds_database() -> None:
    conn = fake_connection([
        mysql_row("users", "id", b"int(11)", "NO", "PRI"),
        mysql_row("users", "name", b"text", "YES", ""),
    ])
    report = SchemaIntrospector(get_dialect(Dialect.MYSQL)).introspect(conn, "shop")

    table = report.tables[0]
    assert table.column_names == ["id", "name"]
    assert table.columns[0].data_type == "int(11)"
    assert table.columns[0].is_primary_key
    assert table.columns[1].nullable

    _, params = conn.execute.call_args[0]
    assert params == {"database": "shop"}


def test_interleaved_rows_are_grouped_by_table() -> None:
    conn = fake_connection([
        mysql_row("orders", "id", "int", "NO", "PRI"),
        mysql_row("accounts", "id", "int", "NO", "PRI"),
        mysql_row("orders", "total", "decimal(10,2)", "YES", ""),
        mysql_row("accounts", "email", "varchar(255)", "NO", "UNI"),
    ])
    report = SchemaIntrospector(get_dialect(Dialect.MYSQL)).introspect(conn, "shop")

    assert report.table_names == ["accounts", "orders"]
    assert report.tables[0].column_names == ["id", "email"]
    assert report.tables[1].column_names == ["id", "total"]


def test_repeated_introspection_is_identical() -> None:
    rows = [
        pg_row("b", "x", "text", True, False),
        pg_row("a", "id", "integer", False, True),
    ]
    introspector = SchemaIntrospector(get_dialect(Dialect.POSTGRES))
    first = introspector.introspect(fake_connection(rows), "shop")
    second = introspector.introspect(fake_connection(rows), "shop")
    assert first.to_dict() == second.to_dict()


def test_format_schema() -> None:
    tables = group_columns([
        SchemaColumn("users", "id", "integer", False, True),
        SchemaColumn("users", "name", "text", True, False),
    ])
    assert format_schema(tables) == (
        "Database Schema:\n"
        "\n"
        "Table: users\n"
        "  Columns:\n"
        "    - id integer (PRIMARY KEY)\n"
        "    - name text\n"
        "\n"
    )


def test_empty_database() -> None:
    report = SchemaIntrospector(get_dialect(Dialect.MYSQL)).introspect(fake_connection([]), "empty")
    assert report.tables == []
    assert report.formatted == "Database Schema:\n\n"


def test_to_dict_shape() -> None:
    conn = fake_connection([pg_row("users", "id", "integer", False, True)])
    report = SchemaIntrospector(get_dialect(Dialect.POSTGRES)).introspect(conn, "shop")
    assert report.to_dict()["tables"] == [
        {"name": "users", "columns": [
            {"name": "id", "type": "integer", "nullable": False, "isPrimaryKey": True},
        ]},
    ]


def test_driver_failure_raises_query_error() -> None:
    conn = MagicMock()
    conn.execute.side_effect = ProgrammingError("SELECT", {}, Exception("permission denied for schema public"))
    with pytest.raises(QueryError, match="permission denied"):
        SchemaIntrospector(get_dialect(Dialect.POSTGRES)).introspect(conn, "shop")
