from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine

from database import QueryError, QueryExecutor, QueryResult, SecurityError
from database.executor import render_row


@pytest.fixture
def connection():
    engine = create_engine("sqlite://")
    with engine.connect() as conn:
        yield conn
    engine.dispose()


def test_select_renders_header_and_rows(connection) -> None:
    result = QueryExecutor().execute(connection, "SELECT 1 AS a, 'x' AS b")
    assert result.header == "a\tb"
    assert result.rows == ["1\tx"]
    assert result.row_count == 1


def test_rows_keep_result_order(connection) -> None:
    sql = "SELECT v FROM (SELECT 3 AS v UNION ALL SELECT 1 UNION ALL SELECT 2)"
    result = QueryExecutor().execute(connection, sql)
    assert result.rows == ["3", "1", "2"]
    assert result.row_count == len(result.rows)


def test_null_and_binary_cells(connection) -> None:
    executor = QueryExecutor()
    first = executor.execute(connection, "SELECT NULL AS n, x'6869' AS b, 2.5 AS f")
    second = executor.execute(connection, "SELECT NULL AS n, x'6869' AS b, 2.5 AS f")
    assert first.rows == ["NULL\thi\t2.5"]
    assert second.rows == first.rows


def test_every_row_has_one_field_per_column(connection) -> None:
    result = QueryExecutor().execute(connection, "WITH t(a, b, c) AS (VALUES (1, NULL, 'z'), (2, 'y', NULL)) SELECT * FROM t")
    assert result.columns == ["a", "b", "c"]
    for row in result.rows:
        assert len(row.split("\t")) == len(result.columns)


def test_literal_sql_is_sent_without_parameter_parsing(connection) -> None:
    result = QueryExecutor().execute(connection, "SELECT ':name' AS c, '100%' AS p")
    assert result.rows == [":name\t100%"]


def test_rejected_statement_raises_security_error(connection) -> None:
    with pytest.raises(SecurityError, match="Only SELECT"):
        QueryExecutor().execute(connection, "DELETE FROM t")


def test_check_returns_trimmed_statement() -> None:
    assert QueryExecutor().check("  select 1 ") == "select 1"
    with pytest.raises(SecurityError, match="Empty SQL query"):
        QueryExecutor().check("   ")


def test_execute_sends_trimmed_statement_with_original_casing() -> None:
    connection = MagicMock()
    driver = connection.execution_options.return_value
    driver.exec_driver_sql.return_value.returns_rows = False

    QueryExecutor().execute(connection, "\n  Select Name FROM Users  \n")

    connection.execution_options.assert_called_once_with(no_parameters=True)
    driver.exec_driver_sql.assert_called_once_with("Select Name FROM Users")


def test_driver_failure_raises_query_error(connection) -> None:
    with pytest.raises(QueryError, match="no such table: missing_table"):
        QueryExecutor().execute(connection, "SELECT * FROM missing_table")


def test_query_result_to_dict() -> None:
    result = QueryResult(columns=["a", "b"], rows=["1\tx", "2\tNULL"])
    assert result.to_dict() == {
        "rows": ["1\tx", "2\tNULL"],
        "header": "a\tb",
        "rowCount": 2,
        "hasTabs": True,
    }


def test_empty_result() -> None:
    assert QueryResult().to_dict() == {"rows": [], "header": "", "rowCount": 0, "hasTabs": True}


def test_render_row() -> None:
    assert render_row([1, None, b"x", "y"]) == "1\tNULL\tx\ty"
