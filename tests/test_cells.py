from datetime import date
from decimal import Decimal

from database.cells import NULL_TEXT, CellKind, classify_cell, metadata_text, render_array, render_cell
from database.executor import render_row


def test_classify_cell() -> None:
    assert classify_cell(None) is CellKind.NULL
    assert classify_cell("abc") is CellKind.TEXT
    assert classify_cell(b"abc") is CellKind.BINARY
    assert classify_cell(bytearray(b"abc")) is CellKind.BINARY
    assert classify_cell(memoryview(b"abc")) is CellKind.BINARY
    assert classify_cell(42) is CellKind.SCALAR
    assert classify_cell(Decimal("1.5")) is CellKind.SCALAR
    assert classify_cell(True) is CellKind.BOOLEAN
    assert classify_cell(["x"]) is CellKind.ARRAY
    assert classify_cell({"a": 1}) is CellKind.DOCUMENT


def test_null_renders_as_stable_sentinel() -> None:
    assert render_cell(None) == NULL_TEXT == "NULL"
    assert [render_cell(None) for _ in range(3)] == ["NULL", "NULL", "NULL"]


def test_bytes_decode_as_text() -> None:
    assert render_cell(b"varchar(255)") == "varchar(255)"
    assert render_cell(bytearray(b"hi")) == "hi"
    assert render_cell(memoryview(b"hi")) == "hi"


def test_invalid_utf8_is_replaced() -> None:
    assert render_cell(b"a\xffb") == "a\ufffdb"


def test_scalars_use_default_text() -> None:
    assert render_cell(1) == "1"
    assert render_cell(1.25) == "1.25"
    assert render_cell(Decimal("10.50")) == "10.50"
    assert render_cell(date(2024, 1, 31)) == "2024-01-31"


def test_metadata_text_treats_null_as_empty() -> None:
    assert metadata_text(None) == ""
    assert metadata_text(b"PRI") == "PRI"
    assert metadata_text("YES") == "YES"


def test_booleans_render_like_the_server() -> None:
    assert render_cell(True) == "true"
    assert render_cell(False) == "false"


def test_documents_render_as_json() -> None:
    assert render_cell({"a": True, "b": None}) == '{"a": true, "b": null}'
    assert render_cell({"when": date(2024, 1, 31)}) == '{"when": "2024-01-31"}'


def test_arrays_render_as_array_literals() -> None:
    assert render_cell(["x", "y"]) == "{x,y}"
    assert render_cell([[1, 2], [3, 4]]) == "{{1,2},{3,4}}"
    assert render_cell([True, False]) == "{t,f}"
    assert render_array([]) == "{}"


def test_array_elements_are_quoted_when_needed() -> None:
    assert render_cell(["a b", "", None, 'q"', "null", "back\\slash"]) == (
        '{"a b","",NULL,"q\\"","null","back\\\\slash"}'
    )


def test_structured_cells_in_a_row() -> None:
    row = [{"a": True, "b": None}, ["x", "y"], True]
    assert render_row(row) == '{"a": true, "b": null}\t{x,y}\ttrue'
