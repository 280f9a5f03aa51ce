"""Unit tests for statement classification."""

import pytest

from sqlscan.core.operation import classify_operation


@pytest.mark.parametrize(
    ("sql", "expected"),
    [
        ("SELECT id FROM users WHERE id = ? ", "SELECT"),
        ("WITH t AS (SELECT 1 AS a) SELECT a FROM t", "SELECT"),
        ("SELECT 1 UNION SELECT 2", "SELECT"),
        ("INSERT INTO t VALUES(? ,? )", "INSERT"),
        ("UPDATE t SET a = ? WHERE b = ? ", "UPDATE"),
        ("DELETE FROM t WHERE a = ? ", "DELETE"),
        ("CREATE TABLE t (id INTEGER PRIMARY KEY, name TEXT)", "DDL"),
        ("DROP TABLE t", "DDL"),
        ("", "UNKNOWN"),
        ("   ", "UNKNOWN"),
    ],
)
def test_classify_operation(sql: str, expected: str) -> None:
    assert classify_operation(sql) == expected


def test_classify_with_dialect() -> None:
    assert classify_operation("SELECT id FROM users WHERE id = $1 ", "postgres") == "SELECT"
    assert classify_operation("UPDATE users SET name = :1  WHERE id = :2 ", "oracle") == "UPDATE"


def test_unparseable_statement() -> None:
    assert classify_operation("SELECT (((") == "UNKNOWN"
