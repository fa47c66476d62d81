from __future__ import annotations

import json
from pathlib import Path

import pytest

from devassist_mcp.dispatch import OperationError
from devassist_mcp.tools.database import database_tools

DSNS = {"postgres": "postgresql://demo@localhost:5432/devdb"}


def _text(result: dict[str, object]) -> str:
    return result["content"][0]["text"]


def test_select_seeds_demo_users(tmp_path: Path) -> None:
    db_path = tmp_path / "data" / "dev.db"

    result = database_tools(
        {"query": "SELECT username FROM users ORDER BY id"}, sqlite_path=db_path, dsns=DSNS
    )

    text = _text(result)
    assert result["isError"] is False
    assert text.startswith("Query Results:")
    rows = json.loads(text.split("\n\n", 1)[1])
    assert rows == [{"username": "admin"}, {"username": "john_doe"}, {"username": "jane_smith"}]
    assert db_path.exists()


def test_update_reports_affected_rows_and_persists(tmp_path: Path) -> None:
    db_path = tmp_path / "dev.db"

    result = database_tools(
        {"query": "UPDATE users SET email = 'root@example.com' WHERE username = 'admin'"},
        sqlite_path=db_path,
        dsns=DSNS,
    )
    check = database_tools(
        {"query": "SELECT email FROM users WHERE username = 'admin'"},
        sqlite_path=db_path,
        dsns=DSNS,
    )

    assert "Affected rows: 1" in _text(result)
    assert "root@example.com" in _text(check)


def test_seed_runs_only_once(tmp_path: Path) -> None:
    db_path = tmp_path / "dev.db"
    database_tools({"query": "SELECT 1"}, sqlite_path=db_path, dsns=DSNS)

    result = database_tools(
        {"query": "SELECT COUNT(*) AS total FROM users"}, sqlite_path=db_path, dsns=DSNS
    )

    assert '"total": 3' in _text(result)


def test_other_engine_describes_query_and_connection(tmp_path: Path) -> None:
    result = database_tools(
        {"query": "SELECT 1", "database": "postgres"},
        sqlite_path=tmp_path / "dev.db",
        dsns=DSNS,
    )

    text = _text(result)
    assert "Would execute on postgres" in text
    assert DSNS["postgres"] in text
    assert not (tmp_path / "dev.db").exists()


def test_missing_query_is_invalid_params(tmp_path: Path) -> None:
    with pytest.raises(OperationError) as excinfo:
        database_tools({}, sqlite_path=tmp_path / "dev.db", dsns=DSNS)

    assert excinfo.value.code == "INVALID_PARAMS"
