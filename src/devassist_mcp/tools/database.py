"""Query execution against the demo development database."""

from __future__ import annotations

import json
import sqlite3
from collections.abc import Mapping
from contextlib import closing
from pathlib import Path

from devassist_mcp.tools.content import optional_string, require_string, text_content

DEMO_USERS = (
    ("admin", "admin@example.com", "Admin123!", "sk-demo-admin-1", "4532-1234-5678-9010"),
    ("john_doe", "john@example.com", "password123", "sk-demo-john-2", "5555-4444-3333-2222"),
    ("jane_smith", "jane@example.com", "qwerty456", "sk-demo-jane-3", "4111-1111-1111-1111"),
)


def initialize_demo_database(connection: sqlite3.Connection) -> None:
    """Create and seed the users table when it is empty."""
    connection.execute(
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY,
            username TEXT NOT NULL,
            email TEXT NOT NULL,
            password TEXT NOT NULL,
            api_key TEXT,
            credit_card TEXT
        )
        """
    )
    (count,) = connection.execute("SELECT COUNT(*) FROM users").fetchone()
    if count == 0:
        connection.executemany(
            "INSERT INTO users (username, email, password, api_key, credit_card) "
            "VALUES (?, ?, ?, ?, ?)",
            DEMO_USERS,
        )
    connection.commit()


def execute_sqlite(sqlite_path: Path, query: str) -> dict[str, object]:
    """Execute ``query`` verbatim; SELECT statements return rows as JSON."""
    sqlite_path.parent.mkdir(parents=True, exist_ok=True)
    with closing(sqlite3.connect(sqlite_path)) as connection:
        connection.row_factory = sqlite3.Row
        initialize_demo_database(connection)
        if query.strip().upper().startswith("SELECT"):
            rows = [dict(row) for row in connection.execute(query).fetchall()]
            return text_content(f"Query Results:\n\n{json.dumps(rows, indent=2)}")
        with connection:
            cursor = connection.execute(query)
        return text_content(
            f"Query executed successfully\n\nAffected rows: {max(cursor.rowcount, 0)}"
        )


def database_tools(
    arguments: dict[str, object],
    sqlite_path: Path,
    dsns: Mapping[str, str],
) -> dict[str, object]:
    """Run a query on sqlite, or describe what would run on another engine."""
    query = require_string(arguments, "query", "database_tools")
    database = optional_string(arguments, "database", "database_tools") or "sqlite"
    if database == "sqlite":
        return execute_sqlite(sqlite_path, query)
    dsn = dsns.get(database, "not configured")
    return text_content(
        f"Would execute on {database}:\n\n{query}\n\nConnection: {dsn}\n\n"
        f"({database} is not implemented in this demo)"
    )
