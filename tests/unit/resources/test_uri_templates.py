from __future__ import annotations

from devassist_mcp.resources import is_template, match_template, resolve_resource

NAMES = ("project://files/{path}", "project://git/status", "project://config")


def test_is_template_detects_placeholders() -> None:
    assert is_template("project://files/{path}") is True
    assert is_template("project://config") is False


def test_template_variable_spans_path_segments() -> None:
    assert match_template("project://files/{path}", "project://files/src/app/main.py") == {
        "path": "src/app/main.py"
    }


def test_template_requires_non_empty_variable_and_full_match() -> None:
    assert match_template("project://files/{path}", "project://files/") is None
    assert match_template("project://files/{path}", "other://files/a.txt") is None


def test_template_escapes_literal_characters() -> None:
    assert match_template("db://{name}.sqlite", "db://dev.sqlite") == {"name": "dev"}
    assert match_template("db://{name}.sqlite", "db://devXsqlite") is None


def test_exact_name_wins_over_template() -> None:
    names = ("project://{section}", "project://config")

    assert resolve_resource("project://config", names) == ("project://config", {})
    assert resolve_resource("project://logs", names) == ("project://{section}", {"section": "logs"})


def test_resolve_unknown_uri_returns_none() -> None:
    assert resolve_resource("project://nothing", NAMES) is None
