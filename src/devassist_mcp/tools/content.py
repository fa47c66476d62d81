"""Shared helpers for building tool results and reading arguments."""

from __future__ import annotations

from devassist_mcp.dispatch import OperationError


def text_content(text: str, is_error: bool = False) -> dict[str, object]:
    """Build an MCP tool result carrying a single text block."""
    return {"content": [{"type": "text", "text": text}], "isError": is_error}


def require_string(arguments: dict[str, object], key: str, operation: str) -> str:
    """Return a required non-empty string argument."""
    value = arguments.get(key)
    if not isinstance(value, str) or not value:
        raise OperationError(
            code="INVALID_PARAMS",
            message=f"{operation} {key} must be a non-empty string.",
        )
    return value


def optional_string(arguments: dict[str, object], key: str, operation: str) -> str | None:
    """Return an optional string argument, rejecting non-string values."""
    value = arguments.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise OperationError(
            code="INVALID_PARAMS",
            message=f"{operation} {key} must be a string.",
        )
    return value
