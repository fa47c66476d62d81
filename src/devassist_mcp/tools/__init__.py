"""MCP tool handlers and registrations."""

from .builtin import register_builtin_tools
from .content import text_content

__all__ = ["register_builtin_tools", "text_content"]
