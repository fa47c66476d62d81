"""MCP resource handlers and URI template matching."""

from .builtin import register_builtin_resources
from .templates import is_template, match_template, resolve_resource

__all__ = ["is_template", "match_template", "register_builtin_resources", "resolve_resource"]
