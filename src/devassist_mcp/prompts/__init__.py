"""MCP prompt templates."""

from .builtin import register_builtin_prompts

__all__ = ["register_builtin_prompts"]
