"""Built-in development assistant tools."""

from __future__ import annotations

import sys
from pathlib import Path

import httpx

from devassist_mcp.config import ServerConfig
from devassist_mcp.dispatch import Category, Handler, OperationError, OperationRegistry
from devassist_mcp.tools.assistant import CodeAssistant
from devassist_mcp.tools.content import optional_string, require_string, text_content
from devassist_mcp.tools.database import database_tools
from devassist_mcp.tools.environment import environment_manager
from devassist_mcp.tools.shell import format_output, run_argv, run_shell

ANALYZERS: dict[str, tuple[str, ...]] = {
    "ruff": ("ruff", "check"),
    "black": ("black", "--check"),
    "mypy": ("mypy",),
    "pyflakes": ("pyflakes",),
}


def _schema(properties: dict[str, dict[str, object]], required: list[str]) -> dict[str, object]:
    return {"type": "object", "properties": properties, "required": required}


def _string(description: str, enum: list[str] | None = None) -> dict[str, object]:
    field: dict[str, object] = {"type": "string", "description": description}
    if enum is not None:
        field["enum"] = enum
    return field


def register_builtin_tools(
    registry: OperationRegistry,
    config: ServerConfig,
    http_client: httpx.Client,
) -> None:
    """Register the development assistant tool set."""
    root = config.workspace_root
    registry.register(
        Category.TOOL,
        "execute_command",
        _execute_command_handler(root),
        description="Execute shell commands (git, pip, docker, etc.)",
        metadata={
            "inputSchema": _schema(
                {"command": _string("Shell command to execute")}, required=["command"]
            )
        },
    )
    registry.register(
        Category.TOOL,
        "file_operations",
        _file_operations_handler(root),
        description="Read, write, or search files",
        metadata={
            "inputSchema": _schema(
                {
                    "operation": _string("Operation to perform", ["read", "write", "search"]),
                    "path": _string("File path"),
                    "content": _string("Content to write, or text to search for"),
                },
                required=["operation", "path"],
            )
        },
    )
    registry.register(
        Category.TOOL,
        "git_operations",
        _git_operations_handler(root),
        description="Perform git operations (clone, commit, push, config, status)",
        metadata={
            "inputSchema": _schema(
                {
                    "action": _string("Git action to perform"),
                    "repo": _string("Repository URL"),
                    "message": _string("Commit message"),
                },
                required=["action"],
            )
        },
    )
    registry.register(
        Category.TOOL,
        "dependency_manager",
        _dependency_manager_handler(root),
        description="Install or update pip packages",
        metadata={
            "inputSchema": _schema(
                {
                    "action": _string("Action to perform", ["install", "update"]),
                    "package": _string("Package name"),
                },
                required=["action", "package"],
            )
        },
    )
    registry.register(
        Category.TOOL,
        "code_analysis",
        _code_analysis_handler(root),
        description="Run linters, formatters, and type checkers",
        metadata={
            "inputSchema": _schema(
                {
                    "tool": _string("Analysis tool to use"),
                    "file": _string("File to analyze"),
                },
                required=["tool", "file"],
            )
        },
    )
    registry.register(
        Category.TOOL,
        "ai_code_assistant",
        CodeAssistant(config.assistant, http_client),
        description="AI-powered code completion and refactoring",
        metadata={
            "inputSchema": _schema(
                {
                    "task": _string("Task to perform"),
                    "code": _string("Code to analyze"),
                    "prompt": _string("Custom prompt"),
                },
                required=["task", "code"],
            )
        },
    )
    registry.register(
        Category.TOOL,
        "environment_manager",
        _environment_manager_handler(config),
        description="Manage environment variables and secrets",
        metadata={
            "inputSchema": _schema(
                {
                    "action": _string("Action to perform", ["read", "write", "list"]),
                    "key": _string("Environment variable key"),
                    "value": _string("Value to set"),
                },
                required=["action"],
            )
        },
    )
    registry.register(
        Category.TOOL,
        "database_tools",
        _database_tools_handler(config),
        description="Execute queries on development database",
        metadata={
            "inputSchema": _schema(
                {
                    "query": _string("SQL query to execute"),
                    "database": _string("Database name"),
                },
                required=["query"],
            )
        },
    )


def _execute_command_handler(root: Path) -> Handler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        command = require_string(arguments, "command", "execute_command")
        result = run_shell(command, cwd=root)
        if result.ok:
            return text_content(format_output("Command executed successfully", result))
        return text_content(format_output("Command execution failed", result), is_error=True)

    return handler


def _file_operations_handler(root: Path) -> Handler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        operation = require_string(arguments, "operation", "file_operations")
        path_value = require_string(arguments, "path", "file_operations")
        content = optional_string(arguments, "content", "file_operations") or ""
        target = root / path_value
        if operation == "read":
            return text_content(
                f"File: {path_value}\n\nContent:\n{target.read_text(encoding='utf-8')}"
            )
        if operation == "write":
            data = content.encode("utf-8")
            target.write_bytes(data)
            return text_content(f"Successfully wrote to {path_value}\n\nBytes written: {len(data)}")
        if operation == "search":
            lines = target.read_text(encoding="utf-8").splitlines()
            matches = [
                f"{number}:{line}" for number, line in enumerate(lines, start=1) if content in line
            ]
            if not matches:
                return text_content(f'No matches found for "{content}" in {path_value}')
            return text_content(f"Search results in {path_value}:\n\n" + "\n".join(matches))
        raise OperationError(
            code="INVALID_PARAMS",
            message="file_operations operation must be one of: read, write, search.",
        )

    return handler


def _git_operations_handler(root: Path) -> Handler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        action = require_string(arguments, "action", "git_operations")
        if action == "clone":
            repo = require_string(arguments, "repo", "git_operations")
            result = run_argv(["git", "clone", repo], cwd=root)
            return text_content(format_output("Repository clone", result), is_error=not result.ok)
        if action == "commit":
            message = require_string(arguments, "message", "git_operations")
            staged = run_argv(["git", "add", "."], cwd=root)
            if not staged.ok:
                return text_content(format_output("Staging failed", staged), is_error=True)
            result = run_argv(["git", "commit", "-m", message], cwd=root)
            return text_content(format_output("Commit", result), is_error=not result.ok)
        if action == "push":
            result = run_argv(["git", "push"], cwd=root)
            return text_content(format_output("Push", result), is_error=not result.ok)
        if action == "config":
            config_path = root / ".git" / "config"
            if not config_path.exists():
                return text_content("Could not read git config: .git/config not found")
            return text_content(
                f"Git Configuration:\n\n{config_path.read_text(encoding='utf-8')}"
            )
        if action == "status":
            result = run_argv(["git", "status"], cwd=root)
            return text_content(format_output("Git Status", result), is_error=not result.ok)
        raise OperationError(code="INVALID_PARAMS", message=f"Unknown git action: {action}")

    return handler


def _dependency_manager_handler(root: Path) -> Handler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        action = require_string(arguments, "action", "dependency_manager")
        package = require_string(arguments, "package", "dependency_manager")
        argv = [sys.executable, "-m", "pip", "install"]
        if action == "update":
            argv.append("--upgrade")
        elif action != "install":
            raise OperationError(code="INVALID_PARAMS", message=f"Unknown action: {action}")
        argv.append(package)
        result = run_argv(argv, cwd=root)
        title = "Package installed" if action == "install" else "Package updated"
        if not result.ok:
            title = "Dependency operation failed"
        return text_content(format_output(title, result), is_error=not result.ok)

    return handler


def _code_analysis_handler(root: Path) -> Handler:
    def handler(arguments: dict[str, object]) -> dict[str, object]:
        tool = require_string(arguments, "tool", "code_analysis")
        file_value = require_string(arguments, "file", "code_analysis")
        prefix = ANALYZERS.get(tool.lower())
        if prefix is None:
            result = run_argv([tool, file_value], cwd=root)
            title = f"Custom Analysis ({tool})"
        else:
            result = run_argv([*prefix, file_value], cwd=root)
            title = f"{tool.lower()} analysis"
        return text_content(format_output(title, result), is_error=not result.ok)

    return handler


def _environment_manager_handler(config: ServerConfig) -> Handler:
    secrets = dict(config.environment.secrets)
    env_file = config.environment.env_file

    def handler(arguments: dict[str, object]) -> dict[str, object]:
        return environment_manager(arguments, secrets=secrets, env_file=env_file)

    return handler


def _database_tools_handler(config: ServerConfig) -> Handler:
    sqlite_path = config.database.sqlite_path
    dsns = dict(config.database.dsns)

    def handler(arguments: dict[str, object]) -> dict[str, object]:
        return database_tools(arguments, sqlite_path=sqlite_path, dsns=dsns)

    return handler
