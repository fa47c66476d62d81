"""Environment variable reads and writes for environment_manager."""

from __future__ import annotations

import os
from collections.abc import Mapping
from pathlib import Path

from devassist_mcp.dispatch import OperationError
from devassist_mcp.tools.content import optional_string, require_string, text_content

ACTIONS = ("read", "write", "list")


def _read_env_file(env_file: Path) -> str | None:
    if not env_file.exists():
        return None
    return env_file.read_text(encoding="utf-8")


def read_env_variable(
    key: str,
    secrets: Mapping[str, str],
    env_file: Path,
    environ: Mapping[str, str],
) -> dict[str, object]:
    """Look up ``key`` in configured secrets, then the process env, then the env file."""
    if key in secrets:
        return text_content(
            f"Environment Variable: {key}\n\nValue: {secrets[key]}\n\n(From configured secrets)"
        )
    env_value = environ.get(key)
    if env_value:
        return text_content(f"Environment Variable: {key}\n\nValue: {env_value}")

    content = _read_env_file(env_file)
    if content is not None:
        prefix = f"{key}="
        for line in content.splitlines():
            if line.startswith(prefix):
                value = line[len(prefix) :].strip()
                return text_content(
                    f"Environment Variable: {key}\n\nValue: {value}\n\n(From {env_file.name} file)"
                )
    return text_content(f"Environment variable {key} not found")


def write_env_variable(key: str, value: str, env_file: Path) -> dict[str, object]:
    """Set ``key`` in the env file, replacing the first existing assignment."""
    content = _read_env_file(env_file) or ""
    lines = content.split("\n") if content else []
    prefix = f"{key}="
    for index, line in enumerate(lines):
        if line.startswith(prefix):
            lines[index] = f"{key}={value}"
            break
    else:
        lines.append(f"{key}={value}")
    env_file.parent.mkdir(parents=True, exist_ok=True)
    env_file.write_text("\n".join(lines), encoding="utf-8")
    return text_content(
        f"Environment variable {key} written to {env_file.name} file\n\nValue: {value}"
    )


def list_env_variables(
    secrets: Mapping[str, str],
    env_file: Path,
    environ: Mapping[str, str],
) -> dict[str, object]:
    """Dump configured secrets, the whole process environment and the env file."""
    parts = ["=== Environment Variables ===", "", "Configured Secrets:"]
    parts.extend(f"{key}={value}" for key, value in secrets.items())
    parts.extend(["", "=== Process Environment ==="])
    parts.extend(f"{key}={value}" for key, value in environ.items())
    content = _read_env_file(env_file)
    if content is None:
        parts.extend(["", f"{env_file.name} file not found"])
    else:
        parts.extend(["", f"=== {env_file.name} File Contents ===", content])
    return text_content("\n".join(parts) + "\n")


def environment_manager(
    arguments: dict[str, object],
    secrets: Mapping[str, str],
    env_file: Path,
    environ: Mapping[str, str] | None = None,
) -> dict[str, object]:
    """Route an environment_manager call to its action."""
    source = os.environ if environ is None else environ
    action = require_string(arguments, "action", "environment_manager").lower()
    if action == "read":
        key = require_string(arguments, "key", "environment_manager")
        return read_env_variable(key, secrets, env_file, source)
    if action == "write":
        key = require_string(arguments, "key", "environment_manager")
        value = optional_string(arguments, "value", "environment_manager") or ""
        return write_env_variable(key, value, env_file)
    if action == "list":
        return list_env_variables(secrets, env_file, source)
    raise OperationError(
        code="INVALID_PARAMS",
        message=f"environment_manager action must be one of: {', '.join(ACTIONS)}.",
    )
