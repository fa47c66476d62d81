"""Per-request audit trail stored as JSON lines."""

from __future__ import annotations

import json
from collections import deque
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from pathlib import Path

PLAIN_STRING_KEYS = frozenset({"operation", "action", "task", "database", "name", "uri"})


def utc_timestamp() -> str:
    """Return an ISO-8601 UTC timestamp with millisecond precision."""
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def sanitize_arguments(arguments: Mapping[str, object]) -> dict[str, object]:
    """Reduce arguments to shapes so commands, code and secrets never reach the log."""
    sanitized: dict[str, object] = {}
    for key in sorted(arguments):
        value = arguments[key]
        if isinstance(value, str):
            if key in PLAIN_STRING_KEYS:
                sanitized[key] = value
            else:
                sanitized[f"{key}_present"] = True
                sanitized[f"{key}_length"] = len(value)
        elif value is None or isinstance(value, (int, float, bool)):
            sanitized[key] = value
        elif isinstance(value, list):
            sanitized[f"{key}_type"] = "list"
            sanitized[f"{key}_length"] = len(value)
        elif isinstance(value, dict):
            sanitized[f"{key}_type"] = "dict"
            sanitized[f"{key}_keys"] = sorted(str(item) for item in value)
        else:
            sanitized[f"{key}_type"] = type(value).__name__
    return sanitized


@dataclass(slots=True, frozen=True)
class AuditEvent:
    """One handled request: what was routed where and how it ended."""

    timestamp: str
    request_id: str
    category: str
    operation: str
    ok: bool
    error_code: str | None
    metadata: dict[str, object]

    @classmethod
    def for_response(
        cls,
        request_id: str,
        category: str,
        operation: str,
        arguments: Mapping[str, object],
        response: Mapping[str, object],
    ) -> AuditEvent:
        """Build the event for a response envelope, keeping only argument shapes."""
        error = response.get("error")
        code = error.get("code") if isinstance(error, dict) else None
        return cls(
            timestamp=utc_timestamp(),
            request_id=request_id,
            category=category,
            operation=operation,
            ok=response.get("ok") is True,
            error_code=code if isinstance(code, str) else None,
            metadata=sanitize_arguments(arguments),
        )


class RequestAuditLog:
    """Append-only request log at ``<data_dir>/audit.jsonl``."""

    def __init__(self, path: Path) -> None:
        path.parent.mkdir(parents=True, exist_ok=True)
        self.path = path

    def append(self, event: AuditEvent) -> None:
        with self.path.open("a", encoding="utf-8") as handle:
            handle.write(json.dumps(asdict(event), sort_keys=True) + "\n")

    def tail(self, count: int) -> list[dict[str, object]]:
        """Return the last ``count`` events, oldest first; unreadable lines are skipped."""
        if count < 1 or not self.path.is_file():
            return []
        recent: deque[dict[str, object]] = deque(maxlen=count)
        with self.path.open("r", encoding="utf-8") as handle:
            for line in handle:
                try:
                    recent.append(json.loads(line))
                except json.JSONDecodeError:
                    continue
        return list(recent)
