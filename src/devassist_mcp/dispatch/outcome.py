"""Explicit handler outcome type."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Success:
    """Handler returned normally."""

    value: dict[str, object]

    @property
    def ok(self) -> bool:
        return True


@dataclass(slots=True, frozen=True)
class Failure:
    """Handler raised; ``error`` is the exception exactly as raised."""

    error: Exception

    @property
    def ok(self) -> bool:
        return False


Outcome = Success | Failure
