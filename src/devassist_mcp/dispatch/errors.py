"""Dispatch error taxonomy."""

from __future__ import annotations

from dataclasses import dataclass


class DispatchError(Exception):
    """Base class for failures reported by the dispatcher itself."""

    code = "DISPATCH_ERROR"

    def __init__(self, category: str, name: str, message: str) -> None:
        super().__init__(message)
        self.category = category
        self.name = name
        self.message = message


class UnknownOperation(DispatchError):
    """Raised when no handler is registered for (category, name)."""

    code = "UNKNOWN_OPERATION"

    def __init__(self, category: str, name: str) -> None:
        super().__init__(category, name, f"Unknown {category}: {name}")


class DuplicateRegistration(DispatchError):
    """Raised when a (category, name) pair is registered twice."""

    code = "DUPLICATE_REGISTRATION"

    def __init__(self, category: str, name: str) -> None:
        super().__init__(category, name, f"{category} already registered: {name}")


class HandlerFailure(DispatchError):
    """Wraps an exception raised by a handler without altering it.

    The original exception is available unchanged as ``error`` and as
    ``__cause__``.
    """

    code = "HANDLER_FAILURE"

    def __init__(self, category: str, name: str, error: BaseException) -> None:
        super().__init__(category, name, str(error))
        self.error = error


@dataclass(slots=True, frozen=True)
class OperationError(Exception):
    """Expected handler failure whose code and message are meant for the client."""

    code: str
    message: str

    def __str__(self) -> str:
        return self.message
