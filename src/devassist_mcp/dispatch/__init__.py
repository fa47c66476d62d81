"""Category-aware request dispatch."""

from .errors import (
    DispatchError,
    DuplicateRegistration,
    HandlerFailure,
    OperationError,
    UnknownOperation,
)
from .outcome import Failure, Outcome, Success
from .registry import Category, Handler, OperationRegistry, Registration

__all__ = [
    "Category",
    "DispatchError",
    "DuplicateRegistration",
    "Failure",
    "Handler",
    "HandlerFailure",
    "OperationError",
    "OperationRegistry",
    "Outcome",
    "Registration",
    "Success",
    "UnknownOperation",
]
