"""Decide how much of a failure crosses the transport boundary."""

from __future__ import annotations

import traceback
from enum import Enum

from devassist_mcp.dispatch import DispatchError, HandlerFailure, OperationError

REDACTED_MESSAGE = "Operation failed."


class ErrorExposure(str, Enum):
    """Failure detail policy applied when building error envelopes."""

    REDACTED = "redacted"
    VERBOSE = "verbose"


def describe_failure(error: BaseException, exposure: ErrorExposure) -> dict[str, object]:
    """Return the client-facing error payload for ``error``.

    Client-authored errors (``OperationError`` and dispatcher errors) always
    keep their code and message. Anything else is reduced to a generic
    message unless ``exposure`` is ``verbose``, in which case the exception
    type, message and formatted traceback are all included.
    """
    if isinstance(error, HandlerFailure):
        error = error.error
    if isinstance(error, OperationError):
        return {"code": error.code, "message": error.message}
    if isinstance(error, DispatchError):
        return {"code": error.code, "message": error.message}
    if ErrorExposure(exposure) is ErrorExposure.REDACTED:
        return {"code": HandlerFailure.code, "message": REDACTED_MESSAGE}
    return {
        "code": HandlerFailure.code,
        "message": str(error),
        "type": type(error).__name__,
        "detail": "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        ),
    }
