"""URI template matching for resource names such as ``project://files/{path}``."""

from __future__ import annotations

import re
from collections.abc import Iterable
from functools import lru_cache
from typing import Final

VARIABLE_PATTERN: Final[re.Pattern[str]] = re.compile(r"\{([A-Za-z_][A-Za-z0-9_]*)\}")


def is_template(name: str) -> bool:
    """Return True when a resource name contains ``{var}`` placeholders."""
    return VARIABLE_PATTERN.search(name) is not None


@lru_cache(maxsize=128)
def _compile(template: str) -> re.Pattern[str]:
    pattern = ""
    position = 0
    for match in VARIABLE_PATTERN.finditer(template):
        pattern += re.escape(template[position : match.start()])
        pattern += f"(?P<{match.group(1)}>.+)"
        position = match.end()
    pattern += re.escape(template[position:])
    return re.compile(pattern)


def match_template(template: str, uri: str) -> dict[str, str] | None:
    """Bind template variables against ``uri``; None when it does not match."""
    match = _compile(template).fullmatch(uri)
    if match is None:
        return None
    return match.groupdict()


def resolve_resource(uri: str, names: Iterable[str]) -> tuple[str, dict[str, str]] | None:
    """Pick the registered name serving ``uri``.

    An exact name wins over templates; templates are tried in registration
    order.
    """
    ordered = tuple(names)
    if uri in ordered:
        return uri, {}
    for name in ordered:
        if not is_template(name):
            continue
        bound = match_template(name, uri)
        if bound is not None:
            return name, bound
    return None
