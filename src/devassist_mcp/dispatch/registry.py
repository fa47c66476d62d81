"""Registration table and dispatch by (category, name)."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum

from .errors import DuplicateRegistration, HandlerFailure, UnknownOperation
from .outcome import Failure, Outcome, Success

Handler = Callable[[dict[str, object]], dict[str, object]]


class Category(str, Enum):
    """Namespaces that operation names are unique within."""

    TOOL = "tool"
    RESOURCE = "resource"
    PROMPT = "prompt"


@dataclass(slots=True, frozen=True)
class Registration:
    """One registered handler plus the metadata used for listing."""

    category: Category
    name: str
    handler: Handler
    description: str = ""
    metadata: dict[str, object] = field(default_factory=dict)


@dataclass(slots=True)
class OperationRegistry:
    """In-memory handler table preserving registration order per category."""

    _entries: dict[tuple[Category, str], Registration] = field(default_factory=dict)

    def register(
        self,
        category: Category,
        name: str,
        handler: Handler,
        *,
        description: str = "",
        metadata: dict[str, object] | None = None,
    ) -> Registration:
        """Register a handler; an existing (category, name) pair is never replaced."""
        category = Category(category)
        key = (category, name)
        if key in self._entries:
            raise DuplicateRegistration(category.value, name)
        registration = Registration(
            category=category,
            name=name,
            handler=handler,
            description=description,
            metadata=dict(metadata or {}),
        )
        self._entries[key] = registration
        return registration

    def get(self, category: Category, name: str) -> Registration | None:
        """Return a registration by category and name, or None when absent."""
        try:
            return self._entries.get((Category(category), name))
        except ValueError:
            return None

    def __contains__(self, key: object) -> bool:
        if not isinstance(key, tuple) or len(key) != 2:
            return False
        category, name = key
        try:
            return (Category(category), name) in self._entries
        except ValueError:
            return False

    def names(self, category: Category) -> tuple[str, ...]:
        """Return names registered in a category in registration order."""
        category = Category(category)
        return tuple(name for (cat, name) in self._entries if cat is category)

    def registrations(self, category: Category) -> tuple[Registration, ...]:
        """Return registrations of a category in registration order."""
        category = Category(category)
        return tuple(entry for (cat, _), entry in self._entries.items() if cat is category)

    def dispatch(
        self, category: Category, name: str, params: dict[str, object]
    ) -> dict[str, object]:
        """Invoke the handler for (category, name) with ``params`` and return its result."""
        registration = self._lookup(category, name)
        try:
            return registration.handler(params)
        except Exception as error:
            raise HandlerFailure(registration.category.value, name, error) from error

    def dispatch_outcome(
        self, category: Category, name: str, params: dict[str, object]
    ) -> Outcome:
        """Like ``dispatch`` but report handler failures as a ``Failure`` value."""
        registration = self._lookup(category, name)
        try:
            return Success(registration.handler(params))
        except Exception as error:
            return Failure(error)

    def _lookup(self, category: Category, name: str) -> Registration:
        try:
            resolved = Category(category)
        except ValueError:
            raise UnknownOperation(str(category), name) from None
        registration = self._entries.get((resolved, name))
        if registration is None:
            raise UnknownOperation(resolved.value, name)
        return registration
