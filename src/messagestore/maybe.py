"""Zero-or-one value container used instead of ``None`` to signal absence.

A ``Maybe`` is never itself missing: "no value" is the empty state of a
real object. Callers test ``has_value``, pull the value out with a
default via ``get_or``, transform it with ``map``, or force it out with
``value`` (which raises ``EmptyResultError`` when empty).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, Iterator, TypeVar

from messagestore.errors import EmptyResultError

T = TypeVar("T")
U = TypeVar("U")


@dataclass(frozen=True)
class Maybe(Generic[T]):
    """Immutable container holding zero or exactly one value.

    Construct with ``Maybe.some(value)``, ``Maybe.empty()`` or
    ``Maybe.from_optional(value_or_none)``. Truthiness follows length, so
    ``Maybe.some("")`` is truthy: presence, not the value, decides.
    """

    _items: tuple[T, ...] = ()

    def __post_init__(self) -> None:
        if len(self._items) > 1:
            raise ValueError("Maybe holds at most one value")

    # -- constructors ---------------------------------------------------------

    @classmethod
    def some(cls, value: T) -> Maybe[T]:
        if value is None:
            raise ValueError("Maybe.some() needs a value; use Maybe.empty()")
        return cls((value,))

    @classmethod
    def empty(cls) -> Maybe[Any]:
        return cls()

    @classmethod
    def from_optional(cls, value: T | None) -> Maybe[T]:
        """Bridge from APIs that return ``None`` for absence."""
        if value is None:
            return cls()
        return cls((value,))

    # -- queries --------------------------------------------------------------

    @property
    def has_value(self) -> bool:
        return len(self._items) == 1

    @property
    def value(self) -> T:
        """Force the value out. Raises EmptyResultError when empty."""
        if not self._items:
            raise EmptyResultError("Maybe is empty")
        return self._items[0]

    def get_or(self, default: T) -> T:
        return self._items[0] if self._items else default

    def map(self, fn: Callable[[T], U]) -> Maybe[U]:
        """Apply ``fn`` to the value if present; empty stays empty."""
        if not self._items:
            return Maybe()
        return Maybe.some(fn(self._items[0]))

    # -- container protocol ---------------------------------------------------

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:
        if not self._items:
            return "Maybe.empty()"
        return f"Maybe.some({self._items[0]!r})"
