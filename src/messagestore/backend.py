"""Capability interfaces for message persistence backends.

Each role is its own Protocol so a storage technology only claims what it
can honor. ``MessageBackend`` is the composition ``MessageStore`` needs.
Concrete implementations live in ``messagestore.backends``.
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class MessageLocator(Protocol):
    """Maps a message id to a backend-specific location.

    Must be pure, total over non-negative ids, and injective.
    """

    def locate(self, message_id: int) -> Any: ...


@runtime_checkable
class MessageReader(Protocol):
    """Reads the payload stored at a location.

    Raises MessageNotFoundError when nothing is stored there and
    BackendError on I/O failure.
    """

    async def read(self, location: Any) -> str: ...


@runtime_checkable
class MessageWriter(Protocol):
    """Replaces the payload at a location, all or nothing."""

    async def write(self, location: Any, payload: str) -> None: ...


@runtime_checkable
class MessageBackend(MessageLocator, MessageReader, MessageWriter, Protocol):
    """Full read/write/locate backend consumed by MessageStore."""
