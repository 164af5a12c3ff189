"""In-memory message backend.

Useful for testing and development. Not suitable for production as data
is lost when the process exits.
"""

from __future__ import annotations

from messagestore.errors import MessageNotFoundError


class InMemoryBackend:
    """Dict-backed ``MessageBackend``; the location is the id itself."""

    def __init__(self) -> None:
        self._messages: dict[int, str] = {}

    def locate(self, message_id: int) -> int:
        return message_id

    async def write(self, location: int, payload: str) -> None:
        self._messages[location] = payload

    async def read(self, location: int) -> str:
        try:
            return self._messages[location]
        except KeyError:
            raise MessageNotFoundError(location) from None

    def __len__(self) -> int:
        return len(self._messages)
