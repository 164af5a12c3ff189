"""Audit log collaborators for MessageStore lifecycle events.

The store calls these synchronously, attempt before outcome. They never
affect store correctness; MessageStore swallows any exception they raise.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable


@runtime_checkable
class AuditLog(Protocol):
    """Receives the five store lifecycle events."""

    def saving(self, message_id: int) -> None: ...

    def saved(self, message_id: int) -> None: ...

    def reading(self, message_id: int) -> None: ...

    def did_not_find(self, message_id: int) -> None: ...

    def returning(self, message_id: int) -> None: ...


class LoggingAuditLog:
    """Writes lifecycle events to a stdlib logger at INFO."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    def saving(self, message_id: int) -> None:
        self._logger.info("Saving message %d.", message_id)

    def saved(self, message_id: int) -> None:
        self._logger.info("Saved message %d.", message_id)

    def reading(self, message_id: int) -> None:
        self._logger.info("Reading message %d.", message_id)

    def did_not_find(self, message_id: int) -> None:
        self._logger.info("No message found for id %d.", message_id)

    def returning(self, message_id: int) -> None:
        self._logger.info("Returning message %d.", message_id)


class NullAuditLog:
    """Discards every event."""

    def saving(self, message_id: int) -> None:
        pass

    def saved(self, message_id: int) -> None:
        pass

    def reading(self, message_id: int) -> None:
        pass

    def did_not_find(self, message_id: int) -> None:
        pass

    def returning(self, message_id: int) -> None:
        pass
