"""MessageStore — the single public entry point for saving and reading messages.

Composes a persistence backend, a write-through cache and an audit log.
``save`` is a command and returns nothing; ``read`` is a query and returns
a ``Maybe``, empty when no message exists. There is no separate
presence check: presence and value come back from one call.
"""

from __future__ import annotations

import logging

from messagestore.audit import AuditLog, LoggingAuditLog
from messagestore.backend import MessageBackend
from messagestore.backends.file import FileBackend
from messagestore.cache import MessageCache
from messagestore.config import StoreConfig, ensure_storage_root
from messagestore.errors import (
    ConfigurationError,
    InvalidMessageError,
    InvalidMessageIdError,
    MessageNotFoundError,
)
from messagestore.locks import KeyedLock
from messagestore.maybe import Maybe

logger = logging.getLogger(__name__)


def _require_valid_id(message_id: object) -> None:
    # bool is an int subclass but never a meaningful id
    if isinstance(message_id, bool) or not isinstance(message_id, int):
        raise InvalidMessageIdError(
            f"message_id must be an int, got {type(message_id).__name__}"
        )
    if message_id < 0:
        raise InvalidMessageIdError(
            f"message_id must be non-negative, got {message_id}"
        )


def _require_message(message: object) -> None:
    if message is None:
        raise InvalidMessageError("message must not be None")
    if not isinstance(message, str):
        raise InvalidMessageError(
            f"message must be str, got {type(message).__name__}"
        )


class MessageStore:
    """Keyed text-message store with caching and audit logging.

    - ``save(id, message)`` writes through the backend, then updates the
      cache, so the next ``read`` is served from memory.
    - ``read(id)`` returns ``Maybe.some(message)`` or ``Maybe.empty()``;
      a missing message is never an exception.
    - Backend failures propagate unchanged; audit log failures are
      logged and ignored.
    - Saves of one id are serialized around backend write + cache update;
      reads go through the cache, whose per-id lock makes a miss load once
      and orders it against the cache update of a concurrent save.
    """

    def __init__(
        self,
        config: StoreConfig,
        backend: MessageBackend,
        audit_log: AuditLog | None = None,
    ) -> None:
        self._config = ensure_storage_root(config)
        if backend is None:
            raise ConfigurationError("A message backend is required")
        if not isinstance(backend, MessageBackend):
            raise ConfigurationError(
                f"{type(backend).__name__} does not implement locate/read/write"
            )
        self._backend = backend
        self._cache = MessageCache(maxsize=config.cache_maxsize)
        if audit_log is None:
            audit_log = LoggingAuditLog()
        elif not isinstance(audit_log, AuditLog):
            raise ConfigurationError(
                f"{type(audit_log).__name__} does not implement the audit log events"
            )
        self._log: AuditLog = audit_log
        self._save_locks = KeyedLock()

    def _notify(self, event: str, message_id: int) -> None:
        """Send an audit event; a failing log never fails the operation."""
        try:
            getattr(self._log, event)(message_id)
        except Exception:
            logger.warning(
                "Audit log event %r failed for message %d.",
                event, message_id, exc_info=True,
            )

    async def save(self, message_id: int, message: str) -> None:
        """Store ``message`` under ``message_id``, replacing any previous one."""
        _require_valid_id(message_id)
        _require_message(message)
        location = self._backend.locate(message_id)

        self._notify("saving", message_id)
        async with self._save_locks.hold(message_id):
            await self._backend.write(location, message)
            await self._cache.add_or_update(message_id, message)
        self._notify("saved", message_id)

    async def read(self, message_id: int) -> Maybe[str]:
        """Return the message stored under ``message_id``, if any."""
        _require_valid_id(message_id)
        location = self._backend.locate(message_id)

        self._notify("reading", message_id)
        try:
            message = await self._cache.get_or_add(
                message_id, lambda: self._backend.read(location)
            )
        except MessageNotFoundError:
            self._notify("did_not_find", message_id)
            return Maybe.empty()
        self._notify("returning", message_id)
        return Maybe.some(message)


def create_message_store(
    config: StoreConfig,
    backend: MessageBackend | None = None,
    audit_log: AuditLog | None = None,
) -> MessageStore:
    """Build a MessageStore, defaulting to files under the working directory."""
    if backend is None:
        ensure_storage_root(config)
        backend = FileBackend(config.working_directory, encoding=config.encoding)
    return MessageStore(config, backend, audit_log=audit_log)
