"""messagestore — keyed text-message persistence.

A MessageStore composes a swappable backend, a write-through cache and
an audit log, and reports absence with ``Maybe`` rather than ``None``.
"""

__version__ = "0.1.0"

from messagestore.audit import AuditLog, LoggingAuditLog, NullAuditLog
from messagestore.backend import MessageBackend, MessageLocator, MessageReader, MessageWriter
from messagestore.backends import FileBackend, HttpBackend, InMemoryBackend, SqliteBackend
from messagestore.cache import MessageCache
from messagestore.config import StoreConfig, ensure_storage_root
from messagestore.errors import (
    BackendConnectionError,
    BackendError,
    BackendTimeoutError,
    ConfigurationError,
    EmptyResultError,
    InvalidMessageError,
    InvalidMessageIdError,
    MessageNotFoundError,
    MessageStoreError,
    PreconditionError,
)
from messagestore.maybe import Maybe
from messagestore.store import MessageStore, create_message_store

__all__ = [
    "AuditLog",
    "LoggingAuditLog",
    "NullAuditLog",
    "MessageBackend",
    "MessageLocator",
    "MessageReader",
    "MessageWriter",
    "FileBackend",
    "HttpBackend",
    "InMemoryBackend",
    "SqliteBackend",
    "MessageCache",
    "StoreConfig",
    "ensure_storage_root",
    "BackendConnectionError",
    "BackendError",
    "BackendTimeoutError",
    "ConfigurationError",
    "EmptyResultError",
    "InvalidMessageError",
    "InvalidMessageIdError",
    "MessageNotFoundError",
    "MessageStoreError",
    "PreconditionError",
    "Maybe",
    "MessageStore",
    "create_message_store",
]
