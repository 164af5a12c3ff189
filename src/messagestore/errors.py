"""Exception hierarchy for message store operations.

Four kinds of failure are kept distinct so callers can tell them apart:
configuration problems, precondition violations, backend failures, and
the not-found condition (which backends raise and the store translates
into an empty result).
"""

from __future__ import annotations


class MessageStoreError(Exception):
    """Base exception for message store operations."""


class ConfigurationError(MessageStoreError):
    """Missing or unusable configuration, storage root, or backend."""


# ---------------------------------------------------------------------------
# Preconditions
# ---------------------------------------------------------------------------


class PreconditionError(MessageStoreError, ValueError):
    """Caller passed an argument outside the operation's domain."""


class InvalidMessageIdError(PreconditionError):
    """Message id is not a non-negative integer."""


class InvalidMessageError(PreconditionError):
    """Message payload is absent or not text."""


# ---------------------------------------------------------------------------
# Backend
# ---------------------------------------------------------------------------


class MessageNotFoundError(MessageStoreError):
    """No payload exists at the requested location."""

    def __init__(self, location: object) -> None:
        super().__init__(f"No message at {location!r}")
        self.location = location


class BackendError(MessageStoreError):
    """I/O, database or transport failure inside a backend."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class BackendConnectionError(BackendError):
    """Network/DNS failure reaching a remote backend."""


class BackendTimeoutError(BackendError):
    """Remote backend did not answer in time."""


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------


class EmptyResultError(MessageStoreError, LookupError):
    """Raised when forcing the value out of an empty Maybe."""
