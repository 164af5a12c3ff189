"""Concrete MessageBackend implementations."""

from messagestore.backends.file import FileBackend
from messagestore.backends.http import HttpBackend
from messagestore.backends.memory import InMemoryBackend
from messagestore.backends.sqlite import SqliteBackend

__all__ = ["FileBackend", "HttpBackend", "InMemoryBackend", "SqliteBackend"]
