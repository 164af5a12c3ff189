"""Message store configuration — plain frozen dataclass, no env loading.

The host application builds a ``StoreConfig`` from its own settings and
hands it to ``MessageStore``. Validation happens once, at store
construction, via ``ensure_storage_root``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from messagestore.constants import DEFAULT_ENCODING
from messagestore.errors import ConfigurationError


@dataclass(frozen=True)
class StoreConfig:
    working_directory: Path | None
    cache_maxsize: int | None = None  # None = keep every entry
    encoding: str = DEFAULT_ENCODING

    def __post_init__(self) -> None:
        # Accept plain strings from callers; frozen, so bypass __setattr__.
        # Blank input stays as-is: Path("") would silently mean the cwd.
        root = self.working_directory
        if isinstance(root, (str, os.PathLike)) and not isinstance(root, Path):
            if os.fspath(root).strip():
                object.__setattr__(self, "working_directory", Path(root))


def ensure_storage_root(config: StoreConfig | None) -> StoreConfig:
    """Validate ``config`` and its storage root, returning it unchanged.

    Raises ConfigurationError if the config is missing, the cache size is
    not positive, or the working directory is blank or not an existing,
    accessible directory.
    """
    if config is None:
        raise ConfigurationError("A StoreConfig is required")
    if not isinstance(config, StoreConfig):
        raise ConfigurationError(
            f"Expected StoreConfig, got {type(config).__name__}"
        )
    if config.cache_maxsize is not None and config.cache_maxsize < 1:
        raise ConfigurationError(
            f"cache_maxsize must be positive or None, got {config.cache_maxsize}"
        )

    root = config.working_directory
    if not isinstance(root, Path):
        raise ConfigurationError(
            f"working_directory must be a non-empty path, got {root!r}"
        )
    if not root.exists():
        raise ConfigurationError(f"Storage root {root} does not exist")
    if not root.is_dir():
        raise ConfigurationError(f"Storage root {root} is not a directory")
    if not os.access(root, os.R_OK | os.W_OK | os.X_OK):
        raise ConfigurationError(f"Storage root {root} is not accessible")
    return config
