"""FileBackend — one text file per message under a working directory.

Writes go to a temp file in the same directory and are moved into place
with ``os.replace``, so a reader sees either the old or the new payload,
never a partial one. New files get the usual 0666-minus-umask mode
instead of the temp file's 0600; replaced files keep their mode.
Blocking file calls run in a worker thread.
"""

from __future__ import annotations

import asyncio
import logging
import os
import stat
import tempfile
from pathlib import Path

from messagestore.constants import DEFAULT_ENCODING, MESSAGE_FILE_SUFFIX
from messagestore.errors import BackendError, MessageNotFoundError

logger = logging.getLogger(__name__)


def _current_umask() -> int:
    # os.umask can only be read by setting it
    mask = os.umask(0)
    os.umask(mask)
    return mask


class FileBackend:
    """Message persistence as ``{working_directory}/{id}.txt`` files.

    Implements the ``MessageBackend`` protocol:

    - ``locate(message_id) -> Path``
    - ``write(path, payload) -> None``
    - ``read(path) -> str``
    """

    def __init__(
        self,
        working_directory: str | os.PathLike[str],
        suffix: str = MESSAGE_FILE_SUFFIX,
        encoding: str = DEFAULT_ENCODING,
    ) -> None:
        self._root = Path(working_directory)
        self._suffix = suffix
        self._encoding = encoding
        self._new_file_mode = 0o666 & ~_current_umask()

    @property
    def working_directory(self) -> Path:
        return self._root

    def locate(self, message_id: int) -> Path:
        return self._root / f"{message_id}{self._suffix}"

    async def write(self, location: Path, payload: str) -> None:
        try:
            await asyncio.to_thread(self._write_atomic, Path(location), payload)
        except OSError as exc:
            raise BackendError(f"Failed to write {location}: {exc}") from exc

    async def read(self, location: Path) -> str:
        try:
            return await asyncio.to_thread(self._read_text, Path(location))
        except FileNotFoundError as exc:
            raise MessageNotFoundError(location) from exc
        except (OSError, UnicodeDecodeError) as exc:
            raise BackendError(f"Failed to read {location}: {exc}") from exc

    def _read_text(self, path: Path) -> str:
        with open(path, encoding=self._encoding, newline="") as fh:
            return fh.read()

    def _write_atomic(self, path: Path, payload: str) -> None:
        fd, tmp_name = tempfile.mkstemp(
            dir=path.parent, prefix=f".{path.name}.", suffix=".tmp"
        )
        try:
            # newline="" keeps the payload byte-for-byte on every platform
            with os.fdopen(fd, "w", encoding=self._encoding, newline="") as fh:
                fh.write(payload)
                fh.flush()
                os.fsync(fh.fileno())
            os.chmod(tmp_name, self._mode_for(path))
            os.replace(tmp_name, path)
        except BaseException:
            try:
                os.unlink(tmp_name)
            except OSError:
                logger.warning("Could not remove temp file %s.", tmp_name)
            raise

    def _mode_for(self, path: Path) -> int:
        try:
            return stat.S_IMODE(os.stat(path).st_mode)
        except FileNotFoundError:
            return self._new_file_mode
