"""Tests for the file, SQLite and in-memory message backends."""

import os
import stat
from pathlib import Path

import pytest

from messagestore.backend import MessageBackend, MessageLocator, MessageReader, MessageWriter
from messagestore.backends.file import FileBackend
from messagestore.backends.memory import InMemoryBackend
from messagestore.backends.sqlite import SqliteBackend
from messagestore.config import StoreConfig
from messagestore.errors import BackendError, InvalidMessageIdError, MessageNotFoundError


# ---------------------------------------------------------------------------
# Protocol conformance
# ---------------------------------------------------------------------------


class TestProtocolConformance:
    @pytest.mark.parametrize(
        "backend",
        [FileBackend("/tmp"), SqliteBackend("/tmp/x.db"), InMemoryBackend()],
        ids=["file", "sqlite", "memory"],
    )
    def test_backends_implement_every_role(self, backend) -> None:
        assert isinstance(backend, MessageLocator)
        assert isinstance(backend, MessageReader)
        assert isinstance(backend, MessageWriter)
        assert isinstance(backend, MessageBackend)

    def test_locator_only_is_not_a_backend(self) -> None:
        class Locator:
            def locate(self, message_id: int) -> int:
                return message_id

        assert isinstance(Locator(), MessageLocator)
        assert not isinstance(Locator(), MessageBackend)


# ---------------------------------------------------------------------------
# FileBackend
# ---------------------------------------------------------------------------


class TestFileBackend:
    def test_locate_maps_id_to_txt_file(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        assert backend.locate(40) == tmp_path / "40.txt"

    def test_locate_is_injective(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        locations = {backend.locate(i) for i in range(1000)}
        assert len(locations) == 1000

    def test_locate_custom_suffix(self, tmp_path) -> None:
        backend = FileBackend(tmp_path, suffix=".msg")
        assert backend.locate(1) == tmp_path / "1.msg"

    @pytest.mark.asyncio
    async def test_write_then_read(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        path = backend.locate(40)
        await backend.write(path, "hello")
        assert path.read_text(encoding="utf-8") == "hello"
        assert await backend.read(path) == "hello"

    @pytest.mark.asyncio
    async def test_write_replaces_content(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        path = backend.locate(1)
        await backend.write(path, "a much longer first payload")
        await backend.write(path, "short")
        assert await backend.read(path) == "short"

    @pytest.mark.asyncio
    async def test_write_leaves_no_temp_files(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        await backend.write(backend.locate(1), "x")
        await backend.write(backend.locate(1), "y")
        assert sorted(os.listdir(tmp_path)) == ["1.txt"]

    @pytest.mark.asyncio
    async def test_failed_replace_keeps_old_payload(self, tmp_path, monkeypatch) -> None:
        backend = FileBackend(tmp_path)
        path = backend.locate(1)
        await backend.write(path, "old payload")

        def failing_replace(src, dst):
            raise OSError("rename refused")

        monkeypatch.setattr(os, "replace", failing_replace)
        with pytest.raises(BackendError, match="rename refused"):
            await backend.write(path, "new payload")
        monkeypatch.undo()

        assert await backend.read(path) == "old payload"
        assert sorted(os.listdir(tmp_path)) == ["1.txt"]

    @pytest.mark.asyncio
    async def test_failed_first_write_leaves_nothing_behind(self, tmp_path, monkeypatch) -> None:
        backend = FileBackend(tmp_path)
        path = backend.locate(2)

        def failing_fsync(fd):
            raise OSError("device error")

        monkeypatch.setattr(os, "fsync", failing_fsync)
        with pytest.raises(BackendError, match="device error"):
            await backend.write(path, "never lands")
        monkeypatch.undo()

        assert not path.exists()
        assert os.listdir(tmp_path) == []

    @pytest.mark.asyncio
    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    async def test_new_file_gets_umask_mode(self, tmp_path) -> None:
        umask = os.umask(0)
        os.umask(umask)
        backend = FileBackend(tmp_path)
        path = backend.locate(7)
        await backend.write(path, "x")
        assert stat.S_IMODE(path.stat().st_mode) == 0o666 & ~umask

    @pytest.mark.asyncio
    @pytest.mark.skipif(os.name == "nt", reason="POSIX permission bits")
    async def test_overwrite_keeps_existing_mode(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        path = backend.locate(8)
        await backend.write(path, "first")
        os.chmod(path, 0o640)
        await backend.write(path, "second")
        assert stat.S_IMODE(path.stat().st_mode) == 0o640
        assert await backend.read(path) == "second"

    @pytest.mark.asyncio
    async def test_payload_kept_verbatim(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        path = backend.locate(2)
        payload = "line one\r\nline two\nünïcødé"
        await backend.write(path, payload)
        assert await backend.read(path) == payload

    @pytest.mark.asyncio
    async def test_empty_payload(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        path = backend.locate(3)
        await backend.write(path, "")
        assert await backend.read(path) == ""

    @pytest.mark.asyncio
    async def test_read_missing_raises_not_found(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        path = backend.locate(41)
        with pytest.raises(MessageNotFoundError) as exc_info:
            await backend.read(path)
        assert exc_info.value.location == path

    @pytest.mark.asyncio
    async def test_write_into_missing_directory_raises_backend_error(self, tmp_path) -> None:
        backend = FileBackend(tmp_path / "gone")
        with pytest.raises(BackendError):
            await backend.write(backend.locate(1), "x")

    @pytest.mark.asyncio
    async def test_read_directory_raises_backend_error(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        (tmp_path / "5.txt").mkdir()
        with pytest.raises(BackendError):
            await backend.read(backend.locate(5))

    @pytest.mark.asyncio
    async def test_undecodable_content_raises_backend_error(self, tmp_path) -> None:
        backend = FileBackend(tmp_path)
        Path(backend.locate(6)).write_bytes(b"\xff\xfe\xfa")
        with pytest.raises(BackendError):
            await backend.read(backend.locate(6))


# ---------------------------------------------------------------------------
# SqliteBackend
# ---------------------------------------------------------------------------


class TestSqliteBackend:
    def test_locate_is_row_key(self, tmp_path) -> None:
        backend = SqliteBackend(tmp_path / "m.db")
        assert backend.locate(40) == 40

    def test_locate_accepts_largest_row_key(self, tmp_path) -> None:
        backend = SqliteBackend(tmp_path / "m.db")
        assert backend.locate(2**63 - 1) == 2**63 - 1

    def test_locate_rejects_id_beyond_row_key(self, tmp_path) -> None:
        backend = SqliteBackend(tmp_path / "m.db")
        with pytest.raises(InvalidMessageIdError, match="row key limit"):
            backend.locate(2**63)

    def test_for_config_places_db_in_working_directory(self, tmp_path) -> None:
        backend = SqliteBackend.for_config(StoreConfig(working_directory=tmp_path))
        assert backend.db_path == tmp_path / "messages.db"

    @pytest.mark.asyncio
    async def test_write_then_read(self, tmp_path) -> None:
        backend = SqliteBackend(tmp_path / "m.db")
        await backend.write(40, "hello")
        assert await backend.read(40) == "hello"

    @pytest.mark.asyncio
    async def test_upsert_overwrites(self, tmp_path) -> None:
        backend = SqliteBackend(tmp_path / "m.db")
        await backend.write(1, "m1")
        await backend.write(1, "m2")
        assert await backend.read(1) == "m2"

    @pytest.mark.asyncio
    async def test_empty_payload(self, tmp_path) -> None:
        backend = SqliteBackend(tmp_path / "m.db")
        await backend.write(2, "")
        assert await backend.read(2) == ""

    @pytest.mark.asyncio
    async def test_read_missing_raises_not_found(self, tmp_path) -> None:
        backend = SqliteBackend(tmp_path / "m.db")
        with pytest.raises(MessageNotFoundError):
            await backend.read(41)

    @pytest.mark.asyncio
    async def test_persists_across_instances(self, tmp_path) -> None:
        await SqliteBackend(tmp_path / "m.db").write(7, "durable")
        assert await SqliteBackend(tmp_path / "m.db").read(7) == "durable"

    @pytest.mark.asyncio
    async def test_unopenable_database_raises_backend_error(self, tmp_path) -> None:
        backend = SqliteBackend(tmp_path / "missing-dir" / "m.db")
        with pytest.raises(BackendError):
            await backend.write(1, "x")


# ---------------------------------------------------------------------------
# InMemoryBackend
# ---------------------------------------------------------------------------


class TestInMemoryBackend:
    @pytest.mark.asyncio
    async def test_write_then_read(self) -> None:
        backend = InMemoryBackend()
        await backend.write(backend.locate(1), "one")
        assert await backend.read(1) == "one"
        assert len(backend) == 1

    @pytest.mark.asyncio
    async def test_read_missing_raises_not_found(self) -> None:
        backend = InMemoryBackend()
        with pytest.raises(MessageNotFoundError):
            await backend.read(1)
