"""Tests for KeyedLock — per-key locks that disappear when idle."""

import asyncio

import pytest

from messagestore.locks import KeyedLock


class TestKeyedLock:
    @pytest.mark.asyncio
    async def test_entry_removed_after_release(self) -> None:
        locks = KeyedLock()
        async with locks.hold(1):
            assert len(locks) == 1
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_entry_removed_when_body_raises(self) -> None:
        locks = KeyedLock()
        with pytest.raises(RuntimeError):
            async with locks.hold(1):
                raise RuntimeError("boom")
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_entry_kept_while_waiters_remain(self) -> None:
        locks = KeyedLock()
        release = asyncio.Event()
        order: list[str] = []

        async def first() -> None:
            async with locks.hold("k"):
                order.append("first")
                await release.wait()

        async def second() -> None:
            async with locks.hold("k"):
                order.append("second")

        task_a = asyncio.create_task(first())
        await asyncio.sleep(0)
        task_b = asyncio.create_task(second())
        await asyncio.sleep(0)

        assert len(locks) == 1
        assert order == ["first"]
        release.set()
        await asyncio.gather(task_a, task_b)
        assert order == ["first", "second"]
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_same_key_is_mutually_exclusive(self) -> None:
        locks = KeyedLock()
        inside = 0
        peak = 0

        async def worker() -> None:
            nonlocal inside, peak
            async with locks.hold(7):
                inside += 1
                peak = max(peak, inside)
                await asyncio.sleep(0.001)
                inside -= 1

        await asyncio.gather(*(worker() for _ in range(10)))
        assert peak == 1
        assert len(locks) == 0

    @pytest.mark.asyncio
    async def test_distinct_keys_do_not_block(self) -> None:
        locks = KeyedLock()
        async with locks.hold(1):
            await asyncio.wait_for(self._hold_briefly(locks, 2), timeout=1)
            assert len(locks) == 1

    @staticmethod
    async def _hold_briefly(locks: KeyedLock, key: int) -> None:
        async with locks.hold(key):
            assert len(locks) == 2
