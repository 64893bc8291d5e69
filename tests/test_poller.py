"""Tests for the fixed-interval Poller"""

import asyncio
import functools

import pytest

from unisocial import Poller


class TestPoller:
    @pytest.mark.asyncio
    async def test_runs_max_ticks(self):
        calls = []
        updates = []

        def fetch():
            calls.append(1)
            return len(calls)

        poller = Poller(fetch, interval=0, on_update=updates.append)
        await poller.run(max_ticks=3)

        assert len(calls) == 3
        assert updates == [1, 2, 3]
        assert poller.ticks == 3

    @pytest.mark.asyncio
    async def test_awaits_coroutine_fetch(self):
        updates = []

        async def fetch():
            return "fresh"

        poller = Poller(fetch, interval=0, on_update=updates.append)
        await poller.run(max_ticks=2)

        assert updates == ["fresh", "fresh"]

    @pytest.mark.asyncio
    async def test_failure_reported_and_polling_continues(self):
        errors = []
        updates = []
        results = iter([RuntimeError("backend down"), "ok"])

        def fetch():
            result = next(results)
            if isinstance(result, Exception):
                raise result
            return result

        poller = Poller(fetch, interval=0, on_update=updates.append, on_error=errors.append)
        await poller.run(max_ticks=2)

        assert [str(e) for e in errors] == ["backend down"]
        assert updates == ["ok"]
        assert poller.failures == 1

    @pytest.mark.asyncio
    async def test_stop_interrupts_sleep(self):
        """stop() ends a long sleep right away"""
        poller = Poller(lambda: None, interval=60)

        async def stop_soon():
            await asyncio.sleep(0.05)
            poller.stop()

        await asyncio.wait_for(asyncio.gather(poller.run(), stop_soon()), timeout=5)

        assert poller.stopped
        assert poller.ticks == 1

    @pytest.mark.asyncio
    async def test_stop_from_callback(self):
        seen = []

        def on_update(value):
            seen.append(value)
            if len(seen) == 2:
                poller.stop()

        poller = Poller(lambda: "tick", interval=0, on_update=on_update)
        await asyncio.wait_for(poller.run(), timeout=5)

        assert seen == ["tick", "tick"]

    @pytest.mark.asyncio
    async def test_stopped_before_run(self):
        poller = Poller(lambda: "tick", interval=0)
        poller.stop()

        await poller.run()

        assert poller.ticks == 0

    def test_negative_interval_rejected(self):
        with pytest.raises(ValueError):
            Poller(lambda: None, interval=-1)

    @pytest.mark.asyncio
    async def test_update_error_reported_and_polling_continues(self):
        """A render callback that raises does not end the loop"""
        errors = []
        rendered = []

        def on_update(value):
            if not rendered and not errors:
                raise RuntimeError("render failed")
            rendered.append(value)

        poller = Poller(lambda: "x", interval=0, on_update=on_update, on_error=errors.append)
        await poller.run(max_ticks=3)

        assert poller.ticks == 3
        assert [str(e) for e in errors] == ["render failed"]
        assert rendered == ["x", "x"]
        assert poller.failures == 1

    @pytest.mark.asyncio
    async def test_awaits_coroutine_from_lambda(self):
        updates = []

        async def fetch_room(room_id):
            return f"room {room_id}"

        poller = Poller(lambda: fetch_room(3), interval=0, on_update=updates.append)
        await poller.run(max_ticks=1)

        assert updates == ["room 3"]

    @pytest.mark.asyncio
    async def test_awaits_coroutine_from_partial(self):
        updates = []

        async def fetch_room(room_id):
            return f"room {room_id}"

        poller = Poller(functools.partial(fetch_room, 4), interval=0, on_update=updates.append)
        await poller.run(max_ticks=1)

        assert updates == ["room 4"]
