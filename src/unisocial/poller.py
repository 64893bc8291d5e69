"""Fixed-interval polling used to keep comments and chat fresh

The backend has no push channel, so views refresh by refetching on a timer.
A ``Poller`` owns that timer: fetch, hand the result over, sleep, repeat.
"""

import asyncio
import inspect
import logging
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class Poller:
    """Call ``fetch`` every ``interval`` seconds until stopped

    Synchronous fetch functions (such as client methods, which block on
    HTTP) run in a worker thread so the event loop stays responsive.
    Coroutine functions are awaited directly.

    A tick that raises is logged and reported to ``on_error``; polling goes
    on with the next tick.

    Example:
        >>> poller = Poller(thread.load, interval=5, on_update=render)
        >>> asyncio.run(poller.run())
    """

    def __init__(
        self,
        fetch: Callable[[], Any],
        interval: float,
        on_update: Optional[Callable[[Any], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
    ):
        if interval < 0:
            raise ValueError("Polling interval must not be negative")
        self.fetch = fetch
        self.interval = interval
        self.on_update = on_update
        self.on_error = on_error
        self.ticks = 0
        self.failures = 0
        self._stop_event: Optional[asyncio.Event] = None
        self._stop_requested = False

    @property
    def stopped(self) -> bool:
        return self._stop_requested

    def stop(self) -> None:
        """Ask the loop to finish; a pending sleep ends immediately"""
        self._stop_requested = True
        if self._stop_event is not None:
            self._stop_event.set()

    async def tick(self) -> Any:
        """Run one fetch and deliver its result

        Errors from ``fetch`` and from ``on_update`` are both counted as a
        failed tick.
        """
        self.ticks += 1
        try:
            if inspect.iscoroutinefunction(self.fetch):
                result = await self.fetch()
            else:
                result = await asyncio.to_thread(self.fetch)
                if inspect.isawaitable(result):
                    result = await result
            if self.on_update is not None:
                self.on_update(result)
        except Exception as e:
            self.failures += 1
            logger.warning(f"Poll tick {self.ticks} failed: {e}")
            if self.on_error is not None:
                self.on_error(e)
            return None

        return result

    async def run(self, max_ticks: Optional[int] = None) -> None:
        """Poll until stop() is called or ``max_ticks`` ticks have run"""
        self._stop_event = asyncio.Event()
        if self._stop_requested:
            self._stop_event.set()
        logger.debug(f"Polling every {self.interval}s")

        completed = 0
        while not self._stop_requested:
            await self.tick()
            completed += 1
            if max_ticks is not None and completed >= max_ticks:
                break

            try:
                await asyncio.wait_for(self._stop_event.wait(), timeout=self.interval)
            except asyncio.TimeoutError:
                pass

        logger.debug(f"Polling finished after {completed} tick(s), {self.failures} failed")
