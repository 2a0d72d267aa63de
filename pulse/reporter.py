"""Periodic reporters: snapshot counters, send them, discharge on success."""

import asyncio
import contextlib
import logging

from pulse.client import ReportClient, ReportError
from pulse.counters import ClickCounters, KeypressCounter, TravelDistance

log = logging.getLogger("pulse.reporter")


class Reporter:
    """One snapshot -> transmit -> reset/hold cycle per tick.

    Counters are only discharged after the endpoint accepted the report; on
    failure they keep accumulating and the next tick sends the larger total.
    """

    name = "reporter"

    def __init__(self, client: ReportClient, url: str, interval_s: float = 10.0):
        if not interval_s > 0:
            raise ValueError(f"interval_s must be positive, got {interval_s}")
        self.client = client
        self.url = url
        self.interval_s = interval_s
        self._task: asyncio.Task | None = None

    def snapshot(self) -> dict:
        raise NotImplementedError

    def payload(self, snapshot: dict) -> dict:
        raise NotImplementedError

    def commit(self, snapshot: dict):
        raise NotImplementedError

    async def tick(self) -> bool:
        """Run one report cycle. Returns True if the report was delivered."""
        snap = self.snapshot()
        try:
            await self.client.put(self.url, self.payload(snap))
        except ReportError as e:
            log.error(f"[{self.name}] report failed, holding counts: {e}")
            return False
        self.commit(snap)
        log.debug(f"[{self.name}] reported {snap}")
        return True

    async def run(self):
        """Tick every interval until cancelled. The first tick is one interval in."""
        loop = asyncio.get_running_loop()
        next_at = loop.time() + self.interval_s
        while True:
            await asyncio.sleep(max(0.0, next_at - loop.time()))
            try:
                await self.tick()
            except Exception as e:
                log.error(f"[{self.name}] tick error: {e}")

            next_at += self.interval_s
            now = loop.time()
            if next_at <= now:
                # Skip ticks missed while the last one ran long
                missed = int((now - next_at) // self.interval_s) + 1
                next_at += missed * self.interval_s

    def start(self):
        """Start the reporter as a background task."""
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run(), name=f"pulse-{self.name}")
            log.info(f"[{self.name}] started, every {self.interval_s:g}s")

    async def stop(self):
        """Cancel the reporter task and wait for it to finish."""
        task, self._task = self._task, None
        if task and not task.done():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
            log.info(f"[{self.name}] stopped")


class KeypressReporter(Reporter):
    name = "keypress"

    def __init__(self, counter: KeypressCounter, client: ReportClient, url: str,
                 interval_s: float = 10.0):
        super().__init__(client, url, interval_s)
        self.counter = counter

    def snapshot(self) -> dict:
        return {"keypress": self.counter.keypress.get()}

    def payload(self, snapshot: dict) -> dict:
        return {"keypress": snapshot["keypress"]}

    def commit(self, snapshot: dict):
        self.counter.keypress.discharge(snapshot["keypress"])


class MouseReporter(Reporter):
    name = "mouse"

    def __init__(self, clicks: ClickCounters, travel: TravelDistance,
                 client: ReportClient, url: str, interval_s: float = 10.0):
        super().__init__(client, url, interval_s)
        self.clicks = clicks
        self.travel = travel

    def snapshot(self) -> dict:
        return {
            "right": self.clicks.right.get(),
            "left": self.clicks.left.get(),
            "pixels": self.travel.pixels.get(),
        }

    def payload(self, snapshot: dict) -> dict:
        return {
            "rightClick": snapshot["right"],
            "leftClick": snapshot["left"],
            "mouseTravel": TravelDistance.meters(snapshot["pixels"]),
        }

    def commit(self, snapshot: dict):
        self.clicks.right.discharge(snapshot["right"])
        self.clicks.left.discharge(snapshot["left"])
        self.travel.pixels.discharge(snapshot["pixels"])
