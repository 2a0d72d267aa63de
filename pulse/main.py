"""inputpulse daemon: count keyboard/mouse activity and report it every few seconds."""

import asyncio
import logging
import signal
from dataclasses import dataclass

from pulse.client import ReportClient
from pulse.config import Config, config
from pulse.counters import ClickCounters, KeypressCounter, TravelDistance
from pulse.input_monitor import (
    InputListener,
    KeyboardListener,
    MouseButtonListener,
    MouseMoveListener,
)
from pulse.reporter import KeypressReporter, MouseReporter, Reporter

log = logging.getLogger("pulse.main")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO"):
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)


@dataclass
class App:
    cfg: Config
    keypress: KeypressCounter
    clicks: ClickCounters
    travel: TravelDistance
    client: ReportClient
    listeners: list[InputListener]
    reporters: list[Reporter]

    def start(self):
        if not self.cfg.endpoint.keypress_url or not self.cfg.endpoint.mouse_url:
            log.warning("No endpoint URL configured (PULSE_ENDPOINT_URL); reports will fail")
        if not self.cfg.endpoint.password:
            log.warning("PULSE_PASSWORD is empty")

        started = [listener.start() for listener in self.listeners]
        if not any(started):
            log.error("No input listener could be registered; reporting zeros only")

        for reporter in self.reporters:
            reporter.start()

    async def shutdown(self):
        try:
            for reporter in self.reporters:
                await reporter.stop()

            if self.cfg.reporter.flush_on_exit:
                # Last chance for the current window
                results = await asyncio.gather(
                    *(r.tick() for r in self.reporters), return_exceptions=True
                )
                for reporter, result in zip(self.reporters, results):
                    if isinstance(result, Exception):
                        log.error(f"[{reporter.name}] final report failed: {result}")

            for listener in self.listeners:
                try:
                    listener.stop()
                except Exception as e:
                    log.error(f"[{listener.name}] listener stop failed: {e}")
        finally:
            await self.client.aclose()


def build_app(cfg: Config, client: ReportClient | None = None) -> App:
    """Create the counters once and hand them to every listener and reporter."""
    keypress = KeypressCounter()
    clicks = ClickCounters()
    travel = TravelDistance()

    if client is None:
        client = ReportClient(cfg.endpoint.password, timeout=cfg.endpoint.timeout_s)

    interval = cfg.reporter.interval_s
    return App(
        cfg=cfg,
        keypress=keypress,
        clicks=clicks,
        travel=travel,
        client=client,
        listeners=[
            KeyboardListener(keypress),
            MouseButtonListener(clicks),
            MouseMoveListener(travel),
        ],
        reporters=[
            KeypressReporter(keypress, client, cfg.endpoint.keypress_url, interval),
            MouseReporter(clicks, travel, client, cfg.endpoint.mouse_url, interval),
        ],
    )


async def run_pulse(cfg: Config, stop: asyncio.Event):
    app = build_app(cfg)
    app.start()
    log.info(f"inputpulse running: reports every {cfg.reporter.interval_s:g}s")
    try:
        await stop.wait()
    finally:
        log.info("inputpulse shutting down...")
        await app.shutdown()
        log.info("inputpulse stopped.")


def main():
    configure_logging(config.log_level)
    loop = asyncio.new_event_loop()
    stop = asyncio.Event()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, stop.set)
    try:
        loop.run_until_complete(run_pulse(config, stop))
    finally:
        loop.close()


if __name__ == "__main__":
    main()
