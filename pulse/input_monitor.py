"""Keyboard/mouse input listeners using pynput. Counts only, never content.

Each listener owns its own pynput hook thread, so a hook that fails to
register only takes down that one source.
"""

import logging

from pulse.counters import ClickCounters, KeypressCounter, TravelDistance
from pulse.distance import DistanceTracker

log = logging.getLogger("pulse.input")

STOP_TIMEOUT_S = 2.0


class InputListener:
    """Base lifecycle around a single pynput listener thread."""

    name = "input"

    def __init__(self):
        self._hook = None
        self.failed = False

    def _create_hook(self):
        raise NotImplementedError

    @property
    def running(self) -> bool:
        return self._hook is not None and self._hook.is_alive()

    def start(self) -> bool:
        """Register the hook. Returns False if registration failed."""
        if self._hook is not None:
            return True
        try:
            hook = self._create_hook()
            hook.daemon = True
            hook.start()
        except Exception as e:
            self.failed = True
            log.error(f"[{self.name}] listener registration failed: {e}")
            return False
        self._hook = hook
        self.failed = False
        log.info(f"[{self.name}] listener started")
        return True

    def stop(self):
        hook, self._hook = self._hook, None
        if hook is None:
            return
        hook.stop()
        hook.join(STOP_TIMEOUT_S)
        log.info(f"[{self.name}] listener stopped")


class KeyboardListener(InputListener):
    name = "keyboard"

    def __init__(self, counter: KeypressCounter):
        super().__init__()
        self.counter = counter

    def _create_hook(self):
        from pynput import keyboard

        return keyboard.Listener(on_press=self._on_press)

    def _on_press(self, key):
        self.counter.keypress.add(1)


class MouseButtonListener(InputListener):
    name = "mouse-button"

    def __init__(self, clicks: ClickCounters):
        super().__init__()
        self.clicks = clicks

    def _create_hook(self):
        from pynput import mouse

        return mouse.Listener(on_click=self._on_click)

    def _on_click(self, x, y, button, pressed):
        if not pressed:
            return
        name = getattr(button, "name", None)
        if name == "left":
            self.clicks.left.add(1)
        elif name == "right":
            self.clicks.right.add(1)


class MouseMoveListener(InputListener):
    name = "mouse-move"

    def __init__(self, travel: TravelDistance, tracker: DistanceTracker | None = None):
        super().__init__()
        self.travel = travel
        # Position state belongs to this listener's thread only
        self.tracker = tracker or DistanceTracker()

    def _create_hook(self):
        from pynput import mouse

        return mouse.Listener(on_move=self._on_move)

    def _on_move(self, x, y):
        self.travel.pixels.add(self.tracker.update(x, y))
