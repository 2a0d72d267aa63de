"""Shared activity counters. Written by listener threads, drained by reporters."""

import threading

PIXEL_M_CONVERSION = 0.0002645833  # meters per pixel at 96 DPI


class Counter:
    """Thread-safe integer accumulator."""

    _zero = 0

    def __init__(self):
        self._value = self._zero
        self._lock = threading.Lock()

    def add(self, delta=1):
        with self._lock:
            self._value += delta

    def get(self):
        with self._lock:
            return self._value

    def read_and_reset(self):
        """Return the current value and set the counter back to zero."""
        with self._lock:
            value = self._value
            self._value = self._zero
            return value

    def discharge(self, amount):
        """Subtract a snapshot that has been reported.

        Increments that arrived after the snapshot was taken stay in the
        counter and go out with the next report.
        """
        with self._lock:
            self._value = max(self._zero, self._value - amount)


class FloatCounter(Counter):
    _zero = 0.0

    def add(self, delta=1.0):
        super().add(float(delta))


class KeypressCounter:
    def __init__(self):
        self.keypress = Counter()


class ClickCounters:
    def __init__(self):
        self.left = Counter()
        self.right = Counter()


class TravelDistance:
    """Cumulative cursor travel in pixels."""

    def __init__(self):
        self.pixels = FloatCounter()

    @staticmethod
    def meters(pixels: float) -> float:
        return pixels * PIXEL_M_CONVERSION
