"""Cursor travel from successive absolute positions."""

import math


class DistanceTracker:
    """Turns absolute cursor positions into incremental distance.

    The previous position starts at the origin, so the first move measures
    from (0, 0) to wherever the cursor actually is.
    """

    def __init__(self):
        self.position: tuple[float, float] = (0.0, 0.0)

    def update(self, x: float, y: float) -> float:
        distance = math.dist(self.position, (x, y))
        self.position = (float(x), float(y))
        return distance
