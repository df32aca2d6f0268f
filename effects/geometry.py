"""
Pixelmanip -- Shared Geometry & Color Distance Helpers
Color distance, closeness tests, the strength schedule, and the
cardinal directions used by the triangle approximator.
"""

from enum import IntEnum
from typing import NamedTuple

import numpy as np

# Largest possible distance in BGR space is sqrt(3 * 255^2) ~= 441.67
SENTINEL_GRADIENT = 442.0

# (iteration upper bound, strength); the last bound is open
STRENGTH_SCHEDULE = (
    (2500, 90),
    (5000, 60),
    (6000, 45),
    (8000, 30),
    (None, 20),
)


class Direction(IntEnum):
    """Cardinal directions. Declaration order is the tie-break order."""
    UP = 1
    RIGHT = 2
    DOWN = 3
    LEFT = 4

    @property
    def vertical(self) -> bool:
        return self in (Direction.UP, Direction.DOWN)

    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class TrianglePoint(NamedTuple):
    row: int
    col: int

    def clamped(self, height: int, width: int) -> "TrianglePoint":
        return TrianglePoint(
            max(0, min(height - 1, int(self.row))),
            max(0, min(width - 1, int(self.col))),
        )


def color_distance(a, b) -> np.ndarray | float:
    """Euclidean distance between BGR pixels.

    Either argument may be a single pixel or an (..., 3) array; the
    result broadcasts like numpy arithmetic.
    """
    diff = np.asarray(a, dtype=np.float64) - np.asarray(b, dtype=np.float64)
    dist = np.sqrt(np.sum(diff * diff, axis=-1))
    if np.ndim(dist) == 0:
        return float(dist)
    return dist


def is_close(a, b, strength: float):
    """True where the distance between pixels is strictly below `strength`."""
    return color_distance(a, b) < strength


def strength_for_iteration(iteration: int) -> int:
    """Closeness threshold for a given approximation iteration."""
    for bound, strength in STRENGTH_SCHEDULE:
        if bound is None or iteration < bound:
            return strength
    return STRENGTH_SCHEDULE[-1][1]


def pick_two_smallest(gradients: dict) -> tuple[Direction, Direction]:
    """Return the direction with the smallest gradient and the runner-up.

    Ties go to the first direction in UP, RIGHT, DOWN, LEFT order, for both
    picks. The runner-up search excludes the winner.
    """
    order = sorted(Direction)
    smallest = min(order, key=lambda d: gradients[d])
    rest = [d for d in order if d != smallest]
    second = min(rest, key=lambda d: gradients[d])
    return smallest, second
