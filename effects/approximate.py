"""
Pixelmanip -- Triangle Approximation
Rebuilds an image from randomly seeded, color-matched triangles.

Each iteration picks a random seed pixel, finds the two cardinal
directions whose neighbours are closest in color, walks outward along
both until the color drifts past the current strength, and paints the
resulting line or right triangle with the seed's color. The fill only
covers pixels whose source color is close to the seed, so triangles
come out porous. Strength tightens as iterations accumulate, moving
from broad strokes to detail.
"""

import logging
from typing import Callable, NamedTuple, Optional

import numpy as np

from core.raster import check_pair, WHITE
from effects.geometry import (
    Direction,
    SENTINEL_GRADIENT,
    TrianglePoint,
    color_distance,
    is_close,
    pick_two_smallest,
    strength_for_iteration,
)

logger = logging.getLogger(__name__)

MAX_ITERATIONS = 10000


class Stroke(NamedTuple):
    """What a single iteration drew."""
    seed: TrianglePoint
    first: Direction
    second: Direction
    first_vertex: TrianglePoint
    second_vertex: TrianglePoint


class TriangleApproximator:
    """Stateful approximation of `source` into `dest`.

    The source is never written. `dest` is filled white on construction and
    then painted one stroke per iteration.

    Args:
        source: (H, W, 3) uint8 BGR raster to approximate.
        dest: Destination raster of the same shape.
        rng: numpy Generator used to pick seed pixels.
        seed: Seed for a fresh Generator when `rng` is not given.
        iterations: Iteration limit.
    """

    def __init__(self, source: np.ndarray, dest: np.ndarray,
                 rng: Optional[np.random.Generator] = None,
                 seed: Optional[int] = None,
                 iterations: int = MAX_ITERATIONS):
        check_pair(source, dest)
        self.source = source
        self.dest = dest
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.iterations = max(0, int(iterations))
        self.height, self.width = source.shape[:2]
        self._pixels = source.astype(np.float64)
        self.iteration = 0
        self.cancelled = False
        self.reset()

    def reset(self) -> None:
        """Blank the canvas to white and restart the iteration count."""
        self.dest[:, :] = WHITE
        self.iteration = 0
        self.cancelled = False

    @property
    def strength(self) -> int:
        return strength_for_iteration(self.iteration)

    @property
    def done(self) -> bool:
        return self.iteration >= self.iterations

    def run(self, on_progress: Optional[Callable[[np.ndarray], None]] = None,
            should_stop: Optional[Callable[[], bool]] = None) -> int:
        """Iterate until the limit or until `should_stop()` returns True.

        `on_progress(dest)` is called after every iteration. `should_stop` is
        polled once per iteration, after the progress hook. A cancelled run
        leaves `dest` exactly as far as it got.

        Returns:
            Number of iterations executed by this call.
        """
        executed = 0
        self.cancelled = False
        while not self.done:
            self.step()
            executed += 1
            if on_progress is not None:
                on_progress(self.dest)
            if self.done:
                break
            if should_stop is not None and should_stop():
                self.cancelled = True
                logger.info("Approximation cancelled at iteration %d", self.iteration)
                break
        return executed

    def step(self) -> Stroke:
        """Run one iteration and return what it drew."""
        strength = self.strength
        row = int(self.rng.integers(self.height))
        col = int(self.rng.integers(self.width))
        seed = TrianglePoint(row, col)
        seed_color = self.source[row, col].copy()

        first, second = pick_two_smallest(self.gradients(row, col))
        v1 = self.walk(row, col, first, strength)
        v2 = self.walk(row, col, second, strength)

        if second == first.opposite():
            self._draw_line(seed, first, v1, v2, seed_color)
        else:
            self._fill_triangle(seed, first, second, v1, v2, seed_color, strength)

        self.iteration += 1
        return Stroke(seed, first, second, v1, v2)

    def gradients(self, row: int, col: int) -> dict:
        """Color distance from (row, col) to its four neighbours.

        Directions too close to the edge get SENTINEL_GRADIENT so they only
        win when every other direction is excluded as well.
        """
        here = self._pixels[row, col]
        h, w = self.height, self.width
        return {
            Direction.UP: SENTINEL_GRADIENT if row - 2 < 0
            else color_distance(here, self._pixels[row - 1, col]),
            Direction.RIGHT: SENTINEL_GRADIENT if col + 2 > w
            else color_distance(here, self._pixels[row, col + 1]),
            Direction.DOWN: SENTINEL_GRADIENT if row + 2 > h
            else color_distance(here, self._pixels[row + 1, col]),
            Direction.LEFT: SENTINEL_GRADIENT if col - 2 < 0
            else color_distance(here, self._pixels[row, col - 1]),
        }

    def walk(self, row: int, col: int, direction: Direction, strength: float) -> TrianglePoint:
        """Walk away from (row, col) while pixels stay close to its color.

        Up and left stop at index 2, right and down at the second-to-last
        index. The result is the first pixel that is not close, else the
        last pixel visited, else the start when there is nowhere to go.
        """
        h, w = self.height, self.width
        if direction == Direction.UP:
            rows = np.arange(row - 1, 1, -1)
            cols = np.full(rows.shape, col)
        elif direction == Direction.DOWN:
            rows = np.arange(row + 1, h - 1)
            cols = np.full(rows.shape, col)
        elif direction == Direction.RIGHT:
            cols = np.arange(col + 1, w - 1)
            rows = np.full(cols.shape, row)
        else:
            cols = np.arange(col - 1, 1, -1)
            rows = np.full(cols.shape, row)

        if rows.size == 0:
            return TrianglePoint(row, col)

        close = is_close(self._pixels[rows, cols], self._pixels[row, col], strength)
        far = np.flatnonzero(~close)
        stop = int(far[0]) if far.size else rows.size - 1
        return TrianglePoint(int(rows[stop]), int(cols[stop])).clamped(h, w)

    def _draw_line(self, seed, first, v1, v2, color) -> None:
        # Solid segment, no closeness test
        if first.vertical:
            top, bottom = sorted((v1.row, v2.row))
            self.dest[top:bottom + 1, seed.col] = color
        else:
            left, right = sorted((v1.col, v2.col))
            self.dest[seed.row, left:right + 1] = color

    def _fill_triangle(self, seed, first, second, v1, v2, color, strength) -> None:
        pair = {first, second}
        # The vertical vertex shares the seed's column, so its column offset
        # is 0 and the other vertex supplies the extent (and vice versa).
        horz = abs(v2.col - seed.col) or abs(v1.col - seed.col)
        vert = abs(v2.row - seed.row) or abs(v1.row - seed.row)
        if horz == 0:
            horz = 1
        shrink = vert // horz

        row_step = -1 if Direction.UP in pair else 1
        col_step = 1 if Direction.RIGHT in pair else -1

        ks = np.arange(vert + 1)
        js = np.arange(horz + 1)
        rows = seed.row + row_step * ks
        cols = seed.col + col_step * js

        row_ok = (rows >= 0) & (rows < self.height)
        col_ok = (cols >= 0) & (cols < self.width)
        rows, ks = rows[row_ok], ks[row_ok]
        cols, js = cols[col_ok], js[col_ok]
        if rows.size == 0 or cols.size == 0:
            return

        # Each scanline away from the seed is `shrink` pixels shorter
        extent = horz - ks * shrink
        inside = js[np.newaxis, :] <= extent[:, np.newaxis]
        close = is_close(self._pixels[np.ix_(rows, cols)], self._pixels[seed.row, seed.col], strength)

        rr, cc = np.nonzero(inside & close)
        self.dest[rows[rr], cols[cc]] = color


def approximate(source: np.ndarray, dest: np.ndarray,
                seed: Optional[int] = None,
                rng: Optional[np.random.Generator] = None,
                on_progress: Optional[Callable[[np.ndarray], None]] = None,
                should_stop: Optional[Callable[[], bool]] = None,
                iterations: int = MAX_ITERATIONS) -> np.ndarray:
    """Approximate `source` with color-matched triangles into `dest`.

    Args:
        source: (H, W, 3) uint8 BGR array.
        dest: Destination of the same shape; overwritten.
        seed: Seed for seed-pixel selection (ignored when `rng` is given).
        rng: numpy Generator for seed-pixel selection.
        on_progress: Called with `dest` after every iteration.
        should_stop: Polled once per iteration; True cancels.
        iterations: Iteration limit (10000 by default).

    Returns:
        `dest`, complete or as far as it got before cancellation.
    """
    approximator = TriangleApproximator(source, dest, rng=rng, seed=seed, iterations=iterations)
    logger.debug("Approximating %dx%d raster, %d iterations",
                 approximator.width, approximator.height, approximator.iterations)
    executed = approximator.run(on_progress=on_progress, should_stop=should_stop)
    logger.debug("Approximation finished after %d iterations", executed)
    return dest
