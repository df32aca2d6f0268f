"""
Pixelmanip -- Triangle Approximation Tests
Strength schedule, direction selection, walks, rendering, determinism,
termination and cancellation.

Run with: pytest tests/test_approximate.py -v
"""

import numpy as np
import pytest

from conftest import ScriptedRng, _solid
from core.raster import RasterError
from effects.approximate import TriangleApproximator, approximate, MAX_ITERATIONS
from effects.geometry import (
    Direction, SENTINEL_GRADIENT, TrianglePoint,
    color_distance, is_close, pick_two_smallest, strength_for_iteration,
)

GRAY = (100, 100, 100)
WHITE = (255, 255, 255)


@pytest.fixture
def small_frame():
    return np.random.RandomState(7).randint(0, 256, (12, 15, 3), dtype=np.uint8)


# ---------------------------------------------------------------------------
# HELPERS
# ---------------------------------------------------------------------------

class TestGeometry:

    @pytest.mark.parametrize("iteration,strength", [
        (0, 90), (2499, 90), (2500, 60), (4999, 60), (5000, 45),
        (5999, 45), (6000, 30), (7999, 30), (8000, 20), (9999, 20), (50000, 20),
    ])
    def test_strength_schedule(self, iteration, strength):
        assert strength_for_iteration(iteration) == strength

    def test_strength_non_increasing(self):
        values = [strength_for_iteration(i) for i in range(0, 10001, 50)]
        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_color_distance(self):
        assert color_distance((0, 0, 0), (255, 255, 255)) == pytest.approx(441.6729559)
        assert color_distance((1, 2, 3), (1, 2, 3)) == 0.0
        assert color_distance((0, 3, 0), (4, 0, 0)) == pytest.approx(5.0)
        assert color_distance((0, 0, 0), (255, 255, 255)) < SENTINEL_GRADIENT

    def test_is_close_is_strict(self):
        assert not is_close((0, 3, 0), (4, 0, 0), 5)
        assert is_close((0, 3, 0), (4, 0, 0), 5.01)

    def test_point_clamped(self):
        assert TrianglePoint(-3, 99).clamped(10, 20) == TrianglePoint(0, 19)
        assert TrianglePoint(4, 5).clamped(10, 20) == TrianglePoint(4, 5)

    def test_all_tied_picks_up_then_right(self):
        grads = {d: 7.0 for d in Direction}
        assert pick_two_smallest(grads) == (Direction.UP, Direction.RIGHT)

    def test_tie_for_second_uses_order(self):
        grads = {Direction.UP: 5, Direction.RIGHT: 1, Direction.DOWN: 1, Direction.LEFT: 3}
        assert pick_two_smallest(grads) == (Direction.RIGHT, Direction.DOWN)

    def test_smallest_excluded_from_second(self):
        grads = {Direction.UP: 1, Direction.RIGHT: 2, Direction.DOWN: 2, Direction.LEFT: 0}
        assert pick_two_smallest(grads) == (Direction.LEFT, Direction.UP)

    def test_up_tied_with_down_and_right(self):
        grads = {Direction.UP: 0, Direction.RIGHT: 4, Direction.DOWN: 4, Direction.LEFT: 9}
        assert pick_two_smallest(grads) == (Direction.UP, Direction.RIGHT)


# ---------------------------------------------------------------------------
# GRADIENTS & WALKS
# ---------------------------------------------------------------------------

class TestGradients:

    def test_sentinels_near_top_left(self, small_frame):
        approx = TriangleApproximator(small_frame, np.zeros_like(small_frame), seed=0)
        for row, col in [(0, 0), (1, 1)]:
            grads = approx.gradients(row, col)
            assert grads[Direction.UP] == SENTINEL_GRADIENT
            assert grads[Direction.LEFT] == SENTINEL_GRADIENT
            assert grads[Direction.RIGHT] < SENTINEL_GRADIENT
            assert grads[Direction.DOWN] < SENTINEL_GRADIENT

    def test_sentinels_at_bottom_right(self, small_frame):
        approx = TriangleApproximator(small_frame, np.zeros_like(small_frame), seed=0)
        grads = approx.gradients(11, 14)
        assert grads[Direction.DOWN] == SENTINEL_GRADIENT
        assert grads[Direction.RIGHT] == SENTINEL_GRADIENT
        # One step in from the far edges is still usable
        grads = approx.gradients(10, 13)
        assert all(g < SENTINEL_GRADIENT for g in grads.values())

    def test_gradient_is_neighbour_distance(self, small_frame):
        approx = TriangleApproximator(small_frame, np.zeros_like(small_frame), seed=0)
        grads = approx.gradients(5, 6)
        expected = color_distance(small_frame[5, 6], small_frame[4, 6])
        assert grads[Direction.UP] == pytest.approx(expected)
        expected = color_distance(small_frame[5, 6], small_frame[5, 5])
        assert grads[Direction.LEFT] == pytest.approx(expected)


class TestWalk:

    def _row_frame(self):
        src = _solid(1, 10, GRAY)
        src[0, 7] = (0, 0, 255)
        return src

    def test_stops_at_first_far_pixel(self):
        src = self._row_frame()
        approx = TriangleApproximator(src, np.zeros_like(src), seed=0)
        assert approx.walk(0, 3, Direction.RIGHT, 90) == TrianglePoint(0, 7)

    def test_runs_to_margin_when_all_close(self):
        src = _solid(1, 10, GRAY)
        approx = TriangleApproximator(src, np.zeros_like(src), seed=0)
        assert approx.walk(0, 3, Direction.RIGHT, 90) == TrianglePoint(0, 8)
        assert approx.walk(0, 6, Direction.LEFT, 90) == TrianglePoint(0, 2)

    def test_nowhere_to_go_returns_start(self):
        src = _solid(6, 6, GRAY)
        approx = TriangleApproximator(src, np.zeros_like(src), seed=0)
        assert approx.walk(2, 3, Direction.UP, 90) == TrianglePoint(2, 3)
        assert approx.walk(0, 3, Direction.UP, 90) == TrianglePoint(0, 3)
        assert approx.walk(5, 3, Direction.DOWN, 90) == TrianglePoint(5, 3)
        assert approx.walk(3, 5, Direction.RIGHT, 90) == TrianglePoint(3, 5)
        assert approx.walk(3, 1, Direction.LEFT, 90) == TrianglePoint(3, 1)

    def test_vertical_walks(self):
        src = _solid(10, 3, GRAY)
        src[1, 1] = (255, 0, 0)
        approx = TriangleApproximator(src, np.zeros_like(src), seed=0)
        # Row 1 is never visited going up, so the walk ends at row 2
        assert approx.walk(6, 1, Direction.UP, 90) == TrianglePoint(2, 1)
        assert approx.walk(3, 1, Direction.DOWN, 90) == TrianglePoint(8, 1)


# ---------------------------------------------------------------------------
# RENDERING
# ---------------------------------------------------------------------------

class TestRendering:

    def test_canvas_white_before_first_iteration(self, small_frame):
        dest = np.zeros_like(small_frame)
        approx = TriangleApproximator(small_frame, dest, seed=1)
        assert approx.iteration == 0
        assert (dest == 255).all()

    def test_vertical_line(self):
        src = _solid(10, 10, (255, 0, 0))
        src[:, 5] = (0, 0, 255)
        dest = np.zeros_like(src)
        approx = TriangleApproximator(src, dest, rng=ScriptedRng([5, 5]))
        stroke = approx.step()

        assert stroke.seed == TrianglePoint(5, 5)
        assert (stroke.first, stroke.second) == (Direction.UP, Direction.DOWN)
        assert stroke.first_vertex == TrianglePoint(2, 5)
        assert stroke.second_vertex == TrianglePoint(8, 5)

        expected = _solid(10, 10, WHITE)
        expected[2:9, 5] = (0, 0, 255)
        np.testing.assert_array_equal(dest, expected)

    def test_horizontal_line(self):
        src = _solid(9, 9, (0, 255, 0))
        src[4, :] = (10, 20, 30)
        dest = np.zeros_like(src)
        approx = TriangleApproximator(src, dest, rng=ScriptedRng([4, 4]))
        stroke = approx.step()

        assert (stroke.first, stroke.second) == (Direction.RIGHT, Direction.LEFT)
        expected = _solid(9, 9, WHITE)
        expected[4, 2:8] = (10, 20, 30)
        np.testing.assert_array_equal(dest, expected)

    def test_first_quadrant_triangle(self):
        src = _solid(10, 10, GRAY)
        dest = np.zeros_like(src)
        approx = TriangleApproximator(src, dest, rng=ScriptedRng([5, 5]))
        stroke = approx.step()

        assert (stroke.first, stroke.second) == (Direction.UP, Direction.RIGHT)
        assert stroke.first_vertex == TrianglePoint(2, 5)
        assert stroke.second_vertex == TrianglePoint(5, 8)

        expected = _solid(10, 10, WHITE)
        expected[5, 5:9] = GRAY
        expected[4, 5:8] = GRAY
        expected[3, 5:7] = GRAY
        expected[2, 5:6] = GRAY
        np.testing.assert_array_equal(dest, expected)

    def test_triangle_fill_is_porous(self):
        src = _solid(10, 10, GRAY)
        src[4, 6] = (0, 255, 255)
        dest = np.zeros_like(src)
        TriangleApproximator(src, dest, rng=ScriptedRng([5, 5])).step()
        assert tuple(dest[4, 6]) == WHITE
        assert tuple(dest[4, 7]) == GRAY

    def test_third_quadrant_triangle(self):
        """Up and right blocked by distinct colors: fill goes down and left."""
        src = _solid(10, 10, GRAY)
        src[:5, :] = (0, 0, 0)
        src[:, 6:] = (0, 0, 0)
        dest = np.zeros_like(src)
        stroke = TriangleApproximator(src, dest, rng=ScriptedRng([5, 5])).step()

        assert {stroke.first, stroke.second} == {Direction.DOWN, Direction.LEFT}
        assert stroke.first_vertex == TrianglePoint(8, 5)
        assert stroke.second_vertex == TrianglePoint(5, 2)
        # horizontal extent 3, vertical 3: rows 5..8 shrinking by one column each
        expected = _solid(10, 10, WHITE)
        expected[5, 2:6] = GRAY
        expected[6, 3:6] = GRAY
        expected[7, 4:6] = GRAY
        expected[8, 5:6] = GRAY
        np.testing.assert_array_equal(dest, expected)

    def test_second_quadrant_triangle(self):
        """Up and left blocked: fill goes right and down."""
        src = _solid(10, 10, GRAY)
        src[:5, :] = (0, 0, 0)
        src[:, :5] = (0, 0, 0)
        dest = np.zeros_like(src)
        stroke = TriangleApproximator(src, dest, rng=ScriptedRng([5, 5])).step()

        assert (stroke.first, stroke.second) == (Direction.RIGHT, Direction.DOWN)
        assert stroke.first_vertex == TrianglePoint(5, 8)
        assert stroke.second_vertex == TrianglePoint(8, 5)
        expected = _solid(10, 10, WHITE)
        expected[5, 5:9] = GRAY
        expected[6, 5:8] = GRAY
        expected[7, 5:7] = GRAY
        expected[8, 5:6] = GRAY
        np.testing.assert_array_equal(dest, expected)

    def test_fourth_quadrant_triangle(self):
        """Right and down blocked: fill goes up and left."""
        src = _solid(10, 10, GRAY)
        src[6:, :] = (0, 0, 0)
        src[:, 6:] = (0, 0, 0)
        dest = np.zeros_like(src)
        stroke = TriangleApproximator(src, dest, rng=ScriptedRng([5, 5])).step()

        assert (stroke.first, stroke.second) == (Direction.UP, Direction.LEFT)
        assert stroke.first_vertex == TrianglePoint(2, 5)
        assert stroke.second_vertex == TrianglePoint(5, 2)
        expected = _solid(10, 10, WHITE)
        expected[5, 2:6] = GRAY
        expected[4, 3:6] = GRAY
        expected[3, 4:6] = GRAY
        expected[2, 5:6] = GRAY
        np.testing.assert_array_equal(dest, expected)

    def test_forced_width_at_last_column_stays_in_bounds(self):
        """Both vertices share the seed column, so the fill is one column wider than the buffer."""
        src = _solid(5, 2, GRAY)
        dest = np.zeros_like(src)
        stroke = TriangleApproximator(src, dest, rng=ScriptedRng([4, 1])).step()

        # Right, down and left are all too close to an edge to be sampled
        assert (stroke.first, stroke.second) == (Direction.UP, Direction.RIGHT)
        assert stroke.first_vertex == TrianglePoint(2, 1)
        assert stroke.second_vertex == TrianglePoint(4, 1)
        expected = _solid(5, 2, WHITE)
        expected[4, 1] = GRAY
        np.testing.assert_array_equal(dest, expected)
        assert (dest[:, 0] == 255).all()

    def test_single_pixel_buffer(self):
        src = _solid(1, 1, (1, 2, 3))
        dest = np.zeros_like(src)
        approx = TriangleApproximator(src, dest, rng=np.random.default_rng(0), iterations=25)
        assert approx.run() == 25
        assert tuple(dest[0, 0]) == (1, 2, 3)

    @pytest.mark.parametrize("shape", [(1, 9), (9, 1), (2, 2), (3, 2), (2, 7)])
    def test_thin_buffers_stay_in_bounds(self, shape):
        src = np.random.RandomState(3).randint(0, 256, shape + (3,), dtype=np.uint8)
        dest = np.zeros_like(src)
        approx = TriangleApproximator(src, dest, seed=4, iterations=300)
        h, w = shape
        for _ in range(300):
            stroke = approx.step()
            for point in (stroke.seed, stroke.first_vertex, stroke.second_vertex):
                assert 0 <= point.row < h and 0 <= point.col < w

    def test_painted_colors_come_from_source(self, small_frame):
        dest = np.zeros_like(small_frame)
        approximate(small_frame, dest, seed=11, iterations=2000)
        palette = {tuple(px) for px in small_frame.reshape(-1, 3)} | {WHITE}
        assert all(tuple(px) in palette for px in dest.reshape(-1, 3))

    def test_source_never_written(self, small_frame):
        before = small_frame.copy()
        approximate(small_frame, np.zeros_like(small_frame), seed=2, iterations=500)
        np.testing.assert_array_equal(small_frame, before)


# ---------------------------------------------------------------------------
# DETERMINISM, TERMINATION, CANCELLATION
# ---------------------------------------------------------------------------

class TestRun:

    def test_same_seed_same_sequence(self, small_frame):
        def snapshots(seed):
            shots = []
            approximate(small_frame, np.zeros_like(small_frame), seed=seed, iterations=200,
                        on_progress=lambda buf: shots.append(buf.copy()))
            return shots

        a, b = snapshots(42), snapshots(42)
        assert len(a) == len(b) == 200
        for x, y in zip(a, b):
            np.testing.assert_array_equal(x, y)

    def test_injected_generator_matches_seed(self, small_frame):
        a = approximate(small_frame, np.zeros_like(small_frame), seed=5, iterations=300)
        b = approximate(small_frame, np.zeros_like(small_frame),
                        rng=np.random.default_rng(5), iterations=300)
        np.testing.assert_array_equal(a, b)

    def test_seed_pixel_drawn_row_then_column(self, small_frame):
        rng = ScriptedRng([3, 9])
        stroke = TriangleApproximator(small_frame, np.zeros_like(small_frame), rng=rng).step()
        assert stroke.seed == TrianglePoint(3, 9)
        assert rng.calls == [12, 15]

    def test_terminates_at_ten_thousand(self):
        src = np.random.RandomState(1).randint(0, 256, (6, 8, 3), dtype=np.uint8)
        calls = []
        approx = TriangleApproximator(src, np.zeros_like(src), seed=0)
        executed = approx.run(on_progress=lambda buf: calls.append(1),
                              should_stop=lambda: False)
        assert executed == MAX_ITERATIONS == 10000
        assert len(calls) == 10000
        assert approx.iteration == 10000
        assert not approx.cancelled
        assert approx.strength == 20

    def test_cancellation_keeps_partial_canvas(self, small_frame):
        dest = np.zeros_like(small_frame)
        polls = []
        shots = []

        def should_stop():
            polls.append(1)
            return len(polls) >= 5

        approx = TriangleApproximator(small_frame, dest, seed=9)
        executed = approx.run(on_progress=lambda buf: shots.append(buf.copy()),
                              should_stop=should_stop)
        assert executed == 5
        assert approx.cancelled
        assert len(polls) == 5
        np.testing.assert_array_equal(dest, shots[-1])
        assert not (dest == 255).all()

    def test_no_poll_after_last_iteration(self, small_frame):
        polls = []
        approx = TriangleApproximator(small_frame, np.zeros_like(small_frame), seed=0, iterations=3)
        approx.run(should_stop=lambda: polls.append(1) or False)
        assert len(polls) == 2

    def test_progress_receives_dest(self, small_frame):
        dest = np.zeros_like(small_frame)
        seen = []
        approximate(small_frame, dest, seed=0, iterations=3, on_progress=seen.append)
        assert all(buf is dest for buf in seen)

    def test_reset_restores_white_canvas(self, small_frame):
        dest = np.zeros_like(small_frame)
        approx = TriangleApproximator(small_frame, dest, seed=0, iterations=50)
        approx.run()
        approx.reset()
        assert approx.iteration == 0
        assert (dest == 255).all()

    def test_mismatched_buffers_rejected(self, small_frame):
        with pytest.raises(RasterError):
            TriangleApproximator(small_frame, np.zeros((5, 5, 3), dtype=np.uint8))
