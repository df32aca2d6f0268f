"""
Conftest: shared fixtures for all Pixelmanip test modules.

1. Synthetic frames (deterministic random, gradient, uniform)
2. Scripted random source for driving the approximator pixel by pixel
"""

import os
import sys

import numpy as np
import pytest

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


def _make_test_frame(width=32, height=24):
    """Generate a synthetic BGR test frame (gradient, not blank)."""
    frame = np.zeros((height, width, 3), dtype=np.uint8)
    frame[:, :, 0] = np.linspace(255, 0, width, dtype=np.uint8)  # B inverse
    frame[:, :, 1] = 128  # constant G
    frame[:, :, 2] = np.linspace(0, 255, width, dtype=np.uint8)  # R gradient
    return frame


def _solid(height, width, bgr):
    frame = np.empty((height, width, 3), dtype=np.uint8)
    frame[:, :] = bgr
    return frame


class ScriptedRng:
    """Stands in for numpy's Generator: integers() returns scripted values in order."""

    def __init__(self, values):
        self._values = iter(values)
        self.calls = []

    def integers(self, high):
        value = next(self._values)
        self.calls.append(high)
        assert 0 <= value < high
        return value


@pytest.fixture
def frame():
    """A 24x32 deterministic random BGR frame."""
    rng = np.random.RandomState(42)
    return rng.randint(0, 256, (24, 32, 3), dtype=np.uint8)


@pytest.fixture
def gradient_frame():
    return _make_test_frame()


@pytest.fixture
def dest(frame):
    """Destination matching `frame`, pre-filled with a marker value."""
    return np.full_like(frame, 77)
