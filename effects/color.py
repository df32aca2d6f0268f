"""
Pixelmanip -- Per-Pixel Color Transforms
Original, black and white, grayscale, darken, RGB percentages, purify.
Every output pixel depends only on the matching input pixel.
"""

import numpy as np

from core.raster import check_pair, to_uint8
from core.safety import clamp_threshold, clamp_brightness, clamp_percentage

# Channel indices in a BGR raster
B, G, R = 0, 1, 2


def grayscale_luminosity(frame: np.ndarray) -> np.ndarray:
    """0.299 R + 0.587 G + 0.114 B, as float64 (H, W)."""
    f = frame.astype(np.float64)
    return 0.299 * f[:, :, R] + 0.587 * f[:, :, G] + 0.114 * f[:, :, B]


def edge_luminosity(blue, green, red):
    """0.2126 R + 0.7152 G + 0.0722 B.

    Takes the three channels separately so a caller can mix channels from
    different pixels. Not the same weights as grayscale_luminosity.
    """
    return (0.2126 * np.asarray(red, dtype=np.float64)
            + 0.7152 * np.asarray(green, dtype=np.float64)
            + 0.0722 * np.asarray(blue, dtype=np.float64))


def original(source: np.ndarray, dest: np.ndarray) -> np.ndarray:
    """Copy the source verbatim."""
    check_pair(source, dest)
    np.copyto(dest, source)
    return dest


def black_white(source: np.ndarray, dest: np.ndarray, threshold: int = 0) -> np.ndarray:
    """White where the channel mean is strictly above `threshold`, else black.

    Args:
        source: (H, W, 3) uint8 BGR array.
        dest: Destination of the same shape.
        threshold: 0-255.
    """
    check_pair(source, dest)
    threshold = clamp_threshold(threshold)
    mean = source.astype(np.float64).sum(axis=2) / 3.0
    dest[:, :] = np.where(mean > threshold, 255, 0).astype(np.uint8)[:, :, np.newaxis]
    return dest


def grayscale(source: np.ndarray, dest: np.ndarray) -> np.ndarray:
    """Set all three channels to the rounded grayscale luminosity."""
    check_pair(source, dest)
    gray = to_uint8(np.floor(grayscale_luminosity(source) + 0.5))
    # One rounded value broadcast to every channel, never rounded per channel
    dest[:, :] = gray[:, :, np.newaxis]
    return dest


def darken(source: np.ndarray, dest: np.ndarray, brightness: float = 0.5) -> np.ndarray:
    """Multiply every channel by `brightness` (0-1) and truncate."""
    check_pair(source, dest)
    brightness = clamp_brightness(brightness)
    dest[:] = to_uint8(np.floor(source.astype(np.float64) * brightness))
    return dest


def rgb_percentages(source: np.ndarray, dest: np.ndarray,
                    red: float = 100, green: float = 100, blue: float = 100) -> np.ndarray:
    """Scale each channel by its own percentage (0-150), truncating.

    Amplified channels saturate at 255.
    """
    check_pair(source, dest)
    scale = np.array([
        clamp_percentage(blue, "blue") / 100.0,
        clamp_percentage(green, "green") / 100.0,
        clamp_percentage(red, "red") / 100.0,
    ])
    dest[:] = to_uint8(np.floor(source.astype(np.float64) * scale))
    return dest


def purify(source: np.ndarray, dest: np.ndarray) -> np.ndarray:
    """Max out the dominant channel and zero the other two.

    Equal maxima resolve blue first, then green, then red.
    """
    check_pair(source, dest)
    peak = source.max(axis=2)
    blue_wins = source[:, :, B] == peak
    green_wins = ~blue_wins & (source[:, :, G] == peak)
    red_wins = ~blue_wins & ~green_wins

    dest[:, :, B] = np.where(blue_wins, 255, 0)
    dest[:, :, G] = np.where(green_wins, 255, 0)
    dest[:, :, R] = np.where(red_wins, 255, 0)
    return dest
