"""
Pixelmanip -- Raster Buffers
A raster is a (H, W, 3) uint8 numpy array in B, G, R channel order,
the layout OpenCV decodes into. Every effect reads a source raster and
writes a destination raster of the same shape.
"""

import numpy as np

WHITE = (255, 255, 255)
BLACK = (0, 0, 0)


class RasterError(ValueError):
    """Raised when a buffer is empty, malformed, or paired with a buffer of another size."""
    pass


def new_raster(height: int, width: int, color=BLACK) -> np.ndarray:
    """Allocate a (height, width, 3) uint8 raster filled with one BGR color."""
    height, width = int(height), int(width)
    if height <= 0 or width <= 0:
        raise RasterError(f"Raster dimensions must be positive, got {width}x{height}")
    buf = np.empty((height, width, 3), dtype=np.uint8)
    buf[:, :] = color
    return buf


def blank_like(frame: np.ndarray, color=BLACK) -> np.ndarray:
    """Allocate a destination raster matching `frame`'s size."""
    check_raster(frame)
    return new_raster(frame.shape[0], frame.shape[1], color)


def check_raster(frame, name: str = "raster") -> np.ndarray:
    """Validate a single raster and return it unchanged."""
    if not isinstance(frame, np.ndarray):
        raise RasterError(f"{name} must be a numpy array, got {type(frame).__name__}")
    if frame.ndim != 3 or frame.shape[2] != 3:
        raise RasterError(f"{name} must have shape (H, W, 3), got {frame.shape}")
    if frame.dtype != np.uint8:
        raise RasterError(f"{name} must be uint8, got {frame.dtype}")
    if frame.shape[0] == 0 or frame.shape[1] == 0:
        raise RasterError(f"{name} is empty")
    return frame


def check_pair(source, dest) -> None:
    """Validate a source/destination pair. Sizes must match exactly."""
    check_raster(source, "source")
    check_raster(dest, "dest")
    if source.shape != dest.shape:
        raise RasterError(
            f"Source {source.shape[1]}x{source.shape[0]} and destination "
            f"{dest.shape[1]}x{dest.shape[0]} differ in size"
        )
    if not dest.flags.writeable:
        raise RasterError("dest is read-only")


def to_uint8(values: np.ndarray) -> np.ndarray:
    """Clamp a wide-typed array into [0, 255] and narrow it to uint8."""
    return np.clip(values, 0, 255).astype(np.uint8)
