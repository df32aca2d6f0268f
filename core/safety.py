"""
Pixelmanip -- Safety & Parameter Guards
Preflight checks run before an image is decoded, plus the clamps every
effect applies to its numeric settings. Effects may be called directly,
without the menu's sanitized input, so they re-clamp on their own.
"""

import math
import os
from pathlib import Path

# --- Configurable Limits ---
MAX_FILE_MB = 50             # Maximum input image size
MAX_DIMENSION = 8192         # Largest accepted raster side, in pixels
ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".tif", ".tiff", ".webp"}

# --- Parameter ranges (same bounds the interactive menu enforces) ---
THRESHOLD_RANGE = (0, 255)
BRIGHTNESS_RANGE = (0.0, 1.0)
PERCENT_RANGE = (0, 150)


class SafetyError(Exception):
    """Raised when a preflight check fails."""
    pass


def preflight(input_path: str) -> dict:
    """Run all checks before decoding an image file.

    Args:
        input_path: Path to the input image.

    Returns:
        dict with file metadata (path, size_mb, extension).

    Raises:
        SafetyError: If any check fails.
        FileNotFoundError: If input doesn't exist.
    """
    input_path = str(input_path)
    real_path = os.path.realpath(input_path)

    if not os.path.isfile(real_path):
        raise FileNotFoundError(f"Input file not found: {input_path}")

    size_mb = os.path.getsize(real_path) / (1024 * 1024)
    if size_mb > MAX_FILE_MB:
        raise SafetyError(
            f"Input file is {size_mb:.0f}MB, exceeds {MAX_FILE_MB}MB limit."
        )

    ext = Path(real_path).suffix.lower()
    if ext not in ALLOWED_EXTENSIONS:
        raise SafetyError(
            f"File type '{ext}' not allowed. "
            f"Supported: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    return {
        "path": real_path,
        "size_mb": size_mb,
        "extension": ext,
    }


def validate_dimensions(width: int, height: int) -> None:
    """Reject rasters too large to process interactively.

    Raises:
        SafetyError: If either side exceeds MAX_DIMENSION or is not positive.
    """
    if width <= 0 or height <= 0:
        raise SafetyError(f"Invalid raster size {width}x{height}")
    if width > MAX_DIMENSION or height > MAX_DIMENSION:
        raise SafetyError(
            f"Raster is {width}x{height}, max side is {MAX_DIMENSION}px."
        )


def _finite(value, name: str) -> float:
    try:
        f = float(value)
    except (TypeError, ValueError):
        raise SafetyError(f"{name} must be a number, got {value!r}")
    if math.isnan(f) or math.isinf(f):
        raise SafetyError(f"NaN/Inf not allowed for {name}")
    return f


def clamp_threshold(value) -> int:
    """Black/white threshold, as an integer in [0, 255]."""
    lo, hi = THRESHOLD_RANGE
    return int(max(lo, min(hi, _finite(value, "threshold"))))


def clamp_brightness(value) -> float:
    """Darken constant in [0, 1]."""
    lo, hi = BRIGHTNESS_RANGE
    return max(lo, min(hi, _finite(value, "brightness")))


def clamp_percentage(value, name: str = "percentage") -> float:
    """Channel percentage in [0, 150]."""
    lo, hi = PERCENT_RANGE
    return max(lo, min(hi, _finite(value, name)))
