"""
Pixelmanip -- Media I/O
Decodes images into BGR rasters and resizes them for display.
Nothing here ever writes a file.
"""

import logging
from pathlib import Path

import cv2
import numpy as np
from PIL import Image, UnidentifiedImageError

from core.config import WIDTH, HEIGHT, IMAGE_DIR
from core.safety import preflight, validate_dimensions

logger = logging.getLogger(__name__)


class MediaError(RuntimeError):
    """Raised when an image cannot be decoded or a camera cannot be opened."""
    pass


def load_image(image_path: str) -> np.ndarray:
    """Load an image file as a (H, W, 3) uint8 BGR raster.

    Raises:
        FileNotFoundError: If the file doesn't exist.
        SafetyError: If the file fails preflight.
        MediaError: If the file can't be decoded.
    """
    info = preflight(image_path)
    try:
        with Image.open(info["path"]) as img:
            rgb = np.array(img.convert("RGB"))
    except (UnidentifiedImageError, OSError) as e:
        raise MediaError(f"Could not decode image {image_path}: {e}") from e

    validate_dimensions(rgb.shape[1], rgb.shape[0])
    logger.debug("Loaded %s (%dx%d)", image_path, rgb.shape[1], rgb.shape[0])
    return cv2.cvtColor(rgb, cv2.COLOR_RGB2BGR)


def fit_to_display(frame: np.ndarray, width: int = WIDTH, height: int = HEIGHT) -> np.ndarray:
    """Resize a raster to exactly width x height."""
    if frame.shape[1] == width and frame.shape[0] == height:
        return frame.copy()
    resized = cv2.resize(frame, (width, height), interpolation=cv2.INTER_LINEAR)
    logger.debug("Resized %dx%d -> %dx%d", frame.shape[1], frame.shape[0], width, height)
    return resized


def read_image_names(names_file: str) -> list[str]:
    """Read the image manifest: one filename per line, blank lines skipped.

    Raises:
        FileNotFoundError: If the manifest doesn't exist.
    """
    path = Path(names_file)
    if not path.is_file():
        raise FileNotFoundError(f"Image names file not found: {names_file}")
    names = [line.strip() for line in path.read_text(encoding="utf-8").splitlines()]
    return [n for n in names if n]


def resolve_image(name: str, image_dir: str = IMAGE_DIR) -> Path:
    """Path of a manifest entry inside the image folder."""
    return Path(image_dir) / name
