"""
Pixelmanip -- Runner
Drives a pipeline against a still image or a live webcam stream and
hands every result to a display window.
"""

import logging

import cv2
import numpy as np

from core.config import APPROX_WAIT_MS, VIDEO_WAIT_MS, WIDTH, HEIGHT
from core.media_io import MediaError, fit_to_display
from core.pipeline import Pipeline
from core.raster import blank_like
from effects import Manipulation

logger = logging.getLogger(__name__)


def run_image(pipeline: Pipeline, choice, frame: np.ndarray, window) -> np.ndarray:
    """Run one manipulation on a still image and show it.

    Approximation is shown after every iteration and stops early when
    ESC is pressed. The final result stays up until a key is pressed.

    Returns:
        The manipulated raster.
    """
    name = pipeline.resolve(choice)
    dest = blank_like(frame)

    if name == Manipulation.APPROXIMATE:
        pipeline.run(
            name, frame, dest,
            on_progress=window.show,
            should_stop=lambda: window.escape_pressed(APPROX_WAIT_MS),
        )
    else:
        pipeline.run(name, frame, dest)

    window.show(dest)
    window.wait()
    return dest


def open_camera(index: int = 0):
    """Open a capture device.

    Raises:
        MediaError: If the device can't be opened.
    """
    capture = cv2.VideoCapture(index)
    if not capture.isOpened():
        capture.release()
        raise MediaError(f"Could not open camera {index}")
    logger.info("Opened camera %d", index)
    return capture


def run_webcam(pipeline: Pipeline, choice, capture, window,
               width: int = WIDTH, height: int = HEIGHT) -> int:
    """Manipulate frames until the stream ends or ESC is pressed.

    The capture is released on return.

    Returns:
        Number of frames processed.
    """
    name = pipeline.resolve(choice)
    dest = None
    frames = 0
    try:
        while True:
            ok, frame = capture.read()
            if not ok or frame is None or frame.size == 0:
                logger.info("Camera stream ended after %d frames", frames)
                break
            frame = fit_to_display(frame, width, height)
            if dest is None or dest.shape != frame.shape:
                dest = blank_like(frame)

            pipeline.run(name, frame, dest)
            window.show(dest)
            frames += 1

            if window.escape_pressed(VIDEO_WAIT_MS):
                break
    finally:
        capture.release()
        logger.debug("Released camera")
    return frames
