"""
Pixelmanip -- Motion Detection
Frame-to-frame differencing against one retained previous frame.
"""

import numpy as np

from core.raster import RasterError, check_pair

MOTION_THRESHOLD = 110


class MotionDetector:
    """Marks pixels that changed since the previous frame.

    Holds exactly one retained frame, owned by this instance. The first
    frame seen is compared against itself, so its output is all black.
    """

    def __init__(self, threshold: int = MOTION_THRESHOLD):
        self.threshold = threshold
        self.previous = None

    def reset(self) -> None:
        """Forget the retained frame."""
        self.previous = None

    def detect(self, frame: np.ndarray, dest: np.ndarray) -> np.ndarray:
        """Write white where |dB|+|dG|+|dR| exceeds the threshold, else black.

        Args:
            frame: Current (H, W, 3) uint8 frame.
            dest: Destination of the same shape.

        Returns:
            `dest`. The retained frame becomes a copy of `frame`.
        """
        check_pair(frame, dest)
        if self.previous is None:
            self.previous = frame.copy()
        elif self.previous.shape != frame.shape:
            raise RasterError(
                f"Frame size changed from {self.previous.shape[1]}x{self.previous.shape[0]} "
                f"to {frame.shape[1]}x{frame.shape[0]}; call reset() first"
            )

        diff = np.abs(frame.astype(np.int16) - self.previous.astype(np.int16)).sum(axis=2)
        dest[:, :] = np.where(diff > self.threshold, 255, 0).astype(np.uint8)[:, :, np.newaxis]

        np.copyto(self.previous, frame)
        return dest


def motion_detect(source: np.ndarray, dest: np.ndarray,
                  detector: MotionDetector | None = None) -> np.ndarray:
    """Registry entry point. Without a detector every call is a first frame."""
    if detector is None:
        detector = MotionDetector()
    return detector.detect(source, dest)
