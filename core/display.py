"""
Pixelmanip -- Display Window
Thin wrapper over an OpenCV HighGUI window: show a raster, poll keys.
"""

import cv2
import numpy as np

from core.config import WIDTH, HEIGHT, WINDOW_NAME, WINDOW_X, WINDOW_Y, ESC_KEY


class DisplayWindow:
    """A free-ratio window sized to the display raster.

    Use as a context manager; all windows are destroyed on exit.
    """

    def __init__(self, name: str = WINDOW_NAME, width: int = WIDTH, height: int = HEIGHT,
                 position: tuple[int, int] = (WINDOW_X, WINDOW_Y)):
        self.name = name
        self.width = width
        self.height = height
        self.position = position
        self._open = False

    def open(self) -> "DisplayWindow":
        cv2.namedWindow(self.name, cv2.WINDOW_FREERATIO)
        cv2.resizeWindow(self.name, self.width, self.height)
        cv2.moveWindow(self.name, *self.position)
        self._open = True
        return self

    def close(self) -> None:
        if self._open:
            cv2.destroyAllWindows()
            self._open = False

    def __enter__(self):
        return self.open()

    def __exit__(self, exc_type, exc, tb):
        self.close()

    def show(self, frame: np.ndarray) -> None:
        cv2.imshow(self.name, frame)

    def poll_key(self, wait_ms: int) -> int:
        """Wait up to `wait_ms` for a key. Returns -1 if none was pressed."""
        # waitKey(0) blocks forever, so bounded polls never pass 0
        return cv2.waitKey(max(1, int(wait_ms)))

    def escape_pressed(self, wait_ms: int) -> bool:
        return self.poll_key(wait_ms) == ESC_KEY

    def wait(self) -> int:
        """Block until any key is pressed."""
        return cv2.waitKey(0)
