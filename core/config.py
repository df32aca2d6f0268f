"""
Pixelmanip -- Configuration
Display constants, key codes, media locations, and the per-run
manipulation settings collected from the menu or the CLI.
"""

from dataclasses import dataclass

# Display window (buffers are resized to this before any manipulation)
WIDTH = 550
HEIGHT = 350
WINDOW_NAME = "Modified"
WINDOW_X = 210 + WIDTH
WINDOW_Y = 0

# Key polling
ESC_KEY = 27
VIDEO_WAIT_MS = 10      # bounded wait per captured frame
APPROX_WAIT_MS = 2      # bounded wait per approximation iteration

# Media locations for the interactive menu
IMAGE_DIR = "images"
IMAGE_NAMES_FILE = "imageNames.txt"

DEFAULT_CAMERA = 0


@dataclass
class ManipulationConfig:
    """Values a manipulation may need. Unused fields are ignored."""
    bw_threshold: int = 0
    brightness: float = 0.5
    red: float = 100
    green: float = 100
    blue: float = 100
    seed: int | None = None

    def params_for(self, name: str) -> dict:
        """Effect keyword arguments for the named manipulation."""
        if name == "blackwhite":
            return {"threshold": self.bw_threshold}
        if name == "darken":
            return {"brightness": self.brightness}
        if name == "rgbpercent":
            return {"red": self.red, "green": self.green, "blue": self.blue}
        return {}
