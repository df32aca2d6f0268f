"""
Pixelmanip -- Manipulation Pipeline
Owns the per-session state (motion detector, random generator, config)
and runs a menu choice from a source raster into a destination raster.
"""

import logging

import numpy as np

from core.config import ManipulationConfig
from effects import EFFECTS, Manipulation, Mode, MotionDetector, apply_effect, effect_for_choice, resolve

logger = logging.getLogger(__name__)


class Pipeline:
    """Runs manipulations for one image or one webcam session.

    The motion detector lives as long as the pipeline, so consecutive
    webcam frames are differenced against each other.
    """

    def __init__(self, mode: str = Mode.IMAGE, config: ManipulationConfig | None = None):
        self.mode = Mode(mode)
        self.config = config or ManipulationConfig()
        self.detector = MotionDetector()
        self.rng = np.random.default_rng(self.config.seed)

    def resolve(self, choice) -> Manipulation:
        """Accept a menu number or an effect name."""
        if isinstance(choice, int):
            return effect_for_choice(choice, self.mode)
        name = resolve(choice)
        if self.mode not in EFFECTS[name]["modes"]:
            raise ValueError(f"'{name.value}' is not available in {self.mode.value} mode")
        return name

    def run(self, choice, source: np.ndarray, dest: np.ndarray,
            on_progress=None, should_stop=None) -> np.ndarray:
        """Run one manipulation and return `dest`."""
        name = self.resolve(choice)
        params = self.config.params_for(name.value)
        logger.debug("Running %s with %s", name.value, params)
        return apply_effect(
            source, dest, name,
            rng=self.rng,
            detector=self.detector,
            on_progress=on_progress,
            should_stop=should_stop,
            **params,
        )

    def reset(self) -> None:
        """Forget motion history and restart the random sequence."""
        self.detector.reset()
        self.rng = np.random.default_rng(self.config.seed)
