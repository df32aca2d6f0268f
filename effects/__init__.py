"""
Pixelmanip -- Effects Registry
Every effect is a function: (source: np.ndarray, dest: np.ndarray, **params) -> dest.
It reads the source, writes the destination (same shape), and returns it.
"""

import inspect
from enum import Enum

from core.raster import check_pair
from effects.color import original, black_white, grayscale, darken, rgb_percentages, purify
from effects.edges import sobel_outline
from effects.approximate import approximate
from effects.motion import motion_detect, MotionDetector


class Mode(str, Enum):
    IMAGE = "image"
    WEBCAM = "webcam"


class Manipulation(str, Enum):
    ORIGINAL = "original"
    BLACK_WHITE = "blackwhite"
    GRAYSCALE = "grayscale"
    DARKEN = "darken"
    RGB_PERCENTAGES = "rgbpercent"
    PURIFY = "purify"
    OUTLINE = "outline"
    APPROXIMATE = "approximate"
    MOTION = "motion"


QUIT_CHOICE = 8

# Master registry: name -> (function, default_params, description, menu slot, modes)
EFFECTS = {
    Manipulation.ORIGINAL: {
        "fn": original,
        "params": {},
        "description": "Original image, copied unchanged",
        "menu": 0,
        "modes": (Mode.IMAGE, Mode.WEBCAM),
        "label": "Original",
    },
    Manipulation.BLACK_WHITE: {
        "fn": black_white,
        "params": {"threshold": 0},
        "description": "White where the channel average is above a threshold (0-255), else black",
        "menu": 1,
        "modes": (Mode.IMAGE, Mode.WEBCAM),
        "label": "Black and White",
    },
    Manipulation.GRAYSCALE: {
        "fn": grayscale,
        "params": {},
        "description": "Grayscale from 0.299 R + 0.587 G + 0.114 B",
        "menu": 2,
        "modes": (Mode.IMAGE, Mode.WEBCAM),
        "label": "Grayscale",
    },
    Manipulation.DARKEN: {
        "fn": darken,
        "params": {"brightness": 0.5},
        "description": "Multiply every channel by a brightness constant (0-1)",
        "menu": 3,
        "modes": (Mode.IMAGE, Mode.WEBCAM),
        "label": "Darken",
    },
    Manipulation.RGB_PERCENTAGES: {
        "fn": rgb_percentages,
        "params": {"red": 100, "green": 100, "blue": 100},
        "description": "Scale red, green and blue by their own percentage (0-150)",
        "menu": 4,
        "modes": (Mode.IMAGE, Mode.WEBCAM),
        "label": "RGB values",
    },
    Manipulation.PURIFY: {
        "fn": purify,
        "params": {},
        "description": "Max out each pixel's dominant channel, zero the rest",
        "menu": 5,
        "modes": (Mode.IMAGE, Mode.WEBCAM),
        "label": "Purify RGB",
    },
    Manipulation.OUTLINE: {
        "fn": sobel_outline,
        "params": {},
        "description": "Sobel edge outline: strong edges white, weak edges gray",
        "menu": 6,
        "modes": (Mode.IMAGE, Mode.WEBCAM),
        "label": "Sobel Outline",
    },
    Manipulation.APPROXIMATE: {
        "fn": approximate,
        "params": {},
        "description": "Rebuild the image from random color-matched triangles (progressive)",
        "menu": 7,
        "modes": (Mode.IMAGE,),
        "label": "Approximate (Image mode only)",
    },
    Manipulation.MOTION: {
        "fn": motion_detect,
        "params": {},
        "description": "Highlight pixels that changed since the previous frame",
        "menu": 7,
        "modes": (Mode.WEBCAM,),
        "label": "Motion Detection (Video mode only)",
    },
}

# Keys forwarded only to effects whose signature accepts them
_INJECTABLE = ("rng", "seed", "on_progress", "should_stop", "detector")


def resolve(name: str) -> Manipulation:
    """Normalize an effect name (or Manipulation) to its registry key."""
    try:
        return Manipulation(name)
    except ValueError:
        available = ", ".join(sorted(m.value for m in EFFECTS))
        raise ValueError(f"Unknown effect: {name}. Available: {available}") from None


def get_effect(name: str):
    """Get an effect by name. Returns (fn, default_params).

    Raises ValueError if the effect doesn't exist.
    """
    entry = EFFECTS[resolve(name)]
    return entry["fn"], entry["params"].copy()


def list_effects(mode: str = None) -> list[dict]:
    """List all available effects with descriptions.

    Args:
        mode: Optional filter, 'image' or 'webcam'.
    """
    results = []
    for name, entry in EFFECTS.items():
        if mode and mode not in entry["modes"]:
            continue
        results.append({
            "name": name.value,
            "description": entry["description"],
            "params": entry["params"],
            "menu": entry["menu"],
            "modes": [m.value for m in entry["modes"]],
        })
    return results


def menu_entries(mode: str) -> list[tuple[int, str]]:
    """(choice, label) pairs for the menu of a mode, in menu order."""
    entries = [(e["menu"], e["label"]) for e in EFFECTS.values() if mode in e["modes"]]
    return sorted(entries)


def effect_for_choice(choice: int, mode: str) -> Manipulation:
    """Map a menu number to the manipulation it selects in `mode`.

    Choice 7 is approximation for images and motion detection for webcams.
    """
    for name, entry in EFFECTS.items():
        if entry["menu"] == choice and mode in entry["modes"]:
            return name
    raise ValueError(f"No manipulation for menu choice {choice} in {Mode(mode).value} mode")


def apply_effect(source, dest, effect_name: str, **params):
    """Apply a named effect, reading `source` and writing `dest`.

    Special params (rng, seed, on_progress, should_stop, detector) are only
    passed to effects that declare them; the rest are merged over the
    effect's defaults.
    """
    check_pair(source, dest)
    name = resolve(effect_name)
    fn, defaults = get_effect(name)
    sig = inspect.signature(fn)

    merged = {**defaults}
    for key, value in params.items():
        if key in _INJECTABLE and key not in sig.parameters:
            continue
        merged[key] = value

    unknown = [k for k in merged if k not in sig.parameters]
    if unknown:
        raise ValueError(f"Unknown params for {name.value}: {', '.join(sorted(unknown))}")

    return fn(source, dest, **merged)


__all__ = [
    "EFFECTS",
    "Manipulation",
    "Mode",
    "MotionDetector",
    "QUIT_CHOICE",
    "apply_effect",
    "effect_for_choice",
    "get_effect",
    "list_effects",
    "menu_entries",
    "resolve",
]
