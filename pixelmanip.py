#!/usr/bin/env python3
"""
Pixelmanip -- Image/Webcam Manipulation
CLI entry point. Also importable as a library.

Usage:
    python pixelmanip.py menu
    python pixelmanip.py image photo.png --effect blackwhite --threshold 120
    python pixelmanip.py image photo.png --effect approximate --seed 7
    python pixelmanip.py webcam --effect motion
    python pixelmanip.py list-effects --mode webcam
    python pixelmanip.py info rgbpercent
"""

import argparse
import logging
import os
import sys

# Add project root to path so imports work
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from core.config import (
    DEFAULT_CAMERA, IMAGE_DIR, IMAGE_NAMES_FILE, ManipulationConfig,
)
from core.display import DisplayWindow
from core.logconf import setup_logging
from core.media_io import fit_to_display, load_image, read_image_names, resolve_image
from core.menu import choose_image, choose_manipulation, choose_mode, collect_config
from core.pipeline import Pipeline
from core.runner import open_camera, run_image, run_webcam
from effects import EFFECTS, Manipulation, Mode, QUIT_CHOICE, list_effects, resolve

__version__ = "0.1.0"

logger = logging.getLogger("pixelmanip")


def _config_from_args(args) -> ManipulationConfig:
    return ManipulationConfig(
        bw_threshold=args.threshold,
        brightness=args.brightness,
        red=args.red,
        green=args.green,
        blue=args.blue,
        seed=args.seed,
    )


def cmd_image(args):
    """Manipulate a still image and show the result."""
    name = resolve(args.effect)
    frame = fit_to_display(load_image(args.path))
    pipeline = Pipeline(Mode.IMAGE, _config_from_args(args))
    if name == Manipulation.APPROXIMATE:
        print("Press ESC while focused on the display to exit approximation early")
    print("Press any key while focused on the display to close it")
    with DisplayWindow() as window:
        run_image(pipeline, name, frame, window)


def cmd_webcam(args):
    """Manipulate the live webcam feed."""
    name = resolve(args.effect)
    pipeline = Pipeline(Mode.WEBCAM, _config_from_args(args))
    pipeline.resolve(name)  # reject image-only effects before opening the camera
    print("Press ESC while focused on the display to stop")
    capture = open_camera(args.camera)
    with DisplayWindow() as window:
        frames = run_webcam(pipeline, name, capture, window)
    logger.info("Processed %d frames", frames)


def cmd_menu(args):
    """Run the interactive console program."""
    print("Image/Webcam Manipulation Program")
    print("---------------------------------\n")
    mode = choose_mode()

    frame = None
    if mode == Mode.IMAGE:
        names = read_image_names(args.names_file)
        image_name = choose_image(names)
        if image_name is None:
            print("Error loading image", file=sys.stderr)
            sys.exit(1)
        frame = fit_to_display(load_image(resolve_image(image_name, args.image_dir)))

    config = ManipulationConfig(seed=args.seed)
    while True:
        choice = choose_manipulation(mode)
        if choice == QUIT_CHOICE:
            break
        collect_config(choice, mode, config)
        pipeline = Pipeline(mode, config)

        if mode == Mode.IMAGE:
            if pipeline.resolve(choice) == Manipulation.APPROXIMATE:
                print("Press ESC while focused on display to exit approximation early")
            print("Press any key while focused on the display to return to the main menu\n")
            with DisplayWindow() as window:
                run_image(pipeline, choice, frame, window)
        else:
            print("Press ESC while focused on the display to return to the main menu\n")
            capture = open_camera(args.camera)
            with DisplayWindow() as window:
                run_webcam(pipeline, choice, capture, window)


def cmd_list_effects(args):
    """List available manipulations."""
    effects = list_effects(args.mode)
    print(f"\n{'MENU':<6}{'EFFECT':<14}{'MODES':<16}DESCRIPTION")
    print("-" * 78)
    for e in effects:
        print(f"{e['menu']:<6}{e['name']:<14}{','.join(e['modes']):<16}{e['description']}")
    print()


def cmd_info(args):
    """Show detailed info about an effect."""
    name = resolve(args.effect_name)
    entry = EFFECTS[name]
    print(f"\n  {name.value}  (menu {entry['menu']})")
    print(f"  {entry['description']}")
    print(f"  Modes: {', '.join(m.value for m in entry['modes'])}")
    if entry["params"]:
        print("  Parameters:")
        for key, default in entry["params"].items():
            print(f"    {key} (default: {default})")
    else:
        print("  Parameters: none")
    print()


def _add_effect_options(p):
    p.add_argument("--effect", required=True, help="Effect name (see list-effects)")
    p.add_argument("--threshold", type=int, default=0, help="Black/white threshold (0-255)")
    p.add_argument("--brightness", type=float, default=0.5, help="Darken constant (0-1)")
    p.add_argument("--red", type=float, default=100, help="Red percentage (0-150)")
    p.add_argument("--green", type=float, default=100, help="Green percentage (0-150)")
    p.add_argument("--blue", type=float, default=100, help="Blue percentage (0-150)")
    p.add_argument("--seed", type=int, default=None, help="Random seed for approximate")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pixelmanip",
        description="Pixelmanip -- image and webcam pixel manipulation",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    parser.add_argument("--log-file", default=None, help="Also log to this file")
    sub = parser.add_subparsers(dest="command")

    # menu
    p = sub.add_parser("menu", help="Interactive console program")
    p.add_argument("--image-dir", default=IMAGE_DIR, help="Folder holding the listed images")
    p.add_argument("--names-file", default=IMAGE_NAMES_FILE, help="File listing image names")
    p.add_argument("--camera", type=int, default=DEFAULT_CAMERA, help="Camera index")
    p.add_argument("--seed", type=int, default=None, help="Random seed for approximate")

    # image
    p = sub.add_parser("image", help="Manipulate a still image")
    p.add_argument("path", help="Image file")
    _add_effect_options(p)

    # webcam
    p = sub.add_parser("webcam", help="Manipulate the live webcam feed")
    p.add_argument("--camera", type=int, default=DEFAULT_CAMERA, help="Camera index")
    _add_effect_options(p)

    # list-effects
    p = sub.add_parser("list-effects", help="List all available effects")
    p.add_argument("--mode", choices=[m.value for m in Mode], help="Filter by mode")

    # info
    p = sub.add_parser("info", help="Show detailed info about an effect")
    p.add_argument("effect_name", help="Effect name")

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)

    commands = {
        "menu": cmd_menu,
        "image": cmd_image,
        "webcam": cmd_webcam,
        "list-effects": cmd_list_effects,
        "info": cmd_info,
    }

    if args.command in commands:
        try:
            commands[args.command](args)
        except KeyboardInterrupt:
            print()
            sys.exit(130)
        except Exception as e:
            logger.debug("Command failed", exc_info=True)
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
