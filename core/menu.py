"""
Pixelmanip -- Interactive Menu
Console prompts for the interactive program. Every prompt re-asks
until it gets a number inside the allowed range.
"""

from core.config import ManipulationConfig
from effects import Manipulation, Mode, QUIT_CHOICE, effect_for_choice, menu_entries


def _ask_number(prompt: str, lower, upper, parse, input_fn=input, output=print):
    while True:
        output(prompt)
        raw = input_fn("Choice: ")
        try:
            value = parse(raw.strip())
        except ValueError:
            output("Sorry, couldn't read the input. Please try again\n")
            continue
        if value != value or value < lower or value > upper:
            output("Please enter a valid number\n")
            continue
        return value


def prompt_int(prompt: str, lower: int, upper: int, input_fn=input, output=print) -> int:
    """Ask for an integer in [lower, upper]."""
    return _ask_number(prompt, lower, upper, int, input_fn, output)


def prompt_float(prompt: str, lower: float, upper: float, input_fn=input, output=print) -> float:
    """Ask for a number in [lower, upper]."""
    return _ask_number(prompt, lower, upper, float, input_fn, output)


def choose_mode(input_fn=input, output=print) -> Mode:
    choice = prompt_int(
        "Please enter the corresponding number to select a media to manipulate\n"
        "1) Image\n2) Webcam",
        1, 2, input_fn, output,
    )
    return Mode.IMAGE if choice == 1 else Mode.WEBCAM


def choose_image(names: list[str], input_fn=input, output=print) -> str | None:
    """List the available images and return the chosen name, or None if there are none."""
    if not names:
        output("No image names available")
        return None
    output("\nAvailable images to manipulate")
    for i, name in enumerate(names, start=1):
        output(f"{i}) {name}")
    output("")
    choice = prompt_int(
        "Please enter corresponding number to select an image",
        1, len(names), input_fn, output,
    )
    return names[choice - 1]


def choose_manipulation(mode: str, input_fn=input, output=print) -> int:
    """Show the main menu for `mode` and return the menu number (QUIT_CHOICE quits)."""
    output("\nMain Menu")
    output("---------")
    for number, label in menu_entries(mode):
        output(f"{number}) {label}")
    output(f"{QUIT_CHOICE}) Quit")
    choice = prompt_int("\nEnter a manipulation choice", 0, QUIT_CHOICE, input_fn, output)
    output("")
    return choice


def collect_config(choice: int, mode: str, config: ManipulationConfig | None = None,
                   input_fn=input, output=print) -> ManipulationConfig:
    """Ask only for the values the chosen manipulation uses."""
    config = config or ManipulationConfig()
    name = effect_for_choice(choice, mode)

    if name == Manipulation.BLACK_WHITE:
        config.bw_threshold = prompt_int(
            "Please enter a threshold (0-255): ", 0, 255, input_fn, output)
    elif name == Manipulation.DARKEN:
        config.brightness = prompt_float(
            "Please enter a brightness constant between 0-1: ", 0, 1, input_fn, output)
    elif name == Manipulation.RGB_PERCENTAGES:
        config.red = prompt_int("Please enter a red multiplier (%): ", 0, 150, input_fn, output)
        config.green = prompt_int("Please enter a green multiplier (%): ", 0, 150, input_fn, output)
        config.blue = prompt_int("Please enter a blue multiplier (%): ", 0, 150, input_fn, output)
    return config
