"""
Pixelmanip -- Logging Setup
Root logger configuration for the CLI: a timestamped stdout handler and
an optional rotating log file.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler


def setup_logging(level=logging.INFO, log_file: str | None = None) -> None:
    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)

    fmt = logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s")

    ch = logging.StreamHandler(stream=sys.stdout)
    ch.setFormatter(fmt)
    ch.setLevel(level)
    root.addHandler(ch)

    if log_file:
        os.makedirs(os.path.dirname(os.path.abspath(log_file)), exist_ok=True)
        fh = RotatingFileHandler(log_file, maxBytes=5_000_000, backupCount=3)
        fh.setFormatter(fmt)
        fh.setLevel(logging.DEBUG)
        root.addHandler(fh)

    # Tame noisy libs
    logging.getLogger("PIL").setLevel(logging.WARNING)
