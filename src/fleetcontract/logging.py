"""Logging configuration for fleetcontract."""

import logging
from pathlib import Path

import platformdirs


def setup_logging() -> None:
    """Configure logging with file handler for debug output.

    Logs go to the user config dir (e.g. ~/.config/fleetcontract/debug.log).
    Console output is handled separately by Rich.
    """
    log_dir = Path(platformdirs.user_config_dir("fleetcontract", ensure_exists=True))
    log_file = log_dir / "debug.log"

    logger = logging.getLogger("fleetcontract")
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers on repeated calls
    if logger.handlers:
        return

    try:
        fh = logging.FileHandler(log_file, encoding="utf-8")
    except OSError:
        # Read-only home (CI, sandboxes): run without a log file.
        logger.addHandler(logging.NullHandler())
        return
    fh.setLevel(logging.DEBUG)
    fh.setFormatter(
        logging.Formatter(
            "%(asctime)s [%(levelname)-7s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(fh)

    logger.debug("Logging initialized → %s", log_file)
