"""File logging. The terminal belongs to the UI, so nothing is logged to it."""

import logging
from pathlib import Path

from platformdirs import user_log_dir

LOGGER_NAME = "termfm"
LOG_PATH = Path(user_log_dir(LOGGER_NAME, appauthor=False)) / "termfm.log"
LOG_FORMAT = "%(asctime)s | %(levelname)-7s | %(name)s | %(message)s"


def setup_logging(path: Path | None = None, level: int = logging.DEBUG) -> logging.Logger:
    """Send ``termfm.*`` records to ``path``; with no path, drop them."""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = False

    if path is None:
        logger.addHandler(logging.NullHandler())
        return logger

    path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(path, mode="a", encoding="utf-8")
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    logger.setLevel(level)
    logger.addHandler(handler)
    return logger
