"""Configuration module for activitypy."""

import logging
from importlib import metadata

DEFAULT_WINDOW_SIZE = 150


def get_version() -> str:
    """Return activitypy version."""
    try:
        return metadata.version("activitypy")
    except metadata.PackageNotFoundError:
        return "Version unknown"


def get_logger() -> logging.Logger:
    """Gets the activitypy logger."""
    logger = logging.getLogger("activitypy")
    if logger.handlers:
        return logger

    logger.setLevel(logging.INFO)
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)s - %(funcName)s - %(message)s",  # noqa: E501
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)
    logger.addHandler(handler)
    return logger
