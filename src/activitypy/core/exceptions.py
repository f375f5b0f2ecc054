"""Custom exceptions for activitypy."""

from activitypy.core import config

logger = config.get_logger()


class LoggedException(Exception):
    """Base class that automatically logs messages."""

    def __init__(self, message: str) -> None:
        """Initialize a new instance of the LoggedException class.

        Args:
            message: The message to display.
        """
        logger.exception(message)
        super().__init__(message)


class ClassifierError(LoggedException):
    """The classifier failed or returned a malformed response."""

    pass


class ModelLoadError(LoggedException):
    """A persisted classifier could not be loaded."""

    pass


class InvalidFileTypeError(LoggedException):
    """Activitypy did not expect this file extension."""

    pass


class EmptyDirectoryError(LoggedException):
    """No .csv or .parquet recordings were found in the directory."""

    pass
