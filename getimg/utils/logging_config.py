import logging
import sys
from logging import Formatter, StreamHandler, getLogger
from logging import DEBUG, INFO, WARNING, ERROR, CRITICAL

class ColourFormatter(Formatter):
    """Custom formatter with colored output for different log levels."""

    LEVEL_COLOURS = [
        (DEBUG, "\x1b[40;1m"),
        (INFO, "\x1b[34;1m"),
        (WARNING, "\x1b[33;1m"),
        (ERROR, "\x1b[31m"),
        (CRITICAL, "\x1b[41m"),
    ]

    FORMATS = {
        level: Formatter(
            f"\x1b[30;1m%(asctime)s\x1b[0m {colour}%(levelname)-8s\x1b[0m "
            f"\x1b[35m%(name)s\x1b[0m %(message)s",
            "%H:%M:%S",
        )
        for level, colour in LEVEL_COLOURS
    }

    def format(self, record):
        formatter = self.FORMATS.get(record.levelno, self.FORMATS[DEBUG])
        return formatter.format(record)

class PlainFormatter(Formatter):
    """Simple formatter without colors, for pipes and redirected output."""

    def __init__(self):
        super().__init__(
            "%(asctime)s %(levelname)-8s %(name)s %(message)s",
            "%Y-%m-%d %H:%M:%S"
        )

def setup_logging(level="WARNING", stream=None):
    """
    Set up logging for the command-line tool.

    All records go to standard error so that stdout only carries progress
    messages.

    Args:
        level (str): Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        stream: Output stream, standard error by default

    Returns:
        logging.Logger: Configured root logger
    """
    stream = stream if stream is not None else sys.stderr
    handler = StreamHandler(stream)

    if hasattr(stream, "isatty") and stream.isatty():
        handler.setFormatter(ColourFormatter())
    else:
        handler.setFormatter(PlainFormatter())

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        handlers=[handler],
        force=True  # Override any existing configuration
    )

    # httpx logs every request at INFO
    getLogger("httpx").setLevel(max(logging.WARNING, logging.getLogger().level))

    return logging.getLogger()

def get_logger(name=None):
    """
    Get a logger for a module.

    Args:
        name (str): Logger name (typically __name__ from the calling module)

    Returns:
        logging.Logger: Logger instance
    """
    return getLogger(name)
