import logging
import sys

LOG_FORMAT = "%(levelname)s: %(message)s"

_VERBOSITY_LEVELS = (
    logging.CRITICAL,
    logging.ERROR,
    logging.WARNING,
    logging.INFO,
)


def verbosity_to_level(verbosity: int) -> int:
    """Map a repeated -v count to a log level; anything past -vvv is DEBUG."""
    if verbosity < 0:
        return logging.CRITICAL
    if verbosity >= len(_VERBOSITY_LEVELS):
        return logging.DEBUG
    return _VERBOSITY_LEVELS[verbosity]


def setup_logging(level: int = logging.WARNING) -> None:
    """Send log output to stderr, replacing any handlers already installed."""
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )
