"""Logging setup shared by every refdash module.

Modules log through children of the ``refdash`` logger. Records are written to
stderr, keeping stdout for the dashboard itself so that
``refdash report ref.log > dashboard.txt`` captures only the dashboard.
"""

import logging
import sys
from typing import Optional

ROOT_LOGGER_NAME = "refdash"
CONSOLE_HANDLER_NAME = "refdash-console"
DEFAULT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


class _StderrHandler(logging.StreamHandler):
    """Stream handler that writes to whatever ``sys.stderr`` currently is."""

    def __init__(self) -> None:
        super().__init__(sys.stderr)

    @property
    def stream(self):
        return sys.stderr

    @stream.setter
    def stream(self, value) -> None:
        pass


def _console_handler(logger: logging.Logger) -> Optional[logging.Handler]:
    for handler in logger.handlers:
        if handler.get_name() == CONSOLE_HANDLER_NAME:
            return handler
    return None


def setup_root_logger(
    level: int = logging.INFO,
    format_string: str = DEFAULT_FORMAT,
    handler: Optional[logging.Handler] = None,
) -> logging.Handler:
    """Attach the console handler to the ``refdash`` logger.

    Nothing changes if the handler is already attached; call ``reset_logging``
    first to replace it.

    Args:
        level: Level of the ``refdash`` logger.
        format_string: Format of console records.
        handler: Handler to use instead of the stderr one, e.g. in tests.

    Returns:
        The attached console handler.
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    existing = _console_handler(root_logger)
    if existing is not None:
        return existing

    if handler is None:
        handler = _StderrHandler()
    handler.set_name(CONSOLE_HANDLER_NAME)
    handler.setFormatter(logging.Formatter(format_string))

    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    # Records still reach the root logger, where pytest's caplog listens
    root_logger.propagate = True
    return handler


def get_logger(name: str) -> logging.Logger:
    """Return the logger for ``name``, typically a module's ``__name__``."""
    setup_root_logger()
    return logging.getLogger(name)


def set_global_log_level(level: int) -> None:
    """Set the level of the ``refdash`` logger and its console handler."""
    handler = setup_root_logger()
    logging.getLogger(ROOT_LOGGER_NAME).setLevel(level)
    handler.setLevel(level)


def level_for_flags(verbose: bool, quiet: bool) -> int:
    """Map the CLI's ``--verbose``/``--quiet`` switches to a log level.

    ``--verbose`` wins when both are given.
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.WARNING
    return logging.INFO


def reset_logging() -> None:
    """Detach the console handler and clear the ``refdash`` level."""
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    handler = _console_handler(root_logger)
    if handler is not None:
        root_logger.removeHandler(handler)
    root_logger.setLevel(logging.NOTSET)


setup_root_logger()
