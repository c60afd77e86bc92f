"""Logging setup for the command line.

Library modules only create loggers with ``logging.getLogger(__name__)``;
the CLI calls configure_logging() once per run to decide where the
records of the ``rebackup`` logger hierarchy go and at which level.
"""

import logging

from rich.logging import RichHandler

from rebackup.utils.formatting import err_console

PACKAGE_LOGGER = "rebackup"

# Marks handlers installed by configure_logging() so repeat calls replace them
_HANDLER_TAG = "_rebackup_handler"


def configure_logging(level: int = logging.WARNING) -> logging.Logger:
    """Route the package's log records to stderr through Rich.

    Idempotent: handlers installed by a previous call are replaced, so the
    CLI can be invoked repeatedly in one process (e.g. from tests).

    Args:
        level: Minimum level of records to display.

    Returns:
        The configured package logger.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)

    for handler in list(logger.handlers):
        if getattr(handler, _HANDLER_TAG, False):
            logger.removeHandler(handler)

    handler = RichHandler(
        console=err_console,
        level=level,
        show_time=False,
        show_path=False,
        markup=False,
        rich_tracebacks=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    setattr(handler, _HANDLER_TAG, True)
    logger.addHandler(handler)

    return logger


def level_from_flags(verbose: bool, quiet: bool) -> int:
    """Map the global CLI flags to a logging level.

    Args:
        verbose: Display debug information.
        quiet: Only display errors.

    Returns:
        DEBUG if verbose, ERROR if quiet, WARNING otherwise.
    """
    if verbose:
        return logging.DEBUG
    if quiet:
        return logging.ERROR
    return logging.WARNING
