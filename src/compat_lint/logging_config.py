"""Logging configuration for compat-lint."""
import logging
import sys

LOGGER_NAME = "compat_lint"

_FORMAT = "%(levelname)s: %(message)s"
# Worker threads log concurrently; the module name tells the stages apart
_VERBOSE_FORMAT = "%(levelname)s [%(name)s]: %(message)s"


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """Configure the compat_lint logger tree.

    Warnings (skipped files, unattributed violations) are shown by default.
    ``quiet`` wins over ``verbose`` when both are set.

    Args:
        verbose: Show progress messages (INFO) tagged with the module name
        quiet: Only show errors
    """
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    root = logging.getLogger(LOGGER_NAME)
    root.setLevel(level)
    root.propagate = False
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(_VERBOSE_FORMAT if verbose and not quiet else _FORMAT))
    root.addHandler(handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger below the compat_lint namespace.

    ``__name__`` of a package module is used as is; any other name is nested
    under the namespace.
    """
    if name != LOGGER_NAME and not name.startswith(f"{LOGGER_NAME}."):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)
