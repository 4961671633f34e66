"""
Logging setup for Artifact Sync.

Log records go to stderr. While a sync is running they are routed through the
active status line so a warning doesn't get mixed into the progress bar.
"""

import logging
import sys
from typing import Optional, TextIO

from ..ui.colors import Colors, colorize

LOGGER_NAME = "artifact_sync"


class ColorFormatter(logging.Formatter):
    """Prefix warnings and errors, coloring them on a terminal."""

    LEVEL_STYLES = {
        logging.DEBUG: ("", Colors.MUTED),
        logging.WARNING: ("Warning: ", Colors.AMBER),
        logging.ERROR: ("Error: ", Colors.PINK),
        logging.CRITICAL: ("Error: ", Colors.PINK),
    }

    def __init__(self, use_color: bool = False):
        super().__init__("%(message)s")
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        msg = super().format(record)
        prefix, color = self.LEVEL_STYLES.get(record.levelno, ("", ""))
        msg = prefix + msg
        if self.use_color and color:
            msg = colorize(msg, color)
        return msg


class StatusLineHandler(logging.StreamHandler):
    """Stream handler that writes through a StatusLine when one is attached."""

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__(stream if stream is not None else sys.stderr)
        self.status_line = None

    def emit(self, record: logging.LogRecord):
        status_line = self.status_line
        if status_line is None or status_line.closed:
            super().emit(record)
            return
        try:
            status_line.write(self.format(record), stream=self.stream)
        except Exception:
            self.handleError(record)


def setup_logging(verbose: bool = False, stream: Optional[TextIO] = None) -> StatusLineHandler:
    """
    Configure the package logger. Safe to call more than once.

    Returns:
        The installed handler, so callers can attach a status line to it
    """
    logger = logging.getLogger(LOGGER_NAME)
    for existing in [h for h in logger.handlers if isinstance(h, StatusLineHandler)]:
        logger.removeHandler(existing)

    handler = StatusLineHandler(stream)
    is_tty = hasattr(handler.stream, "isatty") and handler.stream.isatty()
    handler.setFormatter(ColorFormatter(use_color=is_tty))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)
    return handler
