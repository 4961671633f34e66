"""
Tests for logging setup and routing through the status line.
"""

import io
import logging

from artifact_sync.core.log import ColorFormatter, StatusLineHandler, setup_logging
from artifact_sync.ui.colors import Colors
from artifact_sync.ui.progress_display import StatusLine


def make_record(level, msg):
    return logging.LogRecord("artifact_sync.test", level, __file__, 1, msg, None, None)


class TestColorFormatter:
    """Tests for level prefixes and coloring."""

    def test_plain_prefixes(self):
        formatter = ColorFormatter(use_color=False)
        assert formatter.format(make_record(logging.INFO, "hello")) == "hello"
        assert formatter.format(make_record(logging.WARNING, "careful")) == "Warning: careful"
        assert formatter.format(make_record(logging.ERROR, "broken")) == "Error: broken"

    def test_colored_output(self):
        formatter = ColorFormatter(use_color=True)
        line = formatter.format(make_record(logging.ERROR, "broken"))
        assert line.startswith(Colors.PINK)
        assert line.endswith(Colors.RESET)

    def test_info_never_colored(self):
        assert ColorFormatter(use_color=True).format(make_record(logging.INFO, "hi")) == "hi"


class TestStatusLineHandler:
    """Tests for StatusLineHandler."""

    def test_plain_stream_without_status_line(self):
        stream = io.StringIO()
        handler = StatusLineHandler(stream)
        handler.setFormatter(ColorFormatter())
        handler.emit(make_record(logging.WARNING, "careful"))
        assert stream.getvalue() == "Warning: careful\n"

    def test_routes_through_status_line(self):
        log_stream = io.StringIO()
        progress_stream = io.StringIO()
        handler = StatusLineHandler(log_stream)
        handler.setFormatter(ColorFormatter())
        status = StatusLine(10, stream=progress_stream, width_provider=lambda: 60)
        status.report(3, 10, "Downloaded", "a.bin")
        handler.status_line = status

        handler.emit(make_record(logging.WARNING, "careful"))

        assert log_stream.getvalue() == "Warning: careful\n"
        assert progress_stream.getvalue().count("(3/10)") == 2  # drawn, then redrawn

    def test_closed_status_line_bypassed(self):
        log_stream = io.StringIO()
        handler = StatusLineHandler(log_stream)
        status = StatusLine(1, stream=io.StringIO())
        status.close()
        handler.status_line = status

        handler.emit(make_record(logging.INFO, "done"))

        assert log_stream.getvalue() == "done\n"


class TestSetupLogging:
    """Tests for setup_logging()."""

    def test_installs_single_handler(self):
        stream = io.StringIO()
        setup_logging(stream=stream)
        setup_logging(stream=stream)
        logger = logging.getLogger("artifact_sync")
        assert len([h for h in logger.handlers if isinstance(h, StatusLineHandler)]) == 1

    def test_levels(self):
        stream = io.StringIO()
        setup_logging(verbose=False, stream=stream)
        logger = logging.getLogger("artifact_sync.sync")
        logger.debug("hidden")
        logger.info("shown")
        assert stream.getvalue() == "shown\n"

        stream = io.StringIO()
        setup_logging(verbose=True, stream=stream)
        logger.debug("now shown")
        assert "now shown" in stream.getvalue()
