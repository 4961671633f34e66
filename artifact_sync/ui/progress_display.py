"""
Download progress display for Artifact Sync.

Renders a single status line that is redrawn in place as entries complete:

    [==========          ]  50% (5/10) - Downloaded: textures/rock.vtex_c
"""

import shutil
import sys
import threading
from dataclasses import dataclass
from typing import Callable, Optional, TextIO

from ..core.constants import FALLBACK_TERMINAL_WIDTH

BAR_WIDTH = 20
ELLIPSIS = "..."


@dataclass
class ProgressState:
    """Snapshot of sync progress shown on the status line."""
    processed: int = 0
    total: int = 0
    action: str = ""
    path: str = ""


def get_terminal_width() -> int:
    """Terminal width, or a fixed fallback when output is not a terminal."""
    return shutil.get_terminal_size((FALLBACK_TERMINAL_WIDTH, 24)).columns


def render_line(width: int, state: ProgressState) -> str:
    """
    Render the status line for a terminal `width` columns wide.

    The result is always exactly width - 1 characters so that it fully
    overwrites the previous line without wrapping. Long paths are cut from
    the left so the file name stays visible.
    """
    limit = max(width - 1, 0)
    pct = int(state.processed / state.total * 100) if state.total > 0 else 0
    bar = ("=" * (pct // 5)).ljust(BAR_WIDTH)
    status = f"[{bar}] {pct:3d}% ({state.processed}/{state.total}) - {state.action}"

    if len(status) >= limit:
        return status[:limit].ljust(limit)

    if state.path:
        prefix = status + ": "
        room = limit - len(prefix)
        shown = state.path
        if room <= len(ELLIPSIS):
            shown = ""
        elif len(shown) > room:
            shown = ELLIPSIS + shown[len(shown) - room + len(ELLIPSIS):]
        if shown:
            status = prefix + shown

    return status.ljust(limit)


class StatusLine:
    """
    In-place progress line shared by all download workers.

    Every update happens under one lock; the line is only drawn when
    `enabled` is set, but the state is tracked either way.
    """

    def __init__(
        self,
        total: int,
        stream: Optional[TextIO] = None,
        width_provider: Callable[[], int] = get_terminal_width,
        enabled: bool = True,
    ):
        self.lock = threading.Lock()
        self.state = ProgressState(total=total)
        self.stream = stream if stream is not None else sys.stdout
        self.enabled = enabled
        self._width = width_provider
        self._drawn = ""
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def report(self, processed: int, total: int, action: str, path: str = ""):
        """Replace the shown state and redraw."""
        with self.lock:
            self.state = ProgressState(processed, total, action, path)
            self._draw()

    def file_completed(self, action: str, path: str) -> int:
        """Count one finished entry and redraw. Returns the new processed count."""
        with self.lock:
            self.state.processed += 1
            self.state.action = action
            self.state.path = path
            self._draw()
            return self.state.processed

    def write(self, msg: str, stream: Optional[TextIO] = None):
        """Print a message above the status line, then redraw the line."""
        out = stream if stream is not None else self.stream
        with self.lock:
            self._erase()
            out.write(msg + "\n")
            out.flush()
            self._draw()

    def close(self):
        with self.lock:
            self._erase()
            self._drawn = ""
            self._closed = True

    def _draw(self):
        if self._closed or not self.enabled:
            return
        self._drawn = render_line(self._width(), self.state)
        self.stream.write("\r" + self._drawn)
        self.stream.flush()

    def _erase(self):
        if not self._drawn or not self.enabled:
            return
        self.stream.write("\r" + " " * max(self._width() - 1, 0) + "\r")
        self.stream.flush()
