"""
Terminal output: status line rendering and colors.
"""

from .colors import Colors
from .progress_display import ProgressState, StatusLine, render_line, get_terminal_width

__all__ = [
    "Colors",
    "ProgressState",
    "StatusLine",
    "render_line",
    "get_terminal_width",
]
