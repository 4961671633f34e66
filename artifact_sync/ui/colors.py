"""
Shared color definitions for terminal output.
"""


class Colors:
    RESET = "\x1b[0m"
    BOLD = "\x1b[1m"
    DIM = "\x1b[2m"
    PURPLE = "\x1b[38;2;138;43;226m"
    PINK = "\x1b[38;2;244;114;182m"
    AMBER = "\x1b[38;2;251;191;36m"
    MUTED = "\x1b[38;2;148;163;184m"


def colorize(text: str, color: str) -> str:
    return f"{color}{text}{Colors.RESET}"
