import sys
from typing import TextIO

GRAY = "\033[90m"
YELLOW = "\033[33m"
RED = "\033[1;31m"
RESET = "\033[0m"

LEVEL_COLORS = {
    "info": GRAY,
    "warn": YELLOW,
    "error": RED,
}


def colorize(text: str, level: str) -> str:
    """
    Wrap text in the ANSI colour used for a diagnostic level.
    """
    color = LEVEL_COLORS.get(level, GRAY)
    return f"{color}{text}{RESET}"


def print_event_colored(text: str, level: str, stream: TextIO | None = None) -> None:
    """
    Print a diagnostic line in its level colour (gray/yellow/red).
    """
    print(colorize(text, level), file=stream or sys.stderr)
