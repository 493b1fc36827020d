"""Console helpers: colour, numbered menus and numeric prompts."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from typing import TextIO

from .errors import InvalidSelectionError


class Colors:
    """ANSI color codes for terminal output."""

    RESET = "\033[0m"
    BOLD = "\033[1m"
    RED = "\033[31m"
    YELLOW = "\033[33m"
    CYAN = "\033[36m"


def _supports_color(stream: TextIO | None = None) -> bool:
    stream = stream or sys.stdout
    if os.environ.get("NO_COLOR"):
        return False
    if not hasattr(stream, "isatty") or not stream.isatty():
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return True


def colorize(text: str, color: str, bold: bool = False, stream: TextIO | None = None) -> str:
    """Apply color to text if terminal supports it."""
    if not _supports_color(stream):
        return text
    prefix = (Colors.BOLD if bold else "") + color
    return f"{prefix}{text}{Colors.RESET}"


def print_error(message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    print(colorize(message, Colors.RED, stream=stream), file=stream)


def print_warning(message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    print(colorize(message, Colors.YELLOW, stream=stream), file=stream)


def print_header(message: str, stream: TextIO | None = None) -> None:
    stream = stream or sys.stdout
    print(colorize(message, Colors.CYAN, bold=True, stream=stream), file=stream)


def print_menu(title: str, options: Sequence[str], stream: TextIO | None = None) -> None:
    """Print ``title`` followed by ``1: option`` lines."""
    stream = stream or sys.stdout
    print_header(title, stream=stream)
    for index, option in enumerate(options, start=1):
        print(f"{index}: {option}", file=stream)


def parse_choice(raw: str, upper: int) -> int:
    """Parse a 1-based menu choice; raises InvalidSelectionError when out of range."""
    text = raw.strip()
    try:
        value = int(text)
    except ValueError:
        raise InvalidSelectionError(text, upper) from None
    if value < 1 or value > upper:
        raise InvalidSelectionError(text, upper)
    return value


def prompt_choice(
    prompt: str,
    upper: int,
    *,
    stdin: TextIO | None = None,
    stdout: TextIO | None = None,
) -> int:
    """Show ``prompt``, read one line and return the validated choice.

    EOF counts as invalid input.
    """
    stdin = stdin or sys.stdin
    stdout = stdout or sys.stdout
    print(f"\n{prompt}", end="", file=stdout)
    stdout.flush()
    line = stdin.readline()
    return parse_choice(line, upper)


__all__ = [
    "Colors",
    "colorize",
    "parse_choice",
    "print_error",
    "print_header",
    "print_menu",
    "print_warning",
    "prompt_choice",
]
