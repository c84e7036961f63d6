"""
Terminal output helpers
-----------------------
Rules:
  - Headings are bold, errors get a red [Error] prefix
  - Streak values are coloured by band: >= 7 green, >= 3 yellow, else red
  - ANSI codes only when stdout is a TTY
"""
from __future__ import annotations

import sys

_ANSI = sys.stdout.isatty()

_RESET  = "\033[0m"  if _ANSI else ""
_RED    = "\033[31m" if _ANSI else ""
_GREEN  = "\033[32m" if _ANSI else ""
_YELLOW = "\033[33m" if _ANSI else ""
_BOLD   = "\033[1m"  if _ANSI else ""


def streak_band(streak: int) -> str:
    """Return 'green', 'yellow' or 'red' for a streak length."""
    if streak >= 7:
        return "green"
    if streak >= 3:
        return "yellow"
    return "red"


def colorize_streak(text: str, streak: int) -> str:
    color = {"green": _GREEN, "yellow": _YELLOW, "red": _RED}[streak_band(streak)]
    return f"{color}{text}{_RESET}"


def print_heading(title: str) -> None:
    print(f"\n{_BOLD}{title}{_RESET}")


def print_error(message: str) -> None:
    print(f"\n{_RED}[Error]{_RESET} {message}\n")
