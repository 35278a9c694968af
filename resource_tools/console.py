"""Console output helpers: tagged log lines, ANSI colors and timers."""
from __future__ import annotations

import os
import sys
import time


class Colors:
    RED = '\033[91m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    CYAN = '\033[96m'
    DIM = '\033[2m'
    END = '\033[0m'


def use_color() -> bool:
    if os.getenv('NO_COLOR'):
        return False
    return hasattr(sys.stdout, 'isatty') and sys.stdout.isatty()


def colorize(text: str, color: str) -> str:
    if not use_color():
        return text
    return f"{color}{text}{Colors.END}"


def red(text: str) -> str:
    return colorize(text, Colors.RED)


def green(text: str) -> str:
    return colorize(text, Colors.GREEN)


def yellow(text: str) -> str:
    return colorize(text, Colors.YELLOW)


def cyan(text: str) -> str:
    return colorize(text, Colors.CYAN)


def dim(text: str) -> str:
    return colorize(text, Colors.DIM)


def log(msg: str) -> None:
    print(f"[LOG] {msg}")


def warn(msg: str) -> None:
    print(yellow(f"[WARN] {msg}"))


def error(msg: str) -> None:
    print(red(f"[ERROR] {msg}"))


class Timer:
    """with Timer('Searched code'): ...  ->  [LOG] Searched code: 0.42s"""

    def __init__(self, label: str, enabled: bool = True):
        self.label = label
        self.enabled = enabled
        self.start = 0.0

    def __enter__(self):
        self.start = time.perf_counter()
        return self

    def __exit__(self, *exc):
        if self.enabled:
            log(f"{self.label}: {time.perf_counter() - self.start:.2f}s")
        return False
