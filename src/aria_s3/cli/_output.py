"""Output formatting helpers for the CLI."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict, is_dataclass
from typing import Any


def print_object(data: Any, *, json_mode: bool = False) -> None:
    """Print a dict or dataclass as JSON or key-value pairs."""
    if is_dataclass(data) and not isinstance(data, type):
        data = asdict(data)
    if json_mode:
        print(json.dumps(data, indent=2, default=str))
        return

    for k, v in data.items():
        print(f"{k}: {v}")


def print_error(msg: str) -> None:
    """Print an error message to stderr."""
    print(f"Error: {msg}", file=sys.stderr)


class DotProgress:
    """Print up to ``width`` dots while a file is copied."""

    def __init__(self, width: int = 79) -> None:
        self.width = width
        self._shown = 0

    def __call__(self, done: int, total: int) -> None:
        if total <= 0:
            return
        target = min(self.width, done * self.width // total)
        if target > self._shown:
            sys.stdout.write("." * (target - self._shown))
            sys.stdout.flush()
            self._shown = target
        if done >= total:
            self.finish()

    def finish(self) -> None:
        if self._shown:
            sys.stdout.write("\n")
            sys.stdout.flush()
        self._shown = 0
