"""Terminal output channel.

Regular lines go to stdout, error lines and tracebacks to stderr.  Rich
is used when installed; otherwise plain ``print`` is used and styles
are dropped.  Text is never interpreted as Rich markup, so handler
output containing brackets is printed verbatim.
"""

from __future__ import annotations

import sys
import traceback
from typing import Any

from cmdctl.cli.console import RichUnavailableError, get_rich_console


class ConsoleOutput:
    """Output channel writing to the terminal."""

    def __init__(self, *, verbose: bool = False) -> None:
        self.verbose: bool = verbose
        try:
            self._out: Any = get_rich_console(stderr=False)
            self._err: Any = get_rich_console(stderr=True)
        except RichUnavailableError:
            self._out = None
            self._err = None

    @property
    def rich(self) -> bool:
        return self._out is not None

    def line(self, text: str, style: str | None = None) -> None:
        if self._out is None:
            print(text)
            return
        self._out.print(text, style=style, markup=False)

    def error(self, message: str) -> None:
        if self._err is None:
            print(f"ERROR: {message}", file=sys.stderr)
            return
        self._err.print(f" ERROR  {message}", style="bold white on red", markup=False)

    def exception(self, error: BaseException) -> None:
        if self._err is None:
            traceback.print_exception(error, file=sys.stderr)
            return
        from rich.traceback import Traceback

        self._err.print(
            Traceback.from_exception(type(error), error, error.__traceback__),
        )
