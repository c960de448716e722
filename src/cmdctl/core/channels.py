"""Input and output channels shared by the controller and the handler.

The controller may substitute the output channel once, before the
handler runs; after that both sides write to the same instance.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field
from typing import Any


@dataclass(slots=True)
class CommandInput:
    """Parsed arguments and options for one command run."""

    arguments: dict[str, Any] = field(default_factory=dict)
    """Positional or named command arguments."""

    options: dict[str, Any] = field(default_factory=dict)
    """Flags such as ``verbose`` or ``disable-events``."""

    interactive: bool = True
    """``False`` for silent sub-invocations."""

    def argument(self, name: str, default: Any = None) -> Any:
        return self.arguments.get(name, default)

    def option(self, name: str, default: Any = None) -> Any:
        return self.options.get(name, default)


class BufferedOutput:
    """Output channel that keeps everything in memory.

    Regular lines and error lines are kept apart so callers can assert
    on either; :meth:`fetch` returns everything in write order.
    """

    def __init__(self, *, verbose: bool = False) -> None:
        self.verbose: bool = verbose
        self.lines: list[str] = []
        self.errors: list[str] = []
        self._all: list[str] = []

    def line(self, text: str, style: str | None = None) -> None:
        self.lines.append(text)
        self._all.append(text)

    def error(self, message: str) -> None:
        self.errors.append(message)
        self._all.append(message)

    def exception(self, error: BaseException) -> None:
        text = "".join(traceback.format_exception(error)).rstrip("\n")
        self._all.append(text)

    def fetch(self) -> str:
        """Return all buffered output joined by newlines."""
        return "\n".join(self._all)


class NullOutput:
    """Output channel that discards everything."""

    verbose: bool = False

    def line(self, text: str, style: str | None = None) -> None:
        pass

    def error(self, message: str) -> None:
        pass

    def exception(self, error: BaseException) -> None:
        pass
