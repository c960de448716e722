"""Built-in ``list`` and ``about`` commands.

Both write through the command's output channel, so they behave the
same under a console, a buffer or a silent sub-invocation.
"""

from __future__ import annotations

import platform
import sys
from importlib.metadata import PackageNotFoundError, version

from cmdctl.cli.kernel import Kernel
from cmdctl.core import exit_status
from cmdctl.core.command import Command
from cmdctl.version import __version__


# ---------------------------------------------------------------------------
# Diagnostic collectors
# ---------------------------------------------------------------------------

def _python_row() -> tuple[str, str]:
    return "Python", platform.python_version()


def _os_row() -> tuple[str, str]:
    system_raw = platform.system()
    system_display = {
        "Windows": "Windows",
        "Linux": "Linux",
        "Darwin": "macOS",
    }.get(system_raw, system_raw)
    return "OS", f"{system_display} {platform.release()} ({platform.machine()})"


def _rich_row() -> tuple[str, str]:
    try:
        return "rich", version("rich")
    except PackageNotFoundError:
        return "rich", "not installed"


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

class ListCommand(Command):
    """Print every registered command with its description."""

    name = "list"
    description = "List available commands."

    def handle(self, kernel: Kernel) -> int:
        commands = kernel.commands()
        width = max((len(command.name) for command in commands), default=0)
        self.line("Available commands:", style="bold")
        for command in commands:
            self.line(f"  {command.name:<{width}}  {command.description}".rstrip())
        return exit_status.SUCCESS


class AboutCommand(Command):
    """Print version and environment details."""

    name = "about"
    description = "Show cmdctl version and environment."

    def handle(self) -> int:
        rows = [
            ("cmdctl", __version__),
            _python_row(),
            _os_row(),
            _rich_row(),
        ]
        for label, value in rows:
            self.line(f"{label:<8} {value}")
        if sys.version_info < (3, 11):
            self.error("Python >= 3.11 is required.")
            return exit_status.FAILURE
        return exit_status.SUCCESS


def register_builtins(kernel: Kernel) -> None:
    kernel.register(ListCommand())
    kernel.register(AboutCommand())
