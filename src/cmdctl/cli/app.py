"""CLI application entry point for cmdctl.

This module is the **sole process-level error boundary**.  The command
controller already turns handler outcomes into exit codes; what reaches
:func:`cli` is either a setup problem (:class:`~cmdctl.exceptions.CmdctlError`),
``KeyboardInterrupt`` outside a trapped context, or an error a command
raised while no lifecycle emitter was registered.

Architecture notes
------------------
* No command logic lives here — work is delegated to the kernel.
* ``print()`` is forbidden outside the CLI layer; boundary messages go
  through :class:`~cmdctl.cli.output.ConsoleOutput`.
* This module is the only place that calls ``sys.exit``.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence
from typing import Any

from cmdctl.cli.builtin import register_builtins
from cmdctl.cli.kernel import Kernel
from cmdctl.cli.logging_setup import configure_logging
from cmdctl.cli.output import ConsoleOutput
from cmdctl.config import Settings
from cmdctl.core import exit_status
from cmdctl.core.controller import DISABLE_EVENTS_OPTION
from cmdctl.core.events import EventDispatcher, LifecycleEvent
from cmdctl.exceptions import CmdctlError
from cmdctl.version import __version__

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Argument parser
# ---------------------------------------------------------------------------

def _build_parser() -> argparse.ArgumentParser:
    """Construct the top-level argument parser.

    * ``cmdctl``                        — list commands
    * ``cmdctl <command> [key=value…]`` — run a command
    * ``cmdctl --version``
    """
    parser = argparse.ArgumentParser(
        prog="cmdctl",
        description="Run registered commands through the lifecycle controller.",
    )
    parser.add_argument(
        "-V",
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Show debug logs and full tracebacks.",
    )
    parser.add_argument(
        "--disable-events",
        action="store_true",
        help="Do not dispatch lifecycle events for this run.",
    )
    parser.add_argument(
        "command",
        nargs="?",
        default=None,
        help="Name of the command to run (default: list).",
    )
    parser.add_argument(
        "arguments",
        nargs="*",
        metavar="key=value",
        help="Arguments passed to the command handler.",
    )
    return parser


def parse_pairs(pairs: Sequence[str]) -> dict[str, str]:
    """Turn ``["a=1", "b=x"]`` into ``{"a": "1", "b": "x"}``.

    Raises
    ------
    CmdctlError
        When an item has no ``=`` or an empty key.
    """
    parsed: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise CmdctlError(
                f"Invalid argument {pair!r}.",
                hint="Arguments must be given as key=value.",
            )
        parsed[key.replace("-", "_")] = value
    return parsed


# ---------------------------------------------------------------------------
# Kernel wiring
# ---------------------------------------------------------------------------

def _log_event(event: LifecycleEvent) -> None:
    logger.debug("%s: %s", type(event).__name__, event.command.name)


def default_kernel(settings: Settings | None = None) -> Kernel:
    """Kernel with an event dispatcher and the built-in commands."""
    dispatcher = EventDispatcher()
    dispatcher.subscribe(_log_event)
    kernel = Kernel(emitter=dispatcher, settings=settings)
    register_builtins(kernel)
    return kernel


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------

def main(argv: list[str] | None = None, kernel: Kernel | None = None) -> int:
    """Run the cmdctl CLI.

    Parameters
    ----------
    argv:
        Explicit argument list.  When ``None`` (default), ``sys.argv[1:]``
        is used.  Accepting *argv* enables deterministic testing without
        monkeypatching.
    kernel:
        Kernel to dispatch to; :func:`default_kernel` when ``None``.

    Returns
    -------
    int
        OS process exit code.
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    settings = Settings.from_env()
    configure_logging(logging.DEBUG if args.verbose else settings.log_level)
    if kernel is None:
        kernel = default_kernel(settings)

    options: dict[str, Any] = {}
    if args.verbose:
        options["verbose"] = True
    if args.disable_events:
        options[DISABLE_EVENTS_OPTION] = True

    output = ConsoleOutput(verbose=args.verbose or settings.verbose)
    return kernel.call(
        args.command or "list",
        parse_pairs(args.arguments),
        output,
        options=options,
    )


# ---------------------------------------------------------------------------
# Script-level error boundary
# ---------------------------------------------------------------------------

def cli() -> None:
    """Top-level error boundary invoked by the console-script entry point.

    This function wraps :func:`main` and guarantees the process never
    exits with a raw stack trace during normal usage.  Messages go
    through a :class:`ConsoleOutput`, which never interprets error text
    as Rich markup.
    """
    try:
        code = main()
        sys.exit(code)
    except CmdctlError as exc:
        output = ConsoleOutput()
        output.error(str(exc))
        if exc.hint:
            output.line(f"Hint: {exc.hint}", style="yellow")
        sys.exit(exit_status.FAILURE)
    except KeyboardInterrupt:
        ConsoleOutput().error("Aborted by user.")
        sys.exit(exit_status.KEYBOARD_INTERRUPT)
    except Exception as exc:  # noqa: BLE001
        ConsoleOutput().error(f"Unexpected error. {type(exc).__name__}: {exc}")
        sys.exit(exit_status.FAILURE)
