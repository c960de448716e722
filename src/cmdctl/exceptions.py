"""Custom exception hierarchy for cmdctl.

All exceptions that cross layer boundaries must inherit from
:class:`CmdctlError`.  Two of them are *outcomes* rather than bugs and
are matched explicitly by the controller: :class:`ManualFailure` and
:class:`RuntimeExitRequest`.

Hierarchy
---------
CmdctlError
├── ManualFailure
├── RuntimeExitRequest
├── CommandInterrupted
├── CommandNotFoundError
├── CommandDefinitionError
├── ResolutionError
└── CooperativeContextError
"""

from __future__ import annotations

from typing import NoReturn

DEFAULT_FAILURE_MESSAGE = "Command failed manually."


class CmdctlError(Exception):
    """Base exception for all cmdctl errors.

    Every user-visible error condition maps to a subclass of this
    exception so that the CLI error boundary can render a clean message
    without leaking internal stack traces.
    """

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.hint: str | None = hint
        """Optional actionable guidance shown below the error message."""


# --- Handler outcomes ------------------------------------------------------

class ManualFailure(CmdctlError):
    """Raised by a handler to abort the command with a message.

    Always maps to the fixed failure status; it is rendered as a plain
    error line and never reaches the error renderer.
    """


class RuntimeExitRequest(CmdctlError):
    """Raised when the hosting runtime asks the process to stop.

    The carried *status* is adopted verbatim as the exit code.  No
    rendering and no failure reporting happen for this outcome.
    """

    def __init__(self, status: int, message: str | None = None) -> None:
        super().__init__(message or f"Exit requested with status {status}.")
        self.status: int = status

    @classmethod
    def from_system_exit(cls, exc: SystemExit) -> RuntimeExitRequest:
        """Translate ``sys.exit()`` into an exit request.

        ``None`` means success; a non-integer payload (``sys.exit("msg")``)
        is a failure, mirroring how the interpreter itself treats it.
        """
        code = exc.code
        if code is None:
            return cls(0)
        if isinstance(code, int) and not isinstance(code, bool):
            return cls(code)
        return cls(1, str(code))


class CommandInterrupted(CmdctlError):
    """Raised inside a handler when a trapped signal cancelled it."""

    def __init__(self, signal_name: str | None = None) -> None:
        self.signal_name: str | None = signal_name
        reason = f"received {signal_name}" if signal_name else "cancelled"
        super().__init__(f"Command interrupted ({reason}).")


# --- Command registry / definition -----------------------------------------

class CommandNotFoundError(CmdctlError):
    """Raised when no command is registered under the requested name."""

    def __init__(self, name: str, *, hint: str | None = None) -> None:
        super().__init__(f'Command "{name}" is not defined.', hint=hint)
        self.name: str = name


class CommandDefinitionError(CmdctlError):
    """Raised when a command class defines no usable entry point."""


# --- Invocation ------------------------------------------------------------

class ResolutionError(CmdctlError):
    """Raised when the resolver cannot supply a handler parameter."""


class CooperativeContextError(CmdctlError):
    """Raised when an awaitable handler result cannot be awaited."""


def fail(error: str | BaseException | None = None) -> NoReturn:
    """Abort the running command.

    ``None`` fails with a default message, a string is wrapped in
    :class:`ManualFailure`, and an exception instance is raised as is.
    """
    if error is None:
        error = DEFAULT_FAILURE_MESSAGE
    if isinstance(error, str):
        error = ManualFailure(error)
    raise error
