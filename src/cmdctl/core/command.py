"""Base class for user-defined commands.

Subclasses define either ``handle`` or ``__call__``; the controller picks
one when it is constructed.  Handler parameters are injected by the
resolver, so a handler only declares what it needs::

    class Greet(Command):
        name = "greet"

        def handle(self, who: str = "world") -> int:
            self.line(f"Hello {who}")
            return 0
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, ClassVar, NoReturn

from cmdctl.core.channels import CommandInput, NullOutput
from cmdctl.core.events import NullEmitter
from cmdctl.core.protocols import Kernel, LifecycleEmitter, OutputChannel
from cmdctl.core.scheduler import HookFlags
from cmdctl.exceptions import CommandNotFoundError
from cmdctl.exceptions import fail as _fail


class Command:
    """One unit of work governed by a :class:`CommandController`."""

    name: ClassVar[str] = ""
    description: ClassVar[str] = ""
    coroutine: bool = False
    """Run inside a fresh event loop when the caller has none."""

    hook_flags: HookFlags = HookFlags.DEFAULT

    def __init__(self, name: str | None = None) -> None:
        if name is not None:
            self.name = name  # type: ignore[misc]
        elif not self.name:
            self.name = type(self).__name__.lower()  # type: ignore[misc]
        self.exit_code: int | None = None
        self.input: CommandInput = CommandInput()
        self.output: OutputChannel = NullOutput()
        self.emitter: LifecycleEmitter = NullEmitter()
        self.kernel: Kernel | None = None

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"

    # ------------------------------------------------------------------
    # Output helpers
    # ------------------------------------------------------------------

    def line(self, text: str, style: str | None = None) -> None:
        self.output.line(text, style)

    def error(self, message: str) -> None:
        self.output.error(message)

    # ------------------------------------------------------------------
    # Control flow
    # ------------------------------------------------------------------

    def fail(self, error: str | BaseException | None = None) -> NoReturn:
        """Fail the command manually.

        Raises
        ------
        ManualFailure
            When *error* is ``None`` or a string.
        BaseException
            *error* itself, unchanged, when it is an exception.
        """
        _fail(error)

    # ------------------------------------------------------------------
    # Sub-invocation
    # ------------------------------------------------------------------

    def _require_kernel(self, name: str) -> Kernel:
        if self.kernel is None:
            raise CommandNotFoundError(
                name,
                hint=f"{self!r} is not registered with a kernel.",
            )
        return self.kernel

    def call(self, name: str, arguments: Mapping[str, Any] | None = None) -> int:
        """Run another command, sharing this command's output."""
        return self._require_kernel(name).call(name, arguments, self.output)

    def call_silent(self, name: str, arguments: Mapping[str, Any] | None = None) -> int:
        """Run another command without output and return its exit status."""
        return self._require_kernel(name).call(name, arguments, NullOutput())

    async def call_silent_async(
        self, name: str, arguments: Mapping[str, Any] | None = None,
    ) -> int:
        """Like :meth:`call_silent`, for handlers already inside a loop."""
        return await self._require_kernel(name).call_async(name, arguments, NullOutput())
