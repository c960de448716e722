"""Protocols (interfaces) consumed by the core layer.

These define the contracts that collaborators must satisfy.  Core code
depends ONLY on these protocols — never on concrete implementations —
so the controller can be wired with the real asyncio runner, Rich
renderer and container, or with test doubles.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

if TYPE_CHECKING:
    from cmdctl.core.channels import CommandInput
    from cmdctl.core.events import LifecycleEvent
    from cmdctl.core.scheduler import ExecutionContext, HookFlags

T = TypeVar("T")


class OutputChannel(Protocol):
    """Sink the controller and the handler write to."""

    verbose: bool

    def line(self, text: str, style: str | None = None) -> None:
        """Write one line of regular output."""
        ...  # pragma: no cover

    def error(self, message: str) -> None:
        """Write one error line."""
        ...  # pragma: no cover

    def exception(self, error: BaseException) -> None:
        """Write a traceback for *error*.  May be a no-op."""
        ...  # pragma: no cover


class Bindings(Protocol):
    """Read side of a dependency container."""

    def bound(self, key: Any) -> bool:
        ...  # pragma: no cover

    def get(self, key: Any) -> Any:
        ...  # pragma: no cover


class Resolver(Protocol):
    """Performs argument injection and invokes *func*.

    Returns whatever the handler returns; an ``int`` is taken as the exit
    code, anything else is ignored.  May raise.
    """

    def call(self, func: Callable[..., Any], **overrides: Any) -> Any:
        ...  # pragma: no cover


class ErrorRenderer(Protocol):
    """Writes a human-readable rendering of *error* to *output*."""

    def render(
        self,
        error: BaseException,
        input: CommandInput,
        output: OutputChannel,
    ) -> None:
        ...  # pragma: no cover


class LifecycleEmitter(Protocol):
    """Fan-out of lifecycle events.

    ``active`` is ``False`` only for the null emitter, which stands for
    "no emitter registered".
    """

    @property
    def active(self) -> bool:
        ...  # pragma: no cover

    def dispatch(self, event: LifecycleEvent) -> None:
        ...  # pragma: no cover


class ContextRunner(Protocol):
    """Runs *callback* to completion inside a fresh cooperative context.

    Control returns to the caller only once the callback has finished.
    """

    def run(self, callback: Callable[[], Awaitable[T]], hook_flags: HookFlags) -> T:
        ...  # pragma: no cover


class Kernel(Protocol):
    """Command registry able to run a command by name."""

    def call(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        output: OutputChannel | None = None,
        *,
        options: Mapping[str, Any] | None = None,
        context: ExecutionContext | None = None,
    ) -> int:
        ...  # pragma: no cover

    async def call_async(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        output: OutputChannel | None = None,
        *,
        options: Mapping[str, Any] | None = None,
    ) -> int:
        ...  # pragma: no cover
