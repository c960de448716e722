"""Command controller — runs one command through its lifecycle.

This module is the **sole place** where handler outcomes are translated
into exit codes.  Per execution exactly one of the following happens:

* normal completion — an ``int`` returned by the handler becomes the
  exit code;
* :class:`~cmdctl.exceptions.ManualFailure` — one error line, exit code
  :data:`~cmdctl.core.exit_status.FAILURE`;
* :class:`~cmdctl.exceptions.RuntimeExitRequest` (or ``SystemExit``) —
  its status is adopted, nothing is rendered or reported;
* unexpected error with an active emitter — rendered, reported through
  ``FailToHandle``, exit code ``FAILURE``;
* unexpected error without an emitter — re-raised unchanged.

``AfterExecute`` is dispatched on every one of those paths, last.
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any

from cmdctl.core import exit_status
from cmdctl.core.binding import OutputBinder
from cmdctl.core.channels import CommandInput
from cmdctl.core.command import Command
from cmdctl.core.events import (
    AfterExecute,
    AfterHandle,
    BeforeHandle,
    FailToHandle,
    NullEmitter,
)
from cmdctl.core.protocols import (
    ErrorRenderer,
    LifecycleEmitter,
    OutputChannel,
    Resolver,
)
from cmdctl.core.scheduler import ExecutionContext, ExecutionScheduler
from cmdctl.exceptions import (
    CommandDefinitionError,
    CommandInterrupted,
    CooperativeContextError,
    ManualFailure,
    RuntimeExitRequest,
)

logger = logging.getLogger(__name__)

DISABLE_EVENTS_OPTION = "disable-events"
ENTRY_POINTS: tuple[str, ...] = ("handle", "__call__")


def select_entry_point(command: Command) -> Callable[..., Any]:
    """Return the bound handler: ``handle`` if defined, else ``__call__``.

    ``handle`` anywhere in the class hierarchy wins over ``__call__``,
    even one a subclass defines.

    Raises
    ------
    CommandDefinitionError
        When the command class defines neither.
    """
    classes = [klass for klass in type(command).__mro__ if klass is not object]
    for method in ENTRY_POINTS:
        if any(callable(vars(klass).get(method)) for klass in classes):
            return getattr(command, method)
    raise CommandDefinitionError(
        f"{type(command).__name__} defines neither handle() nor __call__().",
    )


@dataclass(slots=True)
class _Outcome:
    result: Any = None


def _discard(awaitable: Any) -> None:
    close = getattr(awaitable, "close", None)
    if callable(close):
        close()


class CommandController:
    """Composes events, output binding and scheduling around one command.

    Parameters
    ----------
    command:
        The command to run.  Its handler entry point is selected here,
        once, and reused for the controller's lifetime.
    resolver:
        Injects handler arguments and invokes the handler.
    renderer:
        Renders unexpected errors when an emitter is active.
    scheduler:
        Decides between direct and cooperative execution.
    emitter:
        Lifecycle emitter; defaults to the command's own, which is the
        null emitter unless one was attached.
    binder:
        Output override lookup; defaults to "never override".
    """

    def __init__(
        self,
        command: Command,
        *,
        resolver: Resolver,
        renderer: ErrorRenderer,
        scheduler: ExecutionScheduler,
        emitter: LifecycleEmitter | None = None,
        binder: OutputBinder | None = None,
    ) -> None:
        self._command: Command = command
        self._resolver: Resolver = resolver
        self._renderer: ErrorRenderer = renderer
        self._scheduler: ExecutionScheduler = scheduler
        self._emitter: LifecycleEmitter = emitter if emitter is not None else command.emitter
        self._binder: OutputBinder = binder if binder is not None else OutputBinder()
        self._run_emitter: LifecycleEmitter = self._emitter
        self._entry_point: Callable[..., Any] = select_entry_point(command)
        logger.debug("Entry point for %r: %s", command.name, self._entry_point.__name__)

    @property
    def command(self) -> Command:
        return self._command

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def execute(
        self,
        input: CommandInput,
        output: OutputChannel,
        context: ExecutionContext | None = None,
    ) -> int:
        """Run the command once and return a status in ``[0, 255]``.

        Parameters
        ----------
        input, output:
            Channels bound to the command for this run.  *output* may be
            replaced by an environment override.
        context:
            Whether the caller already runs inside an event loop.
            Detected when omitted.

        Raises
        ------
        Exception
            Whatever the handler raised, unchanged, when no emitter is
            registered.
        """
        self._prepare(input, output)
        if context is None:
            context = ExecutionContext.detect()
        self._scheduler.run(self._command, context, self._callback, self._callback_async)
        return self._finish()

    async def execute_async(self, input: CommandInput, output: OutputChannel) -> int:
        """Run the command on the caller's event loop, without a new context."""
        self._prepare(input, output)
        await self._callback_async()
        return self._finish()

    # ------------------------------------------------------------------
    # Steps
    # ------------------------------------------------------------------

    def _prepare(self, input: CommandInput, output: OutputChannel) -> None:
        command = self._command
        self._run_emitter = self._emitter
        if input.option(DISABLE_EVENTS_OPTION):
            logger.debug("Lifecycle events disabled for %r", command.name)
            self._run_emitter = NullEmitter()
        command.input = input
        command.output = self._binder.resolve(output)
        command.exit_code = None

    def _finish(self) -> int:
        code = self._command.exit_code
        status = exit_status.normalize(code)
        if code is not None and status != code:
            logger.warning(
                "Exit code %d of %r is out of range; using %d", code, self._command.name, status,
            )
        logger.debug("Command %r finished with status %d", self._command.name, status)
        return status

    @contextmanager
    def _guarded(self) -> Iterator[_Outcome]:
        command = self._command
        emitter = self._run_emitter
        outcome = _Outcome()
        error: BaseException | None = None
        try:
            yield outcome
            result = outcome.result
            if isinstance(result, int) and not isinstance(result, bool):
                command.exit_code = result
            emitter.dispatch(AfterHandle(command))
        except ManualFailure as exc:
            command.output.error(str(exc))
            command.exit_code = exit_status.FAILURE
        except (RuntimeExitRequest, SystemExit) as exc:
            error = exc
            if isinstance(exc, SystemExit):
                exc = RuntimeExitRequest.from_system_exit(exc)
            command.exit_code = exc.status
        except Exception as exc:
            error = exc
            if not emitter.active:
                raise
            self._renderer.render(exc, command.input, command.output)
            command.exit_code = exit_status.FAILURE
            emitter.dispatch(FailToHandle(command, exc))
        except BaseException as exc:
            # KeyboardInterrupt and friends leave unhandled but still reach AfterExecute.
            error = exc
            raise
        finally:
            emitter.dispatch(AfterExecute(command, error))

    def _callback(self) -> int | None:
        with self._guarded() as outcome:
            self._run_emitter.dispatch(BeforeHandle(self._command))
            result = self._resolver.call(self._entry_point)
            if inspect.isawaitable(result):
                _discard(result)
                raise CooperativeContextError(
                    f"Handler of {self._command.name!r} returned an awaitable "
                    "outside an event loop.",
                    hint="Set coroutine = True on the command, or await "
                    "execute_async() from inside the running loop.",
                )
            outcome.result = result
        return self._command.exit_code

    async def _callback_async(self) -> int | None:
        with self._guarded() as outcome:
            self._run_emitter.dispatch(BeforeHandle(self._command))
            try:
                result = self._resolver.call(self._entry_point)
                if inspect.isawaitable(result):
                    result = await result
            except asyncio.CancelledError as exc:
                reason = str(exc.args[0]) if exc.args else None
                raise CommandInterrupted(reason) from exc
            outcome.result = result
        return self._command.exit_code
