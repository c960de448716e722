"""Command kernel — registry and composition root.

The kernel owns the long-lived collaborators (container, emitter, error
renderer, scheduler) and builds a fresh
:class:`~cmdctl.core.controller.CommandController` for every call.
"""

from __future__ import annotations

import difflib
import logging
from collections.abc import Mapping
from typing import Any

from cmdctl.cli.error_renderer import RichErrorRenderer
from cmdctl.config import Settings
from cmdctl.core.binding import OutputBinder
from cmdctl.core.channels import CommandInput, NullOutput
from cmdctl.core.command import Command
from cmdctl.core.controller import DISABLE_EVENTS_OPTION, CommandController
from cmdctl.core.events import NullEmitter
from cmdctl.core.protocols import ContextRunner, ErrorRenderer, LifecycleEmitter, OutputChannel
from cmdctl.core.scheduler import ExecutionContext, ExecutionScheduler
from cmdctl.exceptions import CommandNotFoundError
from cmdctl.infra.asyncio_runner import AsyncioContextRunner
from cmdctl.infra.container import CommandScopedResolver, Container

logger = logging.getLogger(__name__)


def _declares(cls: type, attr: str) -> bool:
    """True when a subclass of :class:`Command` sets *attr* itself."""
    for klass in cls.__mro__:
        if klass is Command:
            return False
        if attr in vars(klass):
            return True
    return False


class Kernel:
    """Registry of commands that can run any of them by name.

    Parameters
    ----------
    container:
        Dependency container used for handler injection and for the
        output override.  A new one is created when omitted.
    emitter:
        Lifecycle emitter attached to registered commands that have
        none of their own.
    renderer:
        Renderer for unexpected errors.
    runner:
        Cooperative-context runner; asyncio by default.
    settings:
        Runtime settings; field defaults, not the environment, when omitted.
    """

    def __init__(
        self,
        container: Container | None = None,
        emitter: LifecycleEmitter | None = None,
        renderer: ErrorRenderer | None = None,
        runner: ContextRunner | None = None,
        settings: Settings | None = None,
    ) -> None:
        self.settings: Settings = settings if settings is not None else Settings.defaults()
        self.container: Container = container if container is not None else Container()
        self.emitter: LifecycleEmitter = emitter if emitter is not None else NullEmitter()
        self.renderer: ErrorRenderer = (
            renderer if renderer is not None else RichErrorRenderer(verbose=self.settings.verbose)
        )
        self.scheduler: ExecutionScheduler = ExecutionScheduler(
            runner if runner is not None else AsyncioContextRunner(),
        )
        self._binder: OutputBinder = OutputBinder(self.container)
        self._commands: dict[str, Command] = {}
        self.container.bind(Kernel, self)

    # ------------------------------------------------------------------
    # Registry
    # ------------------------------------------------------------------

    def register(self, command: Command) -> Command:
        command.kernel = self
        if not command.emitter.active:
            command.emitter = self.emitter
        if not _declares(type(command), "hook_flags"):
            command.hook_flags = self.settings.hook_flags
        self._commands[command.name] = command
        logger.debug("Registered command %r", command.name)
        return command

    def command(self, cls: type[Command]) -> type[Command]:
        """Class decorator registering a default instance of *cls*."""
        self.register(cls())
        return cls

    def commands(self) -> list[Command]:
        return sorted(self._commands.values(), key=lambda command: command.name)

    def find(self, name: str) -> Command:
        try:
            return self._commands[name]
        except KeyError:
            matches = difflib.get_close_matches(name, list(self._commands), n=1)
            hint = f'Did you mean "{matches[0]}"?' if matches else None
            raise CommandNotFoundError(name, hint=hint) from None

    # ------------------------------------------------------------------
    # Invocation
    # ------------------------------------------------------------------

    def controller(self, command: Command) -> CommandController:
        return CommandController(
            command,
            resolver=CommandScopedResolver(self.container, command),
            renderer=self.renderer,
            scheduler=self.scheduler,
            binder=self._binder,
        )

    def _input(
        self,
        arguments: Mapping[str, Any] | None,
        options: Mapping[str, Any] | None,
        output: OutputChannel,
    ) -> CommandInput:
        merged: dict[str, Any] = {}
        if self.settings.disable_events:
            merged[DISABLE_EVENTS_OPTION] = True
        if self.settings.verbose:
            merged["verbose"] = True
        merged.update(options or {})
        return CommandInput(
            arguments=dict(arguments or {}),
            options=merged,
            interactive=not isinstance(output, NullOutput),
        )

    def call(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        output: OutputChannel | None = None,
        *,
        options: Mapping[str, Any] | None = None,
        context: ExecutionContext | None = None,
    ) -> int:
        """Run the command registered as *name* and return its exit status.

        Output is discarded unless *output* is given.

        Raises
        ------
        CommandNotFoundError
            When no command is registered under *name*.
        """
        command = self.find(name)
        output = output if output is not None else NullOutput()
        command_input = self._input(arguments, options, output)
        return self.controller(command).execute(command_input, output, context)

    async def call_async(
        self,
        name: str,
        arguments: Mapping[str, Any] | None = None,
        output: OutputChannel | None = None,
        *,
        options: Mapping[str, Any] | None = None,
    ) -> int:
        """Like :meth:`call`, awaited on the caller's event loop."""
        command = self.find(name)
        output = output if output is not None else NullOutput()
        command_input = self._input(arguments, options, output)
        return await self.controller(command).execute_async(command_input, output)
