"""Run-now versus run-inside-an-event-loop scheduling.

A command whose ``coroutine`` flag is set gets a fresh asyncio context
when the caller is not already inside one.  Otherwise the callback runs
directly on the calling thread.  Either way the call is synchronous from
the outside and at most one context is created per execution.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, ClassVar

from cmdctl.core.protocols import ContextRunner

if TYPE_CHECKING:
    from cmdctl.core.command import Command

logger = logging.getLogger(__name__)


class HookFlags(enum.Flag):
    """Interception points the cooperative context installs."""

    NONE = 0
    SIGINT = 1
    SIGTERM = 2
    SIGHUP = 4
    DEBUG = 8
    """Run the event loop in debug mode."""

    DEFAULT = SIGINT | SIGTERM
    ALL = SIGINT | SIGTERM | SIGHUP

    @classmethod
    def parse(cls, text: str) -> HookFlags:
        """Parse a comma separated list such as ``"SIGINT,SIGTERM"``."""
        flags = cls.NONE
        for part in text.split(","):
            name = part.strip().upper()
            if name:
                flags |= cls[name]
        return flags


@dataclass(frozen=True, slots=True)
class ExecutionContext:
    """Token telling the controller what kind of caller it serves."""

    cooperative: bool

    SYNC: ClassVar[ExecutionContext]
    COOPERATIVE: ClassVar[ExecutionContext]

    @classmethod
    def detect(cls) -> ExecutionContext:
        """Inspect the calling thread for a running event loop."""
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            return cls.SYNC
        return cls.COOPERATIVE


ExecutionContext.SYNC = ExecutionContext(cooperative=False)
ExecutionContext.COOPERATIVE = ExecutionContext(cooperative=True)


class ExecutionScheduler:
    """Owns the dispatch decision and the dispatch itself.

    Parameters
    ----------
    runner:
        Collaborator that creates the cooperative context.
    """

    def __init__(self, runner: ContextRunner) -> None:
        self._runner: ContextRunner = runner

    @staticmethod
    def should_dispatch(command: Command, context: ExecutionContext) -> bool:
        return bool(command.coroutine) and not context.cooperative

    def run(
        self,
        command: Command,
        context: ExecutionContext,
        sync_callback: Callable[[], int | None],
        async_callback: Callable[[], Awaitable[int | None]],
    ) -> int | None:
        if self.should_dispatch(command, context):
            logger.debug(
                "Dispatching %r into a new cooperative context (hooks=%s)",
                command.name,
                command.hook_flags,
            )
            return self._runner.run(async_callback, command.hook_flags)
        logger.debug("Running %r directly on the calling thread", command.name)
        return sync_callback()
