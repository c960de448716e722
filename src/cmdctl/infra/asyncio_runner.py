"""Cooperative-context runner backed by :mod:`asyncio`.

This module is the **only** place in the codebase that creates an event
loop.  Each :meth:`AsyncioContextRunner.run` call gets a fresh loop,
installs the signal hooks requested by the command's hook flags, runs
the callback to completion and tears everything down again, putting
back whatever signal handlers the host process had installed.

A trapped signal cancels the running task with the signal name as the
cancel message; the controller turns the resulting
``asyncio.CancelledError`` into a
:class:`~cmdctl.exceptions.CommandInterrupted` error.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from cmdctl.core.scheduler import HookFlags

logger = logging.getLogger(__name__)

T = TypeVar("T")

_SIGNAL_FLAGS: tuple[tuple[HookFlags, str], ...] = (
    (HookFlags.SIGINT, "SIGINT"),
    (HookFlags.SIGTERM, "SIGTERM"),
    (HookFlags.SIGHUP, "SIGHUP"),
)


def signals_for(hook_flags: HookFlags) -> list[signal.Signals]:
    """Return the signals selected by *hook_flags* that this platform has."""
    selected: list[signal.Signals] = []
    for flag, name in _SIGNAL_FLAGS:
        if flag in hook_flags and hasattr(signal, name):
            selected.append(signal.Signals[name])
    return selected


class AsyncioContextRunner:
    """Runs a coroutine function inside a new event loop."""

    def run(self, callback: Callable[[], Awaitable[T]], hook_flags: HookFlags) -> T:
        debug = HookFlags.DEBUG in hook_flags
        with asyncio.Runner(debug=debug) as runner:
            return runner.run(self._supervise(callback, hook_flags))

    async def _supervise(self, callback: Callable[[], Awaitable[T]], hook_flags: HookFlags) -> T:
        loop = asyncio.get_running_loop()
        task = asyncio.current_task()
        previous = self._install(loop, task, signals_for(hook_flags))
        try:
            return await callback()
        finally:
            for sig, handler in previous.items():
                loop.remove_signal_handler(sig)
                # remove_signal_handler resets to SIG_DFL; put the host's handler back.
                if handler is not None:
                    signal.signal(sig, handler)

    @staticmethod
    def _install(
        loop: asyncio.AbstractEventLoop,
        task: asyncio.Task | None,
        signals: list[signal.Signals],
    ) -> dict[signal.Signals, Any]:
        """Install loop handlers and return the handlers they replaced."""
        previous: dict[signal.Signals, Any] = {}
        if task is None:
            return previous

        def on_signal(sig: signal.Signals) -> None:
            logger.info("Received %s, cancelling command", sig.name)
            task.cancel(msg=sig.name)

        for sig in signals:
            handler = signal.getsignal(sig)
            try:
                loop.add_signal_handler(sig, on_signal, sig)
            except (NotImplementedError, RuntimeError):
                # Windows loops, or a non-main thread.
                logger.warning("Signal hook for %s not supported here", sig.name)
                continue
            previous[sig] = handler
        return previous
