"""Tests for cooperative scheduling (core/scheduler.py + controller wiring).

Coverage:
* The dispatch predicate.
* A coroutine command from a sync caller gets exactly one new context.
* A coroutine command from a cooperative caller runs directly.
* Cancellation inside the handler follows the generic error path.
* Hook flag parsing.
"""

from __future__ import annotations

import asyncio

import pytest

from cmdctl.core import exit_status
from cmdctl.core.channels import CommandInput
from cmdctl.core.command import Command
from cmdctl.core.events import AfterExecute, FailToHandle
from cmdctl.core.scheduler import ExecutionContext, ExecutionScheduler, HookFlags
from cmdctl.exceptions import CommandInterrupted


class AsyncCommand(Command):
    name = "async"
    coroutine = True
    hook_flags = HookFlags.SIGINT | HookFlags.DEBUG

    def __init__(self) -> None:
        super().__init__()
        self.loops: list[asyncio.AbstractEventLoop] = []

    async def handle(self) -> int:
        self.loops.append(asyncio.get_running_loop())
        await asyncio.sleep(0)
        return 3


class SyncCoroutineCommand(Command):
    name = "sync-coroutine"
    coroutine = True

    def __init__(self) -> None:
        super().__init__()
        self.in_loop: list[bool] = []

    def handle(self) -> int:
        self.in_loop.append(ExecutionContext.detect().cooperative)
        return 4


class PlainCommand(Command):
    name = "plain"

    def handle(self) -> int:
        return 0


class Cancelled(Command):
    name = "cancelled"
    coroutine = True

    async def handle(self) -> None:
        raise asyncio.CancelledError("SIGTERM")


# ---------------------------------------------------------------------------
# Predicate
# ---------------------------------------------------------------------------

class TestShouldDispatch:
    @pytest.mark.parametrize(
        ("command", "context", "expected"),
        [
            (AsyncCommand(), ExecutionContext.SYNC, True),
            (AsyncCommand(), ExecutionContext.COOPERATIVE, False),
            (PlainCommand(), ExecutionContext.SYNC, False),
            (PlainCommand(), ExecutionContext.COOPERATIVE, False),
        ],
    )
    def test_predicate(self, command: Command, context: ExecutionContext, expected: bool) -> None:
        assert ExecutionScheduler.should_dispatch(command, context) is expected

    def test_detect_outside_loop(self) -> None:
        assert ExecutionContext.detect() == ExecutionContext.SYNC

    def test_detect_inside_loop(self) -> None:
        async def probe() -> ExecutionContext:
            return ExecutionContext.detect()

        assert asyncio.run(probe()) == ExecutionContext.COOPERATIVE


# ---------------------------------------------------------------------------
# Controller scheduling
# ---------------------------------------------------------------------------

class TestControllerScheduling:
    def test_sync_caller_gets_new_context(self, make_controller, runner, output) -> None:
        command = AsyncCommand()
        status = make_controller(command).execute(CommandInput(), output, ExecutionContext.SYNC)

        assert status == 3
        assert runner.calls == [HookFlags.SIGINT | HookFlags.DEBUG]
        assert len(command.loops) == 1

    def test_context_is_detected_when_omitted(self, make_controller, runner, output) -> None:
        assert make_controller(AsyncCommand()).execute(CommandInput(), output) == 3
        assert len(runner.calls) == 1

    def test_cooperative_caller_runs_directly(self, make_controller, runner, output) -> None:
        command = SyncCoroutineCommand()
        controller = make_controller(command)

        status = controller.execute(CommandInput(), output, ExecutionContext.COOPERATIVE)

        assert status == 4
        assert runner.calls == []
        assert command.in_loop == [False]

    def test_execute_async_uses_the_callers_loop(self, make_controller, runner, output) -> None:
        command = AsyncCommand()
        controller = make_controller(command)

        async def caller() -> tuple[int, asyncio.AbstractEventLoop]:
            status = await controller.execute_async(CommandInput(), output)
            return status, asyncio.get_running_loop()

        status, loop = asyncio.run(caller())

        assert status == 3
        assert runner.calls == []
        assert command.loops == [loop]

    def test_plain_command_never_dispatches(self, make_controller, runner, output) -> None:
        make_controller(PlainCommand()).execute(CommandInput(), output, ExecutionContext.SYNC)
        assert runner.calls == []

    def test_sync_handler_inside_new_context(self, make_controller, runner, output) -> None:
        command = SyncCoroutineCommand()
        make_controller(command).execute(CommandInput(), output, ExecutionContext.SYNC)
        assert command.in_loop == [True]
        assert len(runner.calls) == 1


class TestCancellation:
    def test_follows_generic_error_path(
        self, make_controller, renderer, dispatcher, events, output,
    ) -> None:
        status = make_controller(Cancelled(), emitter=dispatcher).execute(
            CommandInput(), output, ExecutionContext.SYNC,
        )

        assert status == exit_status.FAILURE
        assert len(renderer.rendered) == 1
        error = renderer.rendered[0]
        assert isinstance(error, CommandInterrupted)
        assert error.signal_name == "SIGTERM"
        assert isinstance(error.__cause__, asyncio.CancelledError)

        failures = [event for event in events if isinstance(event, FailToHandle)]
        assert [event.error for event in failures] == [error]
        assert isinstance(events[-1], AfterExecute)
        assert events[-1].error is error

    def test_propagates_without_emitter(self, make_controller, output) -> None:
        with pytest.raises(CommandInterrupted):
            make_controller(Cancelled()).execute(CommandInput(), output, ExecutionContext.SYNC)


# ---------------------------------------------------------------------------
# Hook flags
# ---------------------------------------------------------------------------

class TestHookFlags:
    def test_default(self) -> None:
        assert HookFlags.DEFAULT == HookFlags.SIGINT | HookFlags.SIGTERM

    def test_parse(self) -> None:
        assert HookFlags.parse("sigint, SIGHUP") == HookFlags.SIGINT | HookFlags.SIGHUP

    def test_parse_empty(self) -> None:
        assert HookFlags.parse("") == HookFlags.NONE

    def test_parse_unknown(self) -> None:
        with pytest.raises(KeyError):
            HookFlags.parse("SIGUSR9")
