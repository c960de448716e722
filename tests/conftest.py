"""Shared pytest fixtures and configuration for the cmdctl test suite.

Guidelines
----------
* No network access in any test.
* Collaborators (renderer, runner) are recorded, not mocked away, so
  tests can assert on what the controller handed them.
* Only the runner tests create real event loops with signal hooks.
"""

from __future__ import annotations

import asyncio
import os
from collections.abc import Awaitable, Callable
from typing import Any

import pytest

from cmdctl.core.binding import OutputBinder
from cmdctl.core.channels import BufferedOutput, CommandInput
from cmdctl.core.command import Command
from cmdctl.core.controller import CommandController
from cmdctl.core.events import EventDispatcher, LifecycleEvent
from cmdctl.core.protocols import LifecycleEmitter, OutputChannel
from cmdctl.core.scheduler import ExecutionScheduler, HookFlags
from cmdctl.infra.container import CommandScopedResolver, Container


class RecordingRenderer:
    """Error renderer that remembers what it rendered."""

    def __init__(self) -> None:
        self.rendered: list[BaseException] = []

    def render(self, error: BaseException, input: CommandInput, output: OutputChannel) -> None:
        self.rendered.append(error)
        output.error(f"rendered: {error}")


class RecordingRunner:
    """Context runner that records hook flags and runs via ``asyncio.run``."""

    def __init__(self) -> None:
        self.calls: list[HookFlags] = []

    def run(self, callback: Callable[[], Awaitable[Any]], hook_flags: HookFlags) -> Any:
        self.calls.append(hook_flags)
        return asyncio.run(callback())


@pytest.fixture
def output() -> BufferedOutput:
    return BufferedOutput()


@pytest.fixture
def renderer() -> RecordingRenderer:
    return RecordingRenderer()


@pytest.fixture
def runner() -> RecordingRunner:
    return RecordingRunner()


@pytest.fixture
def events() -> list[LifecycleEvent]:
    return []


@pytest.fixture
def dispatcher(events: list[LifecycleEvent]) -> EventDispatcher:
    emitter = EventDispatcher()
    emitter.subscribe(events.append)
    return emitter


@pytest.fixture
def container() -> Container:
    return Container()


@pytest.fixture
def make_controller(
    renderer: RecordingRenderer,
    runner: RecordingRunner,
    container: Container,
) -> Callable[..., CommandController]:
    def factory(
        command: Command,
        emitter: LifecycleEmitter | None = None,
    ) -> CommandController:
        return CommandController(
            command,
            resolver=CommandScopedResolver(container, command),
            renderer=renderer,
            scheduler=ExecutionScheduler(runner),
            emitter=emitter,
            binder=OutputBinder(container),
        )

    return factory


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep ``CMDCTL_*`` variables from the developer's shell out of tests."""
    for name in list(os.environ):
        if name.startswith("CMDCTL_"):
            monkeypatch.delenv(name)
