"""Core layer — command lifecycle orchestration.

Rules
-----
* No ``print()`` calls; all output goes through an output channel.
* No event-loop creation; that is the runner's job.
* No imports from ``cli`` or ``infra``.
"""

from cmdctl.core.binding import OutputBinder
from cmdctl.core.channels import BufferedOutput, CommandInput, NullOutput
from cmdctl.core.command import Command
from cmdctl.core.controller import CommandController, select_entry_point
from cmdctl.core.events import (
    AfterExecute,
    AfterHandle,
    BeforeHandle,
    EventDispatcher,
    FailToHandle,
    LifecycleEvent,
    NullEmitter,
)
from cmdctl.core.protocols import (
    ContextRunner,
    ErrorRenderer,
    Kernel,
    LifecycleEmitter,
    OutputChannel,
    Resolver,
)
from cmdctl.core.scheduler import ExecutionContext, ExecutionScheduler, HookFlags

__all__: list[str] = [
    "AfterExecute",
    "AfterHandle",
    "BeforeHandle",
    "BufferedOutput",
    "Command",
    "CommandController",
    "CommandInput",
    "ContextRunner",
    "ErrorRenderer",
    "EventDispatcher",
    "ExecutionContext",
    "ExecutionScheduler",
    "FailToHandle",
    "HookFlags",
    "Kernel",
    "LifecycleEmitter",
    "LifecycleEvent",
    "NullEmitter",
    "NullOutput",
    "OutputBinder",
    "OutputChannel",
    "Resolver",
    "select_entry_point",
]
