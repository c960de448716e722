"""Lifecycle events and their dispatchers.

Events are ephemeral: created, dispatched and discarded.  Within one
execution they are totally ordered::

    BeforeHandle -> AfterHandle -> FailToHandle -> AfterExecute

``AfterHandle`` is skipped when the handler raises, ``FailToHandle`` on
every path but an unexpected error; ``AfterExecute`` always comes last.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Union

if TYPE_CHECKING:
    from cmdctl.core.command import Command

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Event variants
# ---------------------------------------------------------------------------

@dataclass(frozen=True, slots=True)
class BeforeHandle:
    """The handler is about to be invoked."""

    command: Command


@dataclass(frozen=True, slots=True)
class AfterHandle:
    """The handler returned without raising."""

    command: Command


@dataclass(frozen=True, slots=True)
class FailToHandle:
    """The handler raised an unexpected error that was rendered."""

    command: Command
    error: BaseException


@dataclass(frozen=True, slots=True)
class AfterExecute:
    """The guarded region is being left, on every path."""

    command: Command
    error: BaseException | None = None


LifecycleEvent = Union[BeforeHandle, AfterHandle, FailToHandle, AfterExecute]
Listener = Callable[[LifecycleEvent], None]


# ---------------------------------------------------------------------------
# Dispatchers
# ---------------------------------------------------------------------------

class EventDispatcher:
    """Synchronous fan-out to listeners, in registration order.

    Listeners registered with :meth:`listen` receive only their exact
    event type; :meth:`subscribe` listeners receive everything.  The two
    kinds are interleaved by registration order, not grouped.
    """

    def __init__(self) -> None:
        self._listeners: list[tuple[type | None, Listener]] = []

    @property
    def active(self) -> bool:
        return True

    def listen(self, event_type: type, listener: Listener) -> None:
        self._listeners.append((event_type, listener))

    def subscribe(self, listener: Listener) -> None:
        self._listeners.append((None, listener))

    def has_listeners(self, event_type: type | None = None) -> bool:
        if event_type is None:
            return bool(self._listeners)
        return any(kind in (None, event_type) for kind, _ in self._listeners)

    def dispatch(self, event: LifecycleEvent) -> None:
        # Listeners must not raise; an error here propagates as a bug.
        for kind, listener in list(self._listeners):
            if kind is None or type(event) is kind:
                listener(event)
        logger.debug("Dispatched %s for %r", type(event).__name__, event.command.name)


class NullEmitter:
    """Stands for "no emitter registered"; every dispatch is a no-op."""

    @property
    def active(self) -> bool:
        return False

    def dispatch(self, event: LifecycleEvent) -> None:
        pass
