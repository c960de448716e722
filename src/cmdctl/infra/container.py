"""Dependency container and handler-argument resolver.

Handlers declare what they need as parameters; :meth:`Container.call`
fills each one, in order of precedence, from:

1. an explicit override passed by name;
2. a binding registered for the parameter's annotation;
3. a binding registered for the parameter's name;
4. the parameter's default value.

A parameter that none of these satisfy raises
:class:`~cmdctl.exceptions.ResolutionError`.
"""

from __future__ import annotations

import inspect
import logging
import typing
from collections.abc import Callable, Mapping
from typing import Any

from cmdctl.core.channels import CommandInput
from cmdctl.core.command import Command
from cmdctl.core.protocols import OutputChannel
from cmdctl.exceptions import ResolutionError

logger = logging.getLogger(__name__)

_MISSING = object()


class Container:
    """Minimal binding registry that can call functions with injection."""

    def __init__(self) -> None:
        self._bindings: dict[Any, Any] = {}
        self.bind(Container, self)

    def bind(self, key: Any, instance: Any) -> None:
        self._bindings[key] = instance

    def unbind(self, key: Any) -> None:
        self._bindings.pop(key, None)

    def bound(self, key: Any) -> bool:
        return key in self._bindings

    def get(self, key: Any) -> Any:
        try:
            return self._bindings[key]
        except KeyError:
            raise ResolutionError(f"Nothing is bound for {key!r}.") from None

    def call(self, func: Callable[..., Any], **overrides: Any) -> Any:
        """Invoke *func*, injecting every parameter it declares."""
        return func(**self.resolve_arguments(func, overrides))

    def resolve_arguments(
        self,
        func: Callable[..., Any],
        overrides: Mapping[str, Any],
    ) -> dict[str, Any]:
        signature = inspect.signature(func)
        hints = _annotations(func)

        kwargs: dict[str, Any] = {}
        for name, param in signature.parameters.items():
            if param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            value = self._lookup(name, hints.get(name, _MISSING), overrides)
            if value is not _MISSING:
                kwargs[name] = value
            elif param.default is not param.empty:
                continue
            else:
                raise ResolutionError(
                    f"Cannot resolve parameter {name!r} of {_qualname(func)}.",
                    hint=f"Pass {name}=... as a command argument or bind it in the container.",
                )
        return kwargs

    def _lookup(self, name: str, annotation: Any, overrides: Mapping[str, Any]) -> Any:
        if name in overrides:
            return overrides[name]
        if annotation is not _MISSING:
            try:
                if annotation in self._bindings:
                    return self._bindings[annotation]
            except TypeError:
                # Unhashable annotation such as ``list[int]``.
                pass
        return self._bindings.get(name, _MISSING)


class CommandScopedResolver:
    """Resolver for one command run.

    Adds the command's bound input channel, output channel and named
    arguments on top of the container, without registering them
    globally.  Channels are read at call time, after any output
    substitution.
    """

    def __init__(self, container: Container, command: Command) -> None:
        self._container: Container = container
        self._command: Command = command

    def call(self, func: Callable[..., Any], **overrides: Any) -> Any:
        command = self._command
        scoped: dict[str, Any] = dict(command.input.arguments)
        scoped.update(overrides)
        for name, annotation in _annotations(func).items():
            if name == "return" or name in scoped:
                continue
            if annotation is CommandInput:
                scoped[name] = command.input
            elif annotation is OutputChannel:
                scoped[name] = command.output
        logger.debug("Calling %s with %s", _qualname(func), sorted(scoped))
        return self._container.call(func, **scoped)


def _annotations(func: Callable[..., Any]) -> dict[str, Any]:
    try:
        return typing.get_type_hints(func)
    except (NameError, TypeError):
        # Unresolvable forward references; fall back to name lookups.
        return {}


def _qualname(func: Callable[..., Any]) -> str:
    return getattr(func, "__qualname__", repr(func))
