"""Infrastructure layer — runtime integration.

This layer owns event-loop creation, signal hooks and argument
injection.

Rules
-----
* No imports from ``cli``.
* No user-facing output (no ``print()``, no Rich rendering).
* Must expose clean, typed interfaces consumed by the core layer.
"""

from cmdctl.infra.asyncio_runner import AsyncioContextRunner, signals_for
from cmdctl.infra.container import CommandScopedResolver, Container

__all__: list[str] = [
    "AsyncioContextRunner",
    "CommandScopedResolver",
    "Container",
    "signals_for",
]
