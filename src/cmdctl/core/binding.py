"""Output rebinding from the surrounding environment."""

from __future__ import annotations

import logging

from cmdctl.core.protocols import Bindings, OutputChannel

logger = logging.getLogger(__name__)


class OutputBinder:
    """Substitutes the output channel when an override is bound.

    Parameters
    ----------
    bindings:
        Anything with ``bound(key)`` / ``get(key)``; the override is
        looked up under :class:`~cmdctl.core.protocols.OutputChannel`.
        ``None`` means there is never an override.
    """

    def __init__(self, bindings: Bindings | None = None) -> None:
        self._bindings: Bindings | None = bindings

    def resolve(self, output: OutputChannel) -> OutputChannel:
        if self._bindings is not None and self._bindings.bound(OutputChannel):
            logger.debug("Output channel overridden by environment binding")
            return self._bindings.get(OutputChannel)
        return output
