"""cmdctl — command-execution lifecycle controller.

Wraps one run of a command handler with lifecycle events, output
rebinding, optional asyncio scheduling and exit-status normalisation.
"""

from cmdctl.version import __version__

__all__: list[str] = ["__version__"]
