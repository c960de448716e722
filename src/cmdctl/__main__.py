"""Allow ``python -m cmdctl`` invocation.

This module simply delegates to the CLI error-boundary entry point so
that ``python -m cmdctl`` behaves identically to the ``cmdctl``
console script.
"""

from __future__ import annotations

from cmdctl.cli.app import cli

if __name__ == "__main__":
    cli()
