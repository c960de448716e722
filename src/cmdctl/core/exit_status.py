"""Exit-status constants and normalisation.

Centralised here so that every exit path uses a well-known, tested
value rather than magic integers scattered across the codebase.
"""

from __future__ import annotations

SUCCESS: int = 0
"""Clean exit — command completed without error."""

FAILURE: int = 1
"""The handler failed, manually or with an unexpected error."""

INVALID: int = 2
"""Reserved sentinel for exit codes outside the process range."""

KEYBOARD_INTERRUPT: int = 130
"""User pressed Ctrl+C.  Follows POSIX convention (128 + SIGINT=2)."""

MIN_STATUS: int = 0
MAX_STATUS: int = 255


def normalize(code: int | None) -> int:
    """Coerce *code* into ``[0, 255]``.

    An unset code (``None``) means the handler never assigned one and is
    treated as success.  Anything out of range becomes :data:`INVALID`.
    """
    if code is None:
        return SUCCESS
    if MIN_STATUS <= code <= MAX_STATUS:
        return code
    return INVALID
