"""Runtime settings read from the environment.

=========================  =====================  ==================
Variable                   Meaning                Default
=========================  =====================  ==================
``CMDCTL_LOG_LEVEL``       stdlib logging level   ``WARNING``
``CMDCTL_HOOK_FLAGS``      comma list of flags    ``SIGINT,SIGTERM``
``CMDCTL_DISABLE_EVENTS``  skip lifecycle events  ``false``
``CMDCTL_VERBOSE``         show tracebacks        ``false``
=========================  =====================  ==================
"""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from cmdctl.core.scheduler import HookFlags
from cmdctl.exceptions import CmdctlError

ENV_PREFIX = "CMDCTL_"

_HINTS: dict[str, str] = {
    "log_level": "Use DEBUG, INFO, WARNING, ERROR or CRITICAL.",
    "hook_flags": "Valid flags: " + ", ".join(HookFlags.__members__),
    "disable_events": "Use one of: 1, 0, true, false, yes, no, on, off.",
    "verbose": "Use one of: 1, 0, true, false, yes, no, on, off.",
}


class Settings(BaseSettings):
    """Immutable runtime settings.

    ``Settings()`` reads the ``CMDCTL_*`` variables; use
    :meth:`from_env` at the CLI edge to get a :class:`CmdctlError`
    instead of a pydantic ``ValidationError``.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore", frozen=True)

    log_level: int = logging.WARNING
    hook_flags: HookFlags = HookFlags.DEFAULT
    """Hook flags applied to commands that do not set their own."""

    disable_events: bool = False
    verbose: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def _parse_level(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        name = value.strip().upper()
        if name.isdigit():
            return int(name)
        level = logging.getLevelName(name)
        if not isinstance(level, int):
            raise ValueError(f"unknown logging level {name!r}")
        return level

    @field_validator("hook_flags", mode="before")
    @classmethod
    def _parse_flags(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        try:
            return HookFlags.parse(value)
        except KeyError as exc:
            raise ValueError(f"unknown hook flag {exc.args[0]!r}") from None

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from ``os.environ``.

        Raises
        ------
        CmdctlError
            When a variable holds a value that cannot be parsed.
        """
        try:
            return cls()
        except ValidationError as exc:
            error = exc.errors()[0]
            field = str(error["loc"][0]) if error["loc"] else ""
            raise CmdctlError(
                f"Invalid {ENV_PREFIX}{field.upper()}: {error['msg']}.",
                hint=_HINTS.get(field),
            ) from exc

    @classmethod
    def defaults(cls) -> Settings:
        """Field defaults only, ignoring the environment."""
        return cls.model_construct()
