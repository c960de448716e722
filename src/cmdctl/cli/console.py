"""CLI console helpers with optional Rich support.

This module intentionally avoids module-level imports of optional UI
dependencies so bootstrap paths (``--help``, ``--version``) remain
functional even when Rich is not installed.
"""

from __future__ import annotations

from typing import Any

from cmdctl.exceptions import CmdctlError


class RichUnavailableError(CmdctlError):
	"""Raised when Rich is needed but not installed."""


def _load_rich_console_class() -> type[Any]:
	"""Return ``rich.console.Console`` class or raise ``RichUnavailableError``."""
	try:
		from rich.console import Console
	except ModuleNotFoundError as exc:
		raise RichUnavailableError(
			"rich is not installed. Install with: pip install rich",
		) from exc
	return Console


def get_rich_console(*, stderr: bool = True) -> Any:
	"""Create a Rich console instance, targeting stderr by default."""
	console_class = _load_rich_console_class()
	return console_class(stderr=stderr, highlight=False)
