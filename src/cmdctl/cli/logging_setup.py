"""Logging configuration for the console script.

The library modules only create loggers; handlers are installed here,
once, by the CLI entry point.
"""

from __future__ import annotations

import logging

from cmdctl.cli.console import get_rich_console

PLAIN_FORMAT = "%(asctime)s.%(msecs)03d [%(levelname)-5s] [%(name)-15s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(level: int = logging.WARNING, use_color: bool = True) -> None:
    """Install a root handler, Rich-coloured when available.

    Args:
        level: Root logger level.
        use_color: If True, try Rich colored logging; if False, use plain text.
    """
    if use_color:
        try:
            from rich.logging import RichHandler
        except ImportError:
            pass
        else:
            logging.basicConfig(
                level=level,
                format="%(message)s",
                datefmt=DATE_FORMAT,
                handlers=[RichHandler(
                    console=get_rich_console(),
                    show_time=True,
                    show_level=True,
                    show_path=False,
                    rich_tracebacks=True,
                )],
                force=True,
            )
            return

    logging.basicConfig(
        level=level,
        format=PLAIN_FORMAT,
        datefmt=DATE_FORMAT,
        force=True,
    )
