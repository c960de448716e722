"""Human-readable rendering of unexpected handler errors."""

from __future__ import annotations

from cmdctl.core.channels import CommandInput
from cmdctl.core.protocols import OutputChannel


class RichErrorRenderer:
    """Writes ``<Type>: <message>``, an optional hint and, when verbose, a traceback.

    The traceback goes through :meth:`OutputChannel.exception`, which
    uses Rich's traceback renderer on a :class:`ConsoleOutput`.
    """

    def __init__(self, *, verbose: bool = False) -> None:
        self._verbose: bool = verbose

    def render(
        self,
        error: BaseException,
        input: CommandInput,
        output: OutputChannel,
    ) -> None:
        message = str(error) or "(no message)"
        output.error(f"{type(error).__name__}: {message}")

        hint = getattr(error, "hint", None)
        if hint:
            output.line(f"Hint: {hint}", style="yellow")

        if self._verbose or output.verbose or input.option("verbose"):
            output.exception(error)
