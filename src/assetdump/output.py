"""Output formatting for assetdump CLI."""

from dataclasses import dataclass

from rich.console import Console
from rich.markup import escape


@dataclass
class OutputContext:
    """Context for user-facing output."""

    console: Console
    verbose: bool = False
    quiet: bool = False

    def print(self, message: str, style: str | None = None) -> None:
        """Print message unless in quiet mode."""
        if not self.quiet:
            self.console.print(message, style=style)

    def detail(self, message: str) -> None:
        """Print message only in verbose mode."""
        if self.verbose:
            self.print(message)

    def error(self, message: str) -> None:
        """Print error, always shown."""
        self.console.print(f"[red]\\[error][/red] {escape(message)}")

    def success(self, message: str) -> None:
        """Print success message."""
        self.print(f"[green]{message}[/green]")


# Global output context (set by cli.py main callback)
_ctx: OutputContext | None = None


def get_output_context() -> OutputContext:
    """Get the current output context.

    Returns a default OutputContext if not yet initialized by CLI.
    """
    if _ctx is None:
        return OutputContext(Console())
    return _ctx


def set_output_context(ctx: OutputContext) -> None:
    """Set the global output context. Called by CLI main callback."""
    global _ctx
    _ctx = ctx
