"""assetdump CLI: incremental asset dumper."""

import typer

from assetdump import __version__

from .commands import dump, init
from .logging import configure_logging
from .output import OutputContext, set_output_context


def _version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"assetdump {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="assetdump",
    help="Dump named assets to the filesystem and keep them up to date",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: bool = typer.Option(
        False,
        "--version",
        "-V",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit",
    ),
    verbose: int = typer.Option(
        0,
        "--verbose",
        "-v",
        count=True,
        help="Increase verbosity (-v lists asset sources, -vv adds log paths)",
    ),
    quiet: bool = typer.Option(
        False,
        "--quiet",
        "-q",
        help="Suppress non-error output",
    ),
    no_color: bool = typer.Option(
        False,
        "--no-color",
        help="Disable colored output",
    ),
) -> None:
    """assetdump - incremental asset dumper."""
    console = configure_logging(
        verbosity=verbose,
        quiet=quiet,
        no_color=no_color,
    )
    set_output_context(OutputContext(console=console, verbose=verbose >= 1, quiet=quiet))


app.command()(dump)
app.command()(init)
