"""Dump command: write all assets once, or keep them up to date."""

from pathlib import Path

import typer

from ..config import load_config
from ..constants import CONFIG_FILE
from ..core import DumpEngine, SnapshotStore, WatchScheduler, Writer
from ..errors import AssetDumpError, ConfigurationError
from ..output import get_output_context
from ..registry import AssetManager


def dump(
    write_to: Path | None = typer.Argument(
        None,
        help="Override the configured asset root",
    ),
    watch: bool = typer.Option(
        False,
        "--watch",
        help="Check for changes every period, debug mode only",
    ),
    force: bool = typer.Option(
        False,
        "--force",
        help="Force an initial generation of all assets (used with --watch)",
    ),
    period: float | None = typer.Option(
        None,
        "--period",
        min=0.01,
        help="Polling period in seconds (used with --watch) [default: from config, 1]",
    ),
    no_dump_main: bool = typer.Option(
        False,
        "--no-dump-main",
        help="Do not dump main assets",
    ),
    debug: bool | None = typer.Option(
        None,
        "--debug/--no-debug",
        help="Override the configured debug mode",
    ),
    config_path: Path = typer.Option(
        Path(CONFIG_FILE),
        "--config",
        "-c",
        help="Path to assetdump.toml",
    ),
) -> None:
    """Dump all assets to the filesystem."""
    ctx = get_output_context()

    try:
        config = load_config(config_path.resolve())
        is_debug = config.assets.debug if debug is None else debug
        registry = AssetManager(config.assets.manifest, debug=is_debug)
    except AssetDumpError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    root = write_to.resolve() if write_to is not None else config.assets.write_to
    engine = DumpEngine(registry, Writer(root, ctx))

    ctx.print("Dumping all assets.")
    ctx.print(f"Debug mode is [yellow]{'on' if is_debug else 'off'}[/yellow].")
    ctx.print("")

    if not watch:
        try:
            written = engine.dump_all()
        except AssetDumpError as e:
            ctx.error(str(e))
            raise typer.Exit(1) from None
        ctx.success(f"{written} file(s) written.")
        return

    store = SnapshotStore.for_output_root(root)
    try:
        scheduler = WatchScheduler(
            registry,
            engine,
            store,
            snapshot=store.load(force=force),
            dump_main=not no_dump_main,
            period=period if period is not None else config.watch.period,
            watch_dirs=config.watch.dirs,
            ctx=ctx,
        )
    except ConfigurationError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    try:
        scheduler.run()
    except ConfigurationError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None
    except KeyboardInterrupt:
        scheduler.stop()
        ctx.print("\nStopped watching.")
