"""
Command-line interface for dockscope.

Browse Docker containers, volumes and images in a fuzzy-finder with a detail
preview; confirming an image opens a shell in a fresh container.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console

from ds_common.errors import ConfigurationError
from ds_ui.cli.commands.inspect import register_inspect_commands
from ds_ui.cli.commands.listing import register_listing_commands
from ds_ui.tui.system.components.presenter import RichPresenter
from ds_ui.wiring.dependencies import UIContext, configure_logging

ctx_store = UIContext()

app = typer.Typer(
    help="Browse Docker containers, volumes and images with a fuzzy finder.",
    no_args_is_help=True,
)


@app.callback(invoke_without_command=True)
def entry(
    ctx: typer.Context,
    headless: bool = typer.Option(
        False,
        "--headless",
        help="Print tables instead of opening the picker (useful in scripts).",
    ),
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        "-c",
        help="YAML config file (default: $DS_CONFIG or ~/.config/dockscope/config.yaml).",
    ),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Logging level (default WARNING)."),
    log_file: Optional[str] = typer.Option(None, "--log-file", help="Write logs to this file instead of stderr."),
    debug: bool = typer.Option(False, "--debug", help="Shortcut for --log-level DEBUG."),
) -> None:
    """Global entry point handling interactive vs headless modes."""
    configure_logging(level=log_level, debug=debug, log_file=log_file, force=True)
    ctx_store.headless = headless
    ctx_store.config_path = config

    try:
        ctx_store.config
    except ConfigurationError as exc:
        RichPresenter(Console(stderr=True)).error(f"{exc} ({exc.context.get('path') or 'environment'})")
        raise typer.Exit(2) from exc

    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())
        raise typer.Exit()


register_listing_commands(app, ctx_store)
register_inspect_commands(app, ctx_store)


def main() -> None:
    """Console script entrypoint (Typer app)."""
    app()


if __name__ == "__main__":
    main()
