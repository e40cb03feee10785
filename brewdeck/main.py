"""
brewdeck — CLI entrypoint.

Usage:
    brewdeck --help
    brewdeck search wget
    brewdeck show firefox
    brewdeck install jq
    brewdeck web
"""

from __future__ import annotations

import os
from pathlib import Path

import click

from brewdeck import __version__
from brewdeck.core.observability.logging_config import resolve_level, setup_logging


@click.group()
@click.version_option(version=__version__, prog_name="brewdeck")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose output.")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-essential output.")
@click.option("--debug", is_flag=True, help="Enable debug logging (very verbose).")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=False, dir_okay=False),
    default=None,
    help="Path to config.yml (default: $XDG_CONFIG_HOME/brewdeck/config.yml).",
)
@click.pass_context
def cli(
    ctx: click.Context,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config_path: str | None,
) -> None:
    """brewdeck — search, browse and manage Homebrew formulae and casks."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["debug"] = debug
    ctx.obj["config_path"] = Path(config_path) if config_path else None

    setup_logging(
        level=resolve_level(debug=debug, verbose=verbose, quiet=quiet),
        log_file=os.environ.get("BREWDECK_LOG_FILE"),
        log_file_level=os.environ.get("BREWDECK_LOG_FILE_LEVEL"),
        quiet_third_party=not debug,
    )


@cli.command()
@click.option("--host", default="127.0.0.1", help="Bind address.")
@click.option("--port", "-p", default=8000, type=int, help="Port number.")
@click.pass_context
def web(ctx: click.Context, host: str, port: int) -> None:
    """Start the JSON API server."""
    from brewdeck.ui.cli.context import session_from_ctx
    from brewdeck.ui.web.server import create_app, run_server

    session = session_from_ctx(ctx)
    app = create_app(settings=session.settings)
    debug = ctx.obj.get("debug", False)

    click.echo()
    click.secho("🍺 brewdeck — web API", bold=True)
    click.echo(f"   Listening: http://{host}:{port}/api/search")
    click.echo(f"   Cache:     {session.settings.cache_dir}")
    click.echo(f"   brew:      {session.settings.brew_path}")
    click.echo()

    run_server(app, host=host, port=port, debug=debug)


# ── Register commands from brewdeck/ui/cli/ ───────────────────────

from brewdeck.ui.cli.cache import cache
from brewdeck.ui.cli.catalog import search, show
from brewdeck.ui.cli.packages import install, installed, outdated, uninstall, upgrade

cli.add_command(search)
cli.add_command(show)
cli.add_command(install)
cli.add_command(uninstall)
cli.add_command(upgrade)
cli.add_command(installed)
cli.add_command(outdated)
cli.add_command(cache)


if __name__ == "__main__":
    cli()
