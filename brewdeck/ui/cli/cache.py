"""
CLI commands for the dataset cache — status and clear.
"""

from __future__ import annotations

import json
import sys

import click

from brewdeck.ui.cli.context import session_from_ctx


def _format_age(seconds: int | None) -> str:
    if seconds is None:
        return "—"
    if seconds < 120:
        return f"{seconds}s"
    if seconds < 7200:
        return f"{seconds // 60}m"
    return f"{seconds // 3600}h"


@click.group()
def cache() -> None:
    """Cache — dataset ages and invalidation."""


@cache.command("status")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def cache_status(ctx: click.Context, as_json: bool) -> None:
    """Show each cached dataset's age and freshness."""
    from brewdeck.core.services.freshness import cache_report

    session = session_from_ctx(ctx)
    report = cache_report(session.store)

    if as_json:
        click.echo(json.dumps(report, indent=2))
        return

    click.secho(f"🗄️  Cache: {session.store.cache_dir}", fg="cyan", bold=True)
    for entry in report:
        if not entry["present"]:
            icon, color = "∅", "white"
        elif entry["fresh"]:
            icon, color = "✅", "green"
        else:
            icon, color = "⏰", "yellow"
        click.secho(f"   {icon} {entry['dataset']:<22}", fg=color, nl=False)
        click.echo(
            f" age {_format_age(entry['age_seconds']):>5}"
            f"  / max {_format_age(entry['max_age_seconds'])}"
        )
    click.echo()


@cache.command("clear")
@click.argument("dataset", required=False)
@click.pass_context
def cache_clear(ctx: click.Context, dataset: str | None) -> None:
    """Delete one cached dataset, or all of them."""
    from brewdeck.core.services.freshness import DATASETS

    if dataset is not None and dataset not in DATASETS:
        click.secho(f"❌ Unknown dataset: {dataset} (expected one of: {', '.join(DATASETS)})", fg="red")
        sys.exit(1)

    session = session_from_ctx(ctx)
    removed = session.store.clear(dataset)

    if removed:
        click.secho(f"✅ Cleared: {', '.join(removed)}", fg="green")
    else:
        click.echo("Nothing to clear")
