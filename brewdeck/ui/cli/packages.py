"""
CLI commands for local packages — install, uninstall, upgrade,
installed, outdated.
"""

from __future__ import annotations

import json
import sys

import click

from brewdeck.ui.cli.context import session_from_ctx

_VERBS = {
    "install": ("Installing", "Installed"),
    "uninstall": ("Uninstalling", "Uninstalled"),
    "upgrade": ("Upgrading", "Upgraded"),
}


def _run_action(ctx: click.Context, action: str, package_id: str, as_json: bool) -> None:
    from brewdeck.core.use_cases.browse import run_action

    session = session_from_ctx(ctx)
    doing, done = _VERBS[action]
    if not as_json:
        click.secho(f"🍺 {doing} {package_id}...", fg="cyan")

    result = run_action(session, action, package_id)

    if as_json:
        click.echo(json.dumps(result, indent=2))
        if not result.get("ok"):
            sys.exit(1)
        return

    if not result.get("ok"):
        click.secho(f"❌ {result.get('error', 'failed')}", fg="red")
        sys.exit(1)

    click.secho(f"✅ {done} {package_id} ({result['kind']})", fg="green", bold=True)
    if ctx.find_root().obj.get("verbose") and result.get("output"):
        for line in result["output"].splitlines()[:20]:
            click.echo(f"   │ {line}")


@click.command()
@click.argument("package_id")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def install(ctx: click.Context, package_id: str, as_json: bool) -> None:
    """Install a formula or cask."""
    _run_action(ctx, "install", package_id, as_json)


@click.command()
@click.argument("package_id")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def uninstall(ctx: click.Context, package_id: str, as_json: bool) -> None:
    """Uninstall a formula or cask."""
    _run_action(ctx, "uninstall", package_id, as_json)


@click.command()
@click.argument("package_id")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def upgrade(ctx: click.Context, package_id: str, as_json: bool) -> None:
    """Upgrade a formula or cask."""
    _run_action(ctx, "upgrade", package_id, as_json)


# ── Observe ─────────────────────────────────────────────────────


@click.command()
@click.option("--refresh", is_flag=True, help="Ask brew again instead of using the cache.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def installed(ctx: click.Context, refresh: bool, as_json: bool) -> None:
    """List installed formulae and casks."""
    from brewdeck.core.services.status_ops import installation_status

    session = session_from_ctx(ctx)
    status = installation_status(session.store, session.runner, force=refresh)

    if as_json:
        click.echo(json.dumps(status.model_dump(mode="json"), indent=2))
        return

    for title, names in (("Formulae", status.formulae), ("Casks", status.casks)):
        click.secho(f"\n📦 Installed {title} ({len(names)})", fg="cyan", bold=True)
        for name in sorted(names):
            click.echo(f"   {name}")
    click.echo()


@click.command()
@click.option("--refresh", is_flag=True, help="Ask brew again instead of using the cache.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def outdated(ctx: click.Context, refresh: bool, as_json: bool) -> None:
    """List outdated formulae and casks."""
    from brewdeck.core.services.status_ops import outdated_status

    session = session_from_ctx(ctx)
    status = outdated_status(session.store, session.runner, force=refresh)

    if as_json:
        click.echo(json.dumps(status.model_dump(mode="json"), indent=2))
        return

    if not status.formulae and not status.casks:
        click.secho("✅ Everything is up to date", fg="green")
        return

    for title, names in (("Formulae", status.formulae), ("Casks", status.casks)):
        if not names:
            continue
        click.secho(f"\n↑ Outdated {title} ({len(names)})", fg="yellow", bold=True)
        for name in names:
            click.echo(f"   {name}")
    click.echo()
