"""
CLI commands for browsing the catalog — search and show.

Thin wrappers over ``brewdeck.core.use_cases.browse``.
"""

from __future__ import annotations

import json
import sys

import click

from brewdeck.ui.cli.context import badge_text, session_from_ctx


@click.command()
@click.argument("text", required=False, default="")
@click.option("--page", "-p", default=0, type=click.IntRange(min=0),
              help="Extra pages to show per section (0 = first page only).")
@click.option("--refresh", is_flag=True, help="Ignore cached data and refetch everything.")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def search(ctx: click.Context, text: str, page: int, refresh: bool, as_json: bool) -> None:
    """Search formulae and casks by name (case-insensitive)."""
    from brewdeck.core.use_cases.browse import search_packages

    session = session_from_ctx(ctx)
    view = search_packages(
        session, text,
        formulae_page=page, casks_page=page,
        force=refresh,
    )

    if as_json:
        click.echo(json.dumps(view.to_dict(), indent=2))
        if view.error:
            sys.exit(1)
        return

    if view.error:
        click.secho(f"❌ {view.error}", fg="red")
        sys.exit(1)

    for section in view.sections:
        click.secho(f"\n🍺 {section.title} ({section.total})", fg="cyan", bold=True)
        if not section.items:
            click.echo("   (no matches)")
            continue
        for item in section.items:
            marker = badge_text(item.badges)
            click.echo(f"   {item.id:<32} {item.subtitle[:60]}", nl=not marker)
            if marker:
                click.secho(f"  {marker}", fg="green")
        if section.has_more:
            shown = len(section.items)
            click.echo(f"   ... and {section.total - shown} more (use --page {page + 1})")
    click.echo()


@click.command()
@click.argument("package_id")
@click.option("--json-output", "--json", "as_json", is_flag=True, help="Output as JSON.")
@click.pass_context
def show(ctx: click.Context, package_id: str, as_json: bool) -> None:
    """Show details for a formula or cask."""
    from brewdeck.core.use_cases.browse import show_package

    session = session_from_ctx(ctx)
    result = show_package(session, package_id)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
        if result.error:
            sys.exit(1)
        return

    if result.error:
        click.secho(f"❌ {result.error}", fg="red")
        sys.exit(1)

    detail = result.detail
    assert detail is not None  # guaranteed after error check above

    click.secho(f"\n📦 {detail.title}", fg="cyan", bold=True, nl=False)
    click.echo(f"  [{detail.kind}]")
    if detail.description:
        click.echo(f"   {detail.description}")
    if detail.badges:
        click.secho(f"   {badge_text(detail.badges)}", fg="green")
    click.echo()

    for row in detail.metadata:
        click.echo(f"   {row.label + ':':<16} {row.value}")

    click.echo()
    click.secho("   Actions: ", bold=True, nl=False)
    click.echo(", ".join(f"brewdeck {a} {detail.id}" for a in detail.actions))
    click.echo()
