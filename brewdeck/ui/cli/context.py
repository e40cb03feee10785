"""
Shared CLI plumbing — settings and session from the click context.
"""

from __future__ import annotations

import sys

import click

from brewdeck.core.config.loader import ConfigError, load_settings
from brewdeck.core.use_cases.browse import Session, open_session


def session_from_ctx(ctx: click.Context) -> Session:
    """Load settings (``--config`` aware) and open a session; exit 1 on bad config."""
    obj = ctx.find_root().obj or {}
    try:
        settings = load_settings(obj.get("config_path"))
    except ConfigError as e:
        click.secho(f"❌ {e}", fg="red")
        sys.exit(1)
    return open_session(settings)


def badge_text(badges: list[str]) -> str:
    """Inline marker for list and detail output."""
    marks = {"installed": "✓ installed", "outdated": "↑ outdated"}
    return "  ".join(marks.get(b, b) for b in badges)
