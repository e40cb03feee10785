"""
Local package state — installed and outdated packages.

Both documents come from the brew CLI and are cached with short
windows (10 and 30 minutes). They are advisory: when brew is missing
or misbehaves, an empty document is returned and nothing is cached,
so the next load tries again.
"""

from __future__ import annotations

import logging
from typing import Callable, TypeVar

from pydantic import BaseModel, ValidationError

from brewdeck.core.models import InstallationStatus, OutdatedStatus
from brewdeck.core.persistence.cache_store import CacheStore
from brewdeck.core.services import freshness
from brewdeck.core.services.brew_ops import (
    BrewRunner,
    parse_list_output,
    parse_outdated_output,
)

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class StatusUnavailable(Exception):
    """brew could not produce a status document."""


# ── Fetchers (raise StatusUnavailable) ──────────────────────────


def _fetch_installation(runner: BrewRunner) -> dict:
    sections: dict[str, dict[str, bool]] = {}
    for kind, section in (("formula", "formulae"), ("cask", "casks")):
        r = runner.list_installed(kind)
        if r.returncode != 0:
            raise StatusUnavailable(r.stderr.strip() or f"brew list --{kind} failed")
        sections[section] = {name: True for name in parse_list_output(r.stdout)}
    return InstallationStatus(**sections).model_dump(mode="json")


def _fetch_outdated(runner: BrewRunner) -> dict:
    r = runner.outdated()
    # brew exits non-zero when something is outdated; trust the JSON when present
    if r.returncode != 0 and not r.stdout.strip():
        raise StatusUnavailable(r.stderr.strip() or "brew outdated failed")
    try:
        sections = parse_outdated_output(r.stdout)
    except ValueError as e:
        raise StatusUnavailable(str(e)) from e
    return OutdatedStatus(**sections).model_dump(mode="json")


# ── Public API ──────────────────────────────────────────────────


def _load(
    store: CacheStore,
    key: str,
    fetch_fn: Callable[[], dict],
    model: type[M],
    force: bool,
) -> M:
    try:
        payload = freshness.get_or_refresh(store, key, fetch_fn, force=force)
        try:
            return model.model_validate(payload)
        except ValidationError:
            logger.warning("Cached %s has unexpected schema — refreshing", key)
            payload = freshness.get_or_refresh(store, key, fetch_fn, force=True)
            return model.model_validate(payload)
    except StatusUnavailable as e:
        logger.warning("%s unavailable: %s", key, e)
        return model()


def installation_status(
    store: CacheStore,
    runner: BrewRunner,
    *,
    force: bool = False,
) -> InstallationStatus:
    """Installed formulae and casks, cached for 10 minutes."""
    return _load(
        store, freshness.INSTALLATION_STATUS,
        lambda: _fetch_installation(runner),
        InstallationStatus, force,
    )


def outdated_status(
    store: CacheStore,
    runner: BrewRunner,
    *,
    force: bool = False,
) -> OutdatedStatus:
    """Outdated formulae and casks, cached for 30 minutes."""
    return _load(
        store, freshness.OUTDATED_STATUS,
        lambda: _fetch_outdated(runner),
        OutdatedStatus, force,
    )
