"""
Browse use cases — search, show, act.

Glue between settings, the cache, the brew runner and the pure view
functions. Both the CLI and the web blueprint call these; neither keeps
state of its own between calls.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from brewdeck.core.config.loader import Settings
from brewdeck.core.persistence.cache_store import CacheStore
from brewdeck.core.services import package_actions, search, status_ops
from brewdeck.core.services.brew_ops import BrewRunner
from brewdeck.core.services.catalog_ops import CatalogError, load_catalog

logger = logging.getLogger(__name__)


@dataclass
class Session:
    """Wired dependencies for one surface invocation."""

    settings: Settings
    store: CacheStore
    runner: BrewRunner


def open_session(settings: Settings) -> Session:
    return Session(
        settings=settings,
        store=CacheStore(settings.cache_dir),
        runner=BrewRunner(settings.brew_path, timeout=settings.brew_timeout),
    )


def load_state(session: Session, *, force: bool = False) -> search.SearchState:
    """Load the catalog into a fresh SearchState (error state on failure)."""
    state = search.initial_state(page_size=session.settings.page_size)
    try:
        snapshot = load_catalog(session.store, session.settings, session.runner, force=force)
    except CatalogError as e:
        logger.error("Catalog load failed: %s", e)
        return search.with_error(state, str(e))
    return search.with_catalog(state, snapshot)


# ── Search ──────────────────────────────────────────────────────


def search_packages(
    session: Session,
    text: str | None = "",
    *,
    formulae_page: int = 0,
    casks_page: int = 0,
    force: bool = False,
) -> search.ListView:
    """Filtered, paged list of formulae and casks."""
    state = search.with_search_text(load_state(session, force=force), text)
    for _ in range(max(0, formulae_page)):
        state = search.next_page(state, "formula")
    for _ in range(max(0, casks_page)):
        state = search.next_page(state, "cask")
    return search.render_list(state)


# ── Show ────────────────────────────────────────────────────────


@dataclass
class DetailResult:
    """Outcome of resolving a package id."""

    detail: search.DetailView | None = None
    error: str | None = None
    not_found: bool = False

    def to_dict(self) -> dict:
        if self.error:
            return {"error": self.error, "not_found": self.not_found}
        assert self.detail is not None
        return self.detail.to_dict()


def show_package(session: Session, package_id: str) -> DetailResult:
    state = load_state(session)
    if state.error:
        return DetailResult(error=state.error)

    match = search.lookup(state.formulae, state.casks, package_id)
    if isinstance(match, search.NotFound):
        return DetailResult(error=f"No formula or cask named '{package_id}'", not_found=True)
    return DetailResult(detail=search.render_detail(match, state.installed, state.outdated))


# ── Act ─────────────────────────────────────────────────────────


def run_action(session: Session, action: str, package_id: str) -> dict:
    """Run install / uninstall / upgrade on a catalog package.

    Returns:
        The action result dict, or ``{"ok": False, "error": ...}``
        with ``not_found: True`` when the id is unknown.
    """
    handler = package_actions.ACTIONS.get(action)
    if handler is None:
        return {"ok": False, "error": f"Unknown action: {action}"}

    state = load_state(session)
    if state.error:
        return {"ok": False, "action": action, "id": package_id, "error": state.error}

    match = search.lookup(state.formulae, state.casks, package_id)
    if isinstance(match, search.NotFound):
        return {
            "ok": False,
            "action": action,
            "id": package_id,
            "error": f"No formula or cask named '{package_id}'",
            "not_found": True,
        }
    return handler(session.store, session.runner, match.kind, package_id)


# ── Local status ────────────────────────────────────────────────


def local_status(session: Session, *, force: bool = False) -> dict:
    """Installed and outdated documents, JSON-ready."""
    installed = status_ops.installation_status(session.store, session.runner, force=force)
    outdated = status_ops.outdated_status(session.store, session.runner, force=force)
    return {
        "installed": installed.model_dump(mode="json"),
        "outdated": outdated.model_dump(mode="json"),
    }
