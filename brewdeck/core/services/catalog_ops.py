"""
Catalog loading — formulae and casks from the remote package index.

Both datasets are fetched verbatim and cached for 24 hours. Cached
documents are validated into models on every load; a document that no
longer matches the models counts as a cache miss.

Failures on this path are fatal for the load attempt (``CatalogError``)
unless an expired copy is still on disk, in which case it is served
with a warning.
"""

from __future__ import annotations

import json
import logging
import urllib.error
import urllib.request
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from brewdeck import __version__
from brewdeck.core.config.loader import Settings
from brewdeck.core.models import Cask, Formula, InstallationStatus, OutdatedStatus
from brewdeck.core.persistence.cache_store import CacheStore
from brewdeck.core.services import freshness
from brewdeck.core.services.brew_ops import BrewRunner

logger = logging.getLogger(__name__)

_USER_AGENT = f"brewdeck/{__version__}"

M = TypeVar("M", bound=BaseModel)


class CatalogError(Exception):
    """Raised when a catalog dataset cannot be fetched or parsed."""


def fetch_json(url: str) -> Any:
    """GET ``url`` and decode the JSON body.

    Raises:
        CatalogError: On any network, HTTP or decoding failure.
    """
    logger.info("Fetching %s", url)
    req = urllib.request.Request(url, headers={"User-Agent": _USER_AGENT})
    try:
        with urllib.request.urlopen(req) as resp:
            body = resp.read()
    except urllib.error.HTTPError as e:
        raise CatalogError(f"{url} returned HTTP {e.code}") from e
    except (urllib.error.URLError, OSError) as e:
        raise CatalogError(f"Cannot reach {url}: {e}") from e

    try:
        return json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise CatalogError(f"{url} returned invalid JSON: {e}") from e


def _load_models(
    store: CacheStore,
    key: str,
    url: str,
    model: type[M],
    *,
    force: bool = False,
) -> list[M]:
    adapter = TypeAdapter(list[model])  # type: ignore[valid-type]

    if not force and freshness.is_fresh(store, key):
        cached = store.read(key)
        if cached is not None:
            try:
                return adapter.validate_python(cached)
            except ValidationError as e:
                logger.warning("Cached %s has unexpected schema (%s) — refetching",
                               key, e.error_count())

    try:
        payload = fetch_json(url)
        items = adapter.validate_python(payload)
    except (CatalogError, ValidationError) as e:
        stale = _stale_copy(store, key, adapter)
        if stale is not None:
            logger.warning("Refresh of %s failed (%s) — serving expired cache", key, e)
            return stale
        if isinstance(e, ValidationError):
            raise CatalogError(f"{url} returned unexpected data: {e.error_count()} errors") from e
        raise

    store.write(key, payload)
    logger.info("Cached %d %s", len(items), key)
    return items


def _stale_copy(store: CacheStore, key: str, adapter: TypeAdapter) -> list | None:
    cached = store.read(key)
    if cached is None:
        return None
    try:
        return adapter.validate_python(cached)
    except ValidationError:
        return None


def load_formulae(store: CacheStore, settings: Settings, *, force: bool = False) -> list[Formula]:
    """All formulae, from cache when fresh."""
    return _load_models(store, freshness.FORMULAE, settings.formula_url, Formula, force=force)


def load_casks(store: CacheStore, settings: Settings, *, force: bool = False) -> list[Cask]:
    """All casks, from cache when fresh."""
    return _load_models(store, freshness.CASKS, settings.cask_url, Cask, force=force)


# ═══════════════════════════════════════════════════════════════════
#  Combined load
# ═══════════════════════════════════════════════════════════════════


@dataclass
class CatalogSnapshot:
    """Everything a search surface needs, loaded together."""

    formulae: list[Formula] = field(default_factory=list)
    casks: list[Cask] = field(default_factory=list)
    installed: InstallationStatus = field(default_factory=InstallationStatus)
    outdated: OutdatedStatus = field(default_factory=OutdatedStatus)


def load_catalog(
    store: CacheStore,
    settings: Settings,
    runner: BrewRunner,
    *,
    force: bool = False,
) -> CatalogSnapshot:
    """Load catalog and local state concurrently.

    The four loads are independent and read-only, so they are issued
    together and awaited together.

    Raises:
        CatalogError: If either catalog dataset fails with no fallback.
            Status datasets never raise (they degrade to empty).
    """
    from brewdeck.core.services import status_ops

    jobs: dict[str, Callable[[], Any]] = {
        "formulae": lambda: load_formulae(store, settings, force=force),
        "casks": lambda: load_casks(store, settings, force=force),
        "installed": lambda: status_ops.installation_status(store, runner, force=force),
        "outdated": lambda: status_ops.outdated_status(store, runner, force=force),
    }

    with ThreadPoolExecutor(max_workers=len(jobs)) as pool:
        futures = {name: pool.submit(fn) for name, fn in jobs.items()}
        results = {name: future.result() for name, future in futures.items()}

    return CatalogSnapshot(**results)
