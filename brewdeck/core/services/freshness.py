"""
Freshness policy and the generic cache-or-refresh path.

Every dataset has a fixed maximum age. A cached document younger than
that is returned as-is; anything older (or missing, or corrupt) is
refetched once and written back.

    formulae / casks        24 h   — catalog metadata changes slowly
    installation_status     10 min — changes with user actions
    outdated_status         30 min
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from brewdeck.core.persistence.cache_store import (  # noqa: F401  (re-exported)
    CASKS,
    DATASETS,
    FORMULAE,
    INSTALLATION_STATUS,
    OUTDATED_STATUS,
    CacheStore,
)

logger = logging.getLogger(__name__)

MAX_AGE: dict[str, float] = {
    FORMULAE: 24 * 60 * 60,
    CASKS: 24 * 60 * 60,
    INSTALLATION_STATUS: 10 * 60,
    OUTDATED_STATUS: 30 * 60,
}


def max_age(key: str) -> float:
    """Maximum age in seconds for a dataset. Unknown keys raise KeyError."""
    return MAX_AGE[key]


def is_fresh(store: CacheStore, key: str) -> bool:
    """True when the dataset exists and is strictly younger than its max age."""
    limit = max_age(key)
    age = store.age_of(key)
    return age is not None and age < limit


def get_or_refresh(
    store: CacheStore,
    key: str,
    fetch_fn: Callable[[], Any],
    *,
    force: bool = False,
) -> Any:
    """Return the cached dataset, refreshing it when stale or absent.

    ``fetch_fn`` is called at most once; whatever it raises propagates
    and nothing is written.

    Args:
        store: The dataset cache.
        key: Dataset key (one of ``DATASETS``).
        fetch_fn: Zero-arg callable producing a JSON-serializable payload.
        force: Skip the cache and always refetch.
    """
    if not force and is_fresh(store, key):
        payload = store.read(key)
        if payload is not None:
            logger.debug("cache HIT for %s (age %ds)", key, store.age_of(key) or 0)
            return payload
        logger.debug("cache CORRUPT for %s", key)
    elif force:
        logger.debug("cache BUST for %s", key)
    else:
        state = "MISS" if store.age_of(key) is None else "EXPIRED"
        logger.debug("cache %s for %s", state, key)

    payload = fetch_fn()
    store.write(key, payload)
    return payload


def cache_report(store: CacheStore) -> list[dict]:
    """Per-dataset presence, age and freshness, for status displays."""
    report = []
    for key in DATASETS:
        age = store.age_of(key)
        report.append({
            "dataset": key,
            "present": age is not None,
            "age_seconds": round(age) if age is not None else None,
            "max_age_seconds": int(MAX_AGE[key]),
            "fresh": is_fresh(store, key),
            "path": str(store.path_for(key)),
        })
    return report
