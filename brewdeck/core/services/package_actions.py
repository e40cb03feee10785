"""
Package actions — install, uninstall, upgrade.

Each action runs one brew command. On success the matching status
document is patched in the cache instead of being refetched:

    install    installation_status[kind][id] = True
    uninstall  installation_status[kind] loses id
    upgrade    outdated_status[kind] loses id

On failure the cache is left alone and the result carries the error.
Results are plain dicts so CLI and web can render them directly:

    {"ok": True,  "action": ..., "kind": ..., "id": ..., "output": "..."}
    {"ok": False, "action": ..., "kind": ..., "id": ..., "error": "..."}
"""

from __future__ import annotations

import logging
from typing import Callable

from pydantic import ValidationError

from brewdeck.core.models import InstallationStatus, OutdatedStatus, PackageKind
from brewdeck.core.persistence.cache_store import CacheStore
from brewdeck.core.services import freshness
from brewdeck.core.services.brew_ops import BrewRunner

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════
#  Pure transforms
# ═══════════════════════════════════════════════════════════════════


def mark_installed(doc: InstallationStatus, kind: PackageKind, package_id: str) -> InstallationStatus:
    new = doc.model_copy(deep=True)
    new.section(kind)[package_id] = True
    return new


def mark_uninstalled(doc: InstallationStatus, kind: PackageKind, package_id: str) -> InstallationStatus:
    """Drop the key; absent keys are a no-op."""
    new = doc.model_copy(deep=True)
    new.section(kind).pop(package_id, None)
    return new


def mark_upgraded(doc: OutdatedStatus, kind: PackageKind, package_id: str) -> OutdatedStatus:
    """Remove every occurrence of the id; idempotent."""
    new = doc.model_copy(deep=True)
    remaining = [name for name in new.section(kind) if name != package_id]
    if kind == "formula":
        new.formulae = remaining
    else:
        new.casks = remaining
    return new


def _patch_document(
    store: CacheStore,
    key: str,
    model: type[InstallationStatus] | type[OutdatedStatus],
    transform: Callable,
) -> None:
    def apply(raw: dict) -> dict:
        return transform(model.model_validate(raw)).model_dump(mode="json")

    try:
        store.patch(key, apply)
    except ValidationError:
        # Unpatchable document; drop it so the next read refetches
        logger.warning("Cached %s has unexpected schema — clearing", key)
        store.clear(key)


# ═══════════════════════════════════════════════════════════════════
#  Actions
# ═══════════════════════════════════════════════════════════════════


def _result(action: str, kind: PackageKind, package_id: str, proc) -> dict:
    base = {"action": action, "kind": kind, "id": package_id}
    if proc.returncode != 0:
        error = proc.stderr.strip() or f"brew {action} exited with code {proc.returncode}"
        logger.warning("%s %s (%s) failed: %s", action, package_id, kind, error[:200])
        return {"ok": False, **base, "error": error}
    logger.info("%s %s (%s) succeeded", action, package_id, kind)
    return {"ok": True, **base, "output": proc.stdout.strip()[:2000]}


def install_package(
    store: CacheStore,
    runner: BrewRunner,
    kind: PackageKind,
    package_id: str,
) -> dict:
    """Install a formula or cask and mark it installed."""
    result = _result("install", kind, package_id, runner.install(kind, package_id))
    if result["ok"]:
        _patch_document(
            store, freshness.INSTALLATION_STATUS, InstallationStatus,
            lambda doc: mark_installed(doc, kind, package_id),
        )
    return result


def uninstall_package(
    store: CacheStore,
    runner: BrewRunner,
    kind: PackageKind,
    package_id: str,
) -> dict:
    """Uninstall a formula or cask and drop it from the installed map."""
    result = _result("uninstall", kind, package_id, runner.uninstall(kind, package_id))
    if result["ok"]:
        _patch_document(
            store, freshness.INSTALLATION_STATUS, InstallationStatus,
            lambda doc: mark_uninstalled(doc, kind, package_id),
        )
    return result


def upgrade_package(
    store: CacheStore,
    runner: BrewRunner,
    kind: PackageKind,
    package_id: str,
) -> dict:
    """Upgrade a formula or cask and drop it from the outdated list."""
    result = _result("upgrade", kind, package_id, runner.upgrade(kind, package_id))
    if result["ok"]:
        _patch_document(
            store, freshness.OUTDATED_STATUS, OutdatedStatus,
            lambda doc: mark_upgraded(doc, kind, package_id),
        )
    return result


ACTIONS: dict[str, Callable[[CacheStore, BrewRunner, PackageKind, str], dict]] = {
    "install": install_package,
    "uninstall": uninstall_package,
    "upgrade": upgrade_package,
}
