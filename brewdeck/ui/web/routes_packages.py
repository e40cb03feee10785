"""
Package routes — search, details, actions, status and cache.

Blueprint: packages_bp
Prefix: /api

Thin HTTP wrappers over ``brewdeck.core.use_cases.browse``.

Endpoints:
    GET  /search                        — filtered, paged list view
    GET  /packages/<id>                 — detail view
    POST /packages/<id>/<action>        — install | uninstall | upgrade
    GET  /status                        — installed + outdated documents
    GET  /cache                         — per-dataset age and freshness
    POST /cache/clear                   — drop one dataset or all
"""

from __future__ import annotations

from flask import Blueprint, current_app, jsonify, request

from brewdeck.core.services import freshness
from brewdeck.core.use_cases import browse

packages_bp = Blueprint("packages", __name__)


def _session() -> browse.Session:
    return browse.open_session(current_app.config["BREWDECK_SETTINGS"])


def _int_arg(name: str) -> int:
    try:
        return max(0, int(request.args.get(name, 0)))
    except ValueError:
        return 0


# ── Browse ──────────────────────────────────────────────────────────


@packages_bp.route("/search")
def search():  # type: ignore[no-untyped-def]
    """Filtered list of formulae and casks."""
    view = browse.search_packages(
        _session(),
        request.args.get("q", ""),
        formulae_page=_int_arg("formulae_page"),
        casks_page=_int_arg("casks_page"),
        force=request.args.get("bust", "") == "1",
    )
    if view.error:
        return jsonify(view.to_dict()), 502
    return jsonify(view.to_dict())


@packages_bp.route("/packages/<package_id>")
def package_detail(package_id: str):  # type: ignore[no-untyped-def]
    """Detail view for one formula or cask."""
    result = browse.show_package(_session(), package_id)
    if result.not_found:
        return jsonify(result.to_dict()), 404
    if result.error:
        return jsonify(result.to_dict()), 502
    return jsonify(result.to_dict())


# ── Act ─────────────────────────────────────────────────────────────


@packages_bp.route("/packages/<package_id>/<action>", methods=["POST"])
def package_action(package_id: str, action: str):  # type: ignore[no-untyped-def]
    """Install, uninstall or upgrade a package."""
    if action not in ("install", "uninstall", "upgrade"):
        return jsonify({"error": f"Unknown action: {action}"}), 404

    result = browse.run_action(_session(), action, package_id)

    if result.get("not_found"):
        return jsonify(result), 404
    if not result.get("ok"):
        return jsonify(result), 400
    return jsonify(result)


# ── Status & cache ──────────────────────────────────────────────────


@packages_bp.route("/status")
def local_status():  # type: ignore[no-untyped-def]
    """Installed and outdated packages."""
    force = request.args.get("bust", "") == "1"
    return jsonify(browse.local_status(_session(), force=force))


@packages_bp.route("/cache")
def cache_status():  # type: ignore[no-untyped-def]
    """Per-dataset cache report."""
    return jsonify({"datasets": freshness.cache_report(_session().store)})


@packages_bp.route("/cache/clear", methods=["POST"])
def cache_clear():  # type: ignore[no-untyped-def]
    """Drop one dataset (``{"dataset": ...}``) or all of them."""
    data = request.get_json(silent=True) or {}
    dataset = data.get("dataset")
    if dataset is not None and dataset not in freshness.DATASETS:
        return jsonify({"error": f"Unknown dataset: {dataset}"}), 400

    removed = _session().store.clear(dataset)
    return jsonify({"ok": True, "removed": removed})
