"""
Dataset cache — one JSON document per dataset on disk.

Each dataset (``formulae``, ``casks``, ``installation_status``,
``outdated_status``) lives in ``<cache_dir>/<key>.json``. The file's
modification time is the dataset's age; there is no embedded
timestamp the store relies on.

Reads never fail: a missing file, an unreadable file and invalid JSON
all come back as ``None`` so the caller refreshes. Writes are atomic
(temp file in the same directory, then rename).

There is no locking. ``patch()`` is a read → transform → write cycle
and two overlapping patches of the same key can lose an update.
"""

from __future__ import annotations

import json
import logging
import os
import re
import tempfile
import time
from pathlib import Path
from typing import Any, Callable

logger = logging.getLogger(__name__)

_KEY_RE = re.compile(r"^[a-z0-9_]+$")

FORMULAE = "formulae"
CASKS = "casks"
INSTALLATION_STATUS = "installation_status"
OUTDATED_STATUS = "outdated_status"

DATASETS: tuple[str, ...] = (FORMULAE, CASKS, INSTALLATION_STATUS, OUTDATED_STATUS)


class CacheStore:
    """File-backed key → JSON document store.

    Args:
        cache_dir: Directory for the dataset files (created on first write).
        clock: Returns "now" as a Unix timestamp; injectable for tests.
    """

    def __init__(self, cache_dir: Path, clock: Callable[[], float] = time.time) -> None:
        self.cache_dir = cache_dir
        self._clock = clock

    def path_for(self, key: str) -> Path:
        if not _KEY_RE.match(key):
            raise ValueError(f"Invalid cache key: {key!r}")
        return self.cache_dir / f"{key}.json"

    # ── Read ────────────────────────────────────────────────────

    def read(self, key: str) -> Any | None:
        """Return the cached payload, or None when absent or corrupt."""
        path = self.path_for(key)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read cache file %s: %s", path, e)
            return None

        try:
            return json.loads(raw)
        except json.JSONDecodeError as e:
            logger.warning("Corrupt cache file %s: %s — treating as miss", path, e)
            return None

    def age_of(self, key: str) -> float | None:
        """Seconds since the dataset was last written, or None if absent."""
        try:
            mtime = self.path_for(key).stat().st_mtime
        except OSError:
            return None
        return max(0.0, self._clock() - mtime)

    # ── Write ───────────────────────────────────────────────────

    def write(self, key: str, payload: Any) -> None:
        """Replace the dataset with ``payload`` (atomic)."""
        path = self.path_for(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        content = json.dumps(payload, ensure_ascii=False)

        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{key}_", suffix=".tmp")
        tmp = Path(tmp_name)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(content)
            tmp.replace(path)
        except Exception:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug("Cache write %s (%d bytes)", key, len(content))

    def patch(self, key: str, transform: Callable[[Any], Any]) -> Any | None:
        """Apply a pure ``transform`` to the cached document and store it.

        The previous modification time is kept, so a patch does not
        extend the dataset's freshness window.

        Returns:
            The new payload, or None when there was nothing to patch.
        """
        path = self.path_for(key)
        current = self.read(key)
        if current is None:
            logger.debug("Cache patch %s skipped — no cached document", key)
            return None

        try:
            mtime = path.stat().st_mtime
        except OSError:
            mtime = None

        updated = transform(current)
        self.write(key, updated)

        if mtime is not None:
            os.utime(path, (self._clock(), mtime))
        logger.debug("Cache patch %s applied", key)
        return updated

    # ── Delete ──────────────────────────────────────────────────

    def clear(self, key: str | None = None) -> list[str]:
        """Delete one dataset, or every known dataset when ``key`` is None.

        Other files in ``cache_dir`` are never touched.

        Returns:
            Keys whose files were removed.
        """
        keys = [key] if key is not None else list(DATASETS)
        paths = [self.path_for(k) for k in keys]

        removed: list[str] = []
        for path in paths:
            try:
                path.unlink()
            except FileNotFoundError:
                continue
            removed.append(path.stem)
        if removed:
            logger.info("Cleared cache: %s", ", ".join(removed))
        return removed
