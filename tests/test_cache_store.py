"""
Tests for the dataset cache — read/write, age, patch, clear.
"""

import json
import os
from pathlib import Path

import pytest

from brewdeck.core.persistence.cache_store import CacheStore


class _Clock:
    def __init__(self, now: float) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _set_mtime(path: Path, mtime: float) -> None:
    os.utime(path, (mtime, mtime))


class TestReadWrite:
    def test_write_and_read(self, store: CacheStore):
        store.write("formulae", [{"name": "wget"}])
        assert store.read("formulae") == [{"name": "wget"}]

    def test_write_creates_directory(self, store: CacheStore, cache_dir: Path):
        assert not cache_dir.exists()
        store.write("casks", [])
        assert (cache_dir / "casks.json").is_file()

    def test_one_file_per_dataset(self, store: CacheStore, cache_dir: Path):
        store.write("formulae", [1])
        store.write("casks", [2])
        assert sorted(p.name for p in cache_dir.iterdir()) == ["casks.json", "formulae.json"]

    def test_read_missing_returns_none(self, store: CacheStore):
        assert store.read("formulae") is None

    def test_read_corrupt_returns_none(self, store: CacheStore, cache_dir: Path):
        cache_dir.mkdir()
        (cache_dir / "formulae.json").write_text("not json at all {{{")
        assert store.read("formulae") is None

    def test_write_overwrites_wholesale(self, store: CacheStore):
        store.write("outdated_status", {"formulae": ["a"], "casks": []})
        store.write("outdated_status", {"formulae": [], "casks": ["b"]})
        assert store.read("outdated_status") == {"formulae": [], "casks": ["b"]}

    def test_no_temp_files_left(self, store: CacheStore, cache_dir: Path):
        store.write("formulae", [])
        assert list(cache_dir.glob("*.tmp")) == []

    def test_saved_file_is_valid_json(self, store: CacheStore, cache_dir: Path):
        store.write("installation_status", {"formulae": {"wget": True}})
        data = json.loads((cache_dir / "installation_status.json").read_text())
        assert data["formulae"]["wget"] is True

    def test_invalid_key_rejected(self, store: CacheStore):
        with pytest.raises(ValueError):
            store.read("../etc/passwd")


class TestAge:
    def test_age_of_missing_is_none(self, store: CacheStore):
        assert store.age_of("formulae") is None

    def test_age_uses_mtime_and_clock(self, cache_dir: Path):
        clock = _Clock(10_000.0)
        store = CacheStore(cache_dir, clock=clock)
        store.write("formulae", [])
        _set_mtime(store.path_for("formulae"), 9_000.0)
        assert store.age_of("formulae") == 1_000.0

        clock.now = 9_500.0
        assert store.age_of("formulae") == 500.0

    def test_age_never_negative(self, cache_dir: Path):
        store = CacheStore(cache_dir, clock=_Clock(100.0))
        store.write("formulae", [])
        _set_mtime(store.path_for("formulae"), 200.0)
        assert store.age_of("formulae") == 0.0


class TestPatch:
    def test_patch_applies_transform(self, store: CacheStore):
        store.write("installation_status", {"formulae": {}, "casks": {}})
        result = store.patch(
            "installation_status",
            lambda doc: {**doc, "formulae": {"wget": True}},
        )
        assert result["formulae"] == {"wget": True}
        assert store.read("installation_status")["formulae"] == {"wget": True}

    def test_patch_missing_is_noop(self, store: CacheStore, cache_dir: Path):
        calls = []
        result = store.patch("installation_status", lambda doc: calls.append(doc) or doc)
        assert result is None
        assert calls == []
        assert not (cache_dir / "installation_status.json").exists()

    def test_patch_corrupt_is_noop(self, store: CacheStore, cache_dir: Path):
        cache_dir.mkdir()
        path = cache_dir / "outdated_status.json"
        path.write_text("{broken")
        assert store.patch("outdated_status", lambda doc: doc) is None
        assert path.read_text() == "{broken"

    def test_patch_keeps_mtime(self, cache_dir: Path):
        store = CacheStore(cache_dir, clock=_Clock(5_000.0))
        store.write("outdated_status", {"formulae": ["wget"], "casks": []})
        _set_mtime(store.path_for("outdated_status"), 4_000.0)

        store.patch("outdated_status", lambda doc: {**doc, "formulae": []})

        assert store.age_of("outdated_status") == 1_000.0
        assert store.read("outdated_status")["formulae"] == []


class TestClear:
    def test_clear_one(self, store: CacheStore):
        store.write("formulae", [])
        store.write("casks", [])
        assert store.clear("formulae") == ["formulae"]
        assert store.read("formulae") is None
        assert store.read("casks") == []

    def test_clear_all(self, store: CacheStore):
        store.write("formulae", [])
        store.write("casks", [])
        assert store.clear() == ["formulae", "casks"]
        assert store.read("casks") is None

    def test_clear_all_leaves_other_files(self, store: CacheStore, cache_dir: Path):
        store.write("formulae", [])
        (cache_dir / "package.json").write_text("{}")
        (cache_dir / "notes.txt").write_text("keep me")

        assert store.clear() == ["formulae"]
        assert (cache_dir / "package.json").read_text() == "{}"
        assert (cache_dir / "notes.txt").exists()

    def test_clear_missing(self, store: CacheStore):
        assert store.clear("formulae") == []
        assert store.clear() == []
