"""
Shared test fixtures and configuration.
"""

from __future__ import annotations

from pathlib import Path

import pytest

from brewdeck.core.config.loader import Settings
from brewdeck.core.persistence.cache_store import CacheStore


FORMULAE_JSON = [
    {
        "name": "wget",
        "full_name": "wget",
        "tap": "homebrew/core",
        "desc": "Internet file retriever",
        "license": "GPL-3.0-or-later",
        "homepage": "https://www.gnu.org/software/wget/",
        "versions": {"stable": "1.24.5", "head": "HEAD", "bottle": True},
        "dependencies": ["libidn2", "openssl@3"],
        "generated_date": "2024-05-01",
        "analytics": {"install": {"30d": {"wget": 100}}},
    },
    {
        "name": "curl",
        "full_name": "curl",
        "tap": "homebrew/core",
        "desc": "Get a file from an HTTP, HTTPS or FTP server",
        "license": "curl",
        "homepage": "https://curl.se",
        "versions": {"stable": "8.7.1", "head": "HEAD", "bottle": True},
        "keg_only": True,
        "generated_date": "2024-05-01",
    },
    {
        "name": "git",
        "full_name": "git",
        "tap": "homebrew/core",
        "desc": "Distributed revision control system",
        "license": "GPL-2.0-only",
        "homepage": "https://git-scm.com",
        "versions": {"stable": "2.45.0", "head": "HEAD", "bottle": True},
        "caveats": "Bash completion has been installed to:\n  /opt/homebrew/etc/bash_completion.d\n",
        "generated_date": "2024-05-01",
    },
]

CASKS_JSON = [
    {
        "token": "firefox",
        "full_token": "firefox",
        "tap": "homebrew/cask",
        "name": ["Mozilla Firefox"],
        "desc": "Web browser",
        "homepage": "https://www.mozilla.org/firefox/",
        "url": "https://download-installer.cdn.mozilla.net/firefox.dmg",
        "version": "125.0.3",
        "auto_updates": True,
        "generated_date": "2024-05-01",
    },
    {
        "token": "iterm2",
        "full_token": "iterm2",
        "tap": "homebrew/cask",
        "name": [],
        "desc": None,
        "homepage": "https://iterm2.com/",
        "url": "https://iterm2.com/downloads/stable/iTerm2.zip",
        "version": "3.5.0",
        "auto_updates": None,
        "generated_date": "2024-05-01",
    },
]


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Return a temporary cache directory (not yet created)."""
    return tmp_path / "cache"


@pytest.fixture
def store(cache_dir: Path) -> CacheStore:
    return CacheStore(cache_dir)


@pytest.fixture
def settings(cache_dir: Path) -> Settings:
    return Settings(
        brew_path="/usr/local/bin/brew",
        cache_dir=cache_dir,
        formula_url="https://example.test/formula.json",
        cask_url="https://example.test/cask.json",
        page_size=50,
    )


@pytest.fixture
def formulae_json() -> list[dict]:
    return [dict(f) for f in FORMULAE_JSON]


@pytest.fixture
def casks_json() -> list[dict]:
    return [dict(c) for c in CASKS_JSON]
