"""
Tests for CLI commands — search, show, actions, status, cache.

The cache is pre-seeded so nothing hits the network; brew is mocked.
"""

from __future__ import annotations

import json
import subprocess
import textwrap
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from brewdeck.core.persistence.cache_store import CacheStore
from brewdeck.core.services.catalog_ops import CatalogError
from brewdeck.main import cli


def _mock_result(stdout: str = "", stderr: str = "", rc: int = 0):
    return subprocess.CompletedProcess(args=["brew"], returncode=rc, stdout=stdout, stderr=stderr)


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch):
    for var in ("BREWDECK_BREW", "BREWDECK_CACHE_DIR", "BREWDECK_LOG_FILE", "BREWDECK_LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def config(tmp_path: Path, cache_dir: Path, formulae_json, casks_json) -> Path:
    """A config file pointing at a seeded cache."""
    store = CacheStore(cache_dir)
    store.write("formulae", formulae_json)
    store.write("casks", casks_json)
    store.write("installation_status", {
        "formulae": {"wget": True}, "casks": {}, "last_updated": "2024-05-01T00:00:00+00:00",
    })
    store.write("outdated_status", {
        "formulae": ["wget"], "casks": [], "last_updated": "2024-05-01T00:00:00+00:00",
    })

    path = tmp_path / "config.yml"
    path.write_text(textwrap.dedent(f"""\
        brew_path: /fake/brew
        cache_dir: {cache_dir}
        formula_url: https://example.test/formula.json
        cask_url: https://example.test/cask.json
    """))
    return path


def _invoke(config: Path, *args: str):
    return CliRunner().invoke(cli, ["--config", str(config), *args])


class TestCLIGlobal:
    def test_help(self):
        result = CliRunner().invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "Homebrew" in result.output
        for command in ("search", "show", "install", "uninstall", "upgrade", "cache", "web"):
            assert command in result.output

    def test_version(self):
        result = CliRunner().invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output

    def test_bad_config_exits_1(self, tmp_path: Path):
        bad = tmp_path / "config.yml"
        bad.write_text("page_size: [\n")
        result = CliRunner().invoke(cli, ["--config", str(bad), "search"])
        assert result.exit_code == 1
        assert "Invalid YAML" in result.output


class TestSearch:
    def test_filters(self, config: Path):
        result = _invoke(config, "search", "cu")
        assert result.exit_code == 0
        assert "curl" in result.output
        assert "wget" not in result.output

    def test_badges(self, config: Path):
        result = _invoke(config, "search", "wget")
        assert "installed" in result.output
        assert "outdated" in result.output

    def test_json(self, config: Path):
        result = _invoke(config, "search", "fire", "--json")
        assert result.exit_code == 0
        data = json.loads(result.output)
        formulae, casks = data["sections"]
        assert formulae["items"] == []
        assert casks["items"][0]["id"] == "firefox"
        assert casks["items"][0]["title"] == "Mozilla Firefox"

    def test_catalog_failure(self, tmp_path: Path):
        config = tmp_path / "config.yml"
        config.write_text(f"cache_dir: {tmp_path / 'empty-cache'}\nbrew_path: /fake/brew\n")
        with patch("brewdeck.core.services.catalog_ops.fetch_json",
                   side_effect=CatalogError("offline")), \
             patch("brewdeck.core.services.brew_ops.subprocess.run",
                   return_value=_mock_result(rc=1)):
            result = _invoke(config, "search")
        assert result.exit_code == 1
        assert "offline" in result.output


class TestShow:
    def test_formula(self, config: Path):
        result = _invoke(config, "show", "curl")
        assert result.exit_code == 0
        assert "curl" in result.output
        assert "Homepage:" in result.output
        assert "brewdeck install curl" in result.output

    def test_installed_outdated_formula_actions(self, config: Path):
        result = _invoke(config, "show", "wget", "--json")
        data = json.loads(result.output)
        assert data["actions"] == ["uninstall", "upgrade"]
        assert data["badges"] == ["installed", "outdated"]

    def test_cask(self, config: Path):
        data = json.loads(_invoke(config, "show", "firefox", "--json").output)
        assert data["kind"] == "cask"
        assert data["title"] == "Mozilla Firefox"

    def test_not_found(self, config: Path):
        result = _invoke(config, "show", "nope")
        assert result.exit_code == 1
        assert "No formula or cask named 'nope'" in result.output


class TestActions:
    def test_install_formula(self, config: Path, cache_dir: Path):
        with patch("brewdeck.core.services.brew_ops.subprocess.run",
                   return_value=_mock_result(stdout="==> Pouring curl")) as mock_run:
            result = _invoke(config, "install", "curl")

        assert result.exit_code == 0
        assert "Installed curl" in result.output
        assert mock_run.call_args.args[0] == ["/fake/brew", "install", "curl"]
        status = CacheStore(cache_dir).read("installation_status")
        assert status["formulae"] == {"wget": True, "curl": True}

    def test_install_cask_adds_flag(self, config: Path):
        with patch("brewdeck.core.services.brew_ops.subprocess.run",
                   return_value=_mock_result()) as mock_run:
            result = _invoke(config, "install", "firefox")
        assert result.exit_code == 0
        assert mock_run.call_args.args[0] == ["/fake/brew", "install", "--cask", "firefox"]

    def test_uninstall(self, config: Path, cache_dir: Path):
        with patch("brewdeck.core.services.brew_ops.subprocess.run", return_value=_mock_result()):
            result = _invoke(config, "uninstall", "wget")
        assert result.exit_code == 0
        assert CacheStore(cache_dir).read("installation_status")["formulae"] == {}

    def test_upgrade(self, config: Path, cache_dir: Path):
        with patch("brewdeck.core.services.brew_ops.subprocess.run", return_value=_mock_result()):
            result = _invoke(config, "upgrade", "wget", "--json")
        assert result.exit_code == 0
        assert json.loads(result.output)["ok"] is True
        assert CacheStore(cache_dir).read("outdated_status")["formulae"] == []

    def test_failed_action(self, config: Path, cache_dir: Path):
        with patch("brewdeck.core.services.brew_ops.subprocess.run",
                   return_value=_mock_result(stderr="Error: It seems curl is broken", rc=1)):
            result = _invoke(config, "install", "curl")
        assert result.exit_code == 1
        assert "curl is broken" in result.output
        assert "curl" not in CacheStore(cache_dir).read("installation_status")["formulae"]

    def test_configured_timeout(self, config: Path, cache_dir: Path):
        config.write_text(config.read_text() + "brew_timeout: 5\n")
        with patch("brewdeck.core.services.brew_ops.subprocess.run",
                   side_effect=subprocess.TimeoutExpired(cmd="brew", timeout=5)) as mock_run:
            result = _invoke(config, "install", "curl")

        assert result.exit_code == 1
        assert "timed out after 5s" in result.output
        assert mock_run.call_args.kwargs["timeout"] == 5
        assert "curl" not in CacheStore(cache_dir).read("installation_status")["formulae"]

    def test_unknown_package(self, config: Path):
        with patch("brewdeck.core.services.brew_ops.subprocess.run") as mock_run:
            result = _invoke(config, "install", "nope")
        assert result.exit_code == 1
        mock_run.assert_not_called()


class TestStatusCommands:
    def test_installed(self, config: Path):
        result = _invoke(config, "installed")
        assert result.exit_code == 0
        assert "wget" in result.output

    def test_outdated_json(self, config: Path):
        result = _invoke(config, "outdated", "--json")
        assert json.loads(result.output)["formulae"] == ["wget"]


class TestCacheCommands:
    def test_status_json(self, config: Path):
        result = _invoke(config, "cache", "status", "--json")
        assert result.exit_code == 0
        datasets = {d["dataset"]: d for d in json.loads(result.output)}
        assert datasets["formulae"]["fresh"] is True

    def test_status_text(self, config: Path):
        result = _invoke(config, "cache", "status")
        assert result.exit_code == 0
        assert "installation_status" in result.output

    def test_clear_one(self, config: Path, cache_dir: Path):
        result = _invoke(config, "cache", "clear", "casks")
        assert result.exit_code == 0
        assert not (cache_dir / "casks.json").exists()
        assert (cache_dir / "formulae.json").exists()

    def test_clear_all(self, config: Path, cache_dir: Path):
        result = _invoke(config, "cache", "clear")
        assert result.exit_code == 0
        assert list(cache_dir.glob("*.json")) == []

    def test_clear_unknown(self, config: Path):
        result = _invoke(config, "cache", "clear", "bottles")
        assert result.exit_code == 1
