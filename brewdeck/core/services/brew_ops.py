"""
brew CLI wrapper — the only place that spawns the package manager.

Every command is run with captured text output and judged by its exit
code alone. A missing binary is reported as a failed result (exit 127)
instead of an exception, so callers only ever check ``returncode``.

Commands:
    list --formula | list --cask
    outdated --json=v2
    install | uninstall | upgrade  [--cask] <name>
"""

from __future__ import annotations

import json
import logging
import os
import subprocess

from brewdeck.core.models.catalog import PackageKind

logger = logging.getLogger(__name__)

_MISSING_BINARY_RC = 127


class BrewRunner:
    """Run ``brew`` subcommands against a fixed binary path."""

    def __init__(self, brew_path: str, timeout: int | None = None) -> None:
        self.brew_path = brew_path
        self.timeout = timeout

    def run(self, *args: str) -> subprocess.CompletedProcess[str]:
        """Run ``brew <args>`` and return the completed process."""
        cmd = [self.brew_path, *args]
        logger.debug("Executing: %s", " ".join(cmd))
        env = {"HOMEBREW_NO_AUTO_UPDATE": "1", "HOMEBREW_NO_ENV_HINTS": "1"}
        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                env=_merged_env(env),
            )
        except FileNotFoundError:
            logger.warning("brew not found at %s", self.brew_path)
            return subprocess.CompletedProcess(
                cmd, _MISSING_BINARY_RC, "", f"brew not found at {self.brew_path}",
            )
        except subprocess.TimeoutExpired:
            return subprocess.CompletedProcess(
                cmd, 1, "", f"brew {' '.join(args)} timed out after {self.timeout}s",
            )

        if result.returncode != 0:
            logger.info(
                "brew %s exited %d: %s",
                " ".join(args), result.returncode, result.stderr.strip()[:200],
            )
        return result

    # ── Observe ─────────────────────────────────────────────────

    def list_installed(self, kind: PackageKind) -> subprocess.CompletedProcess[str]:
        return self.run("list", _kind_flag(kind))

    def outdated(self) -> subprocess.CompletedProcess[str]:
        return self.run("outdated", "--json=v2")

    # ── Act ─────────────────────────────────────────────────────

    def install(self, kind: PackageKind, name: str) -> subprocess.CompletedProcess[str]:
        return self.run("install", *_cask_args(kind), name)

    def uninstall(self, kind: PackageKind, name: str) -> subprocess.CompletedProcess[str]:
        return self.run("uninstall", *_cask_args(kind), name)

    def upgrade(self, kind: PackageKind, name: str) -> subprocess.CompletedProcess[str]:
        return self.run("upgrade", *_cask_args(kind), name)


def _kind_flag(kind: PackageKind) -> str:
    return "--cask" if kind == "cask" else "--formula"


def _cask_args(kind: PackageKind) -> list[str]:
    return ["--cask"] if kind == "cask" else []


def _merged_env(extra: dict[str, str]) -> dict[str, str]:
    return {**os.environ, **extra}


# ═══════════════════════════════════════════════════════════════════
#  Output parsing
# ═══════════════════════════════════════════════════════════════════


def parse_list_output(stdout: str) -> list[str]:
    """``brew list`` prints one name per line when not on a terminal.

    Tolerates column output too by splitting on any whitespace.
    """
    return [name for name in stdout.split() if name]


def parse_outdated_output(stdout: str) -> dict[str, list[str]]:
    """Parse ``brew outdated --json=v2`` into sorted name lists.

    Raises:
        ValueError: If the output is not the expected JSON object.
    """
    try:
        data = json.loads(stdout) if stdout.strip() else {}
    except json.JSONDecodeError as e:
        raise ValueError(f"brew outdated returned invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ValueError("brew outdated returned a non-object document")

    result: dict[str, list[str]] = {}
    for section in ("formulae", "casks"):
        entries = data.get(section) or []
        names = {
            entry["name"]
            for entry in entries
            if isinstance(entry, dict) and isinstance(entry.get("name"), str)
        }
        result[section] = sorted(names)
    return result
