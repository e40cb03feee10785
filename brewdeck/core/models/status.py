"""
Local status documents — what is installed, what is outdated.

Both are cached as JSON (``installation_status.json`` and
``outdated_status.json``) and patched in place after successful
install / uninstall / upgrade commands.
"""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, Field

from brewdeck.core.models.catalog import PackageKind


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class InstallationStatus(BaseModel):
    """Installed packages, keyed by formula name / cask token."""

    formulae: dict[str, bool] = Field(default_factory=dict)
    casks: dict[str, bool] = Field(default_factory=dict)
    last_updated: str = Field(default_factory=_now_iso)

    def section(self, kind: PackageKind) -> dict[str, bool]:
        return self.formulae if kind == "formula" else self.casks

    def is_installed(self, kind: PackageKind, package_id: str) -> bool:
        return self.section(kind).get(package_id, False)


class OutdatedStatus(BaseModel):
    """Packages with a newer version available.

    Stored as sorted lists so the JSON stays stable; treated as sets.
    """

    formulae: list[str] = Field(default_factory=list)
    casks: list[str] = Field(default_factory=list)
    last_updated: str = Field(default_factory=_now_iso)

    def section(self, kind: PackageKind) -> list[str]:
        return self.formulae if kind == "formula" else self.casks

    def is_outdated(self, kind: PackageKind, package_id: str) -> bool:
        return package_id in self.section(kind)
