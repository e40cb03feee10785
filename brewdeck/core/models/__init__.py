"""
Domain models — Pydantic types for brewdeck.

All models are re-exported here for convenient access:

    from brewdeck.core.models import Formula, Cask, InstallationStatus, OutdatedStatus
"""

from brewdeck.core.models.catalog import (
    Cask,
    Formula,
    FormulaVersions,
    PackageKind,
)
from brewdeck.core.models.status import InstallationStatus, OutdatedStatus

__all__ = [
    # catalog.py
    "Cask",
    "Formula",
    "FormulaVersions",
    "PackageKind",
    # status.py
    "InstallationStatus",
    "OutdatedStatus",
]
