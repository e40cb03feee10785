"""
Catalog models — formulae and casks as served by formulae.brew.sh.

The upstream records carry dozens of fields (bottles, analytics,
variations, ...). Only the fields the views read are declared; the
rest pass through untouched via ``extra="allow"``.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

PackageKind = Literal["formula", "cask"]


class FormulaVersions(BaseModel):
    """Version block of a formula."""

    model_config = ConfigDict(extra="allow")

    stable: str | None = None
    head: str | None = None
    bottle: bool = False


class Formula(BaseModel):
    """A command-line package entry in the catalog."""

    model_config = ConfigDict(extra="allow")

    name: str
    full_name: str = ""
    tap: str = ""
    desc: str | None = None
    license: str | None = None
    homepage: str = ""
    versions: FormulaVersions = Field(default_factory=FormulaVersions)
    aliases: list[str] = Field(default_factory=list)
    dependencies: list[str] = Field(default_factory=list)
    build_dependencies: list[str] = Field(default_factory=list)
    caveats: str | None = None
    keg_only: bool = False
    deprecated: bool = False
    disabled: bool = False
    generated_date: str = ""

    @property
    def id(self) -> str:
        return self.name

    @property
    def title(self) -> str:
        return self.name


class Cask(BaseModel):
    """A GUI-application package entry in the catalog."""

    model_config = ConfigDict(extra="allow")

    token: str
    full_token: str = ""
    tap: str = ""
    name: list[str] = Field(default_factory=list)
    desc: str | None = None
    homepage: str = ""
    url: str = ""
    version: str = ""
    auto_updates: bool | None = None
    caveats: str | None = None
    deprecated: bool = False
    disabled: bool = False
    generated_date: str = ""

    @property
    def id(self) -> str:
        return self.token

    @property
    def title(self) -> str:
        """First human-readable name, else the token."""
        return self.name[0] if self.name and self.name[0] else self.token
