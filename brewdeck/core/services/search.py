"""
Search and detail views — pure functions over explicit state.

Nothing here does I/O. A surface (CLI, web) loads a CatalogSnapshot,
folds it into a ``SearchState`` and renders views from that state:

    state = with_catalog(initial_state(), snapshot)
    state = with_search_text(state, "cu")
    view  = render_list(state)

    match = lookup(state.formulae, state.casks, "curl")
    detail = render_detail(match, state.installed, state.outdated)

States are frozen; every update returns a new one.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Union

from brewdeck.core.models import (
    Cask,
    Formula,
    InstallationStatus,
    OutdatedStatus,
    PackageKind,
)

DEFAULT_PAGE_SIZE = 50

SEARCH_PLACEHOLDER = "Search formulae or casks..."


# ═══════════════════════════════════════════════════════════════════
#  State
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class SearchState:
    """Everything the search list renders from."""

    search_text: str = ""
    formulae: tuple[Formula, ...] = ()
    casks: tuple[Cask, ...] = ()
    installed: InstallationStatus = field(default_factory=InstallationStatus)
    outdated: OutdatedStatus = field(default_factory=OutdatedStatus)
    is_loading: bool = True
    error: str | None = None
    formulae_page: int = 0
    casks_page: int = 0
    page_size: int = DEFAULT_PAGE_SIZE


def initial_state(page_size: int = DEFAULT_PAGE_SIZE) -> SearchState:
    return SearchState(page_size=page_size)


def with_search_text(state: SearchState, text: str | None) -> SearchState:
    """New search text; paging restarts from the first page."""
    return replace(state, search_text=text or "", formulae_page=0, casks_page=0)


def with_catalog(state: SearchState, snapshot) -> SearchState:
    """Fold a loaded CatalogSnapshot into the state."""
    return replace(
        state,
        formulae=tuple(snapshot.formulae),
        casks=tuple(snapshot.casks),
        installed=snapshot.installed,
        outdated=snapshot.outdated,
        is_loading=False,
        error=None,
    )


def with_status(
    state: SearchState,
    installed: InstallationStatus,
    outdated: OutdatedStatus,
) -> SearchState:
    """Swap in fresh status documents (after an action)."""
    return replace(state, installed=installed, outdated=outdated)


def with_error(state: SearchState, message: str) -> SearchState:
    return replace(state, is_loading=False, error=message)


def next_page(state: SearchState, kind: PackageKind) -> SearchState:
    """Show one more page of a section."""
    if kind == "formula":
        return replace(state, formulae_page=state.formulae_page + 1)
    return replace(state, casks_page=state.casks_page + 1)


# ═══════════════════════════════════════════════════════════════════
#  Filtering
# ═══════════════════════════════════════════════════════════════════


def filter_formulae(formulae, text: str | None) -> list[Formula]:
    """Formulae whose name contains ``text`` (case-insensitive)."""
    needle = (text or "").lower()
    return [f for f in formulae if needle in f.name.lower()]


def filter_casks(casks, text: str | None) -> list[Cask]:
    """Casks whose token contains ``text`` (case-insensitive)."""
    needle = (text or "").lower()
    return [c for c in casks if needle in c.token.lower()]


# ═══════════════════════════════════════════════════════════════════
#  List view
# ═══════════════════════════════════════════════════════════════════


@dataclass
class ListItem:
    id: str
    kind: PackageKind
    title: str
    subtitle: str
    badges: list[str] = field(default_factory=list)


@dataclass
class ListSection:
    title: str
    items: list[ListItem]
    total: int
    has_more: bool


@dataclass
class ListView:
    placeholder: str
    search_text: str
    is_loading: bool
    error: str | None
    sections: list[ListSection]

    def to_dict(self) -> dict:
        return asdict(self)


def _badges(
    kind: PackageKind,
    package_id: str,
    installed: InstallationStatus,
    outdated: OutdatedStatus,
) -> list[str]:
    badges = []
    if installed.is_installed(kind, package_id):
        badges.append("installed")
    if outdated.is_outdated(kind, package_id):
        badges.append("outdated")
    return badges


def _section(title: str, kind: PackageKind, matches: list, page: int, state: SearchState) -> ListSection:
    limit = (page + 1) * state.page_size
    items = [
        ListItem(
            id=pkg.id,
            kind=kind,
            title=pkg.title,
            subtitle=pkg.desc or "",
            badges=_badges(kind, pkg.id, state.installed, state.outdated),
        )
        for pkg in matches[:limit]
    ]
    return ListSection(title=title, items=items, total=len(matches), has_more=len(matches) > limit)


def render_list(state: SearchState) -> ListView:
    """Both sections, filtered by the search text and paged."""
    formulae = filter_formulae(state.formulae, state.search_text)
    casks = filter_casks(state.casks, state.search_text)
    return ListView(
        placeholder=SEARCH_PLACEHOLDER,
        search_text=state.search_text,
        is_loading=state.is_loading,
        error=state.error,
        sections=[
            _section("Formulae", "formula", formulae, state.formulae_page, state),
            _section("Casks", "cask", casks, state.casks_page, state),
        ],
    )


# ═══════════════════════════════════════════════════════════════════
#  Lookup — Formula | Cask | NotFound
# ═══════════════════════════════════════════════════════════════════


@dataclass(frozen=True)
class FormulaMatch:
    formula: Formula
    kind: PackageKind = "formula"

    @property
    def package_id(self) -> str:
        return self.formula.name


@dataclass(frozen=True)
class CaskMatch:
    cask: Cask
    kind: PackageKind = "cask"

    @property
    def package_id(self) -> str:
        return self.cask.token


@dataclass(frozen=True)
class NotFound:
    package_id: str


Match = Union[FormulaMatch, CaskMatch, NotFound]


def lookup(formulae, casks, package_id: str) -> Match:
    """Resolve an id to a formula, else a cask, else NotFound."""
    for formula in formulae:
        if formula.name == package_id:
            return FormulaMatch(formula)
    for cask in casks:
        if cask.token == package_id:
            return CaskMatch(cask)
    return NotFound(package_id)


# ═══════════════════════════════════════════════════════════════════
#  Detail view
# ═══════════════════════════════════════════════════════════════════


@dataclass
class MetadataRow:
    label: str
    value: str
    link: str | None = None


@dataclass
class DetailView:
    id: str
    kind: PackageKind
    title: str
    description: str
    metadata: list[MetadataRow]
    badges: list[str]
    actions: list[str]

    def to_dict(self) -> dict:
        return asdict(self)


def available_actions(installed: bool, outdated: bool) -> list[str]:
    """Actions that make sense for the package's current state."""
    if not installed:
        return ["install"]
    actions = ["uninstall"]
    if outdated:
        actions.append("upgrade")
    return actions


def _formula_rows(formula: Formula) -> list[MetadataRow]:
    rows = [
        MetadataRow("Homepage", formula.homepage, link=formula.homepage or None),
        MetadataRow("Version", formula.versions.stable or formula.versions.head or "—"),
        MetadataRow("License", formula.license or "None"),
    ]
    if formula.tap:
        rows.append(MetadataRow("Tap", formula.tap))
    if formula.dependencies:
        rows.append(MetadataRow("Dependencies", ", ".join(formula.dependencies)))
    if formula.keg_only:
        rows.append(MetadataRow("Keg Only", "Yes"))
    rows.append(MetadataRow("Generated Date", formula.generated_date or "—"))
    return rows


def _cask_rows(cask: Cask) -> list[MetadataRow]:
    rows = [
        MetadataRow("Homepage", cask.homepage, link=cask.homepage or None),
        MetadataRow("Version", cask.version or "—"),
    ]
    if cask.auto_updates:
        rows.append(MetadataRow("Auto Updates", "Yes"))
    return rows


def render_detail(
    match: FormulaMatch | CaskMatch,
    installed: InstallationStatus,
    outdated: OutdatedStatus,
) -> DetailView:
    """Detail view for a resolved package, with contextual actions."""
    if isinstance(match, FormulaMatch):
        pkg: Formula | Cask = match.formula
        rows = _formula_rows(match.formula)
    elif isinstance(match, CaskMatch):
        pkg = match.cask
        rows = _cask_rows(match.cask)
    else:
        raise TypeError(f"Cannot render details for {match!r}")

    if pkg.caveats:
        rows.append(MetadataRow("Caveats", pkg.caveats.strip()))
    if pkg.deprecated:
        rows.append(MetadataRow("Deprecated", "Yes"))
    if pkg.disabled:
        rows.append(MetadataRow("Disabled", "Yes"))

    is_installed = installed.is_installed(match.kind, pkg.id)
    is_outdated = outdated.is_outdated(match.kind, pkg.id)

    return DetailView(
        id=pkg.id,
        kind=match.kind,
        title=pkg.title,
        description=pkg.desc or "",
        metadata=rows,
        badges=_badges(match.kind, pkg.id, installed, outdated),
        actions=available_actions(is_installed, is_outdated),
    )
