"""
Portfolio Catalog Engine
========================
Turns an untrusted catalog of projects (decoded JSON) into the gallery the
site shows: normalized records, the featured-first canonical selection, tag
filters, page-by-page reveal and a generated placeholder visual for every
project that ships without a thumbnail.

Everything here is synchronous and free of shared state. The only state is
the CatalogSession value, which callers pass in and get back.
"""

import logging
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Optional

log = logging.getLogger("catalog")

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

PAGE_SIZE = 6
CANONICAL_CAP = 6
ALL_FILTER = None   # no tag string can equal it

UNTITLED_PLACEHOLDER = "Projeto sem título"
DESCRIPTION_PLACEHOLDER = "Sem descrição disponível."
DATE_PLACEHOLDER = "Data não informada"

# pt-BR long date, e.g. "1 de junho de 2024"
PT_BR_MONTHS = (
    "janeiro", "fevereiro", "março", "abril", "maio", "junho",
    "julho", "agosto", "setembro", "outubro", "novembro", "dezembro",
)


# ---------------------------------------------------------------------------
# Data Models
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ProjectRecord:
    title: str = UNTITLED_PLACEHOLDER
    description: str = DESCRIPTION_PLACEHOLDER
    demo_url: Optional[str] = None
    repo_url: Optional[str] = None
    tags: tuple = ()
    date: Optional[str] = None   # raw ISO string, only kept when it parses
    featured: bool = False
    thumb: Optional[str] = None

    @property
    def parsed_date(self) -> Optional[datetime]:
        return parse_date(self.date)


@dataclass(frozen=True)
class CatalogSession:
    """Everything the gallery knows between two user actions."""
    all_projects: tuple = ()
    visible: tuple = ()
    revealed_count: int = 0
    active_filter: Optional[str] = ALL_FILTER
    candidate_count: int = 0     # matches for the active filter before the cap


@dataclass(frozen=True)
class VisualPalette:
    gradients: tuple
    icons: tuple


# Gradient CSS + SVG path pairs used for generated thumbnails.
DEFAULT_PALETTE = VisualPalette(
    gradients=(
        "linear-gradient(135deg, #6366f1 0%, #a855f7 100%)",
        "linear-gradient(135deg, #0ea5e9 0%, #22d3ee 100%)",
        "linear-gradient(135deg, #10b981 0%, #84cc16 100%)",
        "linear-gradient(135deg, #f59e0b 0%, #ef4444 100%)",
        "linear-gradient(135deg, #ec4899 0%, #f43f5e 100%)",
        "linear-gradient(135deg, #14b8a6 0%, #3b82f6 100%)",
        "linear-gradient(135deg, #8b5cf6 0%, #ec4899 100%)",
        "linear-gradient(135deg, #64748b 0%, #0f172a 100%)",
    ),
    icons=(
        # code brackets
        "M10 20l4-16m4 4l4 4-4 4M6 16l-4-4 4-4",
        # layers / stack
        "M19 11H5m14 0a2 2 0 012 2v6a2 2 0 01-2 2H5a2 2 0 01-2-2v-6a2 2 0 012-2m14 0V9a2 2 0 00-2-2M5 11V9a2 2 0 012-2m0 0V5a2 2 0 012-2h6a2 2 0 012 2v2M7 7h10",
        # terminal
        "M8 9l3 3-3 3m5 0h3M5 20h14a2 2 0 002-2V6a2 2 0 00-2-2H5a2 2 0 00-2 2v12a2 2 0 002 2z",
        # globe
        "M21 12a9 9 0 01-9 9m9-9a9 9 0 00-9-9m9 9H3m9 9a9 9 0 01-9-9m9 9c1.657 0 3-4.03 3-9s-1.343-9-3-9m0 18c-1.657 0-3-4.03-3-9s1.343-9 3-9",
        # chip
        "M9 3v2m6-2v2M9 19v2m6-2v2M5 9H3m2 6H3m18-6h-2m2 6h-2M7 19h10a2 2 0 002-2V7a2 2 0 00-2-2H7a2 2 0 00-2 2v10a2 2 0 002 2zM9 9h6v6H9V9z",
        # chart
        "M9 19v-6a2 2 0 00-2-2H5a2 2 0 00-2 2v6a2 2 0 002 2h2a2 2 0 002-2zm0 0V9a2 2 0 012-2h2a2 2 0 012 2v10m-6 0a2 2 0 002 2h2a2 2 0 002-2m0 0V5a2 2 0 012-2h2a2 2 0 012 2v14a2 2 0 01-2 2h-2a2 2 0 01-2-2z",
        # lightning
        "M13 10V3L4 14h7v7l9-11h-7z",
        # puzzle
        "M11 4a2 2 0 114 0v1a1 1 0 001 1h3a1 1 0 011 1v3a1 1 0 01-1 1h-1a2 2 0 100 4h1a1 1 0 011 1v3a1 1 0 01-1 1h-3a1 1 0 01-1-1v-1a2 2 0 10-4 0v1a1 1 0 01-1 1H7a1 1 0 01-1-1v-3a1 1 0 00-1-1H4a2 2 0 110-4h1a1 1 0 001-1V7a1 1 0 011-1h3a1 1 0 001-1V4z",
    ),
)


# ---------------------------------------------------------------------------
# Normalizer
# ---------------------------------------------------------------------------

def parse_date(value) -> Optional[datetime]:
    """Parse an ISO date/datetime string. Aware values are converted to naive UTC."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    except (ValueError, OverflowError):
        return None
    return parsed


def _text_or(value, placeholder: str) -> str:
    if isinstance(value, str) and value.strip():
        return value
    return placeholder


def _optional_text(value) -> Optional[str]:
    if isinstance(value, str) and value:
        return value
    return None


def _normalize_tags(value) -> tuple:
    if not isinstance(value, (list, tuple)):
        return ()
    if not all(isinstance(tag, str) for tag in value):
        # Mixed members make the whole field malformed
        log.debug(f"Dropping malformed tag list: {value!r}")
        return ()
    return tuple(value)


def normalize_project(raw) -> ProjectRecord:
    """Coerce one raw catalog entry into a ProjectRecord. Never raises."""
    if not isinstance(raw, dict):
        log.debug(f"Catalog entry is not an object: {type(raw).__name__}")
        raw = {}

    date = raw.get("date")
    if date is not None and parse_date(date) is None:
        log.debug(f"Ignoring unparseable date {date!r} on {raw.get('title')!r}")

    return ProjectRecord(
        title=_text_or(raw.get("title"), UNTITLED_PLACEHOLDER),
        description=_text_or(raw.get("description"), DESCRIPTION_PLACEHOLDER),
        demo_url=_optional_text(raw.get("demoUrl")),
        repo_url=_optional_text(raw.get("repoUrl")),
        tags=_normalize_tags(raw.get("tags")),
        date=date if parse_date(date) is not None else None,
        featured=bool(raw.get("featured")),
        thumb=_optional_text(raw.get("thumb")),
    )


def normalize(raw) -> tuple:
    """
    Normalize a decoded catalog document.
    Anything that is not a list degrades to an empty catalog with a warning.
    """
    if not isinstance(raw, (list, tuple)):
        log.warning(f"Catalog is not a list (got {type(raw).__name__}), treating as empty")
        return ()
    return tuple(normalize_project(entry) for entry in raw)


# ---------------------------------------------------------------------------
# Selection & Ordering Policy
# ---------------------------------------------------------------------------

def select_canonical(projects, cap: int = CANONICAL_CAP) -> list:
    """Featured projects when there are any, otherwise the first entries as received."""
    featured = [p for p in projects if p.featured]
    if featured:
        return featured[:cap]
    return list(projects)[:cap]


def _order_key(project: ProjectRecord):
    parsed = project.parsed_date
    if parsed is None:
        return (not project.featured, 1, 0, 0, 0)
    # Integer parts keep microsecond resolution across the whole datetime range
    seconds = parsed.hour * 3600 + parsed.minute * 60 + parsed.second
    return (not project.featured, 0, -parsed.toordinal(), -seconds, -parsed.microsecond)


def order(projects) -> list:
    """Featured first, then newest first, undated last. Stable for ties."""
    return sorted(projects, key=_order_key)


def canonical_view(projects) -> list:
    return order(select_canonical(projects))


# ---------------------------------------------------------------------------
# Filter Engine
# ---------------------------------------------------------------------------

def available_tags(all_projects) -> list:
    return sorted({tag for project in all_projects for tag in project.tags})


def filter_candidates(all_projects, tag: Optional[str]) -> list:
    if tag is ALL_FILTER:
        return list(all_projects)
    return [p for p in all_projects if tag in p.tags]


def apply_filter(all_projects, tag: Optional[str]) -> list:
    """Visible set for a filter: selection and ordering are re-run inside the matches."""
    return canonical_view(filter_candidates(all_projects, tag))


def open_session(all_projects) -> CatalogSession:
    """Fresh session over a newly loaded catalog, showing the 'all' filter."""
    return select_filter(CatalogSession(all_projects=tuple(all_projects)), ALL_FILTER)


def select_filter(session: CatalogSession, tag: Optional[str]) -> CatalogSession:
    candidates = filter_candidates(session.all_projects, tag)
    return replace(
        session,
        visible=tuple(canonical_view(candidates)),
        revealed_count=0,
        active_filter=tag,
        candidate_count=len(candidates),
    )


def filter_controls(session: CatalogSession) -> list:
    """
    Buttons for the filter bar: "Todos" (value ALL_FILTER) plus one per tag, exactly one pressed.
    An empty list means the bar is not rendered at all.
    """
    tags = available_tags(session.all_projects)
    if not tags:
        return []

    controls = [{
        "label": "Todos",
        "value": ALL_FILTER,
        "count": len(session.all_projects),
        "pressed": session.active_filter is ALL_FILTER,
    }]
    for tag in tags:
        controls.append({
            "label": tag,
            "value": tag,
            "count": len(filter_candidates(session.all_projects, tag)),
            "pressed": session.active_filter == tag,
        })
    return controls


# ---------------------------------------------------------------------------
# Pagination Controller
# ---------------------------------------------------------------------------

def reveal(visible, revealed_count: int, page_size: int = PAGE_SIZE) -> tuple:
    """Return (newly revealed items, new revealed count). Exhausted sets give ([], count)."""
    start = min(max(revealed_count, 0), len(visible))
    page = list(visible[start:start + page_size])
    return page, start + len(page)


def reveal_next(session: CatalogSession, page_size: int = PAGE_SIZE) -> tuple:
    page, count = reveal(session.visible, session.revealed_count, page_size)
    return page, replace(session, revealed_count=count)


def more_available(session: CatalogSession, page_size: int = PAGE_SIZE) -> bool:
    # Compares the uncapped candidate count to the page size, so a capped
    # view never offers "show more" for entries the cap already excluded.
    return (
        session.revealed_count < len(session.visible)
        and session.candidate_count > page_size
    )


def revealed(session: CatalogSession) -> list:
    return list(session.visible[:session.revealed_count])


# ---------------------------------------------------------------------------
# Deterministic Visual Assignment
# ---------------------------------------------------------------------------

def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def title_hash(title: str) -> int:
    """31-based rolling hash over UTF-16 code units, wrapped to signed 32 bits."""
    data = title.encode("utf-16-le", "surrogatepass")
    h = 0
    for i in range(0, len(data), 2):
        unit = data[i] | (data[i + 1] << 8)
        h = _to_int32(h * 31 + unit)
    return h


def assign_visual(title: str, palette: VisualPalette = DEFAULT_PALETTE) -> tuple:
    """Map a title to a stable (gradient index, icon index) pair."""
    h = title_hash(title)
    return abs(h) % len(palette.gradients), abs(h >> 3) % len(palette.icons)


# ---------------------------------------------------------------------------
# Render Descriptors
# ---------------------------------------------------------------------------

def format_date(date: Optional[str]) -> str:
    parsed = parse_date(date)
    if parsed is None:
        return DATE_PLACEHOLDER
    return f"{parsed.day} de {PT_BR_MONTHS[parsed.month - 1]} de {parsed.year}"


def describe(project: ProjectRecord, palette: VisualPalette = DEFAULT_PALETTE) -> dict:
    """Render-ready card data. The renderer needs nothing else."""
    if project.thumb:
        visual = {"kind": "image", "src": project.thumb}
    else:
        gradient_id, icon_id = assign_visual(project.title, palette)
        visual = {
            "kind": "generated",
            "gradient_id": gradient_id,
            "icon_id": icon_id,
            "gradient": palette.gradients[gradient_id],
            "icon": palette.icons[icon_id],
        }

    return {
        "title": project.title,
        "description": project.description,
        "tags": list(project.tags),
        "formatted_date": format_date(project.date),
        "demo_url": project.demo_url,
        "repo_url": project.repo_url,
        "featured": project.featured,
        "visual": visual,
    }
