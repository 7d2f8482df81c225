#!/usr/bin/env python3
"""
Portfolio Gallery Orchestrator
==============================
Loads the project catalog, drives the gallery view state (loading, content,
empty, error) from user commands, and writes the rendered gallery page.

Usage:
    python orchestrator.py

Configuration via environment variables or .env file.
"""

import os
import json
import logging
import sys
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

import requests
from dotenv import load_dotenv

import catalog_engine as engine

# Load .env file so this works cross-platform (Windows included)
load_dotenv()

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

CATALOG_URL = os.getenv("CATALOG_URL", "")
CATALOG_FILE = Path(os.getenv("CATALOG_FILE", "data/projects.json"))
OUTPUT_FILE = Path(os.getenv("OUTPUT_FILE", "index.html"))
FETCH_TIMEOUT = float(os.getenv("FETCH_TIMEOUT", "0"))  # 0 = wait forever
LOG_FILE = os.getenv("LOG_FILE", "")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DRY_RUN = os.getenv("DRY_RUN", "false").lower() == "true"

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

log = logging.getLogger("orchestrator")


def setup_logging():
    handlers = [
        logging.StreamHandler(
            open(sys.stdout.fileno(), mode="w", encoding="utf-8", closefd=False)
        ),
    ]
    if LOG_FILE:
        handlers.insert(0, logging.FileHandler(LOG_FILE, encoding="utf-8"))

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=handlers,
    )


# ---------------------------------------------------------------------------
# Catalog fetch
# ---------------------------------------------------------------------------

class CatalogLoadError(Exception):
    """The catalog could not be fetched or decoded."""


def fetch_catalog_url(url: str, timeout: float = FETCH_TIMEOUT):
    """GET the catalog and decode its JSON body."""
    log.info(f"Fetching catalog from {url}...")
    try:
        resp = requests.get(url, timeout=timeout or None, headers={
            "Accept": "application/json",
        })
    except requests.RequestException as e:
        raise CatalogLoadError(f"Request failed: {e}") from e

    if resp.status_code >= 400:
        raise CatalogLoadError(f"HTTP error! status: {resp.status_code}")

    try:
        return resp.json()
    except ValueError as e:
        raise CatalogLoadError(f"Invalid JSON in catalog response: {e}") from e


def fetch_catalog_file(path: Path):
    log.info(f"Reading catalog from {path}...")
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except OSError as e:
        raise CatalogLoadError(f"Could not read {path}: {e}") from e
    except ValueError as e:
        # JSONDecodeError and UnicodeDecodeError are both ValueErrors
        raise CatalogLoadError(f"Invalid JSON in {path}: {e}") from e


def fetch_catalog():
    """Fetch from CATALOG_URL when set, otherwise from CATALOG_FILE."""
    if CATALOG_URL:
        return fetch_catalog_url(CATALOG_URL)
    return fetch_catalog_file(CATALOG_FILE)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LoadRequested:
    pass


@dataclass(frozen=True)
class FilterSelected:
    tag: Optional[str] = engine.ALL_FILTER


@dataclass(frozen=True)
class RevealMoreRequested:
    pass


@dataclass(frozen=True)
class RetryRequested:
    pass


# ---------------------------------------------------------------------------
# View State Machine
# ---------------------------------------------------------------------------

class ViewState(str, Enum):
    LOADING = "loading"
    CONTENT = "content"
    ERROR = "error"


STATUS_LOADING = "Carregando projetos..."
STATUS_EMPTY = "Nenhum projeto encontrado."
STATUS_ERROR = "Erro ao carregar projetos. Tente novamente."


@dataclass
class GalleryView:
    """Snapshot handed to the rendering collaborator after every command."""
    state: str
    mode: str                      # loading / content / empty / error
    status_text: str
    cards: list = field(default_factory=list)
    appended: list = field(default_factory=list)
    replace: bool = True           # True: re-render from scratch; False: append `appended`
    filters: list = field(default_factory=list)
    active_filter: Optional[str] = engine.ALL_FILTER
    more_available: bool = False
    total_visible: int = 0


def content_status(shown: int, total: int, active_filter: Optional[str]) -> str:
    if total == 0:
        return STATUS_EMPTY
    noun = "projeto" if total == 1 else "projetos"
    text = f"Exibindo {shown} de {total} {noun}."
    if active_filter is not engine.ALL_FILTER:
        text += f" Filtro: {active_filter}."
    return text


class GalleryController:
    """
    Owns the catalog session and consumes user commands.

    Loads are ticketed: only the most recently started load may change the
    session, so a slow superseded response can never overwrite a newer one.
    """

    def __init__(self, fetcher: Callable = fetch_catalog,
                 announce: Optional[Callable[[str], None]] = None,
                 palette: engine.VisualPalette = engine.DEFAULT_PALETTE):
        self.fetcher = fetcher
        self.announce = announce
        self.palette = palette
        self.state = ViewState.LOADING
        self.session = engine.CatalogSession()
        self.status_text = ""
        self.last_error = ""
        self._latest_ticket = 0
        self._view = GalleryView(state=self.state.value, mode="loading", status_text="")

    @property
    def view(self) -> GalleryView:
        return self._view

    # ── Command dispatch ───────────────────────────────────────────────

    def dispatch(self, command) -> GalleryView:
        if isinstance(command, LoadRequested):
            if self.state == ViewState.ERROR:
                log.debug("Load ignored in error state; waiting for retry")
                return self._view
            return self._load()
        if isinstance(command, RetryRequested):
            if self.state != ViewState.ERROR:
                log.debug(f"Retry ignored in {self.state.value} state")
                return self._view
            return self._load()
        if isinstance(command, FilterSelected):
            return self._select_filter(command.tag)
        if isinstance(command, RevealMoreRequested):
            return self._reveal_more()
        raise TypeError(f"Unknown gallery command: {command!r}")

    def _load(self) -> GalleryView:
        ticket = self.begin_load()
        try:
            raw = self.fetcher()
        except CatalogLoadError as e:
            return self.fail_load(ticket, e)
        return self.complete_load(ticket, raw)

    # ── Load sequencing ────────────────────────────────────────────────

    def begin_load(self) -> int:
        self._latest_ticket += 1
        self.state = ViewState.LOADING
        self._set_view(GalleryView(
            state=self.state.value, mode="loading", status_text=STATUS_LOADING,
        ))
        log.info(f"Load #{self._latest_ticket} started")
        return self._latest_ticket

    def is_current(self, ticket: int) -> bool:
        return ticket == self._latest_ticket

    def complete_load(self, ticket: int, raw) -> GalleryView:
        if not self.is_current(ticket):
            log.info(f"Load #{ticket} superseded by #{self._latest_ticket}, discarding result")
            return self._view

        projects = engine.normalize(raw)
        self.session = engine.open_session(projects)
        self.state = ViewState.CONTENT
        self.last_error = ""
        log.info(f"Load #{ticket} complete: {len(projects)} projects, "
                 f"{len(engine.available_tags(projects))} tags")
        return self._show_first_page()

    def fail_load(self, ticket: int, error: Exception) -> GalleryView:
        if not self.is_current(ticket):
            log.info(f"Load #{ticket} superseded by #{self._latest_ticket}, ignoring failure")
            return self._view

        # The previous session stays untouched
        log.error(f"Erro ao carregar projetos: {error}")
        self.state = ViewState.ERROR
        self.last_error = str(error)
        self._set_view(GalleryView(
            state=self.state.value, mode="error", status_text=STATUS_ERROR,
        ))
        return self._view

    # ── Filter / reveal ────────────────────────────────────────────────

    def _select_filter(self, tag: Optional[str]) -> GalleryView:
        if self.state != ViewState.CONTENT:
            log.debug(f"Filter ignored in {self.state.value} state")
            return self._view
        self.session = engine.select_filter(self.session, tag)
        log.info(f"Filter {'all' if tag is None else repr(tag)}: {len(self.session.visible)} visible "
                 f"of {self.session.candidate_count} candidates")
        return self._show_first_page()

    def _reveal_more(self) -> GalleryView:
        if self.state != ViewState.CONTENT:
            log.debug(f"Reveal ignored in {self.state.value} state")
            return self._view
        page, self.session = engine.reveal_next(self.session)
        return self._show(page, replace=False)

    def _show_first_page(self) -> GalleryView:
        page, self.session = engine.reveal_next(self.session)
        return self._show(page, replace=True)

    def _show(self, page: list, replace: bool) -> GalleryView:
        session = self.session
        cards = [engine.describe(p, self.palette) for p in engine.revealed(session)]
        total = len(session.visible)
        self._set_view(GalleryView(
            state=self.state.value,
            mode="content" if total else "empty",
            status_text=content_status(session.revealed_count, total, session.active_filter),
            cards=cards,
            appended=cards[len(cards) - len(page):] if page else [],
            replace=replace,
            filters=engine.filter_controls(session),
            active_filter=session.active_filter,
            more_available=engine.more_available(session),
            total_visible=total,
        ))
        return self._view

    def _set_view(self, view: GalleryView):
        self._view = view
        self.status_text = view.status_text
        if self.announce:
            self.announce(view.status_text)
        log.debug(f"Status: {view.status_text}")


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    from generate_portfolio import write_gallery

    setup_logging()
    log.info("=" * 60)
    log.info("PORTFOLIO GALLERY")
    log.info(f"Source: {CATALOG_URL or CATALOG_FILE} | Output: {OUTPUT_FILE}")
    log.info(f"Dry Run: {DRY_RUN}")
    log.info("=" * 60)

    controller = GalleryController()
    view = controller.dispatch(LoadRequested())

    if not DRY_RUN:
        write_gallery(view, OUTPUT_FILE)

    session = controller.session
    log.info("=" * 60)
    log.info(f"🏁 {view.mode.upper()}")
    log.info(f"   Projects:   {len(session.all_projects)}")
    log.info(f"   Tags:       {len(engine.available_tags(session.all_projects))}")
    log.info(f"   Visible:    {view.total_visible}")
    log.info(f"   Shown:      {len(view.cards)}")
    if controller.last_error:
        log.info(f"   Error:      {controller.last_error}")
    log.info("=" * 60)

    return 1 if controller.state == ViewState.ERROR else 0


if __name__ == "__main__":
    sys.exit(main())
