#!/usr/bin/env python3
"""
Render a GalleryView snapshot into the static gallery index.html.

The page is a snapshot and carries no script of its own. The filter buttons
(data-filter / data-filter-all), #retry-btn (data-command="retry") and
#load-more-btn (data-command="reveal-more") are hooks for a client layer that
maps them to FilterSelected, RetryRequested and RevealMoreRequested. The
embedded #gallery-data JSON gives that layer the current view.
"""

import html
import json
import logging
import re
from datetime import datetime, timezone
from pathlib import Path

log = logging.getLogger("portfolio")

GALLERY_HTML_TEMPLATE = """<!DOCTYPE html>
<html lang="pt-BR">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>Projetos</title>
    <style>
        :root {
            --bg: #0a0a0f;
            --surface: #12121a;
            --surface-hover: #1a1a28;
            --border: #2a2a3a;
            --text: #e8e8f0;
            --text-muted: #8888a0;
            --accent: #00e5a0;
            --accent-dim: #00e5a020;
        }

        * { margin: 0; padding: 0; box-sizing: border-box; }

        body {
            font-family: system-ui, sans-serif;
            background: var(--bg);
            color: var(--text);
            min-height: 100vh;
        }

        .hidden { display: none !important; }

        .sr-only {
            position: absolute;
            width: 1px; height: 1px;
            overflow: hidden;
            clip: rect(0, 0, 0, 0);
        }

        .filters {
            display: flex;
            gap: 0.5rem;
            flex-wrap: wrap;
            max-width: 1400px;
            margin: 2rem auto;
            padding: 0 2rem;
        }

        .filter-tag {
            background: var(--surface);
            border: 1px solid var(--border);
            color: var(--text-muted);
            padding: 0.5rem 1rem;
            border-radius: 999px;
            font-size: 0.8rem;
        }

        .filter-tag.active {
            background: var(--accent-dim);
            border-color: var(--accent);
            color: var(--accent);
        }

        .grid {
            display: grid;
            grid-template-columns: repeat(auto-fill, minmax(340px, 1fr));
            gap: 1.5rem;
            max-width: 1400px;
            margin: 0 auto 3rem;
            padding: 0 2rem;
        }

        .card {
            background: var(--surface);
            border: 1px solid var(--border);
            border-radius: 12px;
            overflow: hidden;
            display: flex;
            flex-direction: column;
        }

        .card-preview { position: relative; height: 192px; overflow: hidden; }
        .card-preview img { width: 100%; height: 100%; object-fit: cover; }

        .card-preview .generated {
            width: 100%; height: 100%;
            display: flex;
            align-items: center;
            justify-content: center;
        }

        .card-preview svg { width: 64px; height: 64px; color: #fff; }

        .badge {
            position: absolute;
            top: 1rem; left: 1rem;
            background: var(--accent);
            color: var(--bg);
            font-size: 0.7rem;
            font-weight: 700;
            padding: 0.2rem 0.5rem;
            border-radius: 999px;
        }

        .card-body { padding: 1.5rem; display: flex; flex-direction: column; flex: 1; }
        .card-title { font-size: 1.2rem; margin-bottom: 0.5rem; }
        .card-desc { color: var(--text-muted); margin-bottom: 1rem; line-height: 1.5; }
        .card-tags { display: flex; gap: 0.4rem; flex-wrap: wrap; margin-bottom: 1rem; }

        .tag {
            font-size: 0.75rem;
            background: var(--accent-dim);
            color: var(--accent);
            padding: 0.2rem 0.6rem;
            border-radius: 999px;
        }

        .card-footer {
            margin-top: auto;
            display: flex;
            justify-content: space-between;
            align-items: center;
        }

        .card-date { font-size: 0.8rem; color: var(--text-muted); }
        .card-links { display: flex; gap: 0.5rem; }

        .card-links a {
            font-size: 0.8rem;
            color: var(--text);
            text-decoration: none;
            border: 1px solid var(--border);
            padding: 0.4rem 0.8rem;
            border-radius: 8px;
        }

        .card-links a:hover { border-color: var(--accent); color: var(--accent); }

        .state { text-align: center; padding: 4rem 2rem; color: var(--text-muted); }
        .load-more { text-align: center; margin-bottom: 4rem; }

        .load-more button, .state button {
            background: var(--accent);
            color: var(--bg);
            border: 0;
            padding: 0.75rem 1.5rem;
            border-radius: 8px;
            font-weight: 700;
        }

        footer {
            text-align: center;
            padding: 2rem;
            color: var(--text-muted);
            font-size: 0.75rem;
            border-top: 1px solid var(--border);
        }
    </style>
</head>
<body>
    <div id="status" class="sr-only" role="status" aria-live="polite">STATUS_TEXT</div>

    FILTERS_HTML

    <div id="loading-state" class="state LOADING_CLASS">Carregando projetos...</div>
    <div id="projects-container" class="grid CONTENT_CLASS">CARDS_HTML</div>
    <div id="empty-state" class="state EMPTY_CLASS">Nenhum projeto encontrado.</div>
    <div id="error-state" class="state ERROR_CLASS">
        <p>Erro ao carregar projetos.</p>
        <button id="retry-btn" type="button" data-command="retry">Tentar novamente</button>
    </div>
    <div id="load-more-container" class="load-more MORE_CLASS">
        <button id="load-more-btn" type="button" data-command="reveal-more">Ver mais projetos</button>
    </div>

    <footer>Gerado em GENERATED_DATE</footer>

    <script type="application/json" id="gallery-data">GALLERY_JSON</script>
</body>
</html>"""


def _esc(value) -> str:
    return html.escape(str(value), quote=True)


def render_visual(card: dict) -> str:
    visual = card["visual"]
    if visual["kind"] == "image":
        return (f'<img src="{_esc(visual["src"])}" alt="{_esc(card["title"])}" '
                f'loading="lazy">')
    return (
        f'<div class="generated" style="background: {_esc(visual["gradient"])}" '
        f'data-gradient="{visual["gradient_id"]}" data-icon="{visual["icon_id"]}">'
        '<svg fill="none" stroke="currentColor" viewBox="0 0 24 24" aria-hidden="true">'
        f'<path stroke-linecap="round" stroke-linejoin="round" stroke-width="2" '
        f'd="{_esc(visual["icon"])}"></path></svg></div>'
    )


def render_card(card: dict) -> str:
    title = _esc(card["title"])
    badge = '<span class="badge">Destaque</span>' if card["featured"] else ""
    tags = "".join(f'<span class="tag">{_esc(t)}</span>' for t in card["tags"])

    links = ""
    if card["demo_url"]:
        links += (f'<a href="{_esc(card["demo_url"])}" target="_blank" '
                  f'rel="noopener noreferrer" aria-label="Ver demo do {title}">Demo</a>')
    if card["repo_url"]:
        links += (f'<a href="{_esc(card["repo_url"])}" target="_blank" '
                  f'rel="noopener noreferrer" aria-label="Ver código do {title}">Código</a>')

    return (
        '<div class="card">'
        f'<div class="card-preview">{render_visual(card)}{badge}</div>'
        '<div class="card-body">'
        f'<h3 class="card-title">{title}</h3>'
        f'<p class="card-desc">{_esc(card["description"])}</p>'
        f'<div class="card-tags">{tags}</div>'
        '<div class="card-footer">'
        f'<span class="card-date">{_esc(card["formatted_date"])}</span>'
        f'<div class="card-links">{links}</div>'
        '</div></div></div>'
    )


def render_filters(filters: list) -> str:
    # No tags anywhere in the catalog: no filter bar at all
    if not filters:
        return ""
    buttons = []
    for control in filters:
        active = " active" if control["pressed"] else ""
        pressed = "true" if control["pressed"] else "false"
        # The "all" control sits outside the tag namespace, so a tag named "all" stays distinct
        if control["value"] is None:
            target = 'data-filter-all="true"'
        else:
            target = f'data-filter="{_esc(control["value"])}"'
        buttons.append(
            f'<button type="button" class="filter-tag{active}" '
            f'{target} aria-pressed="{pressed}">'
            f'{_esc(control["label"])} ({control["count"]})</button>'
        )
    return '<div class="filters" id="filter-container">' + "".join(buttons) + "</div>"


def render_gallery(view) -> str:
    """Full page for a view. Only the section for view.mode is left visible."""
    def hidden_unless(mode):
        return "" if view.mode == mode else "hidden"

    gallery_data = {
        "active_filter": view.active_filter,
        "more_available": view.more_available,
        "total_visible": view.total_visible,
        "cards": view.cards,
    }
    # Keep the embedded JSON from closing the script tag early
    gallery_json = json.dumps(gallery_data, ensure_ascii=False).replace("</", "<\\/")

    values = {
        "FILTERS_HTML": render_filters(view.filters),
        "CARDS_HTML": "".join(render_card(c) for c in view.cards),
        "STATUS_TEXT": _esc(view.status_text),
        "LOADING_CLASS": hidden_unless("loading"),
        "CONTENT_CLASS": hidden_unless("content"),
        "EMPTY_CLASS": hidden_unless("empty"),
        "ERROR_CLASS": hidden_unless("error"),
        "MORE_CLASS": "" if view.more_available else "hidden",
        "GENERATED_DATE": datetime.now(timezone.utc).strftime("%Y-%m-%d"),
        "GALLERY_JSON": gallery_json,
    }
    # Single pass, so catalog text that happens to contain a token is left alone
    pattern = re.compile("|".join(values))
    return pattern.sub(lambda m: values[m.group(0)], GALLERY_HTML_TEMPLATE)


def write_gallery(view, output_file: Path) -> Path:
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    output_file.write_text(render_gallery(view), encoding="utf-8")
    log.info(f"Gallery generated: {output_file.absolute()}")
    log.info(f"  {len(view.cards)} cards, {len(view.filters)} filters, mode={view.mode}")
    return output_file
