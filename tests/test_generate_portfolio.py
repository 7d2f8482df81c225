import json
import re

import catalog_engine as engine
from generate_portfolio import render_card, render_filters, render_gallery, write_gallery
from orchestrator import FilterSelected, GalleryController, GalleryView, LoadRequested


def load_view(raw):
    controller = GalleryController(fetcher=lambda: raw)
    return controller, controller.dispatch(LoadRequested())


def section_classes(page, element_id):
    match = re.search(rf'id="{element_id}" class="([^"]*)"', page)
    return match.group(1).split()


def test_content_page_shows_cards_and_filters():
    _, view = load_view([
        {"title": "Site", "tags": ["web"], "featured": True, "date": "2024-06-01",
         "demoUrl": "https://demo.example", "repoUrl": "https://github.com/me/site"},
    ])
    page = render_gallery(view)

    assert "hidden" not in section_classes(page, "projects-container")
    assert "hidden" in section_classes(page, "empty-state")
    assert "hidden" in section_classes(page, "error-state")
    assert "hidden" in section_classes(page, "load-more-container")
    assert 'id="filter-container"' in page
    assert "Destaque" in page
    assert 'aria-label="Ver demo do Site"' in page
    assert 'aria-label="Ver código do Site"' in page
    assert 'rel="noopener noreferrer"' in page
    assert "1 de junho de 2024" in page
    assert "Exibindo 1 de 1 projeto." in page


def test_filter_bar_absent_without_tags():
    _, view = load_view([{"title": "Plain"}])
    assert render_filters(view.filters) == ""
    assert 'id="filter-container"' not in render_gallery(view)


def test_pressed_filter_is_marked():
    controller, _ = load_view([{"title": "A", "tags": ["py"]}, {"title": "B", "tags": ["js"]}])
    view = controller.dispatch(FilterSelected("js"))
    html = render_filters(view.filters)
    assert 'data-filter="js" aria-pressed="true"' in html
    assert 'data-filter-all="true" aria-pressed="false"' in html
    assert "Todos (2)" in html


def test_empty_and_error_modes():
    _, view = load_view([])
    page = render_gallery(view)
    assert "hidden" not in section_classes(page, "empty-state")
    assert "hidden" in section_classes(page, "projects-container")

    error_view = GalleryView(state="error", mode="error", status_text="Erro")
    page = render_gallery(error_view)
    assert "hidden" not in section_classes(page, "error-state")
    assert 'id="retry-btn"' in page


def test_load_more_visible_when_more_available():
    view = GalleryView(state="content", mode="content", status_text="", more_available=True)
    assert "hidden" not in section_classes(render_gallery(view), "load-more-container")


def test_catalog_text_is_escaped():
    card = engine.describe(engine.ProjectRecord(
        title='<script>alert("x")</script>',
        description="Tom & Jerry",
        tags=("<b>",),
    ))
    html = render_card(card)
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "Tom &amp; Jerry" in html
    assert "&lt;b&gt;" in html


def test_tokens_inside_catalog_text_are_not_substituted():
    _, view = load_view([{"title": "STATUS_TEXT GALLERY_JSON", "description": "EMPTY_CLASS"}])
    page = render_gallery(view)
    assert "STATUS_TEXT GALLERY_JSON" in page
    assert "EMPTY_CLASS" in page


def test_generated_and_image_visuals():
    generated = render_card(engine.describe(engine.ProjectRecord(title="Portfolio")))
    gradient_id, icon_id = engine.assign_visual("Portfolio")
    assert f'data-gradient="{gradient_id}" data-icon="{icon_id}"' in generated

    image = render_card(engine.describe(engine.ProjectRecord(title="Shot", thumb="img/shot.png")))
    assert '<img src="img/shot.png" alt="Shot"' in image


def test_embedded_data_matches_view():
    _, view = load_view([{"title": "A</script>B"}])
    page = render_gallery(view)
    raw = re.search(r'<script type="application/json" id="gallery-data">(.*?)</script>', page, re.S)
    data = json.loads(raw.group(1))
    assert data["cards"][0]["title"] == "A</script>B"
    assert data["active_filter"] is None


def test_write_gallery_creates_file(tmp_path):
    _, view = load_view([{"title": "Written"}])
    output = write_gallery(view, tmp_path / "out" / "index.html")
    assert "Written" in output.read_text(encoding="utf-8")


def test_tag_named_all_renders_apart_from_all_control():
    _, view = load_view([{"title": "A", "tags": ["all"]}])
    html = render_filters(view.filters)
    assert 'data-filter-all="true" aria-pressed="true"' in html
    assert 'data-filter="all" aria-pressed="false"' in html


def test_action_buttons_carry_command_hooks():
    page = render_gallery(GalleryView(state="error", mode="error", status_text="Erro"))
    assert 'id="retry-btn" type="button" data-command="retry"' in page
    assert 'id="load-more-btn" type="button" data-command="reveal-more"' in page


def test_write_gallery_logs_under_renderer_logger(tmp_path, caplog):
    _, view = load_view([{"title": "Logged"}])
    with caplog.at_level("INFO", logger="portfolio"):
        write_gallery(view, tmp_path / "index.html")
    assert any(r.name == "portfolio" and "Gallery generated" in r.getMessage()
               for r in caplog.records)
