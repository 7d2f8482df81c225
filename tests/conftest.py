import pytest

import catalog_engine as engine


def make_raw(title, featured=False, date=None, tags=None, **extra):
    raw = {"title": title, "featured": featured}
    if date is not None:
        raw["date"] = date
    if tags is not None:
        raw["tags"] = tags
    raw.update(extra)
    return raw


@pytest.fixture
def make_project():
    return make_raw


@pytest.fixture
def mixed_catalog():
    """8 projects: two featured (older), six regular with later dates."""
    raw = [make_raw(f"Regular {i}", date=f"2025-0{i + 1}-15", tags=["python"])
           for i in range(6)]
    raw.insert(2, make_raw("Featured Old", featured=True, date="2024-01-01", tags=["web"]))
    raw.insert(5, make_raw("Featured New", featured=True, date="2024-06-01", tags=["web", "python"]))
    return engine.normalize(raw)


@pytest.fixture
def untagged_catalog():
    """10 regular projects, no dates, no tags."""
    return engine.normalize([make_raw(f"Project {i}") for i in range(10)])
