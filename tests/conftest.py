"""Shared fixtures for jscall tests."""

import os
from pathlib import Path
from typing import Callable, Iterator
from xml.dom import minidom

import pytest

from jscall.config import clear_config_cache

PAGE_TEMPLATE = "<html><body><p>content</p>{anchors}</body></html>"


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point configuration at an empty directory and drop JSCALL_* overrides."""
    for name in list(os.environ):
        if name.startswith("JSCALL_"):
            monkeypatch.delenv(name, raising=False)

    config_dir = tmp_path / "config"
    monkeypatch.setenv("JSCALL_CONFIG_DIR", str(config_dir))
    clear_config_cache()
    yield config_dir
    clear_config_cache()


def render_page(anchors: int = 1, content: str = "") -> str:
    """Render a small XHTML page with the given number of <jscall> anchors."""
    anchor = f"<jscall>{content}</jscall>"
    return PAGE_TEMPLATE.format(anchors=anchor * anchors)


@pytest.fixture
def make_document() -> Callable[..., minidom.Document]:
    """Factory for parsed documents with a chosen number of anchors."""
    def _make(anchors: int = 1, content: str = "") -> minidom.Document:
        return minidom.parseString(render_page(anchors, content))
    return _make


@pytest.fixture
def page_file(tmp_path: Path) -> Callable[..., Path]:
    """Factory for document files on disk."""
    def _make(anchors: int = 1, content: str = "", name: str = "page.xhtml") -> Path:
        path = tmp_path / name
        path.write_text(render_page(anchors, content), encoding="utf-8")
        return path
    return _make
