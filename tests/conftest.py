"""Shared pytest fixtures for the actorwrap test suite.

Provides reusable fixtures for:
- A wrapper template tree with placeholder directories and template files
- An existing Scrapy project to merge into
- The binding map matching both
"""

from __future__ import annotations

import textwrap
from pathlib import Path

import pytest


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def write_tree(root: Path, files: dict[str, str | bytes]) -> Path:
    """Create *files* (relative path -> content) under *root*."""
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, bytes):
            path.write_bytes(content)
        else:
            path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def make_tree():
    """Expose ``write_tree`` to tests as a fixture."""
    return write_tree


# ---------------------------------------------------------------------------
# Template tree
# ---------------------------------------------------------------------------

TEMPLATE_FILES: dict[str, str | bytes] = {
    ".gitignore": "storage\n.venv\n",
    ".dockerignore": ".git\nstorage\n",
    "Dockerfile": "FROM apify/actor-python:3.11\nCOPY . ./\n",
    "requirements.txt": "apify[scrapy]\nscrapy\n",
    ".actor/actor.json.template": textwrap.dedent("""\
        {
            "actorSpecification": 1,
            "name": "{{ botName }}"
        }
        """),
    "{projectFolder}/__main__.py": "from .main import main\n",
    "{projectFolder}/main.template.py": textwrap.dedent("""\
        from {{ spider_module_name }} import {{ spider_class_name }}
        SETTINGS = "{{ scrapy_settings_module }}"
        """),
    "{projectFolder}/apify/pipelines.py": "class ActorDatasetPushPipeline: ...\n",
}


@pytest.fixture
def template_root(tmp_path: Path) -> Path:
    """Wrapper template tree with ``{projectFolder}`` and ``.template`` entries."""
    root = tmp_path / "template"
    root.mkdir()
    return write_tree(root, TEMPLATE_FILES)


# ---------------------------------------------------------------------------
# Target project
# ---------------------------------------------------------------------------

SCRAPY_CFG = textwrap.dedent("""\
    [settings]
    default = books.settings

    [deploy]
    project = books
    """)


@pytest.fixture
def scrapy_project(tmp_path: Path) -> Path:
    """Existing Scrapy project named ``books`` with one spider."""
    root = tmp_path / "books-project"
    root.mkdir()
    return write_tree(root, {
        "scrapy.cfg": SCRAPY_CFG,
        ".gitignore": "__pycache__/\n",
        "books/__init__.py": "",
        "books/settings.py": "BOT_NAME = 'books'\n",
        "books/spiders/__init__.py": "",
        "books/spiders/books.py": "class BooksSpider: ...\n",
    })


@pytest.fixture
def bindings() -> dict[str, str]:
    """Binding map for the ``books`` project."""
    return {
        "botName": "books",
        "scrapy_settings_module": "books.settings",
        "apify_module_path": "books.apify",
        "spider_class_name": "BooksSpider",
        "spider_module_name": ".spiders.books",
        "projectFolder": "books",
    }
