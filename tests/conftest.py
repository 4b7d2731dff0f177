"""Root test configuration: environment isolation, logging reset, shared fixtures"""

import logging
import os
from pathlib import Path

import pytest

from blogpub.config import ENV_ALIASES, Settings
from blogpub.util.log import LOG_FORMAT


_ALIAS_VARS = [name for aliases in ENV_ALIASES.values() for name in aliases]


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch):
    """Hide real API keys and BLOGPUB_* settings so no test reaches the network."""
    for name in list(os.environ):
        if name.startswith("BLOGPUB_") or name in _ALIAS_VARS:
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def restore_logging():
    """Drop handlers installed by setup_logging; CLI runs bind them to streams that close."""
    root = logging.getLogger()
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler.formatter is not None and handler.formatter._fmt == LOG_FORMAT:
            root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture(name="settings")
def settings_fixture(tmp_path):
    """Settings rooted in tmp_path with no collaborators and no batch delay."""
    return Settings(
        docs_dir=str(tmp_path / "docs"),
        backup_dir=str(tmp_path / "backup"),
        posts_list=str(tmp_path / "posts-list.json"),
        posts_json=str(tmp_path / "posts.json"),
        rss_path=str(tmp_path / "rss.xml"),
        sitemap_path=str(tmp_path / "sitemap.xml"),
        seo_report=str(tmp_path / "seo-report.json"),
        request_delay=0,
    )


@pytest.fixture(name="docs_dir")
def docs_dir_fixture(settings):
    path = Path(settings.docs_dir)
    path.mkdir(parents=True)
    return path


class FakeGenerate:
    """Recording stand-in for the AI collaborator."""

    def __init__(self, response: str = "", error: Exception = None):
        self.response = response
        self.error = error
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.response


class FakeResolve:
    """Recording stand-in for the image chain."""

    def __init__(self, url: str = "https://img.example/x.jpg"):
        self.url = url
        self.queries: list[str] = []

    def __call__(self, query: str) -> str:
        self.queries.append(query)
        return self.url


@pytest.fixture(name="fake_generate")
def fake_generate_fixture():
    return FakeGenerate('{"title": "AI Title", "excerpt": "AI excerpt.", "tags": ["ai", "tools"]}')


@pytest.fixture(name="make_generate")
def make_generate_fixture():
    return FakeGenerate


@pytest.fixture(name="fake_resolve")
def fake_resolve_fixture():
    return FakeResolve()
