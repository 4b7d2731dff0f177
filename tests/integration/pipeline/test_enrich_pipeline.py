"""Integration tests for the index -> process -> export -> feed/sitemap flow.

Each test runs the library steps against the corpus below with fake AI and
image collaborators, and asserts stable expected values. Read this file
top-to-bottom as a reference for what each stage produces with default
settings.

Corpus (under docs_dir)
-----------------------
    blog/Hello World.md     no header, one paragraph
    practice/css-grid.md    partial header: title, date, tags
    ai/agents.md            complete header

After process-all with the fake generator below:
    blog/Hello World.md  -> slug hello-world, title from AI, excerpt/tags from AI
    practice/css-grid.md -> title and tags kept, excerpt from AI
    ai/agents.md         -> unchanged (nothing to complete)
"""

import json
from datetime import datetime
from pathlib import Path

import pytest

from blogpub.core.frontmatter import decode, render_document
from blogpub.core.index import find_post
from blogpub.core.pipeline import load_records, process_all, run_export, run_feed, run_index, run_sitemap


NOW = datetime(2024, 6, 1)

AGENTS = {
    "slug": "agents", "title": "Agents", "excerpt": "About agents.", "date": "2024-05-25",
    "author": "Bob", "readTime": "1 分钟", "tags": ["ai"], "category": "ai",
    "image": "https://example.com/agents.png",
}


@pytest.fixture(name="corpus")
def corpus_fixture(docs_dir):
    files = {
        "blog/Hello World.md": "Hello from the very first post.\n",
        "practice/css-grid.md": "---\ntitle: CSS Grid\ndate: 2024-01-10\ntags: [css, layout]\n---\n\nGrid body.\n",
        "ai/agents.md": render_document(AGENTS, "Agent body."),
    }
    for rel, text in files.items():
        path = docs_dir / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return docs_dir


def _process(settings, make_generate, fake_resolve):
    generate = make_generate('{"title": "Generated", "excerpt": "Generated excerpt.", "tags": ["gen"]}')
    paths = run_index(settings)
    counts, _ = process_all(
        paths, settings, generate=generate, resolve_image=fake_resolve, sleep=lambda s: None,
    )
    return counts, generate


def test_process_all_completes_corpus(corpus, settings, make_generate, fake_resolve):
    counts, generate = _process(settings, make_generate, fake_resolve)
    assert counts == {"updated": 2, "unchanged": 1, "would-update": 0, "failed": 0}
    assert len(generate.prompts) == 2

    hello, _ = decode((corpus / "blog" / "Hello World.md").read_text(encoding="utf-8"))
    assert hello["slug"] == "hello-world"
    assert hello["title"] == "Generated"
    assert hello["tags"] == ["gen"]
    assert hello["category"] == "blog"

    grid, body = decode((corpus / "practice" / "css-grid.md").read_text(encoding="utf-8"))
    assert grid["title"] == "CSS Grid"
    assert grid["tags"] == ["css", "layout"]
    assert grid["excerpt"] == "Generated excerpt."
    assert grid["category"] == "practice"
    assert grid["date"] == "2024-01-10"
    assert body == "Grid body."


def test_backups_hold_originals(corpus, settings, make_generate, fake_resolve):
    original = (corpus / "practice" / "css-grid.md").read_text(encoding="utf-8")
    _process(settings, make_generate, fake_resolve)
    backup_dir = Path(settings.backup_dir)
    assert (backup_dir / "practice" / "css-grid.md").read_text(encoding="utf-8") == original
    assert not (backup_dir / "ai" / "agents.md").exists()


def test_second_pass_changes_nothing(corpus, settings, make_generate, fake_resolve):
    _process(settings, make_generate, fake_resolve)
    counts, generate = _process(settings, make_generate, fake_resolve)
    assert counts["unchanged"] == 3
    assert generate.prompts == []


def test_export_and_lookup_after_processing(corpus, settings, make_generate, fake_resolve):
    _process(settings, make_generate, fake_resolve)
    run_export(settings)
    posts = json.loads(Path(settings.posts_json).read_text(encoding="utf-8"))
    assert [p["slug"] for p in posts] == ["hello-world", "agents", "css-grid"]

    records = load_records(settings, now=NOW)
    assert find_post(records, "Hello-World").title == "Generated"
    assert find_post(records, "missing") is None


def test_feed_and_sitemap_cover_every_post(corpus, settings, make_generate, fake_resolve):
    _process(settings, make_generate, fake_resolve)
    assert run_feed(settings, now=NOW) == 3
    assert run_sitemap(settings, now=NOW) == 3
    rss = Path(settings.rss_path).read_text(encoding="utf-8")
    assert rss.index("/post/agents") < rss.index("/post/css-grid")
    sitemap = Path(settings.sitemap_path).read_text(encoding="utf-8")
    assert sitemap.count("<url>") == 5 + 3
