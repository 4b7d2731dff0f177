"""Pipeline step functions: process, index, export, feed, sitemap, lint orchestration"""

import time
from datetime import date, datetime
from pathlib import Path, PurePosixPath
from typing import Callable, Optional

from blogpub.clients.gemini import GeminiClient
from blogpub.clients.unsplash import resolve_image as unsplash_resolve
from blogpub.config import Settings
from blogpub.core.complete import Generate, ResolveImage, complete_metadata
from blogpub.core.feed import build_feed
from blogpub.core.frontmatter import decode, render_document
from blogpub.core.index import build_index
from blogpub.core.lint import check_documents, write_report
from blogpub.core.models import PostRecord, ProcessResult, SEOReport
from blogpub.core.parse import discover_files, post_paths, read_documents, write_posts_list
from blogpub.core.sitemap import build_sitemap
from blogpub.core.utils.diff import document_diff
from blogpub.util.fs import write_json, write_text, write_with_backup
from blogpub.util.log import get_logger


logger = get_logger(__name__)


def default_collaborators(settings: Settings) -> tuple[Optional[Generate], ResolveImage]:
    """Gemini generator (None without a key) and the Unsplash resolver for settings."""
    return GeminiClient.from_settings(settings), lambda q: unsplash_resolve(q, settings)


def process_document(
    docs_dir: Path,
    rel_path: str,
    settings: Settings,
    *,
    generate: Optional[Generate] = None,
    resolve_image: Optional[ResolveImage] = None,
    dry_run: bool = False,
    today: Optional[date] = None,
    ) -> ProcessResult:
    """Complete one document's frontmatter and persist it, backing up the original first.

    Raises FileNotFoundError when the document does not exist.
    """
    target = docs_dir / rel_path
    if not target.is_file():
        raise FileNotFoundError(f"Document not found: {target}")

    original = target.read_text(encoding="utf-8")
    metadata, body = decode(original)
    completed = complete_metadata(
        metadata, body, PurePosixPath(rel_path).name, rel_path, settings,
        generate=generate, resolve_image=resolve_image, today=today,
    )
    enriched = render_document(completed, body)

    if enriched == original:
        return ProcessResult(path=rel_path, status="unchanged")
    if dry_run:
        return ProcessResult(path=rel_path, status="would-update", diff=document_diff(rel_path, original, enriched))

    write_with_backup(target, Path(settings.backup_dir) / rel_path, enriched)
    logger.info(f"Updated {rel_path}")
    return ProcessResult(path=rel_path, status="updated")


def process_all(
    paths: list[str],
    settings: Settings,
    *,
    generate: Optional[Generate] = None,
    resolve_image: Optional[ResolveImage] = None,
    dry_run: bool = False,
    sleep: Callable[[float], None] = time.sleep,
    ) -> tuple[dict[str, int], list[ProcessResult]]:
    """Process documents in order; per-document I/O failures are logged and counted.

    Sleeps settings.request_delay seconds between documents to stay under
    the AI provider's rate limit.
    """
    docs_dir = Path(settings.docs_dir)
    counts = {"updated": 0, "unchanged": 0, "would-update": 0, "failed": 0}
    results = []
    for i, rel in enumerate(paths):
        if i and settings.request_delay:
            sleep(settings.request_delay)
        try:
            result = process_document(
                docs_dir, rel, settings,
                generate=generate, resolve_image=resolve_image, dry_run=dry_run,
            )
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to process {rel}: {e}")
            counts["failed"] += 1
            continue
        counts[result.status] += 1
        results.append(result)
    return counts, results


def run_index(settings: Settings) -> list[str]:
    """Scan the category folders and write the post list. Returns the paths."""
    paths = discover_files(Path(settings.docs_dir), settings.categories)
    write_posts_list(Path(settings.posts_list), paths)
    return paths


def load_records(settings: Settings, now: Optional[datetime] = None) -> list[PostRecord]:
    """Post records for every listed document, newest first."""
    paths = post_paths(settings, scan_fallback=True)
    return build_index(read_documents(Path(settings.docs_dir), paths), now=now)


def run_export(settings: Settings) -> list[PostRecord]:
    records = load_records(settings)
    write_json(Path(settings.posts_json), [r.public_dict() for r in records])
    return records


def run_feed(settings: Settings, now: Optional[datetime] = None) -> int:
    """Write the RSS feed. Returns the item count."""
    records = load_records(settings, now)
    write_text(Path(settings.rss_path), build_feed(records, settings, now))
    return len(records)


def run_sitemap(settings: Settings, now: Optional[datetime] = None) -> int:
    """Write the sitemap. Returns the post URL count."""
    records = load_records(settings, now)
    write_text(Path(settings.sitemap_path), build_sitemap(records, settings, now))
    return len(records)


def run_lint(settings: Settings, paths: Optional[list[str]] = None) -> SEOReport:
    """Lint every listed document and write the report. Raises FileNotFoundError without a post list."""
    if paths is None:
        paths = post_paths(settings)
    docs = read_documents(Path(settings.docs_dir), paths)
    report = check_documents(docs, total=len(paths))
    write_report(Path(settings.seo_report), report)
    return report
