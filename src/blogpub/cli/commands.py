"""CLI command implementations"""

import json
from pathlib import Path
from typing import Annotated, Optional

import typer

from blogpub.config import Settings, load_config
from blogpub.core.index import find_post
from blogpub.core.optimize import optimize_all
from blogpub.core.parse import post_paths
from blogpub.core.pipeline import (
    default_collaborators,
    load_records,
    process_all,
    process_document,
    run_export,
    run_feed,
    run_index,
    run_lint,
    run_sitemap,
)
from blogpub.util.log import setup_logging


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _listed_paths(settings: Settings) -> list[str]:
    """Post list for batch passes; missing or malformed lists are fatal here."""
    try:
        return post_paths(settings)
    except FileNotFoundError as e:
        _fail(f"{e}. Run 'blogpub index' first.")
    except ValueError as e:
        _fail(str(e))


def main_callback(
    log_level: Annotated[Optional[str], typer.Option("--log-level", help="DEBUG, INFO, WARNING, ERROR")] = None,
    ):
    """Content pipeline for a markdown blog: frontmatter completion, index, feed, sitemap."""
    settings = _settings(overrides={"log_level": log_level.upper() if log_level else None})
    setup_logging(settings.log_level)


def process_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Document path relative to the docs directory")] = None,
    all_docs: Annotated[bool, typer.Option("--all", help="Process every document in the post list")] = False,
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Show the changes without writing")] = False,
    docs: Annotated[Optional[str], typer.Option("--docs-dir", help="Markdown corpus root")] = None,
    delay: Annotated[Optional[float], typer.Option("--delay", help="Seconds between documents with --all")] = None,
    ):
    """Complete missing frontmatter for one document, or all of them with --all."""
    if not path and not all_docs:
        _fail("Give a document path or --all.")

    settings = _settings(overrides={"docs_dir": docs, "request_delay": delay})
    generate, resolve_image = default_collaborators(settings)

    if not all_docs:
        try:
            result = process_document(
                Path(settings.docs_dir), path, settings,
                generate=generate, resolve_image=resolve_image, dry_run=dry_run,
            )
        except FileNotFoundError as e:
            _fail(str(e))
        except (OSError, UnicodeDecodeError) as e:
            _fail(f"Could not process {path}", e)
        if result.diff:
            typer.echo(result.diff, nl=False)
        typer.echo(f"  {result.status}: {result.path}")
        return

    paths = _listed_paths(settings)
    counts, results = process_all(
        paths, settings, generate=generate, resolve_image=resolve_image, dry_run=dry_run,
    )
    for r in results:
        if r.diff:
            typer.echo(r.diff, nl=False)
        typer.echo(f"  {r.status}: {r.path}")
    typer.echo(
        f"Process complete - "
        f"{counts['updated']} updated, "
        f"{counts['would-update']} would update, "
        f"{counts['unchanged']} unchanged, "
        f"{counts['failed']} failed"
    )


def index_cmd(
    docs: Annotated[Optional[str], typer.Option("--docs-dir", help="Markdown corpus root")] = None,
    out: Annotated[Optional[str], typer.Option("--out", help="Post list path")] = None,
    ):
    """Scan the category folders and write the post list."""
    settings = _settings(overrides={"docs_dir": docs, "posts_list": out})
    paths = run_index(settings)
    typer.echo(f"Listed {len(paths)} document(s) in {settings.posts_list}")


def export_cmd(
    out: Annotated[Optional[str], typer.Option("--out", help="Output JSON path")] = None,
    ):
    """Write post records, newest first, as JSON for the rendering layer."""
    settings = _settings(overrides={"posts_json": out})
    try:
        records = run_export(settings)
    except OSError as e:
        _fail("Export failed", e)
    typer.echo(f"Exported {len(records)} post(s) to {settings.posts_json}")


def feed_cmd(
    out: Annotated[Optional[str], typer.Option("--out", help="Output RSS path")] = None,
    site: Annotated[Optional[str], typer.Option("--site-url", help="Public site URL")] = None,
    ):
    """Generate the RSS feed."""
    settings = _settings(overrides={"rss_path": out, "site_url": site})
    try:
        count = run_feed(settings)
    except OSError as e:
        _fail("Feed generation failed", e)
    typer.echo(f"Wrote {count} item(s) to {settings.rss_path}")


def sitemap_cmd(
    out: Annotated[Optional[str], typer.Option("--out", help="Output sitemap path")] = None,
    site: Annotated[Optional[str], typer.Option("--site-url", help="Public site URL")] = None,
    ):
    """Generate the XML sitemap."""
    settings = _settings(overrides={"sitemap_path": out, "site_url": site})
    try:
        count = run_sitemap(settings)
    except OSError as e:
        _fail("Sitemap generation failed", e)
    typer.echo(f"Wrote sitemap with {count} post URL(s) to {settings.sitemap_path}")


def lint_cmd(
    out: Annotated[Optional[str], typer.Option("--out", help="Report JSON path")] = None,
    ):
    """Check every listed post for SEO problems and write a JSON report."""
    settings = _settings(overrides={"seo_report": out})
    report = run_lint(settings, _listed_paths(settings))

    typer.echo(f"Total posts: {report.total_posts}")
    typer.echo(f"Posts with images: {report.posts_with_images}")
    typer.echo(f"Images without alt: {report.images_without_alt}")
    typer.echo(f"Posts without excerpt: {report.posts_without_excerpt}")
    typer.echo(f"Posts without tags: {report.posts_without_tags}")
    typer.echo(f"Posts with bad dates: {report.posts_with_bad_dates}")
    typer.echo(f"Issues: {len(report.issues)}")
    for rec in report.recommendations:
        typer.echo(f"  - {rec}")
    typer.echo(f"Report written to {settings.seo_report}")


def optimize_cmd(
    dry_run: Annotated[bool, typer.Option("--dry-run", help="Report the fixes without writing")] = False,
    ):
    """Apply deterministic excerpt, title, tag, and image-alt fixes to every listed post."""
    settings = _settings()
    paths = _listed_paths(settings)
    counts, kinds, results = optimize_all(paths, settings, dry_run=dry_run)

    for r in results:
        if r.changes:
            typer.echo(f"  {r.file}")
            for change in r.changes:
                typer.echo(f"    - {change}")
    typer.echo(
        f"Optimize complete - "
        f"{counts['total']} total, "
        f"{counts['optimized']} optimized, "
        f"{counts['skipped']} skipped, "
        f"{counts['errors']} errors"
    )
    for kind, n in kinds.most_common():
        typer.echo(f"  {kind}: {n}")
    if dry_run and counts["optimized"]:
        typer.echo("Dry run: no files were modified.")


def show_cmd(
    slug: Annotated[str, typer.Argument(help="Post slug as it appears in the URL")],
    ):
    """Look up a post by slug and print its public record as JSON."""
    settings = _settings()
    record = find_post(load_records(settings), slug)
    if record is None:
        typer.echo(f"Post not found: {slug}", err=True)
        raise typer.Exit(1)
    payload = record.public_dict()
    payload.pop("content")
    typer.echo(json.dumps(payload, indent=2, ensure_ascii=False))
