"""XML sitemap generation: static pages plus one URL per post"""

from datetime import datetime, timezone
from html import escape
from typing import NamedTuple, Optional

from blogpub.config import Settings
from blogpub.core.feed import join_url, post_url
from blogpub.core.models import PostRecord
from blogpub.core.utils.dates import parse_date


POST_PRIORITY = "0.8"


class SitemapEntry(NamedTuple):
    url: str
    lastmod: str
    changefreq: str
    priority: str


def iso_date(value: datetime) -> str:
    return value.replace(tzinfo=timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def changefreq_for(published: datetime, now: datetime) -> str:
    """Fresher posts are crawled more often."""
    age_days = (now - published).total_seconds() / 86400
    if age_days < 7:
        return "daily"
    if age_days < 30:
        return "weekly"
    return "monthly"


def static_entries(settings: Settings, now: datetime) -> list[SitemapEntry]:
    lastmod = iso_date(now)
    pages = [("", "daily", "1.0")]
    pages += [(f"{c.key}/", "weekly", "0.9") for c in settings.categories]
    pages.append(("about/", "monthly", "0.8"))
    return [
        SitemapEntry(join_url(settings.site_url, path) + ("/" if not path else ""), lastmod, freq, prio)
        for path, freq, prio in pages
    ]


def post_entries(records: list[PostRecord], settings: Settings, now: datetime) -> list[SitemapEntry]:
    entries = []
    for r in records:
        published = parse_date(r.date) or now
        entries.append(SitemapEntry(
            url=post_url(settings, r.slug),
            lastmod=iso_date(published),
            changefreq=changefreq_for(published, now),
            priority=POST_PRIORITY,
        ))
    return entries


def build_sitemap(records: list[PostRecord], settings: Settings, now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    entries = static_entries(settings, now) + post_entries(records, settings, now)
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]
    for e in entries:
        lines += [
            "  <url>",
            f"    <loc>{escape(e.url)}</loc>",
            f"    <lastmod>{e.lastmod}</lastmod>",
            f"    <changefreq>{e.changefreq}</changefreq>",
            f"    <priority>{e.priority}</priority>",
            "  </url>",
        ]
    lines.append("</urlset>")
    return "\n".join(lines) + "\n"
