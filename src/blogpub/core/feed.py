"""RSS 2.0 feed generation from post records"""

from datetime import datetime, timezone
from email.utils import format_datetime
from html import escape
from typing import Optional
from urllib.parse import quote

from blogpub.config import Settings
from blogpub.core.models import PostRecord
from blogpub.core.utils.dates import parse_date
from blogpub.core.utils.text import plain_text


DESCRIPTION_CHARS = 200


def join_url(base: str, path: str) -> str:
    base = base.rstrip("/")
    path = path.lstrip("/")
    return f"{base}/{path}" if path else base


def post_url(settings: Settings, slug: str) -> str:
    return join_url(settings.site_url, f"post/{quote(slug, safe='')}")


def rfc822_date(value: datetime) -> str:
    return format_datetime(value.replace(tzinfo=timezone.utc))


def describe(record: PostRecord) -> str:
    """Plain-text excerpt, else plain text of the content, else the title."""
    source = record.excerpt if record.excerpt.strip() else record.content
    return plain_text(source, DESCRIPTION_CHARS) or record.title


def build_item(record: PostRecord, settings: Settings, now: datetime) -> str:
    link = post_url(settings, record.slug)
    lines = [
        "    <item>",
        f"      <title>{escape(record.title)}</title>",
        f"      <link>{escape(link)}</link>",
        f"      <description>{escape(describe(record))}</description>",
        f"      <pubDate>{rfc822_date(parse_date(record.date) or now)}</pubDate>",
        f"      <author>{escape(record.author or settings.author)}</author>",
        f'      <guid isPermaLink="true">{escape(link)}</guid>',
    ]
    if record.category:
        lines.append(f"      <category>{escape(record.category)}</category>")
    lines += [f"      <category>{escape(t.strip())}</category>" for t in record.tags if t.strip()]
    lines.append("    </item>")
    return "\n".join(lines)


def build_feed(records: list[PostRecord], settings: Settings, now: Optional[datetime] = None) -> str:
    """Render the RSS document, newest items first."""
    now = now or datetime.now(timezone.utc).replace(tzinfo=None)
    ordered = sorted(records, key=lambda r: parse_date(r.date) or now, reverse=True)
    built = rfc822_date(now)
    site = settings.site_url.rstrip("/")
    head = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<rss version="2.0" xmlns:atom="http://www.w3.org/2005/Atom">',
        "  <channel>",
        f"    <title>{escape(settings.site_name)}</title>",
        f"    <link>{escape(site)}</link>",
        f"    <description>{escape(settings.site_description)}</description>",
        f"    <language>{escape(settings.site_language)}</language>",
        f"    <lastBuildDate>{built}</lastBuildDate>",
        f"    <pubDate>{built}</pubDate>",
        "    <ttl>60</ttl>",
        f'    <atom:link href="{escape(join_url(site, "rss.xml"))}" rel="self" type="application/rss+xml"/>',
    ]
    items = [build_item(r, settings, now) for r in ordered]
    return "\n".join(head + items + ["  </channel>", "</rss>"]) + "\n"
