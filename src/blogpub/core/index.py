"""Post index: PostRecord assembly, date ordering, and slug lookup"""

from datetime import datetime
from pathlib import PurePosixPath
from typing import Iterable, Optional
from urllib.parse import unquote

from blogpub.core.frontmatter import decode
from blogpub.core.models import PostRecord, RawDocument
from blogpub.core.utils.dates import parse_date
from blogpub.core.utils.slug import normalize_slug, slug_from_filename
from blogpub.core.utils.text import count_chars
from blogpub.util.log import get_logger


logger = get_logger(__name__)


def _str(value) -> str:
    if isinstance(value, list):
        return ", ".join(value)
    return value or ""


def build_post_record(doc: RawDocument) -> PostRecord:
    """Decode a document into a PostRecord, filling identity fields from the filename."""
    metadata, content = decode(doc.text)
    name = PurePosixPath(doc.path).name
    tags = metadata.get("tags") or []
    if isinstance(tags, str):
        tags = [tags] if tags.strip() else []
    return PostRecord(
        slug=_str(metadata.get("slug")) or slug_from_filename(name),
        title=_str(metadata.get("title")) or PurePosixPath(name).stem,
        excerpt=_str(metadata.get("excerpt")),
        date=_str(metadata.get("date")),
        author=_str(metadata.get("author")),
        read_time=_str(metadata.get("readTime")),
        tags=tags,
        category=_str(metadata.get("category")).lower() or "blog",
        subcategory=_str(metadata.get("subcategory")) or None,
        image=_str(metadata.get("image")) or None,
        content=content,
        word_count=count_chars(content),
        path=doc.path,
    )


def sort_key(record: PostRecord, now: datetime) -> datetime:
    """Publish date, or now when the date cannot be parsed."""
    return parse_date(record.date) or now


def build_index(documents: Iterable[RawDocument], now: Optional[datetime] = None) -> list[PostRecord]:
    """Assemble records newest first; documents that fail to decode are logged and skipped."""
    now = now or datetime.now()
    records = []
    for doc in documents:
        try:
            records.append(build_post_record(doc))
        except Exception as e:
            logger.error(f"Skipping {doc.path}: {e}")
    records.sort(key=lambda r: sort_key(r, now), reverse=True)
    return records


def find_post(records: list[PostRecord], slug: str) -> Optional[PostRecord]:
    """Exact match, then trimmed/case-folded match, then percent-decoded match.

    None means not found; the caller renders its 404 state.
    """
    for r in records:
        if r.slug == slug:
            return r

    wanted = normalize_slug(slug)
    for r in records:
        if normalize_slug(r.slug) == wanted:
            return r

    decoded = unquote(slug)
    if decoded != slug:
        wanted = normalize_slug(decoded)
        for r in records:
            if r.slug == decoded or normalize_slug(r.slug) == wanted:
                return r
    return None
