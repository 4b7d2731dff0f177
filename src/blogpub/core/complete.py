"""Metadata completion: deterministic derivations plus AI and image side calls

Every step fills a field only when it is absent (missing, empty string, or
empty list), so completing an already complete mapping changes nothing and
calls neither collaborator.
"""

import json
import math
import re
from datetime import date
from pathlib import PurePosixPath
from typing import Any, Callable, Optional

from blogpub.clients.unsplash import image_search_query, resolve_image as unsplash_resolve
from blogpub.config import Settings
from blogpub.core.frontmatter import FIELD_ORDER
from blogpub.core.models import AIFields
from blogpub.core.utils.dates import today_iso
from blogpub.core.utils.slug import slug_from_filename
from blogpub.core.utils.text import count_chars
from blogpub.util.log import get_logger


logger = get_logger(__name__)

Generate = Callable[[str], str]
ResolveImage = Callable[[str], str]

PROMPT_BODY_CHARS = 2000
NAIVE_EXCERPT_CHARS = 100

_JSON_SPAN = re.compile(r"\{[\s\S]*\}")
_TITLE_PAIR = re.compile(r"title[\"\s:：]+[\"']?([^\"'\n]+)[\"']?", re.IGNORECASE)
_EXCERPT_PAIR = re.compile(r"excerpt[\"\s:：]+[\"']?([^\"'\n]+)[\"']?", re.IGNORECASE)


def is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple)):
        return len(value) > 0
    return True


def derive_category(path: str, settings: Settings) -> str:
    """First configured folder that appears as a directory of path, else the default."""
    folders = PurePosixPath(path.replace("\\", "/")).parts[:-1]
    for c in settings.categories:
        if c.folder in folders:
            return c.key
    return settings.default_category


def read_minutes(body: str, reading_speed: int = 300) -> int:
    return max(1, math.ceil(count_chars(body) / reading_speed))


def naive_excerpt(body: str, length: int = NAIVE_EXCERPT_CHARS) -> str:
    return body[:length].replace("\r", "").replace("\n", " ").strip()


def build_prompt(title: Optional[str], body: str) -> str:
    known = f"标题：{title}\n\n" if title else ""
    want_title = "" if title else '  "title": "文章标题（不超过 20 字）",\n'
    return (
        "请分析以下文章内容，生成摘要和标签（使用中文）。\n\n"
        f"{known}"
        f"文章内容：\n{body[:PROMPT_BODY_CHARS]}...\n\n"
        "请以 JSON 格式返回，格式如下：\n"
        "{\n"
        f"{want_title}"
        '  "excerpt": "2-3 句话的摘要，不超过 100 字",\n'
        '  "tags": ["标签1", "标签2", "标签3"]\n'
        "}"
    )


def _flatten(text: str) -> str:
    """Collapse all whitespace runs, newlines included, to single spaces."""
    return " ".join(text.split())


def _clean_tags(raw: Any) -> list[str]:
    if not isinstance(raw, list):
        return []
    return [_flatten(str(t)) for t in raw if isinstance(t, (str, int, float)) and str(t).strip()]


def _clean_str(raw: Any) -> Optional[str]:
    if isinstance(raw, str) and raw.strip():
        return _flatten(raw)
    return None


def _as_text(value: Any) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return str(value) if value is not None else ""


def _as_tags(value: Any) -> list[str]:
    if isinstance(value, str):
        return [value] if value.strip() else []
    return list(value or [])


def parse_ai_response(text: str) -> AIFields:
    """Recover title/excerpt/tags from free text around a JSON object.

    Strict JSON on the first `{...}` span first; when that fails, regex
    extraction of `title` and `excerpt` pairs. Never raises.
    """
    match = _JSON_SPAN.search(text or "")
    if match:
        try:
            data = json.loads(match.group())
        except ValueError:
            data = None
        if isinstance(data, dict):
            return AIFields(
                title=_clean_str(data.get("title")),
                excerpt=_clean_str(data.get("excerpt")),
                tags=_clean_tags(data.get("tags")),
            )

    logger.warning("AI response is not valid JSON; falling back to pattern extraction")
    fields = AIFields()
    if m := _TITLE_PAIR.search(text or ""):
        fields.title = _clean_str(m.group(1))
    if m := _EXCERPT_PAIR.search(text or ""):
        fields.excerpt = _clean_str(m.group(1))
    return fields


def request_ai_fields(generate: Optional[Generate], title: Optional[str], body: str) -> AIFields:
    """Call the generator and parse its answer; any failure yields empty fields."""
    if generate is None:
        return AIFields()
    try:
        text = generate(build_prompt(title, body))
    except Exception as e:
        # Collaborator failures of any kind degrade to fallbacks
        logger.warning(f"AI generation failed: {e}")
        return AIFields()
    return parse_ai_response(text)


def complete_metadata(
    partial: dict[str, Any],
    body: str,
    filename: str,
    path: str,
    settings: Settings,
    *,
    generate: Optional[Generate] = None,
    resolve_image: Optional[ResolveImage] = None,
    today: Optional[date] = None,
    ) -> dict[str, Any]:
    """Return metadata with every recognized field populated.

    generate is the AI text collaborator (None disables it); resolve_image
    defaults to the Unsplash chain configured by settings.
    """
    done: dict[str, Any] = {k: v for k, v in partial.items() if is_present(v) or k not in FIELD_ORDER}

    if not is_present(done.get("slug")):
        done["slug"] = slug_from_filename(filename)
    if not is_present(done.get("category")):
        done["category"] = derive_category(path, settings)
    if not is_present(done.get("date")):
        done["date"] = today_iso(today)
    if not is_present(done.get("author")):
        done["author"] = settings.author
    if not is_present(done.get("readTime")):
        done["readTime"] = f"{read_minutes(body, settings.reading_speed)} {settings.read_time_unit}"

    if not is_present(done.get("excerpt")) or not is_present(done.get("tags")):
        ai = request_ai_fields(generate, _as_text(done.get("title")) or None, body)
        if not is_present(done.get("title")) and ai.title:
            done["title"] = ai.title
        if not is_present(done.get("excerpt")):
            done["excerpt"] = ai.excerpt or naive_excerpt(body)
        if not is_present(done.get("tags")):
            done["tags"] = ai.tags

    if not is_present(done.get("title")):
        done["title"] = PurePosixPath(filename).stem

    if not is_present(done.get("image")):
        resolver = resolve_image or (lambda q: unsplash_resolve(q, settings))
        query = None
        try:
            query = image_search_query(_as_text(done["title"]), _as_tags(done.get("tags")))
            done["image"] = resolver(query)
        except Exception as e:
            logger.warning(f"Image resolution failed for {query!r}: {e}")

    ordered = {k: done[k] for k in FIELD_ORDER if k in done}
    ordered.update({k: v for k, v in done.items() if k not in ordered})
    return ordered
