"""Image resolution: Unsplash search with a random placeholder fallback"""

from __future__ import annotations

import random
import re
from typing import Sequence

import httpx

from blogpub.config import Settings
from blogpub.util.log import get_logger


logger = get_logger(__name__)

PLACEHOLDER_URL = "https://picsum.photos/seed/{seed}/{width}/{height}"

_LATIN_TAG = re.compile(r"^[a-zA-Z0-9\s-]+$")
_LATIN_WORD = re.compile(r"^[a-zA-Z][a-zA-Z0-9-]*$")
_NON_WORD = re.compile(r"[^\w\s-]", re.ASCII)

# (title substrings, fallback keywords); first hit wins
DOMAIN_KEYWORDS: list[tuple[tuple[str, ...], tuple[str, str]]] = [
    (("ai", "gemini", "agent"),        ("artificial intelligence", "technology")),
    (("前端", "frontend", "web"),       ("web development", "coding")),
    (("算法", "algorithm"),             ("algorithm", "programming")),
    (("css", "layout"),                ("web design", "ui")),
]
DEFAULT_KEYWORDS = ("technology", "digital")


def image_search_query(title: str, tags: Sequence[str] = ()) -> str:
    """Build a short English search query from tags and title.

    Latin-script tags come first, then Latin tokens from the title; with
    neither, a domain keyword pair is picked from title substrings.
    """
    keywords = [t for t in tags if _LATIN_TAG.match(t)][:2]
    title_words = [
        w for w in _NON_WORD.sub(" ", title).split()
        if _LATIN_WORD.match(w) and len(w) >= 2
    ]
    keywords += title_words[:2]

    if not keywords:
        lower = title.lower()
        chosen = DEFAULT_KEYWORDS
        for needles, pair in DOMAIN_KEYWORDS:
            if any(n in lower for n in needles):
                chosen = pair
                break
        keywords = list(chosen)

    return " ".join(keywords[:2]).strip() or "technology"


def random_placeholder(width: int = 1200, height: int = 600, rng: random.Random | None = None) -> str:
    seed = (rng or random).randrange(1000)
    return PLACEHOLDER_URL.format(seed=seed, width=width, height=height)


def _search(query: str, settings: Settings, client: httpx.Client) -> str | None:
    resp = client.get(
        f"{settings.unsplash_base_url.rstrip('/')}/search/photos",
        params={"query": query, "per_page": 1, "orientation": "landscape"},
        headers={"Authorization": f"Client-ID {settings.unsplash_access_key}"},
        timeout=settings.http_timeout,
    )
    if not resp.is_success:
        logger.warning(f"Unsplash API error {resp.status_code} for query {query!r}; using placeholder")
        return None
    results = resp.json().get("results") or []
    if not results:
        logger.info(f"No Unsplash results for {query!r}; using placeholder")
        return None
    regular = results[0]["urls"]["regular"]
    return f"{regular}?auto=format&fit=crop&w={settings.image_width}&q=80"


def resolve_image(
    query: str,
    settings: Settings,
    client: httpx.Client | None = None,
    rng: random.Random | None = None,
) -> str:
    """Return an image URL for query; never raises and never returns None."""
    def fallback() -> str:
        return random_placeholder(settings.image_width, settings.image_height, rng)

    if not settings.unsplash_access_key:
        logger.info("No Unsplash access key configured; using placeholder image")
        return fallback()

    try:
        if client is not None:
            url = _search(query, settings, client)
        else:
            with httpx.Client() as own:
                url = _search(query, settings, own)
    except (httpx.HTTPError, ValueError, KeyError, IndexError, TypeError, AttributeError) as e:
        logger.warning(f"Unsplash search failed for {query!r}: {e}")
        url = None

    return url or fallback()
