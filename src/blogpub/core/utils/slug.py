"""Slug derivation and lookup normalization"""

import re
from pathlib import PurePosixPath


def slug_from_filename(filename: str) -> str:
    """Strip the extension, collapse whitespace to hyphens, lowercase.

    Non-Latin characters are kept as-is: `"My Cool Post.md"` -> `"my-cool-post"`.
    """
    stem = PurePosixPath(filename.replace("\\", "/")).name
    if "." in stem:
        stem = stem.rsplit(".", 1)[0]
    return re.sub(r"\s+", "-", stem.strip()).lower()


def normalize_slug(slug: str) -> str:
    return slug.strip().lower()
