"""Markdown text measures: character counts and plain-text extraction"""

import re

from markdown_it import MarkdownIt


_MARKUP_CHARS = re.compile(r"[#*`\[\]()]")
_WHITESPACE = re.compile(r"\s+")

# Inline tokens whose text is dropped from plain-text output
_SKIP_INLINE = {"code_inline", "image", "html_inline"}


def count_chars(markdown: str) -> int:
    """Count non-whitespace characters once markup punctuation is removed.

    Used as the word count for mixed Chinese/English text, where tokenizing
    on spaces would undercount.
    """
    return len(_WHITESPACE.sub("", _MARKUP_CHARS.sub("", markdown)))


def flatten(text: str) -> str:
    return _WHITESPACE.sub(" ", text).strip()


def truncate(text: str, max_length: int) -> str:
    """Cut text to max_length, preferring a word boundary in the last 20%."""
    if len(text) <= max_length:
        return text
    cut = text[:max_length]
    last_space = cut.rfind(" ")
    if last_space > max_length * 0.8:
        return cut[:last_space] + "..."
    return cut + "..."


def plain_text(markdown: str, max_length: int | None = None) -> str:
    """Return readable text from markdown: no code, images, or raw HTML."""
    if not markdown or not markdown.strip():
        return ""
    parts: list[str] = []
    for tok in MarkdownIt("commonmark").parse(markdown):
        if tok.type != "inline" or not tok.children:
            continue
        for child in tok.children:
            if child.type in _SKIP_INLINE:
                continue
            if child.type in ("softbreak", "hardbreak"):
                parts.append(" ")
            elif child.content:
                parts.append(child.content)
        parts.append(" ")
    text = flatten("".join(parts))
    return truncate(text, max_length) if max_length else text


def images_without_alt(markdown: str) -> int:
    """Count markdown images whose alt text is empty."""
    missing = 0
    for tok in MarkdownIt("commonmark").parse(markdown):
        if tok.type != "inline" or not tok.children:
            continue
        for child in tok.children:
            if child.type == "image" and not child.content.strip():
                missing += 1
    return missing
