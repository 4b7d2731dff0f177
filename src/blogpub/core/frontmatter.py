"""Frontmatter codec: line-oriented decode of the `---` header and canonical encode

The header grammar is deliberately permissive. Malformed lines are ignored,
an unterminated block leaves the whole text as body, and no YAML typing is
applied: every value is a string or a list of strings.
"""

import re
from enum import Enum
from typing import Any


DELIMITER = "---"

FIELD_ORDER = [
    "slug", "title", "excerpt", "date", "author",
    "readTime", "tags", "category", "subcategory", "image",
]

_LINE_SPLIT = re.compile(r"\r?\n")


class _State(Enum):
    BEFORE_BLOCK = "before-block"
    IN_BLOCK = "in-block"
    IN_BODY = "in-body"


def _parse_list(raw: str) -> list[str]:
    """Split `[a, b, "c d"]` on every comma; quoted-comma items are not supported."""
    items = []
    for part in raw[1:-1].split(","):
        item = part.strip()
        if len(item) >= 2 and item[0] == item[-1] == '"':
            item = item[1:-1].strip()
        if item:
            items.append(item)
    return items


def _parse_line(line: str) -> tuple[str, Any] | None:
    """Return (key, value) for a `key: value` line, else None."""
    idx = line.find(":")
    if idx <= 0:
        return None
    key = line[:idx].strip()
    value = line[idx + 1:].strip()
    if not key:
        return None
    if value.startswith("[") and value.endswith("]"):
        return key, _parse_list(value)
    return key, value


def decode(text: str) -> tuple[dict[str, Any], str]:
    """Return (metadata, body) for a document.

    Without a closed header block the metadata is empty and the body is the
    input text unchanged.
    """
    state = _State.BEFORE_BLOCK
    metadata: dict[str, Any] = {}
    body_lines: list[str] = []

    for line in _LINE_SPLIT.split(text):
        stripped = line.strip()
        if state is _State.BEFORE_BLOCK:
            if not stripped:
                continue
            if stripped != DELIMITER:
                return {}, text
            state = _State.IN_BLOCK
        elif state is _State.IN_BLOCK:
            if stripped == DELIMITER:
                state = _State.IN_BODY
                continue
            parsed = _parse_line(line)
            if parsed is not None:
                key, value = parsed
                metadata[key] = value
        else:
            body_lines.append(line)

    if state is not _State.IN_BODY:
        return {}, text
    return metadata, "\n".join(body_lines).strip()


def _render_value(value: Any) -> str:
    if isinstance(value, (list, tuple)):
        items = [f'"{v}"' if " " in str(v) else str(v) for v in value]
        return f"[{', '.join(items)}]"
    return str(value)


def encode(metadata: dict[str, Any]) -> str:
    """Render metadata as header lines (without delimiters) in canonical field order."""
    keys = [k for k in FIELD_ORDER if k in metadata]
    keys += [k for k in metadata if k not in FIELD_ORDER]
    return "\n".join(
        f"{k}: {_render_value(metadata[k])}" for k in keys if metadata[k] is not None
    )


def render_document(metadata: dict[str, Any], body: str) -> str:
    """Return full file text: delimited header, blank line, stripped body."""
    return f"{DELIMITER}\n{encode(metadata)}\n{DELIMITER}\n\n{body.strip()}\n"
