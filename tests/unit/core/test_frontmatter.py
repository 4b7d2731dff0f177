"""Unit tests for core/frontmatter.py"""

import pytest

from blogpub.core.frontmatter import decode, encode, render_document


# --- decode ---

def test_decode_scalar_and_list_fields():
    """A closed block yields scalars, bracket lists, and the stripped body."""
    meta, body = decode("---\nslug: hello\ntags: [a, b, c]\n---\nBody text")
    assert meta == {"slug": "hello", "tags": ["a", "b", "c"]}
    assert body == "Body text"


def test_decode_no_block_returns_text_verbatim():
    meta, body = decode("Just plain text")
    assert meta == {}
    assert body == "Just plain text"


@pytest.mark.parametrize("text", [
    "---\ntitle: Never closed\n\nBody",
    "Intro paragraph\n\n---\n\nMore text\n",
    "---",
])
def test_decode_single_delimiter_returns_text_verbatim(text):
    """An unterminated or misplaced delimiter leaves metadata empty and the text untouched."""
    meta, body = decode(text)
    assert meta == {}
    assert body == text


def test_decode_allows_blank_lines_before_block():
    meta, body = decode("\n\n---\ntitle: Late start\n---\n\nBody")
    assert meta == {"title": "Late start"}
    assert body == "Body"


def test_decode_handles_crlf():
    meta, body = decode("---\r\ntitle: Windows\r\n---\r\nLine one\r\nLine two\r\n")
    assert meta == {"title": "Windows"}
    assert body == "Line one\nLine two"


def test_decode_splits_on_first_colon_only():
    meta, _ = decode("---\ndate: 2024-01-15T10:30:00\nimage: https://example.com/a.png\n---\n")
    assert meta["date"] == "2024-01-15T10:30:00"
    assert meta["image"] == "https://example.com/a.png"


@pytest.mark.parametrize("line", [
    "no colon here",
    ": leading colon",
    "   ",
])
def test_decode_ignores_malformed_lines(line):
    meta, body = decode(f"---\n{line}\ntitle: Kept\n---\nBody")
    assert meta == {"title": "Kept"}
    assert body == "Body"


def test_decode_keeps_empty_value_as_empty_string():
    meta, _ = decode("---\nexcerpt:\n---\nBody")
    assert meta == {"excerpt": ""}


def test_decode_list_strips_quotes_and_drops_empties():
    meta, _ = decode('---\ntags: ["first post", , react ,]\n---\n')
    assert meta["tags"] == ["first post", "react"]


def test_decode_empty_list():
    meta, _ = decode("---\ntags: []\n---\n")
    assert meta["tags"] == []


def test_decode_list_splits_on_every_comma():
    """Commas inside quoted list items are not protected."""
    meta, _ = decode('---\ntags: ["a, b", c]\n---\n')
    assert meta["tags"] == ['"a', 'b"', "c"]


def test_decode_later_duplicate_key_wins():
    meta, _ = decode("---\ntitle: First\ntitle: Second\n---\n")
    assert meta == {"title": "Second"}


def test_decode_body_keeps_inner_delimiters():
    meta, body = decode("---\ntitle: T\n---\n\nAbove\n\n---\n\nBelow\n")
    assert meta == {"title": "T"}
    assert body == "Above\n\n---\n\nBelow"


# --- encode ---

def test_encode_uses_canonical_order_then_extras():
    meta = {"custom": "x", "tags": ["a"], "title": "T", "slug": "s", "image": "i"}
    assert encode(meta).splitlines() == [
        "slug: s",
        "title: T",
        "tags: [a]",
        "image: i",
        "custom: x",
    ]


def test_encode_quotes_list_items_with_spaces():
    assert encode({"tags": ["react", "first post"]}) == 'tags: [react, "first post"]'


def test_encode_skips_none_values():
    assert encode({"title": "T", "subcategory": None}) == "title: T"


def test_encode_empty_list():
    assert encode({"tags": []}) == "tags: []"


# --- round trip ---

@pytest.mark.parametrize("meta", [
    {"slug": "hello", "title": "Hello World", "tags": ["a", "b c"]},
    {
        "slug": "post", "title": "标题", "excerpt": "一段摘要", "date": "2024-01-01",
        "author": "小菜权", "readTime": "3 分钟", "tags": ["前端", "CSS 布局"],
        "category": "blog", "subcategory": "css", "image": "https://example.com/a.png",
    },
    {"title": "Only title"},
    {"tags": []},
])
def test_decode_inverts_encode(meta):
    decoded, body = decode(render_document(meta, "Body"))
    assert decoded == meta
    assert body == "Body"


def test_render_document_layout():
    text = render_document({"title": "T"}, "\n\nBody\n\n")
    assert text == "---\ntitle: T\n---\n\nBody\n"
