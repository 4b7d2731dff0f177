"""Unit tests for core/utils/text.py and core/utils/diff.py"""

import pytest

from blogpub.core.utils.diff import document_diff
from blogpub.core.utils.text import count_chars, images_without_alt, plain_text, truncate


def test_count_chars_strips_markup_and_whitespace():
    assert count_chars("# Title\n\n- [link](url) `code`") == len("Title-linkurlcode")


def test_count_chars_counts_cjk_characters():
    assert count_chars("你好 世界") == 4


def test_plain_text_drops_code_images_and_html():
    md = (
        "# Heading\n\n"
        "Some **bold** and [link text](https://example.com) with `code`.\n\n"
        "![alt](img.png) <span>raw</span>\n\n"
        "```python\nprint('hidden')\n```\n"
    )
    text = plain_text(md)
    assert text.startswith("Heading Some bold and link text with .")
    assert "print" not in text
    assert "img.png" not in text
    assert "<span>" not in text


def test_plain_text_empty():
    assert plain_text("") == ""
    assert plain_text("   \n") == ""


def test_plain_text_truncates():
    assert len(plain_text("word " * 100, 50)) <= 53
    assert plain_text("word " * 100, 50).endswith("...")


@pytest.mark.parametrize("text,limit,expected", [
    ("short", 10, "short"),
    ("aaaa bbbb cccc", 11, "aaaa bbbb..."),
    ("abcdefghijklmnop", 8, "abcdefgh..."),
])
def test_truncate(text, limit, expected):
    assert truncate(text, limit) == expected


def test_images_without_alt():
    md = "![](a.png)\n\n![described](b.png)\n\n![ ](c.png)\n\n`![](not-an-image.png)`"
    assert images_without_alt(md) == 2


def test_document_diff():
    diff = document_diff("blog/a.md", "one\ntwo\n", "one\nthree\n")
    assert diff.startswith("--- a/blog/a.md\n+++ b/blog/a.md\n")
    assert "-two\n" in diff and "+three\n" in diff
    assert document_diff("blog/a.md", "same\n", "same\n") == ""
