"""Shared fixtures for core unit tests"""

import pytest


SAMPLE_FM_MD = """\
---
slug: hello-world
title: Hello World
excerpt: A short greeting post.
date: 2024-03-01
author: Alice
readTime: 1 分钟
tags: [intro, "first post"]
category: blog
image: https://example.com/hello.png
---

# Hello

Body content with **bold** text.
"""


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    """A document whose header already carries every recognized field."""
    return SAMPLE_FM_MD
