"""Unified diffs for dry-run previews"""

import difflib


def document_diff(path: str, old: str, new: str, context: int = 3) -> str:
    """Return a unified diff of a document rewrite, or "" when nothing changes."""
    return "".join(
        difflib.unified_diff(
            old.splitlines(keepends=True),
            new.splitlines(keepends=True),
            fromfile=f"a/{path}",
            tofile=f"b/{path}",
            n=context,
        )
    )
