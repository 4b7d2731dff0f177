"""Filesystem helpers: backup-before-overwrite and JSON output"""

from __future__ import annotations

import json
import shutil
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterator


@contextmanager
def backed_up(target: Path, backup: Path) -> Iterator[Path]:
    """Copy target to backup, then yield target for rewriting.

    The copy completes before control returns to the caller, so the backup
    is readable whenever the target has been touched inside the block.
    Backups are never removed here.
    """
    backup.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(target, backup)
    yield target


def write_with_backup(target: Path, backup: Path, text: str) -> None:
    with backed_up(target, backup) as dest:
        dest.write_text(text, encoding="utf-8")


def write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8")


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
