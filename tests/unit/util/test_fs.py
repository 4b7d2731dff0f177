"""Unit tests for util/fs.py and util/log.py"""

import json
import logging

import pytest

from blogpub.util.fs import backed_up, write_json, write_with_backup
from blogpub.util.log import get_logger, setup_logging


def test_backup_exists_before_target_is_touched(tmp_path):
    target = tmp_path / "docs" / "a.md"
    target.parent.mkdir()
    target.write_text("original", encoding="utf-8")
    backup = tmp_path / "backup" / "nested" / "a.md"

    with backed_up(target, backup) as dest:
        assert backup.read_text(encoding="utf-8") == "original"
        dest.write_text("changed", encoding="utf-8")

    assert target.read_text(encoding="utf-8") == "changed"
    assert backup.read_text(encoding="utf-8") == "original"


def test_backup_survives_failed_write(tmp_path):
    target = tmp_path / "a.md"
    target.write_text("original", encoding="utf-8")
    backup = tmp_path / "bak" / "a.md"

    with pytest.raises(RuntimeError):
        with backed_up(target, backup):
            raise RuntimeError("write interrupted")

    assert backup.read_text(encoding="utf-8") == "original"


def test_write_with_backup_overwrites_previous_backup(tmp_path):
    target = tmp_path / "a.md"
    backup = tmp_path / "bak" / "a.md"
    target.write_text("v1", encoding="utf-8")
    write_with_backup(target, backup, "v2")
    write_with_backup(target, backup, "v3")
    assert target.read_text(encoding="utf-8") == "v3"
    assert backup.read_text(encoding="utf-8") == "v2"


def test_write_with_backup_missing_target(tmp_path):
    with pytest.raises(FileNotFoundError):
        write_with_backup(tmp_path / "nope.md", tmp_path / "bak" / "nope.md", "text")
    assert not (tmp_path / "nope.md").exists()


def test_write_json_keeps_unicode(tmp_path):
    path = tmp_path / "out" / "data.json"
    write_json(path, {"author": "小菜权"})
    assert "小菜权" in path.read_text(encoding="utf-8")
    assert json.loads(path.read_text(encoding="utf-8")) == {"author": "小菜权"}


def test_setup_logging_configures_root():
    setup_logging("DEBUG")
    root = logging.getLogger()
    assert root.level == logging.DEBUG
    assert len(root.handlers) == 1
    assert logging.getLogger("httpx").level == logging.WARNING
    assert get_logger("blogpub.test").name == "blogpub.test"
