import logging
import os
from datetime import datetime

import pytest

from ftndb.errors import NodelistFileNotFound
from ftndb.selector import find_nodelists, nodelist_descriptor, select_nodelist


def _touch(d, *names):
    for name in names:
        (d / name).write_text(";\n")


def test_selects_highest_day_number(nodelist_dir):
    _touch(nodelist_dir, "nodelist.197", "nodelist.200", "nodelist.150")
    assert select_nodelist(nodelist_dir, "nodelist").name == "nodelist.200"


def test_match_is_case_insensitive_and_needs_three_digits(nodelist_dir):
    _touch(nodelist_dir, "NODELIST.123", "nodelist.99", "nodelist.1234", "nodelist.txt", "nodediff.300")
    assert [p.name for p in find_nodelists(nodelist_dir, "nodelist")] == ["NODELIST.123"]


def test_no_match_raises(nodelist_dir):
    _touch(nodelist_dir, "nodediff.290")
    with pytest.raises(NodelistFileNotFound):
        select_nodelist(nodelist_dir, "nodelist")


def test_missing_directory_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        select_nodelist(tmp_path / "absent", "nodelist")


def test_several_matches_logs_notice(nodelist_dir, caplog):
    _touch(nodelist_dir, "nodelist.283", "nodelist.290")
    with caplog.at_level(logging.INFO, logger="ftndb.selector"):
        assert select_nodelist(nodelist_dir, "nodelist").name == "nodelist.290"
    assert "nodelist.283" in caplog.text


def test_exact_returns_name_unchanged(nodelist_dir):
    assert select_nodelist(nodelist_dir, "mynodes.txt", exact=True) == nodelist_dir / "mynodes.txt"


def test_descriptor_from_suffix_and_mtime(nodelist_dir):
    path = nodelist_dir / "nodelist.045"
    path.write_text(";\n")
    stamp = datetime(2024, 2, 14, 12, 0).timestamp()
    os.utime(path, (stamp, stamp))
    desc = nodelist_descriptor(path)
    assert (desc.year, desc.yearday, desc.name) == (2024, 45, "nodelist.045")


def test_descriptor_without_suffix(nodelist_dir):
    path = nodelist_dir / "mynodes.txt"
    path.write_text(";\n")
    assert nodelist_descriptor(path).yearday == 0
