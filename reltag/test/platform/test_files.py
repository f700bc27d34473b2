"""Tests for reltag.platform.files module."""

from __future__ import annotations

from pathlib import Path

from reltag.platform.files import atomic_write_text


def test_atomic_write_replaces_content(tmp_path: Path) -> None:
    target = tmp_path / "package.json"
    target.write_text("old", encoding="utf-8")

    atomic_write_text(target, '{"version": "1.0.0"}\n')

    assert target.read_text(encoding="utf-8") == '{"version": "1.0.0"}\n'


def test_atomic_write_leaves_no_temp_files(tmp_path: Path) -> None:
    target = tmp_path / "bower.json"

    atomic_write_text(target, "{}\n")

    assert sorted(p.name for p in tmp_path.iterdir()) == ["bower.json"]


def test_atomic_write_keeps_newlines_verbatim(tmp_path: Path) -> None:
    target = tmp_path / "m.json"

    atomic_write_text(target, "a\nb\n")

    assert target.read_bytes() == b"a\nb\n"
