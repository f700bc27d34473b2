"""Tests for JSON manifest version updates."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from reltag.core.result import Err, Ok
from reltag.release.manifest import update_manifest, update_manifests


def _write_json(path: Path, data: object) -> None:
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def test_updates_version_and_strips_prefix(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    _write_json(path, {"name": "demo", "version": "1.0.1", "private": True})

    assert update_manifest(path, "v1.0.2") == Ok(True)

    assert path.read_text(encoding="utf-8") == (
        '{\n  "name": "demo",\n  "version": "1.0.2",\n  "private": true\n}\n'
    )


def test_keeps_key_order_and_unicode(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    _write_json(path, {"version": "0.1.0", "author": "Zoë"})

    assert update_manifest(path, "2015.01.02") == Ok(True)

    data = json.loads(path.read_text(encoding="utf-8"))
    assert list(data) == ["version", "author"]
    assert data["version"] == "2015.01.02"
    assert "Zoë" in path.read_text(encoding="utf-8")


def test_missing_file_is_skipped(tmp_path: Path) -> None:
    assert update_manifest(tmp_path / "bower.json", "v1.0.0") == Ok(False)


def test_file_without_version_is_untouched(tmp_path: Path) -> None:
    path = tmp_path / "bower.json"
    path.write_text('{"name":"demo"}', encoding="utf-8")

    assert update_manifest(path, "v1.0.0") == Ok(False)
    assert path.read_text(encoding="utf-8") == '{"name":"demo"}'


def test_non_object_json_is_untouched(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("[1, 2]", encoding="utf-8")

    assert update_manifest(path, "v1.0.0") == Ok(False)


def test_invalid_json_is_an_error(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    path.write_text("{not json", encoding="utf-8")

    result = update_manifest(path, "v1.0.0")

    assert isinstance(result, Err)
    assert result.error.kind == "invalid_manifest"
    assert result.error.hint == str(path)


@pytest.mark.asyncio
async def test_update_manifests_in_order(tmp_path: Path) -> None:
    _write_json(tmp_path / "package.json", {"version": "1.0.0"})
    _write_json(tmp_path / "bower.json", {"version": "1.0.0"})

    result = await update_manifests(
        tmp_path, ["package.json", "missing.json", "bower.json"], "v1.1.0"
    )

    assert result == Ok([tmp_path / "package.json", tmp_path / "bower.json"])
    for name in ("package.json", "bower.json"):
        data = json.loads((tmp_path / name).read_text(encoding="utf-8"))
        assert data["version"] == "1.1.0"


@pytest.mark.asyncio
async def test_update_manifests_stops_at_first_error(tmp_path: Path) -> None:
    (tmp_path / "package.json").write_text("{", encoding="utf-8")
    _write_json(tmp_path / "bower.json", {"version": "1.0.0"})

    result = await update_manifests(tmp_path, ["package.json", "bower.json"], "v1.1.0")

    assert isinstance(result, Err)
    data = json.loads((tmp_path / "bower.json").read_text(encoding="utf-8"))
    assert data["version"] == "1.0.0"
