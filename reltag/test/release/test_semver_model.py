from __future__ import annotations

import pytest

from reltag.release.semver import SemVer, is_valid, parse_version


def test_parse_version() -> None:
    assert parse_version("1.2.3") == SemVer(1, 2, 3)
    assert parse_version("0.0.1") == SemVer(0, 0, 1)
    assert parse_version("1.0.0-beta.2") == SemVer(1, 0, 0, ("beta", 2))
    assert parse_version("1.0.0+build.7") == SemVer(1, 0, 0, (), ("build", "7"))


@pytest.mark.parametrize("text", ["v1.2.3", "1.2", "01.2.3", "1.2.3-", "1.2.3-01", "release"])
def test_parse_version_rejects_invalid(text: str) -> None:
    assert parse_version(text) is None
    assert is_valid(text) is False


def test_str_drops_build_metadata() -> None:
    assert str(SemVer(1, 2, 3, ("rc", 1), ("sha", "abc"))) == "1.2.3-rc.1"


def test_precedence_follows_semver_rules() -> None:
    ordered = [
        "1.0.0-alpha",
        "1.0.0-alpha.1",
        "1.0.0-alpha.beta",
        "1.0.0-beta",
        "1.0.0-beta.2",
        "1.0.0-beta.11",
        "1.0.0-rc.1",
        "1.0.0",
        "1.0.1",
        "1.2.0",
        "1.10.0",
        "2.0.0",
    ]
    versions = [parse_version(v) for v in ordered]
    assert all(v is not None for v in versions)
    shuffled = list(reversed(versions))
    assert sorted(shuffled, key=lambda v: v.precedence()) == versions  # type: ignore[union-attr]


def test_precedence_ignores_build_metadata() -> None:
    a = parse_version("1.0.0+a")
    b = parse_version("1.0.0+b")
    assert a is not None and b is not None
    assert a.precedence() == b.precedence()
    assert not a < b


@pytest.mark.parametrize(
    ("start", "kind", "preid", "expected"),
    [
        ("1.2.3", "major", None, "2.0.0"),
        ("1.2.3", "minor", None, "1.3.0"),
        ("1.2.3", "patch", None, "1.2.4"),
        ("2.0.0-rc.1", "major", None, "2.0.0"),
        ("1.3.0-rc.1", "minor", None, "1.3.0"),
        ("1.2.4-rc.1", "patch", None, "1.2.4"),
        ("1.2.3", "premajor", None, "2.0.0-0"),
        ("1.2.3", "premajor", "beta", "2.0.0-beta.0"),
        ("1.2.3", "preminor", "beta", "1.3.0-beta.0"),
        ("1.2.3", "prepatch", None, "1.2.4-0"),
        ("1.0.1-rc.0", "prepatch", None, "1.0.2-0"),
        ("1.0.1-beta.0", "prepatch", "beta", "1.0.2-beta.0"),
        ("1.2.3", "prerelease", None, "1.2.4-0"),
        ("1.2.4-0", "prerelease", None, "1.2.4-1"),
        ("1.2.4-beta.0", "prerelease", "beta", "1.2.4-beta.1"),
        ("1.2.4-beta.3", "prerelease", "rc", "1.2.4-rc.0"),
        ("1.2.4-beta", "prerelease", None, "1.2.4-beta.0"),
        ("1.2.4-beta", "prerelease", "beta", "1.2.4-beta.0"),
        ("1.2.4-beta.1.x", "prerelease", None, "1.2.4-beta.2.x"),
    ],
)
def test_bump(start: str, kind: str, preid: str | None, expected: str) -> None:
    version = parse_version(start)
    assert version is not None
    assert str(version.bump(kind, preid)) == expected  # type: ignore[arg-type]
