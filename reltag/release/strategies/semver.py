"""Semantic-version strategy: bump the highest SemVer tag."""

from __future__ import annotations

from collections.abc import Mapping, Sequence

from reltag.release import tag_prefix
from reltag.release.errors import ReleaseAbort
from reltag.release.model import OptionSpec, Project
from reltag.release.semver import ReleaseBump, SemVer, parse_version

INITIAL_TAG = "v0.1.0"

NO_SEMVER_TAGS_MESSAGE = (
    "The repository has no tags that are SemVer compliant, "
    "you must specify a tag name with the --tag option."
)

# Checked in order; the first flag set wins.
_BUMP_FLAGS: tuple[ReleaseBump, ...] = (
    "major",
    "minor",
    "premajor",
    "preminor",
    "prepatch",
    "prerelease",
)

AVAILABLE_OPTIONS = (
    OptionSpec("major", "bool", description="increment the major version number"),
    OptionSpec(
        "minor",
        "bool",
        description="increment the minor version number, ignored if --major is set",
    ),
    OptionSpec("premajor", "bool", description="create a prerelease of the next major version"),
    OptionSpec("preminor", "bool", description="create a prerelease of the next minor version"),
    OptionSpec("prepatch", "bool", description="create a prerelease of the next patch version"),
    OptionSpec(
        "prerelease",
        "bool",
        description="advance the prerelease counter, or start one on the next patch version",
    ),
    OptionSpec("preid", "str", description="prerelease identifier, e.g. 'beta'"),
)


def _sorted_versions(tags: Sequence[str]) -> list[tuple[str, SemVer]]:
    parsed: list[tuple[str, SemVer]] = []
    for tag in tags:
        version = parse_version(tag_prefix.strip(tag))
        if version is not None:
            parsed.append((tag, version))
    parsed.sort(key=lambda item: item[1].precedence(), reverse=True)
    return parsed


def get_latest_tag(
    project: Project, tags: Sequence[str], options: Mapping[str, object]
) -> str | None:
    versions = _sorted_versions(tags)
    if not versions:
        return None
    return versions[0][0]


def _bump_kind(options: Mapping[str, object]) -> ReleaseBump:
    for flag in _BUMP_FLAGS:
        if options.get(flag):
            return flag
    return "patch"


def get_next_tag(project: Project, tags: Sequence[str], options: Mapping[str, object]) -> str:
    versions = _sorted_versions(tags)

    if tags and not versions:
        raise ReleaseAbort(NO_SEMVER_TAGS_MESSAGE)
    if not versions:
        return INITIAL_TAG

    latest_tag, latest = versions[0]
    preid = options.get("preid")
    next_version = str(latest.bump(_bump_kind(options), preid if isinstance(preid, str) else None))

    if tag_prefix.has_prefix(latest_tag):
        return tag_prefix.prepend(next_version)
    return next_version
