from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Literal

ReleaseBump = Literal[
    "major",
    "minor",
    "patch",
    "premajor",
    "preminor",
    "prepatch",
    "prerelease",
]

PrereleaseId = int | str

_PRE_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_SEMVER_RE = re.compile(
    r"^(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    rf"(?:-({_PRE_IDENT}(?:\.{_PRE_IDENT})*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$"
)


@dataclass(frozen=True, slots=True)
class SemVer:
    major: int
    minor: int
    patch: int
    prerelease: tuple[PrereleaseId, ...] = field(default_factory=tuple)
    build: tuple[str, ...] = field(default_factory=tuple)

    def __str__(self) -> str:
        core = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            core += "-" + ".".join(str(p) for p in self.prerelease)
        return core

    def precedence(self) -> tuple[object, ...]:
        """Sort key implementing SemVer 2.0.0 precedence (build ignored)."""
        # A release sorts after any of its prereleases.
        pre_key: tuple[object, ...] = (1,)
        if self.prerelease:
            pre_key = (
                0,
                tuple((0, p, "") if isinstance(p, int) else (1, 0, p) for p in self.prerelease),
            )
        return (self.major, self.minor, self.patch, *pre_key)

    def __lt__(self, other: SemVer) -> bool:
        return self.precedence() < other.precedence()

    def bump(self, kind: ReleaseBump, preid: str | None = None) -> SemVer:
        """Increment following npm's semver rules."""
        match kind:
            case "major":
                if self.minor != 0 or self.patch != 0 or not self.prerelease:
                    return SemVer(self.major + 1, 0, 0)
                return SemVer(self.major, 0, 0)
            case "minor":
                if self.patch != 0 or not self.prerelease:
                    return SemVer(self.major, self.minor + 1, 0)
                return SemVer(self.major, self.minor, 0)
            case "patch":
                if not self.prerelease:
                    return SemVer(self.major, self.minor, self.patch + 1)
                return SemVer(self.major, self.minor, self.patch)
            case "premajor":
                return SemVer(self.major + 1, 0, 0)._next_prerelease(preid)
            case "preminor":
                return SemVer(self.major, self.minor + 1, 0)._next_prerelease(preid)
            case "prepatch":
                return SemVer(self.major, self.minor, self.patch + 1)._next_prerelease(preid)
            case "prerelease":
                base = self if self.prerelease else self.bump("patch")
                return base._next_prerelease(preid)
            case _:
                raise AssertionError(f"unexpected bump kind: {kind}")

    def _next_prerelease(self, preid: str | None) -> SemVer:
        pre = list(self.prerelease)
        if not pre:
            pre = [0]
        else:
            for i in range(len(pre) - 1, -1, -1):
                value = pre[i]
                if isinstance(value, int):
                    pre[i] = value + 1
                    break
            else:
                pre.append(0)

        if preid:
            if pre[0] != preid or not isinstance(pre[1] if len(pre) > 1 else None, int):
                pre = [preid, 0]

        return SemVer(self.major, self.minor, self.patch, tuple(pre))


def parse_version(text: str) -> SemVer | None:
    """Parse an unprefixed version string ("1.2.3-rc.1"); None if invalid."""
    m = _SEMVER_RE.match(text)
    if m is None:
        return None
    prerelease: tuple[PrereleaseId, ...] = ()
    if m.group(4):
        prerelease = tuple(int(p) if p.isdigit() else p for p in m.group(4).split("."))
    build: tuple[str, ...] = tuple(m.group(5).split(".")) if m.group(5) else ()
    return SemVer(
        int(m.group(1)),
        int(m.group(2)),
        int(m.group(3)),
        prerelease=prerelease,
        build=build,
    )


def is_valid(text: str) -> bool:
    return parse_version(text) is not None
