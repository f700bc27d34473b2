"""Git repository abstraction.

``Repository`` drives the ``git`` executable for the handful of queries and
mutations a release needs. Every method is a coroutine returning a Result so
the release pipeline can await it without blocking the event loop.

Usage:
    repo = Repository(Path("/path/to/project"))

    match await repo.current_branch():
        case Ok(None):
            print("detached HEAD")
        case Ok(branch):
            print(f"on {branch}")
        case Err(e):
            print(f"git failed: {e.message}")
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol

from reltag.core.result import Err, Ok, Result
from reltag.platform.process import ProcessError, run_async

_GIT_TIMEOUT_SECONDS = 30.0
_GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0

_TAG_FORMAT = "%(refname:strip=2)%09%(objectname)%09%(creatordate:iso-strict)"

__all__ = [
    "GitError",
    "GitTag",
    "Repository",
    "StatusEntry",
    "VcsProtocol",
    "has_modifications",
    "parse_status_entries",
]


@dataclass(frozen=True, slots=True)
class GitError:
    """Error from a git operation.

    Attributes:
        command: The git subcommand that failed
        message: Error message (git's stderr when available)
        returncode: Process return code
    """

    command: str
    message: str
    returncode: int = 1


@dataclass(frozen=True, slots=True)
class GitTag:
    """A tag as listed by ``git for-each-ref``."""

    name: str
    sha: str
    date: datetime | None = None


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in porcelain status output.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: File path
    """

    xy: str
    path: str

    @property
    def is_untracked(self) -> bool:
        return self.xy == "??"


def parse_status_entries(output: str) -> tuple[StatusEntry, ...]:
    """Parse ``git status --porcelain`` output into entries.

    Branch header lines (``## main...origin/main``) are skipped.
    """
    entries: list[StatusEntry] = []
    for line in output.splitlines():
        if not line.strip() or line.startswith("##"):
            continue
        if len(line) < 4:
            continue
        entries.append(StatusEntry(xy=line[:2], path=line[3:]))
    return tuple(entries)


def has_modifications(status: str) -> bool:
    """True if status output lists anything other than untracked files."""
    return any(not e.is_untracked for e in parse_status_entries(status))


class VcsProtocol(Protocol):
    """The git operations the release pipeline depends on."""

    async def current_tag(self) -> Result[str | None, GitError]: ...

    async def tags(self) -> Result[list[GitTag], GitError]: ...

    async def status(self) -> Result[str, GitError]: ...

    async def current_branch(self) -> Result[str | None, GitError]: ...

    async def commit_all(self, message: str) -> Result[None, GitError]: ...

    async def create_tag(self, name: str, message: str | None = None) -> Result[None, GitError]: ...

    async def push(self, remote: str, ref: str) -> Result[None, GitError]: ...


class Repository:
    """Git repository rooted at ``path``.

    Attributes:
        path: Path to the repository working tree
    """

    def __init__(self, path: Path) -> None:
        self.path = path

    def exists(self) -> bool:
        """Check if this is a valid git repository."""
        return (self.path / ".git").exists()

    async def current_tag(self) -> Result[str | None, GitError]:
        """Name of a tag pointing exactly at HEAD, or None."""
        result = await self._git(["tag", "--points-at", "HEAD"])
        match result:
            case Err(e):
                return Err(e)
            case Ok(stdout):
                names = [ln.strip() for ln in stdout.splitlines() if ln.strip()]
                return Ok(names[0] if names else None)

    async def tags(self) -> Result[list[GitTag], GitError]:
        """All tags, oldest first."""
        result = await self._git(
            ["for-each-ref", "--sort=creatordate", f"--format={_TAG_FORMAT}", "refs/tags"]
        )
        match result:
            case Err(e):
                return Err(e)
            case Ok(stdout):
                return Ok([t for t in map(_parse_tag_line, stdout.splitlines()) if t])

    async def status(self) -> Result[str, GitError]:
        """Raw ``git status --porcelain`` output."""
        return await self._git(["status", "--porcelain"])

    async def current_branch(self) -> Result[str | None, GitError]:
        """Current branch name; None on a detached HEAD."""
        result = await self._git(["rev-parse", "--abbrev-ref", "HEAD"])
        match result:
            case Err(e):
                return Err(e)
            case Ok(stdout):
                branch = stdout.strip()
                return Ok(None if branch in ("", "HEAD") else branch)

    async def commit_all(self, message: str) -> Result[None, GitError]:
        """Commit every tracked modification."""
        result = await self._git(["commit", "--all", "--message", message])
        return result.map(lambda _: None)

    async def create_tag(self, name: str, message: str | None = None) -> Result[None, GitError]:
        """Create an annotated tag if ``message`` is given, else a lightweight one."""
        if message:
            args = ["tag", "--annotate", "--message", message, name]
        else:
            args = ["tag", name]
        result = await self._git(args)
        return result.map(lambda _: None)

    async def push(self, remote: str, ref: str) -> Result[None, GitError]:
        result = await self._git(["push", remote, ref])
        return result.map(lambda _: None)

    async def _git(self, args: list[str]) -> Result[str, GitError]:
        """Run a git command in this repository."""
        command = args[0] if args else ""
        timeout = (
            _GIT_NETWORK_TIMEOUT_SECONDS
            if command in {"fetch", "pull", "push"}
            else _GIT_TIMEOUT_SECONDS
        )
        result = await run_async(
            ["git", "-C", str(self.path), *args], cwd=self.path, timeout=timeout
        )
        match result:
            case Err(e):
                return Err(_git_error(command, e))
            case Ok(stdout):
                return Ok(stdout)


def _git_error(command: str, e: ProcessError) -> GitError:
    message = e.stderr.strip() or e.stdout.strip() or f"git {command} failed"
    return GitError(command=command, message=message, returncode=e.returncode)


def _parse_tag_line(line: str) -> GitTag | None:
    parts = line.split("\t")
    if not parts or not parts[0].strip():
        return None

    name = parts[0].strip()
    sha = parts[1].strip() if len(parts) > 1 else ""
    date: datetime | None = None
    if len(parts) > 2 and parts[2].strip():
        try:
            date = datetime.fromisoformat(parts[2].strip())
        except ValueError:
            date = None
    return GitTag(name=name, sha=sha, date=date)
