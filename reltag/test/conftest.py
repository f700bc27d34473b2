"""Shared test doubles for the release pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from reltag.core.result import Err, Ok, Result
from reltag.git.repository import GitError, GitTag
from reltag.release.model import Project


@dataclass
class FakeRepo:
    """In-memory stand-in for ``Repository``.

    ``calls`` records every mutation as a tuple so tests can assert on order.
    Set ``status_text`` to a list to return different statuses per call.
    """

    head_tag: str | None = None
    tag_names: list[str] = field(default_factory=list)
    status_text: str | list[str] = ""
    branch: str | None = "main"
    fail_push: set[str] = field(default_factory=set)
    calls: list[tuple[str, ...]] = field(default_factory=list)

    async def current_tag(self) -> Result[str | None, GitError]:
        return Ok(self.head_tag)

    async def tags(self) -> Result[list[GitTag], GitError]:
        return Ok([GitTag(name=n, sha=f"{i:040d}") for i, n in enumerate(self.tag_names)])

    async def status(self) -> Result[str, GitError]:
        if isinstance(self.status_text, list):
            return Ok(self.status_text.pop(0) if self.status_text else "")
        return Ok(self.status_text)

    async def current_branch(self) -> Result[str | None, GitError]:
        return Ok(self.branch)

    async def commit_all(self, message: str) -> Result[None, GitError]:
        self.calls.append(("commit", message))
        return Ok(None)

    async def create_tag(self, name: str, message: str | None = None) -> Result[None, GitError]:
        self.calls.append(("tag", name, message or ""))
        return Ok(None)

    async def push(self, remote: str, ref: str) -> Result[None, GitError]:
        if ref in self.fail_push:
            return Err(GitError(command="push", message=f"rejected {ref}"))
        self.calls.append(("push", remote, ref))
        return Ok(None)

    @property
    def mutations(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture
def fake_repo() -> FakeRepo:
    return FakeRepo()


@pytest.fixture
def project(tmp_path: Path) -> Project:
    return Project(root=tmp_path, name="demo")
