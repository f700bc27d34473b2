"""Git operations used by the release pipeline.

Usage:
    from reltag.git import Repository

    repo = Repository(Path("/path/to/project"))
    status = await repo.status()
    if status.is_ok() and has_modifications(status.unwrap()):
        print("dirty")
"""

from .repository import (
    GitError,
    GitTag,
    Repository,
    StatusEntry,
    VcsProtocol,
    has_modifications,
    parse_status_entries,
)

__all__ = [
    "GitError",
    "GitTag",
    "Repository",
    "StatusEntry",
    "VcsProtocol",
    "has_modifications",
    "parse_status_entries",
]
