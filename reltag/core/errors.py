"""Process exit codes.

Every handled failure maps to one of these codes so shell scripts can tell a
declined prompt from a broken git remote.
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for the CLI.

    These values are used as process exit codes and should remain stable:
    - 0: Success
    - 1: User error (bad option, bad config, strategy could not name a tag)
    - 2: Environment error (detached HEAD, not a git repository)
    - 4: Git error (a git command failed)
    - 5: I/O error (manifest unreadable or invalid)
    - 6: Aborted (HEAD already tagged, confirmation declined, hook refused)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    GIT_ERROR = 4
    IO_ERROR = 5
    ABORTED = 6

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def is_success(self) -> bool:
        return self == ErrorCode.OK
