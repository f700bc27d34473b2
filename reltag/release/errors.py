"""Error types for the release pipeline.

Two failure classes exist:

- ``ReleaseError`` is the expected, user-facing payload. It travels inside
  ``Err`` and is rendered as a single line without a traceback.
- Anything raised is unexpected. ``HookError`` is the one unexpected error we
  create ourselves: it names the failing hook and chains the original exception.

User code (config hooks, custom strategies) raises ``ReleaseAbort`` to stop the
release with a friendly message instead of a traceback.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

__all__ = [
    "ReleaseErrorKind",
    "ReleaseError",
    "ReleaseAbort",
    "HookError",
    "hook_failure_message",
]

ReleaseErrorKind = Literal[
    "already_tagged",
    "aborted",
    "hook_failed",
    "no_branch",
    "invalid_strategy_result",
    "unknown_strategy",
    "invalid_option",
    "invalid_config",
    "invalid_manifest",
    "git_failed",
    "invalid_step",
]


@dataclass(frozen=True, slots=True)
class ReleaseError:
    kind: ReleaseErrorKind
    message: str
    hint: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message


class ReleaseAbort(Exception):
    """Stop the release with a message shown to the user as-is."""

    def __init__(self, message: str, *, hint: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.hint = hint


class HookError(Exception):
    """An unexpected exception escaped a configured hook."""

    def __init__(self, hook_name: str, message: str) -> None:
        super().__init__(hook_failure_message(hook_name, message))
        self.hook_name = hook_name


def hook_failure_message(hook_name: str, message: str) -> str:
    return f'Error encountered in `{hook_name}` hook: "{message}"'
