"""Error presentation utilities.

Centralized rendering and exit code mapping for handled release failures.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from reltag.core.errors import ErrorCode
from reltag.output.console import Style

if TYPE_CHECKING:
    from reltag.output.console import ConsoleProtocol
    from reltag.release.errors import ReleaseError

__all__ = ["print_release_error", "release_error_exit_code"]


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    match error.kind:
        case "already_tagged" | "aborted" | "hook_failed":
            return int(ErrorCode.ABORTED)
        case "no_branch":
            return int(ErrorCode.ENV_ERROR)
        case "git_failed":
            return int(ErrorCode.GIT_ERROR)
        case "invalid_manifest":
            return int(ErrorCode.IO_ERROR)
        case (
            "invalid_strategy_result"
            | "unknown_strategy"
            | "invalid_option"
            | "invalid_config"
            | "invalid_step"
        ):
            return int(ErrorCode.USER_ERROR)
    # Fallback for exhaustiveness
    return int(ErrorCode.USER_ERROR)
