"""Release tagging: strategies, config, hooks and the release pipeline."""

from __future__ import annotations

from .errors import HookError, ReleaseAbort, ReleaseError
from .model import HookName, OptionSpec, Project, ReleaseOptions, TagResult

__all__ = [
    "HookError",
    "HookName",
    "OptionSpec",
    "Project",
    "ReleaseAbort",
    "ReleaseError",
    "ReleaseOptions",
    "TagResult",
]
