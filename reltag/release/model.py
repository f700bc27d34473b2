from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Literal

OptionType = Literal["bool", "str", "list"]


@dataclass(frozen=True, slots=True)
class Project:
    """The project being released. Read-only for strategies and hooks."""

    root: Path
    name: str

    @classmethod
    def at(cls, root: Path) -> Project:
        root = root.resolve()
        return cls(root=root, name=root.name)


@dataclass(frozen=True, slots=True)
class TagResult:
    next: str
    latest: str | None = None


@dataclass(frozen=True, slots=True)
class OptionSpec:
    """Declarative description of a release option.

    ``config_allowed`` marks options that may be set from config/release.*;
    the rest are command-line only.
    """

    name: str
    type: OptionType
    default: object = None
    description: str = ""
    config_allowed: bool = False


class HookName(Enum):
    INIT = "init"
    BEFORE_COMMIT = "beforeCommit"
    AFTER_PUSH = "afterPush"


HookFn = Callable[[Project, TagResult], object | Awaitable[object]]
HookSet = Mapping[HookName, HookFn]


DEFAULT_REMOTE = "origin"
DEFAULT_MESSAGE = "Released %@"
DEFAULT_MANIFESTS = ("package.json", "bower.json")
DEFAULT_STRATEGY = "semver"


@dataclass(frozen=True, slots=True)
class ReleaseOptions:
    """Fully resolved options for one release run.

    Attributes:
        local: Commit and tag locally only, never push.
        remote: Remote that receives the branch and tag.
        tag: Explicit tag name; when set the strategy is not consulted.
        annotation: Annotation template ("%@" is the tag); None for lightweight tags.
        message: Commit message template ("%@" is the tag).
        manifest: JSON files whose "version" follows the tag.
        yes: Answer yes to every confirmation prompt.
        strategy: Name of the built-in strategy in use.
        strategy_options: Values for strategy-specific options.
    """

    local: bool = False
    remote: str = DEFAULT_REMOTE
    tag: str | None = None
    annotation: str | None = None
    message: str = DEFAULT_MESSAGE
    manifest: tuple[str, ...] = DEFAULT_MANIFESTS
    yes: bool = False
    strategy: str = DEFAULT_STRATEGY
    strategy_options: Mapping[str, object] = field(default_factory=dict)

    def as_dict(self) -> dict[str, object]:
        """Flat view handed to strategies: base options plus strategy options."""
        out: dict[str, object] = {
            "local": self.local,
            "remote": self.remote,
            "tag": self.tag,
            "annotation": self.annotation,
            "message": self.message,
            "manifest": list(self.manifest),
            "yes": self.yes,
            "strategy": self.strategy,
        }
        out.update(self.strategy_options)
        return out


def substitute_tag(template: str, tag: str) -> str:
    """Replace every "%@" in ``template`` with ``tag``."""
    return template.replace("%@", tag)
