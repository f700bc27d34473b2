"""Versioning strategies.

A strategy is described by a ``StrategySpec`` variant and normalized once into a
``Strategy`` that the orchestrator drives the same way regardless of origin:

- ``NamedBuiltin("semver")`` / ``NamedBuiltin("date")``
- ``CustomFunction(fn)``: ``fn(project, tags, options)`` names the next tag
- ``CustomObject(get_next_tag, get_latest_tag, available_options)``

Custom callables may be coroutines and may return either a tag string or a
mapping / ``TagResult`` carrying ``next`` and optionally ``latest``.
"""

from __future__ import annotations

import inspect
from collections.abc import Callable, Mapping, Sequence
from dataclasses import dataclass

from reltag.core.result import Err, Ok, Result
from reltag.release.errors import ReleaseAbort, ReleaseError
from reltag.release.model import OptionSpec, Project, TagResult

from . import date, semver

__all__ = [
    "BUILTIN_STRATEGIES",
    "CustomFunction",
    "CustomObject",
    "NamedBuiltin",
    "Strategy",
    "StrategySpec",
    "to_strategy",
]

StrategyFn = Callable[[Project, Sequence[str], Mapping[str, object]], object]


@dataclass(frozen=True, slots=True)
class NamedBuiltin:
    name: str


@dataclass(frozen=True, slots=True)
class CustomFunction:
    fn: StrategyFn


@dataclass(frozen=True, slots=True)
class CustomObject:
    get_next_tag: StrategyFn
    get_latest_tag: StrategyFn | None = None
    available_options: tuple[OptionSpec, ...] = ()


StrategySpec = NamedBuiltin | CustomFunction | CustomObject


async def _call(
    fn: StrategyFn, project: Project, tags: Sequence[str], options: Mapping[str, object]
) -> object:
    value = fn(project, list(tags), dict(options))
    if inspect.isawaitable(value):
        value = await value
    return value


def _invalid(value: object) -> ReleaseError:
    return ReleaseError(
        kind="invalid_strategy_result",
        message=f"Versioning strategy must produce a non-empty tag name, got {value!r}",
    )


@dataclass(frozen=True, slots=True)
class Strategy:
    """A normalized strategy ready to name the next tag."""

    name: str
    get_next_tag: StrategyFn
    get_latest_tag: StrategyFn | None = None
    available_options: tuple[OptionSpec, ...] = ()

    async def resolve(
        self,
        project: Project,
        tags: Sequence[str],
        options: Mapping[str, object],
    ) -> Result[TagResult, ReleaseError]:
        try:
            produced = await _call(self.get_next_tag, project, tags, options)
            latest: object = None
            if isinstance(produced, TagResult):
                latest, produced = produced.latest, produced.next
            elif isinstance(produced, Mapping):
                latest, produced = produced.get("latest"), produced.get("next")
            if latest is None and self.get_latest_tag is not None:
                latest = await _call(self.get_latest_tag, project, tags, options)
        except ReleaseAbort as e:
            return Err(
                ReleaseError(kind="invalid_strategy_result", message=e.message, hint=e.hint)
            )

        if not isinstance(produced, str) or not produced:
            return Err(_invalid(produced))
        if latest is not None and not isinstance(latest, str):
            return Err(_invalid(latest))
        return Ok(TagResult(next=produced, latest=latest or None))


BUILTIN_STRATEGIES: dict[str, Strategy] = {
    "semver": Strategy(
        name="semver",
        get_next_tag=semver.get_next_tag,
        get_latest_tag=semver.get_latest_tag,
        available_options=semver.AVAILABLE_OPTIONS,
    ),
    "date": Strategy(
        name="date",
        get_next_tag=date.get_next_tag,
        available_options=date.AVAILABLE_OPTIONS,
    ),
}


def to_strategy(
    spec: StrategySpec,
    builtins: Mapping[str, Strategy] = BUILTIN_STRATEGIES,
) -> Result[Strategy, ReleaseError]:
    """Normalize a spec variant; unknown built-in names are a user error."""
    match spec:
        case NamedBuiltin(name=name):
            strategy = builtins.get(name)
            if strategy is None:
                return Err(
                    ReleaseError(
                        kind="unknown_strategy",
                        message=f"Unknown versioning strategy: '{name}'",
                        hint=f"available: {', '.join(sorted(builtins))}",
                    )
                )
            return Ok(strategy)
        case CustomFunction(fn=fn):
            return Ok(Strategy(name="custom", get_next_tag=fn))
        case CustomObject(
            get_next_tag=get_next_tag,
            get_latest_tag=get_latest_tag,
            available_options=available_options,
        ):
            return Ok(
                Strategy(
                    name="custom",
                    get_next_tag=get_next_tag,
                    get_latest_tag=get_latest_tag,
                    available_options=available_options,
                )
            )
