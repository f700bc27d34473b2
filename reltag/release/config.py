"""Release configuration.

Options come from three layers, highest precedence first: explicit command
line values, the project's config files, built-in defaults. Two config files
are read from ``<project>/config/``:

- ``release.toml``: plain option values.
- ``release.py``: option values, hook functions (``init``, ``beforeCommit``,
  ``afterPush``, or ``before_commit`` and ``after_push``) and an optional
  ``strategy`` override. Wins over the TOML file.

Unknown or malformed keys are reported as warnings and ignored. A file that
cannot be read, parsed or executed fails the run.
"""

from __future__ import annotations

import importlib.util
import inspect
import tomllib
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from types import ModuleType

from reltag.core.result import Err, Ok, Result
from reltag.core.structured import (
    StrDict,
    as_str_dict,
    coerce_bool,
    coerce_str,
    coerce_str_list,
)
from reltag.output.console import ConsoleProtocol
from reltag.release.errors import ReleaseError
from reltag.release.model import (
    DEFAULT_MANIFESTS,
    DEFAULT_MESSAGE,
    DEFAULT_REMOTE,
    DEFAULT_STRATEGY,
    HookFn,
    HookName,
    OptionSpec,
    OptionType,
    ReleaseOptions,
)
from reltag.release.strategies import (
    BUILTIN_STRATEGIES,
    CustomFunction,
    CustomObject,
    NamedBuiltin,
    Strategy,
    StrategySpec,
    to_strategy,
)

CONFIG_DIR = "config"
TOML_CONFIG = "release.toml"
PY_CONFIG = "release.py"

BASE_OPTIONS: tuple[OptionSpec, ...] = (
    OptionSpec(
        "local",
        "bool",
        default=False,
        description="commit and tag locally only, do not push to a remote",
        config_allowed=True,
    ),
    OptionSpec(
        "remote",
        "str",
        default=DEFAULT_REMOTE,
        description="the git remote to push to, ignored with --local",
        config_allowed=True,
    ),
    OptionSpec("tag", "str", description="the name of the git tag to create"),
    OptionSpec(
        "annotation",
        "str",
        description="create an annotated tag with this message ('%@' is the tag name)",
        config_allowed=True,
    ),
    OptionSpec(
        "message",
        "str",
        default=DEFAULT_MESSAGE,
        description="release commit message ('%@' is the tag name)",
        config_allowed=True,
    ),
    OptionSpec(
        "manifest",
        "list",
        default=list(DEFAULT_MANIFESTS),
        description="JSON files whose top-level 'version' is set to the new tag",
        config_allowed=True,
    ),
    OptionSpec("yes", "bool", default=False, description="answer 'yes' to every prompt"),
    OptionSpec(
        "strategy",
        "str",
        default=DEFAULT_STRATEGY,
        description="strategy naming the tag: 'semver' or 'date', ignored with --tag",
        config_allowed=True,
    ),
)

_HOOK_NAMES: dict[str, HookName] = {
    **{h.value: h for h in HookName},
    "before_commit": HookName.BEFORE_COMMIT,
    "after_push": HookName.AFTER_PUSH,
}


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """What the project's config files contributed.

    Attributes:
        options: Coerced option values, keyed by option name.
        hooks: Hook callables found in release.py.
        strategy: Custom strategy override from release.py, if any.
        sources: Config files that were read.
    """

    options: Mapping[str, object] = field(default_factory=dict)
    hooks: Mapping[HookName, HookFn] = field(default_factory=dict)
    strategy: CustomFunction | CustomObject | None = None
    sources: tuple[Path, ...] = ()


def known_options(extra: Sequence[OptionSpec] = ()) -> dict[str, OptionSpec]:
    """Every option name the CLI understands, base options first."""
    out: dict[str, OptionSpec] = {o.name: o for o in BASE_OPTIONS}
    for strategy in BUILTIN_STRATEGIES.values():
        for o in strategy.available_options:
            out.setdefault(o.name, o)
    for o in extra:
        out[o.name] = o
    return out


def coerce_option(spec: OptionSpec, value: object) -> object | None:
    """Coerce ``value`` to the option's declared type; None if impossible."""
    match spec.type:
        case "bool":
            return coerce_bool(value)
        case "str":
            return coerce_str(value)
        case "list":
            return coerce_str_list(value)


# -----------------------------------------------------------------------------
# Loading
# -----------------------------------------------------------------------------


def _load_toml(path: Path) -> Result[StrDict, ReleaseError]:
    try:
        data = as_str_dict(tomllib.loads(path.read_text(encoding="utf-8")))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ReleaseError(kind="invalid_config", message=f"cannot read {path}: {e}"))
    except tomllib.TOMLDecodeError as e:
        return Err(ReleaseError(kind="invalid_config", message=f"invalid TOML in {path}: {e}"))
    if data is None:
        return Err(ReleaseError(kind="invalid_config", message=f"{path} must be a TOML table"))
    return Ok(data)


def _exported(module: ModuleType) -> StrDict:
    names = getattr(module, "__all__", None)
    if names is not None:
        return {n: getattr(module, n) for n in names if hasattr(module, n)}

    out: StrDict = {}
    for name, value in vars(module).items():
        if name.startswith("_") or isinstance(value, ModuleType) or inspect.isclass(value):
            continue
        # Helper functions are not options; only hooks and strategies may be callables.
        if callable(value) and name not in _HOOK_NAMES and name != "strategy":
            continue
        out[name] = value
    return out


def _load_python(path: Path) -> Result[StrDict, ReleaseError]:
    spec = importlib.util.spec_from_file_location("reltag_project_release_config", str(path))
    if spec is None or spec.loader is None:
        return Err(ReleaseError(kind="invalid_config", message=f"cannot load {path}"))

    module = importlib.util.module_from_spec(spec)
    try:
        spec.loader.exec_module(module)
    except Exception as e:
        return Err(
            ReleaseError(
                kind="invalid_config",
                message=f"failed to load {path}: {type(e).__name__}: {e}",
            )
        )
    return Ok(_exported(module))


def _lookup(obj: object, *names: str) -> object | None:
    for name in names:
        if isinstance(obj, Mapping):
            value = obj.get(name)
        else:
            value = getattr(obj, name, None)
        if value is not None:
            return value
    return None


def _parse_option_type(raw: object) -> OptionType | None:
    if raw is None or raw is str or raw in ("str", "string", "String"):
        return "str"
    if raw is bool or raw in ("bool", "boolean", "Boolean"):
        return "bool"
    if raw is list or raw in ("list", "array", "Array"):
        return "list"
    return None


def _parse_strategy_options(
    raw: object, console: ConsoleProtocol, source: str
) -> tuple[OptionSpec, ...]:
    specs: list[OptionSpec] = []
    items = raw if isinstance(raw, list | tuple) else []
    for item in items:
        if isinstance(item, OptionSpec):
            specs.append(OptionSpec(item.name, item.type, item.default, item.description, True))
            continue
        name = _lookup(item, "name")
        type_ = _parse_option_type(_lookup(item, "type"))
        if not isinstance(name, str) or not name or type_ is None:
            console.warning(f"invalid strategy option {item!r} in {source}, ignoring")
            continue
        default = _lookup(item, "default")
        description = _lookup(item, "description")
        specs.append(
            OptionSpec(
                name,
                type_,
                default=default,
                description=description if isinstance(description, str) else "",
                config_allowed=True,
            )
        )
    return tuple(specs)


def _parse_strategy(
    value: object, console: ConsoleProtocol, source: str
) -> CustomFunction | CustomObject | None:
    get_next_tag = _lookup(value, "get_next_tag", "getNextTag")
    if get_next_tag is not None:
        if not callable(get_next_tag):
            console.warning(f"`strategy.get_next_tag` is not a function in {source}, ignoring")
            return None
        get_latest_tag = _lookup(value, "get_latest_tag", "getLatestTag")
        if get_latest_tag is not None and not callable(get_latest_tag):
            console.warning(f"`strategy.get_latest_tag` is not a function in {source}, ignoring")
            get_latest_tag = None
        return CustomObject(
            get_next_tag=get_next_tag,
            get_latest_tag=get_latest_tag,
            available_options=_parse_strategy_options(
                _lookup(value, "available_options", "availableOptions"), console, source
            ),
        )
    if callable(value):
        return CustomFunction(fn=value)

    console.warning(
        f"`strategy` in {source} must be a strategy name, a function, "
        "or expose `get_next_tag`, ignoring"
    )
    return None


def load_release_config(
    project_root: Path, console: ConsoleProtocol
) -> Result[ReleaseConfig, ReleaseError]:
    """Read and validate the project's release config files.

    Missing files are fine and yield an empty config.
    """
    config_dir = project_root / CONFIG_DIR
    raw: StrDict = {}
    sources: list[Path] = []

    loaders = ((config_dir / TOML_CONFIG, _load_toml), (config_dir / PY_CONFIG, _load_python))
    for path, loader in loaders:
        if not path.is_file():
            continue
        loaded = loader(path)
        if isinstance(loaded, Err):
            return loaded
        raw.update(loaded.value)
        sources.append(path)

    source = " / ".join(f"{CONFIG_DIR}/{p.name}" for p in sources) or f"{CONFIG_DIR}/{PY_CONFIG}"

    hooks: dict[HookName, HookFn] = {}
    for name, hook in _HOOK_NAMES.items():
        value = raw.pop(name, None)
        if value is None:
            continue
        if hook in hooks:
            console.warning(
                f"`{name}` duplicates the `{hook.value}` hook in {source}, ignoring `{name}`"
            )
            continue
        if callable(value):
            hooks[hook] = value
        else:
            console.warning(f"`{name}` is not a function in {source}, ignoring")

    strategy: CustomFunction | CustomObject | None = None
    strategy_value = raw.get("strategy")
    if strategy_value is not None and not isinstance(strategy_value, str):
        raw.pop("strategy")
        strategy = _parse_strategy(strategy_value, console, source)

    extra = strategy.available_options if isinstance(strategy, CustomObject) else ()
    known = known_options(extra)

    options: StrDict = {}
    for name, value in raw.items():
        spec = known.get(name)
        if spec is None:
            console.warning(f"invalid option `{name}` in {source}, ignoring")
            continue
        if not spec.config_allowed:
            console.warning(f"cannot specify option `{name}` in {source}, ignoring")
            continue
        coerced = coerce_option(spec, value)
        if coerced is None:
            console.warning(f"option `{name}` in {source} must be of type {spec.type}, ignoring")
            continue
        options[name] = coerced

    return Ok(
        ReleaseConfig(
            options=options,
            hooks=hooks,
            strategy=strategy,
            sources=tuple(sources),
        )
    )


# -----------------------------------------------------------------------------
# Resolution
# -----------------------------------------------------------------------------


def parse_option_pairs(
    pairs: Sequence[str], specs: Mapping[str, OptionSpec]
) -> Result[StrDict, ReleaseError]:
    """Parse ``name=value`` pairs given with ``--option``."""
    out: StrDict = {}
    for item in pairs:
        if "=" not in item:
            return Err(
                ReleaseError(
                    kind="invalid_option",
                    message=f"invalid --option (expected name=value): {item}",
                )
            )
        name, value = (s.strip() for s in item.split("=", 1))
        spec = specs.get(name)
        if spec is None:
            return Err(
                ReleaseError(
                    kind="invalid_option",
                    message=f"unknown strategy option: {name}",
                    hint=f"known: {', '.join(sorted(specs)) or 'none'}",
                )
            )
        coerced = coerce_option(spec, value)
        if coerced is None:
            return Err(
                ReleaseError(
                    kind="invalid_option",
                    message=f"option `{name}` must be of type {spec.type}: {value!r}",
                )
            )
        out[name] = coerced
    return Ok(out)


def _pick(
    name: str, cli: Mapping[str, object], config: Mapping[str, object], default: object
) -> object:
    value = cli.get(name)
    if value is not None:
        return value
    value = config.get(name)
    if value is not None:
        return value
    return default


def resolve_options(
    cli: Mapping[str, object],
    config: ReleaseConfig,
    option_pairs: Sequence[str] = (),
) -> Result[tuple[ReleaseOptions, Strategy], ReleaseError]:
    """Merge command line values over config over defaults.

    ``cli`` maps option names to values; None means "not given on the command
    line". An explicit ``--strategy`` beats a custom strategy from release.py.
    """
    spec: StrategySpec
    cli_strategy = cli.get("strategy")
    if isinstance(cli_strategy, str):
        spec = NamedBuiltin(cli_strategy)
    elif config.strategy is not None:
        spec = config.strategy
    else:
        name = config.options.get("strategy")
        spec = NamedBuiltin(name if isinstance(name, str) else DEFAULT_STRATEGY)

    strategy_r = to_strategy(spec)
    if isinstance(strategy_r, Err):
        return strategy_r
    strategy = strategy_r.value

    option_specs = {o.name: o for o in strategy.available_options}
    pairs_r = parse_option_pairs(option_pairs, option_specs)
    if isinstance(pairs_r, Err):
        return pairs_r
    cli_values: StrDict = {**cli, **pairs_r.value}

    strategy_options: StrDict = {}
    for o in strategy.available_options:
        value = _pick(o.name, cli_values, config.options, o.default)
        if value is not None:
            strategy_options[o.name] = value

    manifest = _pick("manifest", cli_values, config.options, DEFAULT_MANIFESTS)
    annotation = _pick("annotation", cli_values, config.options, None)
    tag = cli_values.get("tag")

    options = ReleaseOptions(
        local=bool(_pick("local", cli_values, config.options, False)),
        remote=str(_pick("remote", cli_values, config.options, DEFAULT_REMOTE)),
        tag=str(tag) if tag else None,
        annotation=str(annotation) if annotation else None,
        message=str(_pick("message", cli_values, config.options, DEFAULT_MESSAGE)),
        manifest=tuple(str(m) for m in manifest) if isinstance(manifest, list | tuple) else (),
        yes=bool(_pick("yes", cli_values, config.options, False)),
        strategy=strategy.name,
        strategy_options=strategy_options,
    )
    return Ok((options, strategy))
