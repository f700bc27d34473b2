from __future__ import annotations

import asyncio
from pathlib import Path
from typing import NoReturn

import typer

from reltag.cli.context import build_context
from reltag.core.result import Err
from reltag.output.console import ConsoleProtocol
from reltag.output.errors import print_release_error, release_error_exit_code
from reltag.release.config import load_release_config, resolve_options
from reltag.release.errors import ReleaseError
from reltag.release.orchestrator import ReleaseOrchestrator


def _exit_release(error: ReleaseError, console: ConsoleProtocol) -> NoReturn:
    print_release_error(error, console)
    raise typer.Exit(code=release_error_exit_code(error))


def _confirm(message: str) -> bool:
    return typer.confirm(typer.style(message, fg="yellow"), default=False)


def release(
    local: bool | None = typer.Option(
        None,
        "--local/--no-local",
        "-l",
        help="Commit and tag locally only (nothing is pushed)",
    ),
    remote: str | None = typer.Option(
        None, "--remote", "-r", help="Remote to push to, ignored with --local (default: origin)"
    ),
    tag: str | None = typer.Option(None, "--tag", "-t", help="Name of the tag to create"),
    annotation: str | None = typer.Option(
        None,
        "--annotation",
        "-a",
        help="Create an annotated tag with this message ('%@' is the tag name)",
    ),
    message: str | None = typer.Option(
        None,
        "--message",
        "-m",
        help="Release commit message ('%@' is the tag name) (default: Released %@)",
    ),
    manifest: list[str] | None = typer.Option(
        None,
        "--manifest",
        help="JSON file whose 'version' follows the tag (repeatable) "
        "(default: package.json, bower.json)",
    ),
    yes: bool = typer.Option(False, "--yes", "-y", help="Answer 'yes' to every prompt"),
    strategy: str | None = typer.Option(
        None,
        "--strategy",
        "-s",
        help="Tag naming strategy: semver or date, ignored with --tag (default: semver)",
    ),
    major: bool = typer.Option(False, "--major", "-j", help="semver: bump the major version"),
    minor: bool = typer.Option(
        False, "--minor", "-i", help="semver: bump the minor version, ignored with --major"
    ),
    premajor: bool = typer.Option(False, "--premajor", help="semver: prerelease of next major"),
    preminor: bool = typer.Option(False, "--preminor", help="semver: prerelease of next minor"),
    prepatch: bool = typer.Option(False, "--prepatch", help="semver: prerelease of next patch"),
    prerelease: bool = typer.Option(
        False, "--prerelease", "-e", help="semver: advance or start a prerelease"
    ),
    preid: str | None = typer.Option(
        None, "--preid", help="semver: prerelease identifier, e.g. beta"
    ),
    date_format: str | None = typer.Option(
        None, "--format", "-f", help="date: tag format (default: YYYY.MM.DD)"
    ),
    timezone: str | None = typer.Option(
        None, "--timezone", "-z", help="date: timezone of the current date (default: UTC)"
    ),
    option: list[str] = typer.Option(
        [], "--option", "-o", help="Custom strategy option (name=value, repeatable)"
    ),
    cwd: Path | None = typer.Option(None, "--cwd", help="Project root (default: current dir)"),
) -> None:
    """Create a new git tag at HEAD."""
    ctx = build_context(cwd)

    config = load_release_config(ctx.project.root, ctx.console)
    if isinstance(config, Err):
        _exit_release(config.error, ctx.console)

    cli_values: dict[str, object] = {
        "local": local,
        "remote": remote,
        "tag": tag,
        "annotation": annotation,
        "message": message,
        "manifest": list(manifest) if manifest else None,
        "yes": yes,
        "strategy": strategy,
        "major": major or None,
        "minor": minor or None,
        "premajor": premajor or None,
        "preminor": preminor or None,
        "prepatch": prepatch or None,
        "prerelease": prerelease or None,
        "preid": preid,
        "format": date_format,
        "timezone": timezone,
    }
    resolved = resolve_options(cli_values, config.value, option)
    if isinstance(resolved, Err):
        _exit_release(resolved.error, ctx.console)
    options, active_strategy = resolved.value

    orchestrator = ReleaseOrchestrator(
        project=ctx.project,
        options=options,
        strategy=active_strategy,
        repo=ctx.repo,
        console=ctx.console,
        confirm=_confirm,
        hooks=config.value.hooks,
    )
    result = asyncio.run(orchestrator.run())
    if isinstance(result, Err):
        _exit_release(result.error, ctx.console)
