from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from reltag.core.errors import ErrorCode
from reltag.git.repository import Repository
from reltag.output.console import ConsoleProtocol, RichConsole
from reltag.release.model import Project


@dataclass(frozen=True, slots=True)
class CLIContext:
    project: Project
    repo: Repository
    console: ConsoleProtocol


def build_context(root: Path | None = None) -> CLIContext:
    try:
        project = Project.at(root or Path.cwd())
    except OSError as e:
        typer.echo(f"error: invalid project directory: {e}", err=True)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    repo = Repository(project.root)
    if not project.root.is_dir() or not repo.exists():
        typer.echo(f"error: '{project.root}' is not a git repository", err=True)
        raise typer.Exit(code=int(ErrorCode.ENV_ERROR))

    return CLIContext(project=project, repo=repo, console=RichConsole())
