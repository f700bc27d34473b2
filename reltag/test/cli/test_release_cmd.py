from __future__ import annotations

import json
from pathlib import Path
from typing import TYPE_CHECKING

import pytest
import typer
from typer.testing import CliRunner

from reltag import __version__
from reltag.cli.app import app
from reltag.cli.context import CLIContext, build_context
from reltag.output.console import MockConsole
from reltag.release.model import Project

if TYPE_CHECKING:
    from conftest import FakeRepo

runner = CliRunner()


@pytest.fixture
def console(
    monkeypatch: pytest.MonkeyPatch, project: Project, fake_repo: FakeRepo
) -> MockConsole:
    import reltag.cli.commands.release_cmd as release_cmd

    console = MockConsole()
    ctx = CLIContext(project=project, repo=fake_repo, console=console)  # type: ignore[arg-type]

    def fake_build_context(root: Path | None = None) -> CLIContext:
        return ctx

    monkeypatch.setattr(release_cmd, "build_context", fake_build_context)
    return console


def test_version() -> None:
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.output


def test_release_with_yes(console: MockConsole, fake_repo: FakeRepo) -> None:
    fake_repo.tag_names = ["v1.0.0", "v1.0.1"]

    result = runner.invoke(app, ["release", "--yes"])

    assert result.exit_code == 0, result.output
    assert fake_repo.calls == [("tag", "v1.0.2", ""), ("push", "origin", "v1.0.2")]
    assert "Latest version: v1.0.1" in console.messages


def test_release_flags(console: MockConsole, fake_repo: FakeRepo) -> None:
    fake_repo.tag_names = ["1.4.2"]

    result = runner.invoke(
        app, ["release", "-y", "--local", "--major", "-a", "Version %@", "-r", "ignored"]
    )

    assert result.exit_code == 0, result.output
    assert fake_repo.calls == [("tag", "2.0.0", "Version 2.0.0")]


def test_prerelease_flags(console: MockConsole, fake_repo: FakeRepo) -> None:
    fake_repo.tag_names = ["v1.4.2"]

    result = runner.invoke(app, ["release", "-y", "-l", "--preminor", "--preid", "rc"])

    assert result.exit_code == 0, result.output
    assert fake_repo.calls == [("tag", "v1.5.0-rc.0", "")]


def test_prompt_answered_from_stdin(console: MockConsole, fake_repo: FakeRepo) -> None:
    fake_repo.tag_names = ["v1.0.0"]

    result = runner.invoke(app, ["release", "--tag", "v9.9.9"], input="y\n")

    assert result.exit_code == 0, result.output
    assert "About to create tag 'v9.9.9' and push to remote 'origin', proceed?" in result.output
    assert fake_repo.mutations == ["tag", "push"]


def test_prompt_declined_exits_aborted(console: MockConsole, fake_repo: FakeRepo) -> None:
    fake_repo.tag_names = ["v1.0.0"]
    fake_repo.status_text = "M  app/foo.js\n"

    result = runner.invoke(app, ["release"], input="n\n")

    assert result.exit_code == 6
    assert "error: Aborted." in console.messages
    assert fake_repo.calls == []


def test_already_tagged_exits_aborted(console: MockConsole, fake_repo: FakeRepo) -> None:
    fake_repo.head_tag = "v1.0.1"

    result = runner.invoke(app, ["release", "-y"])

    assert result.exit_code == 6
    assert console.messages == ["error: Skipped tagging, HEAD already at tag: v1.0.1"]


def test_unknown_strategy(console: MockConsole, fake_repo: FakeRepo) -> None:
    result = runner.invoke(app, ["release", "-y", "--strategy", "lunar"])

    assert result.exit_code == 1
    assert "error: Unknown versioning strategy: 'lunar'" in console.messages
    assert fake_repo.calls == []


def test_config_file_is_used(
    console: MockConsole, fake_repo: FakeRepo, project: Project
) -> None:
    config_dir = project.root / "config"
    config_dir.mkdir()
    (config_dir / "release.py").write_text(
        "from reltag.release import ReleaseAbort\n"
        "\n"
        "remote = 'upstream'\n"
        "manifest = ['app.json']\n"
        "\n"
        "def before_commit(project, tag_result):\n"
        "    raise ReleaseAbort('changelog missing for ' + tag_result.next)\n",
        encoding="utf-8",
    )
    (project.root / "app.json").write_text('{"version": "1.0.0"}', encoding="utf-8")
    fake_repo.tag_names = ["v1.0.0"]

    result = runner.invoke(app, ["release", "-y"])

    assert result.exit_code == 6
    assert console.messages == [
        "Latest version: v1.0.0",
        'error: Error encountered in `beforeCommit` hook: "changelog missing for v1.0.1"',
    ]
    data = json.loads((project.root / "app.json").read_text(encoding="utf-8"))
    assert data["version"] == "1.0.1"
    assert fake_repo.calls == []


def test_date_strategy_options(console: MockConsole, fake_repo: FakeRepo) -> None:
    result = runner.invoke(
        app, ["release", "-y", "-l", "-s", "date", "-f", "[build-]YYYY", "-z", "UTC"]
    )

    assert result.exit_code == 0, result.output
    assert len(fake_repo.calls) == 1
    name = fake_repo.calls[0][1]
    assert name.startswith("build-20")
    assert len(name) == len("build-2015")


def test_not_a_git_repository(tmp_path: Path) -> None:
    with pytest.raises(typer.Exit) as exc_info:
        build_context(tmp_path)

    assert exc_info.value.exit_code == 2
