"""Release pipeline.

One run walks these steps in order; any step may end the run early:

    check_at_tag -> resolve_tag -> init_hook -> dirty_check -> report_latest
    -> update_manifests -> before_commit_hook -> commit -> prompt_tag
    -> create_tag -> push -> after_push_hook

Expected failures (HEAD already tagged, a declined prompt, a hook raising
``ReleaseAbort``, git refusing a command) end the run with ``Err``. Unexpected
exceptions, including ``HookError``, propagate to the caller.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace

from reltag.core.result import Err, Ok, Result
from reltag.git.repository import GitError, VcsProtocol, has_modifications
from reltag.output.console import ConsoleProtocol
from reltag.release.errors import ReleaseError
from reltag.release.fsm import FINISH, StepHandler, StepOutcome, advance, run_state_machine
from reltag.release.hooks import execute_hook
from reltag.release.manifest import update_manifests
from reltag.release.model import (
    HookFn,
    HookName,
    Project,
    ReleaseOptions,
    TagResult,
    substitute_tag,
)
from reltag.release.strategies import Strategy

ConfirmFn = Callable[[str], bool]

STEPS: tuple[str, ...] = (
    "check_at_tag",
    "resolve_tag",
    "init_hook",
    "dirty_check",
    "report_latest",
    "update_manifests",
    "before_commit_hook",
    "commit",
    "prompt_tag",
    "create_tag",
    "push",
    "after_push_hook",
)

ABORTED = ReleaseError(kind="aborted", message="Aborted.")


@dataclass(frozen=True, slots=True)
class ReleaseSession:
    """State carried between steps.

    Attributes:
        step: The step to run next.
        tags: Tag result, set once resolve_tag has run.
        push_queue: Refs to push, in the order they were created.
    """

    step: str = STEPS[0]
    tags: TagResult | None = None
    push_queue: tuple[str, ...] = ()


type StepResult = Result[StepOutcome[ReleaseSession], ReleaseError]


def _git_failed(e: GitError) -> ReleaseError:
    return ReleaseError(kind="git_failed", message=f"git {e.command} failed: {e.message}")


def _require_tags(session: ReleaseSession) -> Result[TagResult, ReleaseError]:
    if session.tags is None:
        return Err(
            ReleaseError(
                kind="invalid_step",
                message=f"step {session.step} needs a tag, but resolve_tag has not run",
            )
        )
    return Ok(session.tags)


class ReleaseOrchestrator:
    """Drives one release of ``project`` through ``repo``."""

    def __init__(
        self,
        *,
        project: Project,
        options: ReleaseOptions,
        strategy: Strategy,
        repo: VcsProtocol,
        console: ConsoleProtocol,
        confirm: ConfirmFn,
        hooks: Mapping[HookName, HookFn] | None = None,
    ) -> None:
        self.project = project
        self.options = options
        self.strategy = strategy
        self.repo = repo
        self.console = console
        self.hooks: Mapping[HookName, HookFn] = hooks or {}
        self._confirm = confirm

    async def run(self) -> Result[ReleaseSession, ReleaseError]:
        handlers: dict[str, StepHandler[ReleaseSession]] = {
            name: getattr(self, f"_{name}") for name in STEPS
        }
        return await run_state_machine(
            initial_state=ReleaseSession(),
            get_step=lambda s: s.step,
            handlers=handlers,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _next(session: ReleaseSession, **changes: object) -> StepResult:
        index = STEPS.index(session.step)
        if index + 1 == len(STEPS):
            return Ok(FINISH)
        return Ok(advance(replace(session, step=STEPS[index + 1], **changes)))

    async def _proceed(self, message: str) -> bool:
        if self.options.yes:
            return True
        return await asyncio.to_thread(self._confirm, f"{message}, proceed?")

    async def _hook(self, name: HookName, session: ReleaseSession) -> StepResult:
        tags = _require_tags(session)
        if isinstance(tags, Err):
            return tags
        result = await execute_hook(self.hooks, name, self.project, tags.value)
        if isinstance(result, Err):
            return result
        return self._next(session)

    async def _is_dirty(self) -> Result[bool, ReleaseError]:
        status = await self.repo.status()
        if isinstance(status, Err):
            return Err(_git_failed(status.error))
        return Ok(has_modifications(status.value))

    # -------------------------------------------------------------------------
    # Steps
    # -------------------------------------------------------------------------

    async def _check_at_tag(self, session: ReleaseSession) -> StepResult:
        current = await self.repo.current_tag()
        if isinstance(current, Err):
            return Err(_git_failed(current.error))
        if current.value:
            return Err(
                ReleaseError(
                    kind="already_tagged",
                    message=f"Skipped tagging, HEAD already at tag: {current.value}",
                )
            )
        return self._next(session)

    async def _resolve_tag(self, session: ReleaseSession) -> StepResult:
        if self.options.tag:
            return self._next(session, tags=TagResult(next=self.options.tag))

        tags = await self.repo.tags()
        if isinstance(tags, Err):
            return Err(_git_failed(tags.error))

        names = [t.name for t in tags.value]
        resolved = await self.strategy.resolve(self.project, names, self.options.as_dict())
        if isinstance(resolved, Err):
            return resolved
        return self._next(session, tags=resolved.value)

    async def _init_hook(self, session: ReleaseSession) -> StepResult:
        return await self._hook(HookName.INIT, session)

    async def _dirty_check(self, session: ReleaseSession) -> StepResult:
        dirty = await self._is_dirty()
        if isinstance(dirty, Err):
            return dirty
        if dirty.value:
            proceed = await self._proceed(
                "Your working tree contains modifications that will be added to the release commit"
            )
            if not proceed:
                return Err(ABORTED)
        return self._next(session)

    async def _report_latest(self, session: ReleaseSession) -> StepResult:
        tags = _require_tags(session)
        if isinstance(tags, Err):
            return tags
        latest = tags.value.latest
        if latest:
            self.console.success(f"Latest version: {latest}")
        return self._next(session)

    async def _update_manifests(self, session: ReleaseSession) -> StepResult:
        tags = _require_tags(session)
        if isinstance(tags, Err):
            return tags
        updated = await update_manifests(self.project.root, self.options.manifest, tags.value.next)
        if isinstance(updated, Err):
            return updated
        return self._next(session)

    async def _before_commit_hook(self, session: ReleaseSession) -> StepResult:
        return await self._hook(HookName.BEFORE_COMMIT, session)

    async def _commit(self, session: ReleaseSession) -> StepResult:
        tags = _require_tags(session)
        if isinstance(tags, Err):
            return tags

        # The tree can be clean here (nothing to commit); that is not an error.
        dirty = await self._is_dirty()
        if isinstance(dirty, Err):
            return dirty
        if not dirty.value:
            return self._next(session)

        branch = await self.repo.current_branch()
        if isinstance(branch, Err):
            return Err(_git_failed(branch.error))
        if not branch.value:
            return Err(
                ReleaseError(
                    kind="no_branch",
                    message="Must have a branch checked out to commit to",
                    hint="check out a branch, or release with --tag on a clean tree",
                )
            )

        message = substitute_tag(self.options.message, tags.value.next)
        committed = await self.repo.commit_all(message)
        if isinstance(committed, Err):
            return Err(_git_failed(committed.error))

        self.console.success(f"Successfully committed changes '{message}' locally.")
        return self._next(session, push_queue=(*session.push_queue, branch.value))

    async def _prompt_tag(self, session: ReleaseSession) -> StepResult:
        tags = _require_tags(session)
        if isinstance(tags, Err):
            return tags
        message = f"About to create tag '{tags.value.next}'"
        if not self.options.local:
            message += f" and push to remote '{self.options.remote}'"
        if not await self._proceed(message):
            return Err(ABORTED)
        return self._next(session)

    async def _create_tag(self, session: ReleaseSession) -> StepResult:
        tags = _require_tags(session)
        if isinstance(tags, Err):
            return tags
        tag = tags.value.next
        annotation = (
            substitute_tag(self.options.annotation, tag) if self.options.annotation else None
        )

        created = await self.repo.create_tag(tag, annotation)
        if isinstance(created, Err):
            return Err(_git_failed(created.error))

        self.console.success(f"Successfully created git tag '{tag}' locally.")
        return self._next(session, push_queue=(*session.push_queue, tag))

    async def _push(self, session: ReleaseSession) -> StepResult:
        if self.options.local or not session.push_queue:
            return self._next(session)

        remote = self.options.remote

        async def push_one(ref: str) -> Result[None, GitError]:
            pushed = await self.repo.push(remote, ref)
            if not isinstance(pushed, Err):
                self.console.success(f"Successfully pushed '{ref}' to remote '{remote}'.")
            return pushed

        results = await asyncio.gather(*(push_one(ref) for ref in session.push_queue))
        for pushed in results:
            if isinstance(pushed, Err):
                return Err(_git_failed(pushed.error))
        return self._next(session)

    async def _after_push_hook(self, session: ReleaseSession) -> StepResult:
        return await self._hook(HookName.AFTER_PUSH, session)
