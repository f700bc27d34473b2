"""Lifecycle hook dispatch.

Hooks are plain callables ``hook(project, tag_result)`` taken from
``config/release.py``. They may be coroutine functions or return any awaitable;
a failure raised synchronously and a failure raised while awaiting are treated
the same way.
"""

from __future__ import annotations

import inspect
from collections.abc import Mapping

from reltag.core.result import Err, Ok, Result
from reltag.release.errors import HookError, ReleaseAbort, ReleaseError, hook_failure_message
from reltag.release.model import HookFn, HookName, Project, TagResult


async def execute_hook(
    hooks: Mapping[HookName, HookFn],
    name: HookName,
    project: Project,
    tag_result: TagResult,
) -> Result[None, ReleaseError]:
    """Run the hook registered under ``name``, if any.

    Returns:
        Ok(None) when there is no hook or it completed,
        Err(ReleaseError) when it raised ``ReleaseAbort``.

    Raises:
        HookError: any other exception escaped the hook; the original is
            chained as ``__cause__`` so its traceback is kept.
    """
    hook = hooks.get(name)
    if hook is None:
        return Ok(None)

    try:
        value = hook(project, tag_result)
        if inspect.isawaitable(value):
            await value
    except ReleaseAbort as e:
        return Err(
            ReleaseError(
                kind="hook_failed",
                message=hook_failure_message(name.value, e.message),
                hint=e.hint,
            )
        )
    except Exception as e:
        raise HookError(name.value, str(e)) from e

    return Ok(None)
