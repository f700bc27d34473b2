from __future__ import annotations

from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass
from typing import TypeVar

from reltag.core.result import Err, Ok, Result
from reltag.release.errors import ReleaseError

S = TypeVar("S")


@dataclass(frozen=True, slots=True)
class StepAdvance[S]:
    session: S


@dataclass(frozen=True, slots=True)
class StepFinish:
    pass


StepOutcome = StepAdvance[S] | StepFinish
StepHandler = Callable[[S], Awaitable[Result[StepOutcome[S], ReleaseError]]]
GetStep = Callable[[S], str]


FINISH = StepFinish()


def advance[S](session: S) -> StepAdvance[S]:
    return StepAdvance(session=session)


async def run_state_machine(
    *,
    initial_state: S,
    get_step: GetStep[S],
    handlers: Mapping[str, StepHandler[S]],
) -> Result[S, ReleaseError]:
    """Await handlers one at a time until one finishes or fails.

    Returns the final session on success.
    """
    current = initial_state

    while True:
        step = get_step(current)
        handler = handlers.get(step)
        if handler is None:
            return Err(
                ReleaseError(
                    kind="invalid_step",
                    message=f"unknown release step: {step}",
                )
            )

        outcome = await handler(current)
        if isinstance(outcome, Err):
            return outcome

        if isinstance(outcome.value, StepFinish):
            return Ok(current)

        current = outcome.value.session
