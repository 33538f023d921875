from __future__ import annotations

import enum
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Protocol, Sequence

from .context import RunContext
from .errors import CommandError, FatalFailure, PreconditionMissing, UsageError

logger = logging.getLogger(__name__)


class FailurePolicy(enum.Enum):
    ABORT = "abort"
    SKIP_COMPONENT = "skip_component"
    TOLERATE = "tolerate"
    BEST_EFFORT = "best_effort"


class Step(Protocol):
    """A single step with a declared failure policy."""

    step_id: str
    policy: FailurePolicy

    def run(self, ctx: RunContext) -> None:
        ...


@dataclass(frozen=True)
class PipelineResult:
    ran_steps: List[str]
    skipped_steps: List[str]
    failed_steps: List[str]


def run_pipeline(*, ctx: RunContext, steps: Sequence[Step]) -> PipelineResult:
    """Run steps strictly in order, applying each step's failure policy.

    - UsageError always propagates.
    - PreconditionMissing skips the step unless the policy is ABORT.
    - Any other failure raises FatalFailure for ABORT and SKIP_COMPONENT
      steps; TOLERATE and BEST_EFFORT steps log it and the run goes on.
    """

    ran: List[str] = []
    skipped: List[str] = []
    failed: List[str] = []

    for step in steps:
        logger.info("Running step %s", step.step_id)
        try:
            step.run(ctx)
        except UsageError:
            raise
        except PreconditionMissing as e:
            if step.policy is FailurePolicy.ABORT:
                raise FatalFailure(step.step_id, e) from e
            logger.error("Error: %s", e)
            logger.warning("Skipping %s; continuing with remaining components", step.step_id)
            ctx.report.skipped.append(step.step_id)
            skipped.append(step.step_id)
            continue
        except Exception as e:
            if step.policy in (FailurePolicy.ABORT, FailurePolicy.SKIP_COMPONENT):
                logger.error("Step %s failed: %s", step.step_id, e)
                raise FatalFailure(step.step_id, e) from e
            logger.warning("Non-fatal: step %s failed: %s", step.step_id, e)
            ctx.report.tolerated.append(step.step_id)
            failed.append(step.step_id)
            continue
        ran.append(step.step_id)

    return PipelineResult(ran_steps=ran, skipped_steps=skipped, failed_steps=failed)


@contextmanager
def tolerated(ctx: RunContext, what: str) -> Iterator[None]:
    """Suspend fail-fast for one bracketed action."""
    try:
        yield
    except (CommandError, OSError) as e:
        logger.warning("Non-fatal: %s failed: %s", what, e)
        ctx.report.tolerated.append(what)
