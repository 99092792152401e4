from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, List, Optional, Protocol, Sequence

from .errors import BootstrapError
from .models import OutcomeStatus, RunOutcome

if TYPE_CHECKING:  # pragma: no cover
    from .context import BootstrapCtx

logger = logging.getLogger(__name__)


class Step(Protocol):
    """A single idempotent step.

    ``fatal`` steps stop the run when they fail; ``interactive`` steps may
    block waiting for the operator.
    """

    step_id: str
    fatal: bool
    interactive: bool

    def run(self, ctx: "BootstrapCtx") -> RunOutcome:
        ...


@dataclass(frozen=True)
class PipelineResult:
    outcomes: List[RunOutcome] = field(default_factory=list)
    failed_step: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failed_step is None

    def outcome(self, step_id: str) -> Optional[RunOutcome]:
        for o in self.outcomes:
            if o.step_id == step_id:
                return o
        return None


def run_pipeline(*, ctx: "BootstrapCtx", steps: Sequence[Step]) -> PipelineResult:
    """Run steps in order, stopping at the first fatal failure.

    Nothing is rolled back: completed steps stay in place and the next run
    re-probes them.
    """

    outcomes: List[RunOutcome] = []

    for step in steps:
        if step.interactive:
            logger.info("Step %s may need your input", step.step_id)
        logger.debug("Running step %s", step.step_id)

        try:
            outcome = step.run(ctx)
        except BootstrapError as e:
            outcome = RunOutcome(step.step_id, OutcomeStatus.FAILED, str(e), hint=e.hint)

        outcomes.append(outcome)
        if not outcome.failed:
            continue

        if step.fatal:
            logger.error("Step %s failed: %s", step.step_id, outcome.message)
            if outcome.hint:
                logger.error("%s", outcome.hint)
            return PipelineResult(outcomes=outcomes, failed_step=step.step_id)

        logger.warning("Optional step %s failed: %s", step.step_id, outcome.message)

    return PipelineResult(outcomes=outcomes)
