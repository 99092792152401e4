from __future__ import annotations

import logging

from ..context import BootstrapCtx
from ..lib.osdetect import detect_current_platform
from ..models import OutcomeStatus, PlatformId, RunOutcome

logger = logging.getLogger(__name__)


class DetectPlatformStep:
    step_id = "10_detect_platform"
    fatal = True
    interactive = False

    def run(self, ctx: BootstrapCtx) -> RunOutcome:
        # Computed once per run; a pre-set platform (tests, overrides) wins.
        if ctx.platform is None:
            ctx.platform = detect_current_platform()

        logger.info("Detected operating system: %s", ctx.platform.value)
        if ctx.platform is PlatformId.UNKNOWN:
            logger.warning("Unrecognised operating system; only platform-independent installs are available")
        return RunOutcome(self.step_id, OutcomeStatus.COMPLETED, ctx.platform.value)
