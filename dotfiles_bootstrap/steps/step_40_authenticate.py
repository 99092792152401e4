from __future__ import annotations

import logging
from typing import Optional

from ..context import BootstrapCtx
from ..lib.auth import LoginProvider, TerminalLogin, ensure_authenticated
from ..models import OutcomeStatus, RunOutcome

logger = logging.getLogger(__name__)


class AuthenticateStep:
    step_id = "40_authenticate"
    fatal = True
    interactive = True

    def __init__(self, login: Optional[LoginProvider] = None) -> None:
        self.login = login or TerminalLogin()

    def run(self, ctx: BootstrapCtx) -> RunOutcome:
        if ctx.skip_auth:
            logger.info("Skipping GitHub authentication (--skip-auth)")
            return RunOutcome(self.step_id, OutcomeStatus.SKIPPED, "authentication skipped")

        logged_in = ensure_authenticated(ctx, self.login)
        return RunOutcome(
            self.step_id,
            OutcomeStatus.COMPLETED,
            "logged in" if logged_in else "existing session",
            action="login" if logged_in else None,
        )
