from __future__ import annotations

from ..context import BootstrapCtx
from ..lib.repo import sync_repository
from ..models import OutcomeStatus, RunOutcome


class SyncDotfilesStep:
    step_id = "50_sync_dotfiles"
    fatal = True
    interactive = False

    def run(self, ctx: BootstrapCtx) -> RunOutcome:
        repo_url = ctx.target_repo_url
        action, warnings = sync_repository(ctx, repo_url)
        return RunOutcome(
            self.step_id,
            OutcomeStatus.COMPLETED,
            f"{action.value} {repo_url}",
            action=action.value,
            warnings=warnings,
        )
