from __future__ import annotations

from ..context import BootstrapCtx
from ..lib.installer import ensure_installed
from ..lib.tools import HOMEBREW
from ..models import OutcomeStatus, PlatformId, RunOutcome


class BootstrapPackageManagerStep:
    """Optionally install Homebrew so later steps can use it.

    Failure is not fatal: tool installs fall back to direct download.
    """

    step_id = "15_bootstrap_package_manager"
    fatal = False
    interactive = False

    def run(self, ctx: BootstrapCtx) -> RunOutcome:
        if not ctx.bootstrap_package_manager:
            return RunOutcome(self.step_id, OutcomeStatus.SKIPPED, "package manager bootstrap not requested")
        if ctx.platform is not PlatformId.MACOS:
            return RunOutcome(
                self.step_id,
                OutcomeStatus.SKIPPED,
                f"no package manager bootstrap for {(ctx.platform or PlatformId.UNKNOWN).value}",
            )
        return ensure_installed(ctx, HOMEBREW, step_id=self.step_id)
