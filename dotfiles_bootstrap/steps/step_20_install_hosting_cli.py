from __future__ import annotations

from ..context import BootstrapCtx
from ..lib.installer import ensure_installed
from ..lib.tools import GH
from ..models import RunOutcome


class InstallHostingCliStep:
    step_id = "20_install_hosting_cli"
    fatal = True
    interactive = False

    def run(self, ctx: BootstrapCtx) -> RunOutcome:
        return ensure_installed(ctx, GH, step_id=self.step_id)
