from __future__ import annotations

from ..context import BootstrapCtx
from ..lib.installer import ensure_installed
from ..lib.tools import YADM
from ..models import RunOutcome


class InstallDotfilesManagerStep:
    step_id = "30_install_dotfiles_manager"
    fatal = True
    interactive = False

    def run(self, ctx: BootstrapCtx) -> RunOutcome:
        return ensure_installed(ctx, YADM, step_id=self.step_id)
