from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping, Optional, Sequence, Set

from .config import BootstrapConfig
from .lib.command import CmdResult, Runner, run_cmd
from .lib.probe import ResolutionContext
from .models import PlatformId


@dataclass
class BootstrapCtx:
    cfg: BootstrapConfig
    resolution: ResolutionContext
    runner: Runner = run_cmd
    platform: Optional[PlatformId] = None
    dry_run: bool = False
    force: bool = False
    skip_auth: bool = False
    bootstrap_package_manager: bool = False
    repo_url: Optional[str] = None
    # Executables a dry run pretended to install; only consulted when dry_run.
    planned: Set[str] = field(default_factory=set)

    @property
    def local_bin(self) -> Path:
        return self.cfg.local_bin

    @property
    def target_repo_url(self) -> str:
        return self.repo_url or self.cfg.repo_url

    def exists(self, name: str) -> bool:
        if self.dry_run and name in self.planned:
            return True
        return self.resolution.exists(name)

    def run(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Mapping[str, str] | None = None,
        interactive: bool = False,
    ) -> CmdResult:
        merged = self.resolution.environ()
        merged.update(env or {})
        return self.runner(
            argv,
            check=check,
            env=merged,
            dry_run=self.dry_run,
            interactive=interactive,
        )
