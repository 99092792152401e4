from __future__ import annotations

import stat
from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import pytest

from dotfiles_bootstrap.config import BootstrapConfig
from dotfiles_bootstrap.context import BootstrapCtx
from dotfiles_bootstrap.errors import CommandError
from dotfiles_bootstrap.lib.command import CmdResult
from dotfiles_bootstrap.lib.probe import ResolutionContext
from dotfiles_bootstrap.models import PlatformId


def make_tool(directory: Path, name: str) -> Path:
    """Drop an executable stub so the prober finds ``name``."""
    directory.mkdir(parents=True, exist_ok=True)
    p = directory / name
    p.write_text("#!/bin/sh\nexit 0\n", encoding="utf-8")
    p.chmod(p.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return p


class FakeRunner:
    """Scripted stand-in for run_cmd.

    Rules are matched by argv prefix (longest wins). Unmatched commands
    succeed with empty output.
    """

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.interactive_calls: List[List[str]] = []
        self.envs: List[Dict[str, str]] = []
        self._rules: Dict[Tuple[str, ...], Tuple[int, Optional[Callable[[List[str]], None]]]] = {}

    def on(self, *prefix: str, returncode: int = 0, effect: Optional[Callable[[List[str]], None]] = None) -> None:
        self._rules[tuple(prefix)] = (returncode, effect)

    def _match(self, argv: List[str]):
        best = None
        for prefix, rule in self._rules.items():
            if tuple(argv[: len(prefix)]) == prefix and (best is None or len(prefix) > len(best[0])):
                best = (prefix, rule)
        return best[1] if best else (0, None)

    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env=None,
        dry_run: bool = False,
        interactive: bool = False,
    ) -> CmdResult:
        argv_list = list(argv)
        self.calls.append(argv_list)
        self.envs.append(dict(env or {}))
        if interactive:
            self.interactive_calls.append(argv_list)

        if dry_run:
            return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

        returncode, effect = self._match(argv_list)
        if effect is not None:
            effect(argv_list)
        if check and returncode != 0:
            raise CommandError(f"Command failed ({returncode})", argv=argv_list, returncode=returncode)
        return CmdResult(argv=argv_list, returncode=returncode, stdout="", stderr="")

    def called(self, *prefix: str) -> int:
        return sum(1 for c in self.calls if tuple(c[: len(prefix)]) == prefix)


class FakeLogin:
    def __init__(self, succeed: bool = True, on_login: Optional[Callable[[], None]] = None) -> None:
        self.succeed = succeed
        self.on_login = on_login
        self.count = 0

    def login(self, ctx) -> bool:
        self.count += 1
        if self.on_login is not None:
            self.on_login()
        return self.succeed


@pytest.fixture()
def home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    h = tmp_path / "home"
    h.mkdir()
    monkeypatch.setenv("HOME", str(h))
    return h


@pytest.fixture()
def system_bin(tmp_path: Path) -> Path:
    d = tmp_path / "usr-bin"
    d.mkdir()
    return d


@pytest.fixture()
def cfg(home: Path, tmp_path: Path) -> BootstrapConfig:
    return BootstrapConfig(
        raw={
            "local_bin": str(home / ".local" / "bin"),
            "yadm_repo_dir": str(tmp_path / "yadm-repo.git"),
            "repo_url": "https://example.invalid/dotfiles.git",
        }
    )


@pytest.fixture()
def resolution(system_bin: Path) -> ResolutionContext:
    return ResolutionContext(search_path=[str(system_bin)])


@pytest.fixture()
def runner() -> FakeRunner:
    return FakeRunner()


@pytest.fixture()
def make_ctx(cfg: BootstrapConfig, resolution: ResolutionContext, runner: FakeRunner):
    def _make(**kwargs) -> BootstrapCtx:
        kwargs.setdefault("platform", PlatformId.LINUX)
        return BootstrapCtx(cfg=cfg, resolution=resolution, runner=runner, **kwargs)

    return _make
