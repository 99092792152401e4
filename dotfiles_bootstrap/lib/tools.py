from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

from ..models import InstallStrategy, PlatformId, ToolSpec
from . import pkg

if TYPE_CHECKING:  # pragma: no cover
    from ..context import BootstrapCtx

LINUX = frozenset({PlatformId.LINUX})
MACOS = frozenset({PlatformId.MACOS})
WINDOWS = frozenset({PlatformId.WINDOWS})
UNIX = frozenset({PlatformId.LINUX, PlatformId.MACOS})

WEBI_GH_URL = "https://webi.sh/gh"
YADM_URL = "https://github.com/yadm-dev/yadm/raw/master/yadm"
HOMEBREW_INSTALL_URL = "https://raw.githubusercontent.com/Homebrew/install/HEAD/install.sh"
HOMEBREW_PREFIXES = ("/usr/local/bin", "/opt/homebrew/bin")


# --- GitHub CLI ---------------------------------------------------------------


def _gh_winget(ctx: "BootstrapCtx") -> None:
    pkg.winget_install(ctx, "Git.Git")
    pkg.winget_install(ctx, "GitHub.cli")


def _gh_brew(ctx: "BootstrapCtx") -> None:
    pkg.brew_install(ctx, ["gh"])


def _gh_webi(ctx: "BootstrapCtx") -> None:
    # webi installs into ~/.local/bin regardless of our configured local_bin.
    pkg.run_remote_script(ctx, WEBI_GH_URL, interpreter="sh")
    ctx.resolution.prepend(Path("~/.local/bin").expanduser())


GH = ToolSpec(
    name="GitHub CLI",
    probe="gh",
    strategies=(
        InstallStrategy("winget", _gh_winget, platforms=WINDOWS, requires=("winget",)),
        InstallStrategy("brew", _gh_brew, platforms=MACOS, requires=("brew",)),
        InstallStrategy("webi", _gh_webi, platforms=UNIX, requires=("curl", "sh")),
    ),
    manual_hint=(
        "Install it manually: 'winget install --id GitHub.cli --scope machine' on Windows, "
        "or download it from https://cli.github.com/"
    ),
)


# --- yadm ---------------------------------------------------------------------


def _yadm_download(ctx: "BootstrapCtx") -> None:
    pkg.install_executable(ctx, YADM_URL, "yadm")


YADM = ToolSpec(
    name="yadm",
    probe="yadm",
    strategies=(
        InstallStrategy("apt-get", lambda ctx: pkg.apt_install(ctx, ["yadm"]), platforms=LINUX, requires=("apt-get",)),
        InstallStrategy("yum", lambda ctx: pkg.yum_install(ctx, ["yadm"]), platforms=LINUX, requires=("yum",)),
        InstallStrategy("dnf", lambda ctx: pkg.dnf_install(ctx, ["yadm"]), platforms=LINUX, requires=("dnf",)),
        InstallStrategy("pacman", lambda ctx: pkg.pacman_install(ctx, ["yadm"]), platforms=LINUX, requires=("pacman",)),
        InstallStrategy("brew", lambda ctx: pkg.brew_install(ctx, ["yadm"]), platforms=MACOS, requires=("brew",)),
        InstallStrategy("download", _yadm_download, platforms=None, requires=("curl",)),
    ),
    manual_hint=f"Download {YADM_URL} into a directory on your PATH and mark it executable.",
)


# --- Homebrew -----------------------------------------------------------------


def _homebrew_script(ctx: "BootstrapCtx") -> None:
    pkg.run_remote_script(ctx, HOMEBREW_INSTALL_URL, interpreter="bash", env={"NONINTERACTIVE": "1"})
    for prefix in HOMEBREW_PREFIXES:
        ctx.resolution.prepend(prefix)


HOMEBREW = ToolSpec(
    name="Homebrew",
    probe="brew",
    strategies=(
        InstallStrategy("install-script", _homebrew_script, platforms=MACOS, requires=("curl", "bash")),
    ),
    manual_hint="See https://brew.sh for manual installation.",
)
