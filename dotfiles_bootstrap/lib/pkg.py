from __future__ import annotations

import logging
import os
import stat
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING, Mapping, Sequence

from ..errors import BootstrapError

if TYPE_CHECKING:  # pragma: no cover
    from ..context import BootstrapCtx

logger = logging.getLogger(__name__)


def privileged(ctx: "BootstrapCtx", argv: Sequence[str]) -> list[str]:
    """Prefix argv with sudo when we are not root and sudo is available."""
    geteuid = getattr(os, "geteuid", None)
    if geteuid is not None and geteuid() != 0 and ctx.exists("sudo"):
        return ["sudo", *argv]
    return list(argv)


def apt_install(ctx: "BootstrapCtx", packages: Sequence[str]) -> None:
    if not packages:
        return
    ctx.run(privileged(ctx, ["apt-get", "update"]))
    ctx.run(privileged(ctx, ["apt-get", "install", "-y", *packages]))


def yum_install(ctx: "BootstrapCtx", packages: Sequence[str]) -> None:
    ctx.run(privileged(ctx, ["yum", "install", "-y", *packages]))


def dnf_install(ctx: "BootstrapCtx", packages: Sequence[str]) -> None:
    ctx.run(privileged(ctx, ["dnf", "install", "-y", *packages]))


def pacman_install(ctx: "BootstrapCtx", packages: Sequence[str]) -> None:
    ctx.run(privileged(ctx, ["pacman", "-S", "--noconfirm", *packages]))


def brew_install(ctx: "BootstrapCtx", packages: Sequence[str]) -> None:
    ctx.run(["brew", "install", *packages])


def winget_install(ctx: "BootstrapCtx", package_id: str) -> None:
    ctx.run(
        [
            "winget",
            "install",
            "--id",
            package_id,
            "--exact",
            "--scope",
            "machine",
            "--accept-source-agreements",
            "--accept-package-agreements",
        ]
    )


def _unwritable(path: Path, e: OSError) -> BootstrapError:
    return BootstrapError(
        f"Cannot write {path}: {e}",
        hint=f"Make {path.parent} writable or set local_bin in the config, then re-run.",
    )


def download_file(ctx: "BootstrapCtx", url: str, dest: Path) -> Path:
    """Fetch ``url`` to ``dest`` over HTTPS with curl.

    The payload lands in a temporary sibling first and is renamed into place,
    so an interrupted transfer never leaves a truncated file at ``dest``.
    """

    if not ctx.exists("curl"):
        raise BootstrapError("curl is not installed", hint="Install curl first, then re-run.")

    if ctx.dry_run:
        ctx.run(["curl", "-fsSL", "-o", str(dest), url])
        return dest

    try:
        dest.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp = tempfile.mkstemp(prefix=f".{dest.name}.", dir=str(dest.parent))
        os.close(fd)
    except OSError as e:
        raise _unwritable(dest, e) from e

    try:
        ctx.run(["curl", "-fsSL", "-o", tmp, url])
        os.replace(tmp, dest)
    except OSError as e:
        raise _unwritable(dest, e) from e
    finally:
        if os.path.exists(tmp):
            os.unlink(tmp)
    return dest


def mark_executable(path: Path) -> None:
    try:
        mode = path.stat().st_mode
        path.chmod(mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as e:
        raise BootstrapError(f"Cannot mark {path} executable: {e}", hint=f"Run 'chmod +x {path}' and re-run.") from e


def install_executable(ctx: "BootstrapCtx", url: str, name: str) -> Path:
    """Download a single-file tool into the user-local bin directory."""

    dest = ctx.local_bin / name
    logger.info("Downloading %s to %s", name, dest)
    download_file(ctx, url, dest)
    if not ctx.dry_run:
        mark_executable(dest)
    ctx.resolution.prepend(ctx.local_bin)
    return dest


def run_remote_script(
    ctx: "BootstrapCtx",
    url: str,
    *,
    interpreter: str = "sh",
    env: Mapping[str, str] | None = None,
) -> None:
    """Download an installer script and execute it with ``interpreter``."""

    try:
        fd, tmp = tempfile.mkstemp(prefix="dotfiles-bootstrap-", suffix=".sh")
        os.close(fd)
    except OSError as e:
        raise BootstrapError(
            f"Cannot create a temporary file for {url}: {e}",
            hint="Check that TMPDIR is writable, then re-run.",
        ) from e
    try:
        download_file(ctx, url, Path(tmp))
        ctx.run([interpreter, tmp], env=env)
    finally:
        if os.path.exists(tmp):
            os.unlink(tmp)
