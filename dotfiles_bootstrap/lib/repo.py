from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List

from ..errors import CommandError
from ..logging_utils import log_success
from ..models import RepoAction

if TYPE_CHECKING:  # pragma: no cover
    from ..context import BootstrapCtx

logger = logging.getLogger(__name__)

YADM = "yadm"


def repository_present(ctx: "BootstrapCtx") -> bool:
    return ctx.run([YADM, "status"], check=False).ok


def _clone(ctx: "BootstrapCtx", repo_url: str) -> None:
    argv = [YADM, "clone"]
    # A previous interrupted clone leaves the bare repo behind without a usable
    # work tree; yadm refuses to clone over it unless forced.
    if ctx.cfg.yadm_repo_dir.exists():
        logger.warning("Found leftover yadm repository at %s; re-cloning", ctx.cfg.yadm_repo_dir)
        argv.append("-f")
    argv.append(repo_url)
    try:
        ctx.run(argv, interactive=True)
    except CommandError as e:
        e.hint = f"Run 'yadm clone {repo_url}' manually, then re-run."
        raise


def _update(ctx: "BootstrapCtx") -> List[str]:
    try:
        ctx.run([YADM, "pull"])
    except CommandError as e:
        e.hint = "Resolve the problem with 'yadm status' / 'yadm pull', then re-run."
        raise

    r = ctx.run([YADM, "bootstrap"], check=False, interactive=True)
    if not r.ok:
        msg = f"yadm bootstrap exited with status {r.returncode}; leaving changes as-is"
        logger.warning(msg)
        return [msg]
    return []


def _apply_settings(ctx: "BootstrapCtx") -> None:
    for name, value in ctx.cfg.git_aliases.items():
        ctx.run([YADM, "gitconfig", f"alias.{name}", value])
    for path in ctx.cfg.restore_paths:
        ctx.run([YADM, "checkout", path])


def sync_repository(ctx: "BootstrapCtx", repo_url: str) -> tuple[RepoAction, List[str]]:
    """Clone on first run, pull + bootstrap afterwards.

    Returns the path taken and any warnings from the bootstrap hook.
    """

    logger.info("Setting up yadm repository...")
    warnings: List[str] = []

    if repository_present(ctx):
        logger.warning("yadm repository already exists. Pulling latest changes...")
        action = RepoAction.UPDATE
        warnings = _update(ctx)
    else:
        logger.info("Cloning yadm repository %s...", repo_url)
        action = RepoAction.CLONE
        _clone(ctx, repo_url)

    _apply_settings(ctx)

    log_success(logger, "yadm repository setup completed")
    return action, warnings
