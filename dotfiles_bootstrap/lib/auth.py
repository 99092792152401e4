from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Protocol

from ..errors import BootstrapError, CommandError
from ..logging_utils import log_success

if TYPE_CHECKING:  # pragma: no cover
    from ..context import BootstrapCtx

logger = logging.getLogger(__name__)

GH = "gh"


class LoginProvider(Protocol):
    """Performs the interactive login; returns True when a session exists afterwards."""

    def login(self, ctx: "BootstrapCtx") -> bool:
        ...


class TerminalLogin:
    """Hand the terminal to ``gh auth login`` and wait for the operator."""

    def login(self, ctx: "BootstrapCtx") -> bool:
        try:
            r = ctx.run([GH, "auth", "login", "--hostname", ctx.cfg.hostname], check=False, interactive=True)
        except CommandError as e:
            logger.error("%s", e)
            return False
        return r.ok


def has_session(ctx: "BootstrapCtx") -> bool:
    r = ctx.run([GH, "auth", "status", "--hostname", ctx.cfg.hostname], check=False)
    return r.ok


def ensure_authenticated(ctx: "BootstrapCtx", login: LoginProvider) -> bool:
    """Make sure gh holds a session and git uses it for credentials.

    Returns True when an interactive login was needed.
    """

    if not ctx.exists(GH):
        raise BootstrapError(
            "GitHub CLI (gh) is not installed or not in PATH",
            hint="Install gh from https://cli.github.com/ and re-run.",
        )

    logged_in = False
    if has_session(ctx):
        logger.info("Already authenticated with %s", ctx.cfg.hostname)
    else:
        logger.info("Starting GitHub authentication...")
        if not login.login(ctx):
            raise BootstrapError(
                "GitHub authentication did not complete",
                hint=f"Run 'gh auth login --hostname {ctx.cfg.hostname}' manually, then re-run.",
            )
        logged_in = True

    logger.info("Configuring git to use the gh credential helper")
    try:
        ctx.run([GH, "auth", "setup-git", "--hostname", ctx.cfg.hostname])
    except CommandError as e:
        e.hint = "Run 'gh auth setup-git' manually, then re-run."
        raise

    log_success(logger, "GitHub authentication completed")
    return logged_in
