from __future__ import annotations

import logging
from typing import TYPE_CHECKING, List, Optional

from ..errors import BootstrapError
from ..logging_utils import log_success
from ..models import InstallStrategy, OutcomeStatus, PlatformId, RunOutcome, ToolSpec

if TYPE_CHECKING:  # pragma: no cover
    from ..context import BootstrapCtx

logger = logging.getLogger(__name__)


def select_strategy(
    ctx: "BootstrapCtx", tool: ToolSpec, platform: PlatformId
) -> tuple[Optional[InstallStrategy], List[str]]:
    """First strategy (in priority order) usable on this platform.

    Also returns the prerequisites that were missing for strategies that
    matched the platform, for error reporting.
    """

    missing: List[str] = []
    for strategy in tool.strategies:
        if not strategy.matches(platform):
            continue
        absent = [r for r in strategy.requires if not ctx.exists(r)]
        if not absent:
            return strategy, missing
        logger.debug("Strategy %s for %s unavailable (missing %s)", strategy.name, tool.name, ", ".join(absent))
        for r in absent:
            if r not in missing:
                missing.append(r)
    return None, missing


def ensure_installed(ctx: "BootstrapCtx", tool: ToolSpec, *, step_id: str) -> RunOutcome:
    """Probe, install via the best available strategy, re-probe.

    Never reinstalls a tool the prober can already see unless ``ctx.force``.
    """

    if not ctx.force and ctx.exists(tool.probe):
        logger.info("%s already installed", tool.name)
        return RunOutcome(step_id, OutcomeStatus.ALREADY_PRESENT, f"{tool.name} already installed")

    platform = ctx.platform or PlatformId.UNKNOWN
    strategy, missing = select_strategy(ctx, tool, platform)
    if strategy is None:
        if missing:
            reason = f"Cannot install {tool.name} on {platform.value}: {', '.join(missing)} not installed"
        else:
            reason = f"Unsupported operating system for {tool.name}: {platform.value}"
        return RunOutcome(step_id, OutcomeStatus.FAILED, reason, hint=tool.manual_hint)

    logger.info("Installing %s via %s...", tool.name, strategy.name)
    try:
        strategy.action(ctx)
    except BootstrapError as e:
        return RunOutcome(
            step_id,
            OutcomeStatus.FAILED,
            f"Failed to install {tool.name} via {strategy.name}: {e}",
            action=strategy.name,
            hint=e.hint or tool.manual_hint,
        )

    if ctx.dry_run:
        ctx.planned.add(tool.probe)
        return RunOutcome(
            step_id,
            OutcomeStatus.INSTALLED,
            f"{tool.name} would be installed via {strategy.name}",
            action=strategy.name,
        )

    if not ctx.exists(tool.probe):
        msg = f"{tool.name} installer ({strategy.name}) finished but '{tool.probe}' is still not on PATH"
        logger.warning(msg)
        return RunOutcome(
            step_id,
            OutcomeStatus.FAILED,
            msg,
            action=strategy.name,
            warnings=[msg],
            hint="Add the install location to PATH or open a new shell, then re-run.",
        )

    log_success(logger, "%s installed successfully", tool.name)
    return RunOutcome(
        step_id,
        OutcomeStatus.INSTALLED,
        f"{tool.name} installed via {strategy.name}",
        action=strategy.name,
    )
