from __future__ import annotations

import argparse
import logging
from typing import Optional

from .config import BootstrapConfig, load_config
from .context import BootstrapCtx
from .errors import BootstrapError
from .lib.auth import LoginProvider
from .lib.command import Runner, run_cmd
from .lib.probe import ResolutionContext
from .logging_utils import configure_logging, log_success
from .models import PlatformId
from .pipeline import PipelineResult, run_pipeline
from .report import build_report, save_report
from .steps import (
    AuthenticateStep,
    BootstrapPackageManagerStep,
    DetectPlatformStep,
    InstallDotfilesManagerStep,
    InstallHostingCliStep,
    SyncDotfilesStep,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_INTERRUPTED = 130


def build_steps(login: Optional[LoginProvider] = None):
    return [
        DetectPlatformStep(),
        BootstrapPackageManagerStep(),
        InstallHostingCliStep(),
        InstallDotfilesManagerStep(),
        AuthenticateStep(login=login),
        SyncDotfilesStep(),
    ]


def run(
    *,
    cfg: BootstrapConfig,
    resolution: Optional[ResolutionContext] = None,
    runner: Runner = run_cmd,
    login: Optional[LoginProvider] = None,
    platform: Optional[PlatformId] = None,
    repo_url: Optional[str] = None,
    skip_auth: bool = False,
    force: bool = False,
    bootstrap_package_manager: bool = False,
    dry_run: bool = False,
    report_path: Optional[str] = None,
) -> PipelineResult:
    """Run the bootstrap sequence once.

    Every step probes before acting, so calling this again after fixing a
    failure picks up where the previous run stopped.
    """

    ctx = BootstrapCtx(
        cfg=cfg,
        resolution=resolution or ResolutionContext.from_environ(),
        runner=runner,
        platform=platform,
        dry_run=dry_run,
        force=force or cfg.force,
        skip_auth=skip_auth or cfg.skip_auth,
        bootstrap_package_manager=bootstrap_package_manager or cfg.bootstrap_package_manager,
        repo_url=repo_url,
    )

    logger.info("Starting cross-platform bootstrap setup...")
    try:
        result = run_pipeline(ctx=ctx, steps=build_steps(login))
    except (BootstrapError, OSError):
        raise
    except Exception:
        logger.exception("Bootstrap crashed")
        raise

    if report_path:
        platform_value = ctx.platform.value if ctx.platform else None
        save_report(report_path, build_report(result, platform=platform_value))

    if result.ok:
        log_success(logger, "Bootstrap setup completed successfully!")
        logger.info("Your development environment is now ready.")
        logger.info("You may need to restart your shell to reload environment variables.")
    else:
        logger.error("Bootstrap stopped at step %s; fix the problem above and re-run.", result.failed_step)
    return result


def main(argv: Optional[list[str]] = None) -> int:
    p = argparse.ArgumentParser(prog="dotfiles-bootstrap", description="Install gh + yadm, log in and sync dotfiles.")
    p.add_argument("--config", default=None, help="Path to YAML config (default ~/.config/dotfiles-bootstrap/config.yaml)")
    p.add_argument("--repo-url", default=None, help="Dotfiles repository to clone")
    p.add_argument("--skip-auth", action="store_true", help="Do not check or perform GitHub authentication")
    p.add_argument("--force", action="store_true", help="Reinstall tools even if already present")
    p.add_argument(
        "--bootstrap-package-manager",
        action="store_true",
        help="Install Homebrew first on macOS when it is missing",
    )
    p.add_argument("--dry-run", action="store_true", help="Log commands without running them")
    p.add_argument("--log", default=None, help="Path to log file")
    p.add_argument("--report", default=None, help="Write a run report (json|yaml)")
    p.add_argument("-v", "--verbose", action="store_true", help="Show command output on the console")

    args = p.parse_args(argv)

    try:
        cfg = load_config(args.config)
    except (OSError, ValueError) as e:
        p.error(f"cannot load config: {e}")
    configure_logging(
        log_path=args.log or cfg.log_path,
        level=logging.DEBUG if args.verbose else logging.INFO,
    )

    try:
        result = run(
            cfg=cfg,
            repo_url=args.repo_url,
            skip_auth=bool(args.skip_auth),
            force=bool(args.force),
            bootstrap_package_manager=bool(args.bootstrap_package_manager),
            dry_run=bool(args.dry_run),
            report_path=args.report,
        )
    except KeyboardInterrupt:
        logger.error("Interrupted; re-run dotfiles-bootstrap to resume.")
        return EXIT_INTERRUPTED
    except BootstrapError as e:
        logger.error("%s", e)
        if e.hint:
            logger.error("%s", e.hint)
        return EXIT_FAILED
    except OSError as e:
        logger.error("%s", e)
        return EXIT_FAILED

    return EXIT_OK if result.ok else EXIT_FAILED


if __name__ == "__main__":
    raise SystemExit(main())
