from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

from .config import DEFAULT_LOG_PATH

SUCCESS = 25
logging.addLevelName(SUCCESS, "SUCCESS")


def log_success(logger: logging.Logger, msg: str, *args) -> None:
    logger.log(SUCCESS, msg, *args)


def configure_logging(
    log_path: str = DEFAULT_LOG_PATH,
    level: int = logging.INFO,
    also_console: bool = True,
) -> str:
    """Configure logging.

    Console lines are tagged by severity ([INFO], [SUCCESS], [WARNING],
    [ERROR]); the log file keeps timestamps and logger names.

    Notes:
    - The default log lives under the user's state directory. If it cannot
      be created we fall back to a file in the working directory.

    Returns the actual file path being used.
    """

    logger = logging.getLogger()
    logger.setLevel(logging.DEBUG)

    # Avoid duplicate handlers if configure_logging() is called multiple times.
    if getattr(logger, "_dotfiles_bootstrap_configured", False):
        return getattr(logger, "_dotfiles_bootstrap_log_path", log_path)

    log_path = str(Path(log_path).expanduser())
    chosen_path = log_path
    handlers: list[logging.Handler] = []

    file_fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )

    file_handler: Optional[logging.Handler] = None
    try:
        Path(os.path.dirname(log_path) or ".").mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding="utf-8")
    except OSError:
        fallback = str(Path.cwd() / "dotfiles-bootstrap.log")
        file_handler = logging.FileHandler(fallback, encoding="utf-8")
        chosen_path = fallback
    file_handler.setFormatter(file_fmt)
    file_handler.setLevel(logging.DEBUG)
    handlers.append(file_handler)

    if also_console:
        console = logging.StreamHandler()
        console.setFormatter(logging.Formatter(fmt="[%(levelname)s] %(message)s"))
        console.setLevel(level)
        handlers.append(console)

    for h in handlers:
        logger.addHandler(h)

    setattr(logger, "_dotfiles_bootstrap_configured", True)
    setattr(logger, "_dotfiles_bootstrap_log_path", chosen_path)

    logging.getLogger(__name__).debug(
        "Logging initialized (requested=%s, actual=%s)", log_path, chosen_path
    )
    return chosen_path
