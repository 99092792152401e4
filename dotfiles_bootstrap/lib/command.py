from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Mapping, Protocol, Sequence

from ..errors import CommandError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CmdResult:
    argv: list[str]
    returncode: int
    stdout: str
    stderr: str

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class Runner(Protocol):
    def __call__(
        self,
        argv: Sequence[str],
        *,
        check: bool = True,
        env: Mapping[str, str] | None = None,
        dry_run: bool = False,
        interactive: bool = False,
    ) -> CmdResult:
        ...


def fmt_argv(argv: Sequence[str]) -> str:
    return " ".join(shlex.quote(a) for a in argv)


def run_cmd(
    argv: Sequence[str],
    *,
    check: bool = True,
    env: Mapping[str, str] | None = None,
    dry_run: bool = False,
    interactive: bool = False,
) -> CmdResult:
    """Run a command with consistent logging.

    - Always logs the command.
    - Captures stdout/stderr unless ``interactive``; interactive commands
      inherit the terminal so the operator can answer prompts.
    - dry_run logs but does not execute.
    """

    argv_list = list(argv)
    logger.debug("CMD %s", fmt_argv(argv_list))

    if dry_run:
        logger.info("Would run: %s", fmt_argv(argv_list))
        return CmdResult(argv=argv_list, returncode=0, stdout="", stderr="")

    pipe = None if interactive else subprocess.PIPE
    try:
        p = subprocess.run(
            argv_list,
            text=True,
            stdout=pipe,
            stderr=pipe,
            env=dict(os.environ, **(env or {})),
        )
    except FileNotFoundError as e:
        raise CommandError(
            f"Command not found: {argv_list[0]}",
            argv=argv_list,
            returncode=127,
            stderr=str(e),
        ) from e

    stdout = p.stdout or ""
    stderr = p.stderr or ""
    if stdout:
        logger.debug("STDOUT %s", stdout.strip())
    if stderr:
        logger.debug("STDERR %s", stderr.strip())

    if check and p.returncode != 0:
        detail = f"\n{stderr.strip()}" if stderr.strip() else ""
        raise CommandError(
            f"Command failed ({p.returncode}): {fmt_argv(argv_list)}{detail}",
            argv=argv_list,
            returncode=p.returncode,
            stderr=stderr,
        )

    return CmdResult(argv=argv_list, returncode=p.returncode, stdout=stdout, stderr=stderr)
