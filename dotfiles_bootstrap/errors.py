from __future__ import annotations

from typing import Optional, Sequence


class BootstrapError(RuntimeError):
    """Fatal condition for the current step.

    ``hint`` is the manual action the operator can take instead.
    """

    def __init__(self, message: str, *, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.hint = hint


class CommandError(BootstrapError):
    def __init__(
        self,
        message: str,
        *,
        argv: Sequence[str],
        returncode: int,
        stderr: str = "",
        hint: Optional[str] = None,
    ) -> None:
        super().__init__(message, hint=hint)
        self.argv = list(argv)
        self.returncode = returncode
        self.stderr = stderr
