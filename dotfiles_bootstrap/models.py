from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Callable, FrozenSet, List, Optional, Tuple

if TYPE_CHECKING:  # pragma: no cover
    from .context import BootstrapCtx


class PlatformId(str, Enum):
    LINUX = "linux"
    MACOS = "macos"
    WINDOWS = "windows"
    UNKNOWN = "unknown"


class OutcomeStatus(str, Enum):
    ALREADY_PRESENT = "skipped-already-present"
    INSTALLED = "installed"
    FAILED = "failed"
    SKIPPED = "skipped"
    COMPLETED = "completed"


class RepoAction(str, Enum):
    CLONE = "clone"
    UPDATE = "update"


@dataclass
class RunOutcome:
    step_id: str
    status: OutcomeStatus
    message: str = ""
    action: Optional[str] = None
    warnings: List[str] = field(default_factory=list)
    hint: Optional[str] = None

    @property
    def failed(self) -> bool:
        return self.status is OutcomeStatus.FAILED

    def as_dict(self) -> dict:
        return {
            "step": self.step_id,
            "status": self.status.value,
            "message": self.message,
            "action": self.action,
            "warnings": list(self.warnings),
            "hint": self.hint,
        }


InstallAction = Callable[["BootstrapCtx"], None]


@dataclass(frozen=True)
class InstallStrategy:
    """One way of installing a tool.

    ``platforms=None`` matches every platform, UNKNOWN included.
    ``requires`` lists executables that must already be on the search path.
    """

    name: str
    action: InstallAction
    platforms: Optional[FrozenSet[PlatformId]] = None
    requires: Tuple[str, ...] = ()

    def matches(self, platform: PlatformId) -> bool:
        return self.platforms is None or platform in self.platforms


@dataclass(frozen=True)
class ToolSpec:
    name: str
    probe: str
    strategies: Tuple[InstallStrategy, ...]
    manual_hint: Optional[str] = None
