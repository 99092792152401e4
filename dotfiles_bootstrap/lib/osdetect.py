from __future__ import annotations

import os
import sys
from typing import Optional

from ..models import PlatformId

# OSTYPE values as set (not exported) by bash, Git Bash and MSYS2.
_OSTYPE_PREFIXES = (
    ("linux", PlatformId.LINUX),
    ("darwin", PlatformId.MACOS),
    ("cygwin", PlatformId.WINDOWS),
    ("msys", PlatformId.WINDOWS),
    ("win32", PlatformId.WINDOWS),
)

_SYS_PLATFORM_PREFIXES = (
    ("linux", PlatformId.LINUX),
    ("darwin", PlatformId.MACOS),
    ("win32", PlatformId.WINDOWS),
    ("cygwin", PlatformId.WINDOWS),
    ("msys", PlatformId.WINDOWS),
)


def _match(value: str, table) -> Optional[PlatformId]:
    v = value.strip().lower()
    for prefix, platform_id in table:
        if v.startswith(prefix):
            return platform_id
    return None


def detect_platform(ostype: Optional[str] = None, system: Optional[str] = None) -> PlatformId:
    """Classify the host from environment signals.

    ``system`` (``sys.platform`` style) is the usual signal. ``ostype`` is
    consulted first only when the caller has it; bash does not export OSTYPE,
    so it is normally absent unless the operator exported it. Unrecognised
    signals yield ``PlatformId.UNKNOWN``.
    """

    if ostype:
        found = _match(ostype, _OSTYPE_PREFIXES)
        if found is not None:
            return found
    if system:
        found = _match(system, _SYS_PLATFORM_PREFIXES)
        if found is not None:
            return found
    return PlatformId.UNKNOWN


def detect_current_platform() -> PlatformId:
    return detect_platform(ostype=os.environ.get("OSTYPE"), system=sys.platform)
