from __future__ import annotations

import logging
import os
import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Mapping, Optional

logger = logging.getLogger(__name__)


@dataclass
class ResolutionContext:
    """Search path used to resolve executables for the current run.

    Installers that drop binaries outside the inherited PATH extend this
    instead of mutating ``os.environ``; every delegated command receives
    ``environ()`` so it sees the same view.
    """

    search_path: List[str] = field(default_factory=list)

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "ResolutionContext":
        env = os.environ if environ is None else environ
        raw = env.get("PATH", "") or ""
        return cls(search_path=[p for p in raw.split(os.pathsep) if p])

    @property
    def path_string(self) -> str:
        return os.pathsep.join(self.search_path)

    def which(self, name: str) -> Optional[str]:
        try:
            return shutil.which(name, path=self.path_string)
        except (OSError, ValueError):
            return None

    def exists(self, name: str) -> bool:
        """True if ``name`` resolves to an executable. Never raises."""
        return self.which(name) is not None

    def prepend(self, directory: str | Path) -> None:
        d = str(directory)
        if d in self.search_path:
            self.search_path.remove(d)
        self.search_path.insert(0, d)
        logger.debug("Search path extended with %s", d)

    def environ(self) -> Dict[str, str]:
        return {"PATH": self.path_string}
