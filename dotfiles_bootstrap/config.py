from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

DEFAULT_CONFIG_PATH = "~/.config/dotfiles-bootstrap/config.yaml"
DEFAULT_REPO_URL = "https://github.com/chbota/setup-internal.git"
DEFAULT_HOSTNAME = "github.com"
DEFAULT_LOCAL_BIN = "~/.local/bin"
DEFAULT_YADM_REPO_DIR = "~/.local/share/yadm/repo.git"
DEFAULT_LOG_PATH = "~/.local/state/dotfiles-bootstrap/bootstrap.log"

DEFAULT_GIT_ALIASES: Dict[str, str] = {
    "restoreSettings": "!git diff --stat @~1",
    "backupSettings": "!git diff --stat @~1",
}
DEFAULT_RESTORE_PATHS: List[str] = [".gitconfig"]


def _expand(p: str) -> Path:
    return Path(p).expanduser()


BOOL_KEYS = ("bootstrap_package_manager", "skip_auth", "force")


def _flag(raw: Dict[str, Any], key: str) -> bool:
    value = raw.get(key, False)
    if value is None:
        return False
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


@dataclass(frozen=True)
class BootstrapConfig:
    raw: Dict[str, Any]

    @property
    def repo_url(self) -> str:
        return str(self.raw.get("repo_url") or DEFAULT_REPO_URL)

    @property
    def hostname(self) -> str:
        return str(self.raw.get("hostname") or DEFAULT_HOSTNAME)

    @property
    def local_bin(self) -> Path:
        return _expand(str(self.raw.get("local_bin") or DEFAULT_LOCAL_BIN))

    @property
    def yadm_repo_dir(self) -> Path:
        return _expand(str(self.raw.get("yadm_repo_dir") or DEFAULT_YADM_REPO_DIR))

    @property
    def log_path(self) -> str:
        return str(_expand(str(self.raw.get("log_path") or DEFAULT_LOG_PATH)))

    @property
    def git_aliases(self) -> Dict[str, str]:
        aliases = self.raw.get("git_aliases")
        if aliases is None:
            return dict(DEFAULT_GIT_ALIASES)
        return {str(k): str(v) for k, v in aliases.items()}

    @property
    def restore_paths(self) -> List[str]:
        paths = self.raw.get("restore_paths")
        if paths is None:
            return list(DEFAULT_RESTORE_PATHS)
        return [str(p) for p in paths if str(p).strip()]

    @property
    def bootstrap_package_manager(self) -> bool:
        return _flag(self.raw, "bootstrap_package_manager")

    @property
    def skip_auth(self) -> bool:
        return _flag(self.raw, "skip_auth")

    @property
    def force(self) -> bool:
        return _flag(self.raw, "force")


def load_config(path: Optional[str] = None) -> BootstrapConfig:
    """Load the YAML config.

    With no explicit path the default location is optional; an explicitly
    named file must exist.
    """

    explicit = path is not None
    p = _expand(path if explicit else DEFAULT_CONFIG_PATH)
    if not p.exists():
        if explicit:
            raise FileNotFoundError(str(p))
        return BootstrapConfig(raw={})

    if p.suffix.lower() not in {".yaml", ".yml"}:
        raise ValueError("config must be YAML")

    try:
        raw = yaml.safe_load(p.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"{p} is not valid YAML: {e}") from e
    if not isinstance(raw, dict):
        raise ValueError(f"{p} must contain a mapping/object")

    aliases = raw.get("git_aliases")
    if aliases is not None and not isinstance(aliases, dict):
        raise ValueError("git_aliases must be a mapping")
    paths = raw.get("restore_paths")
    if paths is not None and not isinstance(paths, list):
        raise ValueError("restore_paths must be a list")
    for key in BOOL_KEYS:
        _flag(raw, key)

    return BootstrapConfig(raw=raw)
