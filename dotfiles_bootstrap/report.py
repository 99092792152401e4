from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict

import yaml

from .pipeline import PipelineResult

logger = logging.getLogger(__name__)


def _detect_format(path: Path) -> str:
    ext = path.suffix.lower().lstrip(".")
    if ext in {"json", "yaml", "yml"}:
        return ext
    # Default to JSON for unknown extensions.
    return "json"


def build_report(result: PipelineResult, *, platform: str | None) -> Dict[str, Any]:
    return {
        "platform": platform,
        "ok": result.ok,
        "failed_step": result.failed_step,
        "outcomes": [o.as_dict() for o in result.outcomes],
    }


def save_report(path: str, report: Dict[str, Any]) -> None:
    p = Path(path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)

    if _detect_format(p) in {"yaml", "yml"}:
        p.write_text(yaml.safe_dump(report, sort_keys=False), encoding="utf-8")
    else:
        p.write_text(json.dumps(report, indent=2, sort_keys=True) + "\n", encoding="utf-8")
    logger.debug("Run report written to %s", p)
