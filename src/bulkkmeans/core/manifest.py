from __future__ import annotations

import platform
import subprocess
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

from .io import ensure_dir, save_json


@dataclass
class Manifest:
    name: str  # e.g., "bulkkmeans/run"
    version: str
    timestamp: str  # ISO8601
    config: Dict[str, Any]
    inputs: List[str]
    outputs: Dict[str, str]
    rounds: int
    env: Dict[str, str]
    git: Dict[str, str]


def _git_info() -> Dict[str, str]:
    def _run(args):
        try:
            return subprocess.check_output(args, stderr=subprocess.DEVNULL).decode().strip()
        except (OSError, subprocess.CalledProcessError):
            return ""

    commit = _run(["git", "rev-parse", "--short", "HEAD"])
    dirty = "true" if _run(["git", "status", "--porcelain"]) else "false"
    return {"commit": commit, "dirty": dirty}


def _env_info() -> Dict[str, str]:
    return {
        "python": platform.python_version(),
        "numpy": np.__version__,
        "pandas": pd.__version__,
        "platform": platform.platform(),
    }


def write_manifest(
    out_dir: Path | str,
    name: str,
    version: str,
    config: Dict[str, Any],
    inputs: List[str],
    outputs: Dict[str, str],
    rounds: int,
) -> Manifest:
    ts = datetime.now(timezone.utc).isoformat()
    man = Manifest(
        name=name,
        version=version,
        timestamp=ts,
        config=config,
        inputs=inputs,
        outputs=outputs,
        rounds=rounds,
        env=_env_info(),
        git=_git_info(),
    )
    out_dir = ensure_dir(Path(out_dir))
    save_json(out_dir / "manifest.json", asdict(man))
    return man
