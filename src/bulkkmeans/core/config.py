from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigurationError
from .io import load_yaml

STRATEGIES = ("single_stage", "two_stage")
EMIT_MODES = ("points", "centroids")


@dataclass
class RunConfig:
    # I/O (None -> default data set / stdout)
    points: Optional[str] = None
    centroids: Optional[str] = None
    output: Optional[str] = None
    emit: str = "points"  # "points" (labeled) or "centroids"

    # Algorithm
    iterations: int = 10
    k: Optional[int] = None  # fixes the id universe to 1..k
    strategy: str = "single_stage"  # or "two_stage"
    parallelism: int = 1  # hint only; partitions for assignment

    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    manifest: bool = True

    def validate(self) -> "RunConfig":
        if self.iterations < 0:
            raise ConfigurationError(f"iterations must be >= 0, got {self.iterations}")
        if self.k is not None and self.k <= 0:
            raise ConfigurationError(f"k must be > 0, got {self.k}")
        if self.parallelism < 1:
            raise ConfigurationError(f"parallelism must be >= 1, got {self.parallelism}")
        if self.strategy not in STRATEGIES:
            raise ConfigurationError(f"Unknown strategy {self.strategy!r}; expected one of {STRATEGIES}")
        if self.emit not in EMIT_MODES:
            raise ConfigurationError(f"Unknown emit mode {self.emit!r}; expected one of {EMIT_MODES}")
        return self

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, payload: Dict[str, Any]) -> "RunConfig":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(payload) - known)
        if unknown:
            raise ConfigurationError(f"Unknown config keys: {unknown}")
        return cls(**payload).validate()

    @classmethod
    def from_yaml(cls, path: Path | str) -> "RunConfig":
        payload = load_yaml(path) or {}
        if not isinstance(payload, dict):
            raise ConfigurationError(f"{path}: expected a mapping at the top level")
        return cls.from_dict(payload)

    def merged(self, **overrides: Any) -> "RunConfig":
        """Copy with every non-None override applied (CLI flags over YAML)."""
        data = self.to_dict()
        data.update({k: v for k, v in overrides.items() if v is not None})
        return RunConfig.from_dict(data)
