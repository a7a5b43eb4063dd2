from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Tuple

import numpy as np
import pandas as pd
import yaml

from .errors import DataFormatError


def ensure_dir(path: Path | str) -> Path:
    p = Path(path)
    p.mkdir(parents=True, exist_ok=True)
    return p


def load_json(path: Path | str) -> Any:
    return json.loads(Path(path).read_text())


def save_json(path: Path | str, payload: Any) -> None:
    p = Path(path)
    ensure_dir(p.parent)
    p.write_text(json.dumps(payload, indent=2))


def load_yaml(path: Path | str) -> Any:
    return yaml.safe_load(Path(path).read_text())


def save_yaml(path: Path | str, payload: Any) -> None:
    p = Path(path)
    ensure_dir(p.parent)
    p.write_text(yaml.safe_dump(payload, sort_keys=False))


def _read_records(path: Path | str, columns: list[str]) -> pd.DataFrame:
    """
    Read space-delimited records with exactly len(columns) fields per line.
    Empty files yield an empty frame; anything unparseable raises DataFormatError.
    """
    p = Path(path)
    if not p.is_file():
        raise FileNotFoundError(f"Cannot open input: {p}")
    if not p.read_text().strip():
        return pd.DataFrame({c: pd.Series(dtype=np.float64) for c in columns})
    try:
        df = pd.read_csv(p, sep=" ", header=None, dtype=str, keep_default_na=False, na_filter=False)
    except pd.errors.ParserError as e:
        raise DataFormatError(str(p), f"expected {len(columns)} space-separated fields per line") from e
    if df.shape[1] != len(columns) or df.isna().any().any():
        raise DataFormatError(str(p), f"expected {len(columns)} space-separated fields per line")
    df.columns = columns
    try:
        return df.astype(np.float64)
    except ValueError as e:
        raise DataFormatError(str(p), f"non-numeric field ({e})") from e


def read_points(path: Path | str) -> np.ndarray:
    """Parse `"x y"` lines into an (n, 2) float64 array."""
    df = _read_records(path, ["x", "y"])
    return df[["x", "y"]].to_numpy(dtype=np.float64)


def read_centroids(path: Path | str) -> Tuple[np.ndarray, np.ndarray]:
    """Parse `"id x y"` lines into (ids (k,), positions (k, 2))."""
    df = _read_records(path, ["id", "x", "y"])
    raw_ids = df["id"].to_numpy()
    if not np.all(np.mod(raw_ids, 1) == 0):
        raise DataFormatError(str(path), "centroid ids must be integers")
    lo, hi = np.iinfo(np.int32).min, np.iinfo(np.int32).max
    if ((raw_ids < lo) | (raw_ids > hi)).any():
        raise DataFormatError(str(path), f"centroid ids must fit in int32 [{lo}, {hi}]")
    return raw_ids.astype(np.int32), df[["x", "y"]].to_numpy(dtype=np.float64)


def _write_records(path: Path | str, ids: np.ndarray, xy: np.ndarray) -> Path:
    p = Path(path)
    ensure_dir(p.parent)
    df = pd.DataFrame({"id": np.asarray(ids, dtype=np.int64), "x": xy[:, 0], "y": xy[:, 1]})
    df.to_csv(p, sep=" ", header=False, index=False)
    return p


def write_labeled_points(path: Path | str, labels: np.ndarray, points: np.ndarray) -> Path:
    """One `"centroid_id x y"` line per point."""
    return _write_records(path, labels, points)


def write_centroids(path: Path | str, ids: np.ndarray, positions: np.ndarray) -> Path:
    """One `"id x y"` line per centroid."""
    return _write_records(path, ids, positions)


def format_records(ids: np.ndarray, xy: np.ndarray) -> str:
    return "\n".join(f"{int(i)} {float(x)!r} {float(y)!r}" for i, (x, y) in zip(ids, xy))
