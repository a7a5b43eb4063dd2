"""
End-to-end job: acquire inputs, run the bulk iterations, emit the result.

Output is written only after the final labeling pass succeeds, so a failed run
leaves nothing behind.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import numpy as np

from .clustering.geometry import CentroidSet, as_points
from .clustering.iteration import BulkKMeans, KMeansResult
from .core.config import RunConfig
from .core.io import read_centroids, read_points, write_centroids, write_labeled_points
from .core.manifest import write_manifest
from .core.timers import timed
from .datasets.default_data import default_centroids, default_points

__version__ = "0.1.0"

log = logging.getLogger("bulkkmeans.pipeline")


@dataclass(frozen=True)
class JobOutput:
    result: KMeansResult
    ids: np.ndarray  # first output column: centroid id
    xy: np.ndarray  # (m, 2)
    path: Optional[Path] = None

    def records(self) -> List[Tuple[int, float, float]]:
        return [(int(i), float(x), float(y)) for i, (x, y) in zip(self.ids, self.xy)]


def load_points(cfg: RunConfig) -> np.ndarray:
    if cfg.points:
        return as_points(read_points(cfg.points))
    log.info("Executing K-Means with default point data set.")
    log.info("Use --points to specify file input.")
    return as_points(default_points())


def load_centroids(cfg: RunConfig) -> CentroidSet:
    if cfg.centroids:
        ids, positions = read_centroids(cfg.centroids)
        return CentroidSet(ids, positions)
    log.info("Executing K-Means with default centroid data set.")
    log.info("Use --centroids to specify file input.")
    return default_centroids()


def run_job(cfg: RunConfig) -> JobOutput:
    cfg.validate()
    points = load_points(cfg)
    centroids = load_centroids(cfg)
    km = BulkKMeans(iterations=cfg.iterations, strategy=cfg.strategy, parallelism=cfg.parallelism, k=cfg.k)

    with timed("Total time", log):
        result = km.run(points, centroids)

    if cfg.emit == "centroids":
        ids, xy = result.centroids.ids, result.centroids.positions
    else:
        ids, xy = result.labels, result.points

    if not cfg.output:
        return JobOutput(result, ids, xy)

    write = write_centroids if cfg.emit == "centroids" else write_labeled_points
    out = write(cfg.output, ids, xy)
    log.info(f"Wrote {len(ids)} {cfg.emit} records to {out}")
    if cfg.manifest:
        write_manifest(
            out.parent,
            "bulkkmeans/run",
            __version__,
            cfg.to_dict(),
            [p for p in (cfg.points, cfg.centroids) if p],
            {cfg.emit: str(out)},
            result.rounds,
        )
    return JobOutput(result, ids, xy, out)
