from __future__ import annotations

from dataclasses import dataclass
from multiprocessing.pool import ThreadPool
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..core.errors import ConfigurationError
from .geometry import CentroidSet, point_distances

UNASSIGNED = -1  # no distance compared smaller than +inf (all NaN / inf)


@dataclass(frozen=True)
class Assignments:
    """(centroid_id, point) records for one partition, as parallel arrays."""

    centroid_ids: np.ndarray  # (n,) int32
    points: np.ndarray  # (n, 2) float64
    assigned: Optional[np.ndarray] = None  # (n,) bool; None means every record has a centroid

    def assigned_mask(self) -> np.ndarray:
        if self.assigned is None:
            return np.ones(self.centroid_ids.shape[0], dtype=bool)
        return self.assigned

    def __len__(self) -> int:
        return int(self.centroid_ids.shape[0])


def _nearest(points: np.ndarray, centroids: CentroidSet) -> Tuple[np.ndarray, np.ndarray]:
    """
    (centroid id, assigned flag) for every point.

    Scans centroids in set order and moves a point only on a strictly smaller
    distance, so ties keep the first centroid seen.
    """
    if len(centroids) == 0:
        raise ConfigurationError("Cannot assign points against an empty centroid set")
    n = points.shape[0]
    best = np.full(n, np.inf)
    labels = np.full(n, UNASSIGNED, dtype=np.int32)
    D = point_distances(points, centroids.positions)  # (n, k)
    for j, cid in enumerate(centroids.ids):
        closer = D[:, j] < best
        best = np.where(closer, D[:, j], best)
        labels[closer] = cid
    # -1 is also a legal centroid id, so the flag, not the label, marks unassigned points
    return labels, best < np.inf


def nearest_centroid_ids(points: np.ndarray, centroids: CentroidSet) -> np.ndarray:
    """Id of the nearest centroid for every point (UNASSIGNED if none compares closer than +inf)."""
    return _nearest(points, centroids)[0]


def assign(points: np.ndarray, centroids: CentroidSet) -> Assignments:
    labels, assigned = _nearest(points, centroids)
    return Assignments(labels, points, assigned)


def split_partitions(points: np.ndarray, parallelism: int) -> List[np.ndarray]:
    """Contiguous, near-equal partitions of the point set (never more than the point count)."""
    if parallelism < 1:
        raise ConfigurationError(f"parallelism must be >= 1, got {parallelism}")
    n_parts = max(1, min(parallelism, points.shape[0]))
    return np.array_split(points, n_parts)


def assign_partitions(
    partitions: Sequence[np.ndarray],
    centroids: CentroidSet,
    pool: Optional[ThreadPool] = None,
) -> List[Assignments]:
    """
    Map assignment over partitions. The centroid set is the same read-only
    snapshot for every partition; results come back in partition order once all finish.
    """
    if len(centroids) == 0:
        raise ConfigurationError("Cannot assign points against an empty centroid set")
    if pool is None or len(partitions) <= 1:
        return [assign(part, centroids) for part in partitions]
    return pool.starmap(assign, [(part, centroids) for part in partitions])
