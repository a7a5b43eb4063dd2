from __future__ import annotations

import logging
import warnings
from contextlib import nullcontext
from dataclasses import dataclass, field
from enum import Enum
from multiprocessing.pool import ThreadPool
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np

from ..core.errors import ConfigurationError, StarvedCentroidWarning
from .aggregation import Aggregator, make_aggregator
from .assignment import assign_partitions, nearest_centroid_ids, split_partitions
from .geometry import Centroid, CentroidSet, Point, as_points
from .repair import repair_centroids

log = logging.getLogger("bulkkmeans.iteration")

CentroidsLike = Union[CentroidSet, Iterable[Centroid]]


class RunState(str, Enum):
    INITIALIZING = "initializing"
    RUNNING = "running"
    FINALIZING = "finalizing"
    DONE = "done"


@dataclass(frozen=True)
class RoundResult:
    centroids: CentroidSet
    starved: Tuple[int, ...]


@dataclass(frozen=True)
class KMeansResult:
    centroids: CentroidSet
    labels: np.ndarray  # (n,) centroid id per point
    points: np.ndarray  # (n, 2)
    rounds: int
    starved: Dict[int, Tuple[int, ...]]  # round -> starved ids (only rounds with any)

    def labeled(self) -> List[Tuple[int, Point]]:
        return [(int(c), Point(float(x), float(y))) for c, (x, y) in zip(self.labels, self.points)]


def synthesize_ids(k: int) -> List[int]:
    if k <= 0:
        raise ConfigurationError(f"k must be > 0, got {k}")
    return list(range(1, k + 1))


def fill_id_universe(centroids: CentroidSet, k: int) -> CentroidSet:
    """
    Restrict a centroid set to ids 1..k. Ids missing from the input start at the origin.
    """
    universe = synthesize_ids(k)
    dropped = [i for i in centroids.id_list() if i > k]
    dropped += [i for i in centroids.id_list() if i < 1]
    missing = [i for i in universe if i not in centroids]
    if dropped:
        log.info(f"Ignoring centroid ids outside 1..{k}: {sorted(dropped)}")
    if missing:
        log.info(f"Centroid ids {missing} not in the input set; starting them at (0, 0)")
    positions = [tuple(centroids.position(i)) if i in centroids else (0.0, 0.0) for i in universe]
    return CentroidSet(np.array(universe, dtype=np.int32), np.array(positions, dtype=np.float64))


def run_round(
    partitions: Sequence[np.ndarray],
    centroids: CentroidSet,
    aggregator: Aggregator,
    pool: Optional[ThreadPool] = None,
    round_no: Optional[int] = None,
) -> RoundResult:
    """One bulk round: assign -> aggregate -> repair. Returns a brand-new centroid set."""
    records = assign_partitions(partitions, centroids, pool)
    means = aggregator.aggregate(records)
    report = repair_centroids(centroids, means, round_no)
    return RoundResult(report.centroids, report.starved)


@dataclass
class BulkKMeans:
    iterations: int = 10
    strategy: str = "single_stage"  # "single_stage" or "two_stage"
    parallelism: int = 1  # assignment partitions; changes results only for "two_stage"
    k: Optional[int] = None  # id universe 1..k

    state_: RunState = RunState.INITIALIZING
    cluster_centers_: CentroidSet | None = None
    history_: List[CentroidSet] = field(default_factory=list)  # centroid set after each round
    starved_: Dict[int, Tuple[int, ...]] = field(default_factory=dict)

    def _initial_centroids(self, centroids: CentroidsLike) -> CentroidSet:
        cs = centroids if isinstance(centroids, CentroidSet) else CentroidSet.from_centroids(centroids)
        if len(cs) == 0:
            raise ConfigurationError("Initial centroid set is empty")
        if self.k is not None:
            cs = fill_id_universe(cs, self.k)
        return cs

    def fit(self, points, centroids: CentroidsLike) -> "BulkKMeans":
        """
        Run exactly `iterations` bulk rounds starting from `centroids`.
        Nothing is stored unless every round completes.
        """
        self.state_ = RunState.INITIALIZING
        if self.iterations < 0:
            raise ConfigurationError(f"iterations must be >= 0, got {self.iterations}")
        aggregator = make_aggregator(self.strategy)
        X = as_points(points)
        current = self._initial_centroids(centroids)
        partitions = split_partitions(X, self.parallelism)
        log.debug(
            f"{len(current)} centroids, {X.shape[0]} points in {len(partitions)} partitions, "
            f"{self.iterations} rounds ({aggregator.name})"
        )

        history: List[CentroidSet] = []
        starved: Dict[int, Tuple[int, ...]] = {}
        pool_ctx = ThreadPool(len(partitions)) if len(partitions) > 1 else nullcontext()
        with pool_ctx as pool:
            for r in range(1, self.iterations + 1):
                self.state_ = RunState.RUNNING
                result = run_round(partitions, current, aggregator, pool, round_no=r)
                if result.starved:
                    starved[r] = result.starved
                    warnings.warn(StarvedCentroidWarning(r, result.starved), stacklevel=2)
                current = result.centroids
                history.append(current)

        self.cluster_centers_ = current
        self.history_ = history
        self.starved_ = starved
        self.state_ = RunState.FINALIZING
        return self

    def predict(self, points) -> np.ndarray:
        assert self.cluster_centers_ is not None, "Call fit() first."
        return nearest_centroid_ids(as_points(points), self.cluster_centers_)

    def fit_predict(self, points, centroids: CentroidsLike) -> np.ndarray:
        return self.fit(points, centroids).predict(points)

    def run(self, points, centroids: CentroidsLike) -> KMeansResult:
        """fit, then label every point against the final centroid set."""
        X = as_points(points)
        self.fit(X, centroids)
        labels = self.predict(X)
        self.state_ = RunState.DONE
        return KMeansResult(self.cluster_centers_, labels, X, self.iterations, dict(self.starved_))
