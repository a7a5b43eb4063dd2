"""
Per-round reduction of assignment records into centroid means.

Two strategies share the `Aggregator` interface:

- ``single_stage``: each partition emits (sum, count) per id; partials are
  combined by adding sums and counts, then divided once. Exact for any partitioning.
- ``two_stage``: each partition emits its own mean per id (count dropped);
  partition means are then averaged without weights. This matches
  ``single_stage`` only when every partition holds the same number of points
  for an id, otherwise the result is biased toward small partitions.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Sequence, Type

import numpy as np

from ..core.errors import ConfigurationError
from .assignment import Assignments
from .geometry import CentroidSet


@dataclass(frozen=True)
class PartialAggregate:
    """Per-id coordinate sums and point counts for one partition (or a combination of them)."""

    ids: np.ndarray  # (m,) int32, ascending
    sums: np.ndarray  # (m, 2) float64
    counts: np.ndarray  # (m,) int64

    @classmethod
    def of(cls, records: Assignments) -> "PartialAggregate":
        keep = records.assigned_mask()
        ids, inverse = np.unique(records.centroid_ids[keep], return_inverse=True)
        sums = np.zeros((ids.shape[0], 2), dtype=np.float64)
        counts = np.zeros(ids.shape[0], dtype=np.int64)
        np.add.at(sums, inverse, records.points[keep])
        np.add.at(counts, inverse, 1)
        return cls(ids.astype(np.int32), sums, counts)

    def combine(self, other: "PartialAggregate") -> "PartialAggregate":
        ids = np.union1d(self.ids, other.ids).astype(np.int32)
        sums = np.zeros((ids.shape[0], 2), dtype=np.float64)
        counts = np.zeros(ids.shape[0], dtype=np.int64)
        for part in (self, other):
            idx = np.searchsorted(ids, part.ids)
            sums[idx] += part.sums
            counts[idx] += part.counts
        return PartialAggregate(ids, sums, counts)

    def means(self) -> CentroidSet:
        keep = self.counts > 0
        return CentroidSet(self.ids[keep], self.sums[keep] / self.counts[keep, None])


def _empty_partial() -> PartialAggregate:
    return PartialAggregate(
        np.empty(0, dtype=np.int32), np.empty((0, 2), dtype=np.float64), np.empty(0, dtype=np.int64)
    )


class Aggregator(ABC):
    """Reduces a round's assignment partitions to one mean per id that received points."""

    name: str = ""

    @abstractmethod
    def aggregate(self, partitions: Sequence[Assignments]) -> CentroidSet:
        """
        Args:
            partitions: assignment records of the whole round, split into sub-groups

        Returns:
            centroid means, only for ids with at least one assigned point
        """


class SumCountAggregator(Aggregator):
    """Local (sum, count) combine, global sum/count reduce."""

    name = "single_stage"

    def aggregate(self, partitions: Sequence[Assignments]) -> CentroidSet:
        total = _empty_partial()
        for records in partitions:
            total = total.combine(PartialAggregate.of(records))
        return total.means()


class PartitionMeanAggregator(Aggregator):
    """Local mean per partition, then an unweighted mean of those means."""

    name = "two_stage"

    def aggregate(self, partitions: Sequence[Assignments]) -> CentroidSet:
        partial_means: List[CentroidSet] = [PartialAggregate.of(r).means() for r in partitions]
        if not partial_means:
            return CentroidSet.empty()
        ids = np.concatenate([m.ids for m in partial_means])
        xy = np.concatenate([m.positions for m in partial_means])
        # Every partition mean counts once, whatever its size.
        return PartialAggregate.of(Assignments(ids, xy)).means()


AGGREGATORS: Dict[str, Type[Aggregator]] = {
    SumCountAggregator.name: SumCountAggregator,
    PartitionMeanAggregator.name: PartitionMeanAggregator,
}


def make_aggregator(name: str) -> Aggregator:
    try:
        return AGGREGATORS[name]()
    except KeyError:
        raise ConfigurationError(
            f"Unknown aggregation strategy {name!r}; expected one of {sorted(AGGREGATORS)}"
        ) from None
