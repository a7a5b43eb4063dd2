from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Tuple

import numpy as np

from .geometry import CentroidSet

log = logging.getLogger("bulkkmeans.repair")


@dataclass(frozen=True)
class RepairReport:
    centroids: CentroidSet
    starved: Tuple[int, ...]  # ids that kept their previous position
    dropped: Tuple[int, ...]  # means whose id is not part of the run


def repair_centroids(previous: CentroidSet, means: CentroidSet, round_no: Optional[int] = None) -> RepairReport:
    """
    Exactly one centroid per id of `previous`: the new mean when there is one,
    otherwise the previous position unchanged.
    """
    has_mean = np.isin(previous.ids, means.ids)
    positions = np.array(previous.positions, dtype=np.float64)
    if has_mean.any():
        src = np.searchsorted(means.ids, previous.ids[has_mean])
        positions[has_mean] = means.positions[src]
    starved = tuple(int(i) for i in previous.ids[~has_mean])
    dropped = tuple(int(i) for i in means.ids[~np.isin(means.ids, previous.ids)])

    where = f"round {round_no}: " if round_no is not None else ""
    if starved:
        log.info(f"{where}centroid ids {list(starved)} received no points; keeping previous positions")
    if dropped:
        log.debug(f"{where}ignoring means for unknown ids {list(dropped)}")
    return RepairReport(CentroidSet(previous.ids, positions), starved, dropped)
