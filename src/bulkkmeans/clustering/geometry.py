from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List

import numpy as np

from ..core.errors import ConfigurationError


@dataclass(frozen=True)
class Point:
    x: float
    y: float

    def add(self, other: "Point") -> "Point":
        return Point(self.x + other.x, self.y + other.y)

    def div(self, count: int) -> "Point":
        # count > 0 is the caller's responsibility
        return Point(self.x / count, self.y / count)

    def __add__(self, other: "Point") -> "Point":
        return self.add(other)

    def __iter__(self) -> Iterator[float]:
        yield self.x
        yield self.y


@dataclass(frozen=True)
class Centroid:
    id: int
    position: Point

    @classmethod
    def of(cls, id: int, x: float, y: float) -> "Centroid":
        return cls(int(id), Point(float(x), float(y)))


def euclidean_distance(p: Point, c: Centroid) -> float:
    """sqrt(dx^2 + dy^2); NaN and inf propagate."""
    dx = p.x - c.position.x
    dy = p.y - c.position.y
    return math.sqrt(dx * dx + dy * dy)


def point_distances(points: np.ndarray, positions: np.ndarray) -> np.ndarray:
    """
    Euclidean distances between every point and every centroid position.
    points: (n, 2), positions: (k, 2)  ->  D: (n, k)

    Uses the direct difference form so equal distances compare equal.
    """
    diff = points[:, None, :] - positions[None, :, :]
    return np.sqrt((diff * diff).sum(axis=2))


def as_points(points) -> np.ndarray:
    """Read-only (n, 2) float64 view of a point collection."""
    if isinstance(points, np.ndarray):
        arr = np.array(points, dtype=np.float64)
    else:
        arr = np.array([tuple(p) for p in points], dtype=np.float64)
    if arr.size == 0:
        arr = arr.reshape(0, 2)
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ConfigurationError(f"points must have shape (n, 2), got {arr.shape}")
    arr.flags.writeable = False
    return arr


@dataclass(frozen=True, eq=False)
class CentroidSet:
    """
    Immutable centroid snapshot shared read-only by all work in one round.
    Stored in ascending-id order; this order is the tie-breaking order of assignment.
    """

    ids: np.ndarray  # (k,) int32
    positions: np.ndarray  # (k, 2) float64
    _index: dict = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        ids = np.asarray(self.ids, dtype=np.int32).ravel()
        pos = np.asarray(self.positions, dtype=np.float64).reshape(-1, 2)
        if ids.shape[0] != pos.shape[0]:
            raise ConfigurationError(f"{ids.shape[0]} centroid ids for {pos.shape[0]} positions")
        uniq, counts = np.unique(ids, return_counts=True)
        if (counts > 1).any():
            raise ConfigurationError(f"Duplicate centroid ids: {uniq[counts > 1].tolist()}")
        order = np.argsort(ids, kind="stable")
        ids, pos = ids[order].copy(), pos[order].copy()
        ids.flags.writeable = False
        pos.flags.writeable = False
        object.__setattr__(self, "ids", ids)
        object.__setattr__(self, "positions", pos)
        object.__setattr__(self, "_index", {int(i): j for j, i in enumerate(ids)})

    @classmethod
    def from_centroids(cls, centroids: Iterable[Centroid]) -> "CentroidSet":
        cs = list(centroids)
        return cls(
            np.array([c.id for c in cs], dtype=np.int32),
            np.array([[c.position.x, c.position.y] for c in cs], dtype=np.float64).reshape(-1, 2),
        )

    @classmethod
    def empty(cls) -> "CentroidSet":
        return cls(np.empty(0, dtype=np.int32), np.empty((0, 2), dtype=np.float64))

    def __len__(self) -> int:
        return int(self.ids.shape[0])

    def __contains__(self, cid: int) -> bool:
        return int(cid) in self._index

    def __iter__(self) -> Iterator[Centroid]:
        for i, (x, y) in zip(self.ids, self.positions):
            yield Centroid.of(i, x, y)

    def position(self, cid: int) -> Point:
        x, y = self.positions[self._index[int(cid)]]
        return Point(float(x), float(y))

    def id_list(self) -> List[int]:
        return [int(i) for i in self.ids]

    def to_centroids(self) -> List[Centroid]:
        return list(self)
