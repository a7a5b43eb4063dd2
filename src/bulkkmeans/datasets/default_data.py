from __future__ import annotations
import numpy as np

from ..clustering.geometry import CentroidSet

# id, x, y
DEFAULT_CENTROIDS = np.array(
    [
        [1, -31.85, -44.77],
        [2, 35.16, 17.46],
        [3, -5.16, 21.93],
        [4, -24.06, 6.81],
    ]
)

# Blob centers the default points are drawn around.
DEFAULT_BLOB_CENTERS = np.array(
    [
        [-30.0, -40.0],
        [30.0, 20.0],
        [0.0, 25.0],
        [-25.0, 5.0],
    ]
)


def default_centroids() -> CentroidSet:
    return CentroidSet(DEFAULT_CENTROIDS[:, 0].astype(np.int32), DEFAULT_CENTROIDS[:, 1:])


def default_points(n_per: int = 25, spread: float = 6.0, seed: int = 42) -> np.ndarray:
    """
    Gaussian blobs around the fixed centers; same seed -> same points.
    """
    rng = np.random.default_rng(seed)
    Xs = [c + spread * rng.normal(size=(n_per, 2)) for c in DEFAULT_BLOB_CENTERS]
    return np.round(np.vstack(Xs), 2).astype(np.float64)
