# Shared utilities for the clustering engine. Explicit re-exports for a clean public API.

from .config import RunConfig as RunConfig
from .errors import (
    BulkKMeansError as BulkKMeansError,
    ConfigurationError as ConfigurationError,
    DataFormatError as DataFormatError,
    StarvedCentroidWarning as StarvedCentroidWarning,
)
from .io import (
    ensure_dir as ensure_dir,
    load_json as load_json,
    load_yaml as load_yaml,
    read_centroids as read_centroids,
    read_points as read_points,
    save_json as save_json,
    save_yaml as save_yaml,
    write_centroids as write_centroids,
    write_labeled_points as write_labeled_points,
)
from .log import get_logger as get_logger
from .manifest import Manifest as Manifest, write_manifest as write_manifest
from .timers import Timer as Timer, timed as timed

__all__ = [
    "RunConfig",
    "BulkKMeansError",
    "ConfigurationError",
    "DataFormatError",
    "StarvedCentroidWarning",
    "ensure_dir",
    "load_json",
    "load_yaml",
    "read_centroids",
    "read_points",
    "save_json",
    "save_yaml",
    "write_centroids",
    "write_labeled_points",
    "get_logger",
    "Manifest",
    "write_manifest",
    "Timer",
    "timed",
]
