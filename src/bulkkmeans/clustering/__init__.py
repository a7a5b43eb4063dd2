# Bulk-iteration K-Means engine. Explicit re-exports for a clean public API.

from .aggregation import (
    AGGREGATORS as AGGREGATORS,
    Aggregator as Aggregator,
    PartialAggregate as PartialAggregate,
    PartitionMeanAggregator as PartitionMeanAggregator,
    SumCountAggregator as SumCountAggregator,
    make_aggregator as make_aggregator,
)
from .assignment import (
    UNASSIGNED as UNASSIGNED,
    Assignments as Assignments,
    assign as assign,
    assign_partitions as assign_partitions,
    nearest_centroid_ids as nearest_centroid_ids,
    split_partitions as split_partitions,
)
from .geometry import (
    Centroid as Centroid,
    CentroidSet as CentroidSet,
    Point as Point,
    as_points as as_points,
    euclidean_distance as euclidean_distance,
    point_distances as point_distances,
)
from .iteration import (
    BulkKMeans as BulkKMeans,
    KMeansResult as KMeansResult,
    RoundResult as RoundResult,
    RunState as RunState,
    fill_id_universe as fill_id_universe,
    run_round as run_round,
    synthesize_ids as synthesize_ids,
)
from .repair import RepairReport as RepairReport, repair_centroids as repair_centroids

__all__ = [
    "AGGREGATORS",
    "Aggregator",
    "PartialAggregate",
    "PartitionMeanAggregator",
    "SumCountAggregator",
    "make_aggregator",
    "UNASSIGNED",
    "Assignments",
    "assign",
    "assign_partitions",
    "nearest_centroid_ids",
    "split_partitions",
    "Centroid",
    "CentroidSet",
    "Point",
    "as_points",
    "euclidean_distance",
    "point_distances",
    "BulkKMeans",
    "KMeansResult",
    "RoundResult",
    "RunState",
    "fill_id_universe",
    "run_round",
    "synthesize_ids",
    "RepairReport",
    "repair_centroids",
]
