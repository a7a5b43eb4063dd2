import numpy as np
import pytest

from bulkkmeans.clustering.aggregation import (
    PartialAggregate,
    PartitionMeanAggregator,
    SumCountAggregator,
    make_aggregator,
)
from bulkkmeans.clustering.assignment import Assignments
from bulkkmeans.core.errors import ConfigurationError


def records(cid, pts):
    pts = np.asarray(pts, dtype=np.float64).reshape(-1, 2)
    return Assignments(np.full(len(pts), cid, dtype=np.int32), pts)


def test_partial_aggregate_sums_and_counts():
    r = Assignments(np.array([2, 1, 2], dtype=np.int32), np.array([[1.0, 1.0], [5.0, 6.0], [3.0, 5.0]]))
    pa = PartialAggregate.of(r)
    assert pa.ids.tolist() == [1, 2]
    assert pa.counts.tolist() == [1, 2]
    np.testing.assert_allclose(pa.sums, [[5.0, 6.0], [4.0, 6.0]])
    merged = pa.combine(PartialAggregate.of(records(3, [[1.0, 1.0]])))
    assert merged.ids.tolist() == [1, 2, 3]
    assert merged.counts.tolist() == [1, 2, 1]


def test_single_stage_mean_is_exact():
    rng = np.random.default_rng(0)
    X = rng.normal(size=(137, 2)) * 100
    parts = [records(4, X[:10]), records(4, X[10:100]), records(4, X[100:])]
    means = SumCountAggregator().aggregate(parts)
    assert means.id_list() == [4]
    np.testing.assert_allclose(means.positions[0], X.sum(axis=0) / len(X), atol=1e-9)


def test_single_stage_ignores_partitioning():
    rng = np.random.default_rng(3)
    ids = rng.integers(1, 4, size=60).astype(np.int32)
    X = rng.normal(size=(60, 2))
    whole = SumCountAggregator().aggregate([Assignments(ids, X)])
    split = SumCountAggregator().aggregate([Assignments(ids[:7], X[:7]), Assignments(ids[7:], X[7:])])
    assert whole.id_list() == split.id_list()
    np.testing.assert_allclose(whole.positions, split.positions, atol=1e-12)


def test_two_stage_matches_single_stage_on_uniform_partitions():
    parts = [records(1, [[0.0, 0.0], [2.0, 2.0]]), records(1, [[4.0, 4.0], [6.0, 6.0]])]
    single = SumCountAggregator().aggregate(parts)
    two = PartitionMeanAggregator().aggregate(parts)
    np.testing.assert_allclose(single.positions, [[3.0, 3.0]])
    np.testing.assert_allclose(two.positions, single.positions)


def test_two_stage_bias_on_unequal_partitions():
    # partition A: 3 points summing to (0, 0); partition B: one point at (10, 10)
    parts = [records(1, [[-1.0, -1.0], [1.0, 1.0], [0.0, 0.0]]), records(1, [[10.0, 10.0]])]
    single = SumCountAggregator().aggregate(parts)
    two = PartitionMeanAggregator().aggregate(parts)
    np.testing.assert_allclose(single.positions, [[2.5, 2.5]])
    np.testing.assert_allclose(two.positions, [[5.0, 5.0]])


def test_only_ids_with_points_get_a_mean():
    parts = [records(1, [[1.0, 1.0]]), records(3, np.empty((0, 2)))]
    for agg in (SumCountAggregator(), PartitionMeanAggregator()):
        assert agg.aggregate(parts).id_list() == [1]
        assert len(agg.aggregate([])) == 0


def test_make_aggregator():
    assert isinstance(make_aggregator("single_stage"), SumCountAggregator)
    assert isinstance(make_aggregator("two_stage"), PartitionMeanAggregator)
    with pytest.raises(ConfigurationError):
        make_aggregator("weighted")


def test_unflagged_records_are_skipped_by_both_strategies():
    r = Assignments(
        np.array([-1, -1], dtype=np.int32),
        np.array([[np.nan, 0.0], [4.0, 4.0]]),
        assigned=np.array([False, True]),
    )
    for agg in (SumCountAggregator(), PartitionMeanAggregator()):
        means = agg.aggregate([r])
        assert means.id_list() == [-1]
        np.testing.assert_array_equal(means.positions, [[4.0, 4.0]])
