from pathlib import Path

import numpy as np
import pytest

from bulkkmeans.core.config import RunConfig
from bulkkmeans.core.errors import ConfigurationError, DataFormatError
from bulkkmeans.core.io import load_json, read_centroids, read_points
from bulkkmeans.pipeline import run_job


def write_inputs(tmp_path: Path, points: str, centroids: str):
    p = tmp_path / "points.txt"
    c = tmp_path / "centroids.txt"
    p.write_text(points)
    c.write_text(centroids)
    return str(p), str(c)


def test_labeled_points_written_with_manifest(tmp_path: Path):
    pts, cen = write_inputs(tmp_path, "1 1\n1 2\n9 9\n9 10\n", "1 0 0\n2 10 10\n")
    out = tmp_path / "out" / "clustered.txt"
    job = run_job(RunConfig(points=pts, centroids=cen, output=str(out), iterations=5))
    assert job.path == out
    rows = np.loadtxt(out)
    assert rows[:, 0].astype(int).tolist() == [1, 1, 2, 2]
    np.testing.assert_allclose(rows[:, 1:], [[1, 1], [1, 2], [9, 9], [9, 10]])
    man = load_json(out.parent / "manifest.json")
    assert man["config"]["iterations"] == 5
    assert man["outputs"]["points"] == str(out)


def test_emit_centroids(tmp_path: Path):
    pts, cen = write_inputs(tmp_path, "1 1\n1 2\n9 9\n9 10\n", "2 10 10\n1 0 0\n3 50 -50\n")
    out = tmp_path / "centroids_out.txt"
    with pytest.warns(UserWarning):
        run_job(RunConfig(points=pts, centroids=cen, output=str(out), emit="centroids", manifest=False))
    ids, pos = read_centroids(out)
    assert ids.tolist() == [1, 2, 3]
    np.testing.assert_allclose(pos, [[1.0, 1.5], [9.0, 9.5], [50.0, -50.0]])
    assert not (tmp_path / "manifest.json").exists()


def test_default_data_set_without_paths(caplog):
    caplog.set_level("INFO", logger="bulkkmeans")
    job = run_job(RunConfig(iterations=3))
    assert job.path is None
    assert len(job.records()) == 100
    assert set(job.ids.tolist()) <= {1, 2, 3, 4}
    assert "default point data set" in caplog.text


def test_malformed_inputs_raise_data_format_error(tmp_path: Path):
    bad = tmp_path / "bad.txt"
    for text in ("1 2\nfoo 3\n", "1 2 3\n", "1 2\n3\n", "1 2\n1 2 3\n"):
        bad.write_text(text)
        with pytest.raises(DataFormatError):
            read_points(bad)
    bad.write_text("1.5 0 0\n")
    with pytest.raises(DataFormatError):
        read_centroids(bad)


def test_failed_run_writes_nothing(tmp_path: Path):
    pts, cen = write_inputs(tmp_path, "1 1\n", "")
    out = tmp_path / "never.txt"
    with pytest.raises(ConfigurationError):
        run_job(RunConfig(points=pts, centroids=cen, output=str(out)))
    assert not out.exists()


def test_nan_and_inf_coordinates_are_valid_records(tmp_path: Path):
    p = tmp_path / "points.txt"
    p.write_text("1 2\nNaN 3\ninf -inf\n")
    X = read_points(p)
    assert X.shape == (3, 2)
    assert np.isnan(X[1, 0]) and X[1, 1] == 3.0
    assert np.isposinf(X[2, 0]) and np.isneginf(X[2, 1])


def test_centroid_ids_outside_int32_are_rejected(tmp_path: Path):
    c = tmp_path / "centroids.txt"
    for text in ("4294967297 0 0\n2 5 5\n", "-2147483649 0 0\n"):
        c.write_text(text)
        with pytest.raises(DataFormatError):
            read_centroids(c)
    c.write_text("2147483647 0 0\n-2147483648 1 1\n")
    ids, _ = read_centroids(c)
    assert ids.tolist() == [2147483647, -2147483648]
