"""
Tests for greedy_feature_select.data
"""

import numpy as np
import pytest

from greedy_feature_select import (
    DatasetLoadError,
    GreedyFeatureSelectError,
    describe_dataset,
    extract_features,
    load_dataset,
)
from greedy_feature_select.data import read_chunk, split_raw_rows


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def write_dataset(path, X, y):
    """Write rows in the label-first scientific-notation text format."""
    with open(path, "w") as fh:
        for label, row in zip(y, X):
            values = [f"{float(label):.7e}"] + [f"{v:.7e}" for v in row]
            fh.write("  " + "  ".join(values) + "\n")
    return path


@pytest.fixture
def dataset_file(tmp_path):
    rng = np.random.default_rng(0)
    X = np.round(rng.normal(size=(50, 6)), 4)
    y = rng.integers(1, 3, 50)
    return write_dataset(tmp_path / "data.txt", X, y), X, y


# ---------------------------------------------------------------------------
# Tests: read_chunk
# ---------------------------------------------------------------------------

class TestReadChunk:
    CONTENT = b"1 0.5\n2 1.5\n1 2.5\n"   # lines start at bytes 0, 6 and 12

    @pytest.fixture
    def small_file(self, tmp_path):
        path = tmp_path / "small.txt"
        path.write_bytes(self.CONTENT)
        return path

    def test_whole_file(self, small_file):
        rows = read_chunk(small_file, 0, len(self.CONTENT))
        assert rows == [[1.0, 0.5], [2.0, 1.5], [1.0, 2.5]]

    def test_boundary_mid_line(self, small_file):
        first  = read_chunk(small_file, 0, 8)
        second = read_chunk(small_file, 8, len(self.CONTENT))
        assert first == [[1.0, 0.5], [2.0, 1.5]]
        assert second == [[1.0, 2.5]]

    def test_boundary_at_line_start(self, small_file):
        first  = read_chunk(small_file, 0, 6)
        second = read_chunk(small_file, 6, len(self.CONTENT))
        assert first == [[1.0, 0.5]]
        assert second == [[2.0, 1.5], [1.0, 2.5]]

    def test_every_split_point_reads_each_line_once(self, small_file):
        size = len(self.CONTENT)
        expected = read_chunk(small_file, 0, size)
        for cut in range(size + 1):
            rows = read_chunk(small_file, 0, cut) + read_chunk(small_file, cut, size)
            assert rows == expected, f"split at byte {cut}"

    def test_empty_range(self, small_file):
        assert read_chunk(small_file, 0, 0) == []

    def test_blank_lines_and_crlf(self, tmp_path):
        path = tmp_path / "crlf.txt"
        path.write_bytes(b"1 0.5\r\n\r\n2 1.5\r\n")
        assert read_chunk(path, 0, path.stat().st_size) == [[1.0, 0.5], [2.0, 1.5]]

    def test_bad_token_raises(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_bytes(b"1 0.5\n2 abc\n")
        with pytest.raises(DatasetLoadError, match="byte 6"):
            read_chunk(path, 0, path.stat().st_size)


# ---------------------------------------------------------------------------
# Tests: split_raw_rows
# ---------------------------------------------------------------------------

class TestSplitRawRows:
    def test_label_first(self):
        X, y = split_raw_rows([[2.0, 0.1, 0.2], [1.0, 0.3, 0.4]])
        assert y.tolist() == [2, 1]
        assert X.tolist() == [[0.1, 0.2], [0.3, 0.4]]

    def test_inconsistent_widths(self):
        with pytest.raises(DatasetLoadError, match="Inconsistent"):
            split_raw_rows([[1.0, 0.1, 0.2], [2.0, 0.3]])

    def test_no_rows(self):
        with pytest.raises(DatasetLoadError, match="No data"):
            split_raw_rows([])

    def test_nan_value_rejected(self):
        with pytest.raises(DatasetLoadError, match=r"Non-finite value in 1 row\(s\) \(first at row 2\)"):
            split_raw_rows([[1.0, 0.1], [2.0, float("nan")], [1.0, 0.2]])

    def test_nan_label_rejected(self):
        with pytest.raises(DatasetLoadError, match="Non-finite"):
            split_raw_rows([[float("nan"), 0.1], [2.0, 0.3]])


# ---------------------------------------------------------------------------
# Tests: load_dataset
# ---------------------------------------------------------------------------

class TestLoadDataset:
    def test_shapes_and_values(self, dataset_file):
        path, X, y = dataset_file
        X_loaded, y_loaded = load_dataset(path)
        assert X_loaded.shape == X.shape
        np.testing.assert_allclose(X_loaded, X)
        assert y_loaded.tolist() == y.tolist()

    @pytest.mark.parametrize("n_workers", [1, 2, 3, 7, 64])
    def test_worker_count_does_not_change_rows(self, dataset_file, n_workers):
        path, X, y = dataset_file
        X_loaded, y_loaded = load_dataset(path, n_workers=n_workers)
        np.testing.assert_allclose(X_loaded, X)
        assert y_loaded.tolist() == y.tolist()

    def test_scientific_notation_labels(self, tmp_path):
        path = tmp_path / "sci.txt"
        path.write_text("  2.0000000e+000  1.5000000e-001\n  1.0000000e+000  -3.0000000e+000\n")
        X, y = load_dataset(path)
        assert y.tolist() == [2, 1]
        assert X.tolist() == [[0.15], [-3.0]]

    @pytest.mark.parametrize("token", ["nan", "inf", "-inf"])
    def test_non_finite_value_rejected(self, tmp_path, token):
        path = tmp_path / "nonfinite.txt"
        path.write_text(f"1 {token}\n2 1.0\n1 0.1\n")
        with pytest.raises(DatasetLoadError, match="Non-finite"):
            load_dataset(path, n_workers=2)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DatasetLoadError, match="Failed to load dataset"):
            load_dataset(tmp_path / "nope.txt")

    def test_empty_file(self, tmp_path):
        path = tmp_path / "empty.txt"
        path.write_text("")
        with pytest.raises(DatasetLoadError, match="No data"):
            load_dataset(path)

    def test_inconsistent_rows(self, tmp_path):
        path = tmp_path / "ragged.txt"
        path.write_text("1 0.1 0.2\n2 0.3\n")
        with pytest.raises(DatasetLoadError, match="Inconsistent"):
            load_dataset(path)

    def test_unparsable_value(self, tmp_path):
        path = tmp_path / "bad.txt"
        path.write_text("1 0.1\n2 x\n")
        with pytest.raises(DatasetLoadError):
            load_dataset(path, n_workers=2)

    def test_invalid_worker_count(self, dataset_file):
        path, _, _ = dataset_file
        with pytest.raises(ValueError, match="n_workers"):
            load_dataset(path, n_workers=0)

    def test_error_hierarchy(self):
        err = DatasetLoadError("boom")
        assert isinstance(err, GreedyFeatureSelectError)
        assert isinstance(err, ValueError)
        assert str(err) == "boom"


# ---------------------------------------------------------------------------
# Tests: extract_features / describe_dataset
# ---------------------------------------------------------------------------

class TestExtractFeatures:
    X = np.arange(12, dtype=float).reshape(3, 4)

    def test_ascending_columns(self):
        out = extract_features(self.X, {3, 0})
        assert out.tolist() == [[0, 3], [4, 7], [8, 11]]

    def test_out_of_range_skipped(self):
        assert extract_features(self.X, {1, 10}).shape == (3, 1)

    def test_empty_set(self):
        assert extract_features(self.X, set()).shape == (3, 0)

    def test_empty_data(self):
        assert extract_features([], {0}).shape == (0, 0)


class TestDescribeDataset:
    def test_counts_and_default_rate(self):
        X = np.zeros((5, 3))
        info = describe_dataset(X, [1, 2, 2, 1, 2])
        assert info.n_instances == 5
        assert info.n_features == 3
        assert info.class_counts == {1: 2, 2: 3}
        assert info.majority_class == 2
        assert info.default_accuracy == pytest.approx(0.6)

    def test_tie_picks_smallest_label(self):
        info = describe_dataset(np.zeros((4, 1)), [2, 1, 2, 1])
        assert info.majority_class == 1
        assert info.default_accuracy == 0.5

    def test_empty(self):
        info = describe_dataset([], [])
        assert info.n_instances == 0
        assert info.class_counts == {}
        assert info.majority_class is None
