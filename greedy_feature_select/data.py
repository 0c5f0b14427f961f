"""
greedy_feature_select.data
==========================
Dataset loading and small dataset utilities.

File format
-----------
Plain text, one instance per line, values separated by whitespace.  The
first value is the class label (written as a float, e.g.
``2.0000000e+000``, and truncated to ``int``); the remaining values are
the features::

    2.0000000e+000  1.2340000e+000  -3.0000000e-001 ...
    1.0000000e+000  8.0000000e-001   4.1000000e+000 ...

Concurrent reading
------------------
The file is cut into byte ranges that are read on a thread pool.  A range
``[start, end)`` owns every line whose first byte falls inside it: a range
that begins mid-line skips ahead to the next line start, and the last line
it owns is read to completion even when it runs past ``end``.  Every line
is therefore parsed exactly once, and concatenating the ranges in order
gives the rows in file order.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

import numpy as np
from joblib import Parallel, delayed

from ._logging import get_logger
from .exceptions import DatasetLoadError
from .metric import _as_matrix, resolve_features


__all__ = [
    "DatasetInfo",
    "describe_dataset",
    "extract_features",
    "load_dataset",
    "read_chunk",
    "split_raw_rows",
]

logger = get_logger(__name__)

MAX_READ_WORKERS = 8


@dataclass(frozen=True)
class DatasetInfo:
    """Basic statistics of a labeled dataset."""

    n_instances: int
    n_features: int
    class_counts: dict = field(default_factory=dict)
    majority_class: int | None = None
    default_accuracy: float = 0.0


# ---------------------------------------------------------------------------
# Loading
# ---------------------------------------------------------------------------

def load_dataset(path, *, n_workers: int | None = None) -> tuple[np.ndarray, np.ndarray]:
    """Load a dataset file into a feature matrix and a label vector.

    Parameters
    ----------
    path : str or Path
        Dataset file (see module docstring for the format).
    n_workers : int, optional
        Number of byte ranges read in parallel.  Defaults to
        ``min(8, os.cpu_count())``.

    Returns
    -------
    X : np.ndarray, shape (n_samples, n_features)
    y : np.ndarray of int, shape (n_samples,)

    Raises
    ------
    DatasetLoadError
        The file is missing or unreadable, holds no rows, has a token that
        is not a number or is ``nan``/``inf``, or its rows disagree on the
        number of features.
    """
    if n_workers is None:
        n_workers = min(MAX_READ_WORKERS, os.cpu_count() or 1)
    if n_workers < 1:
        raise ValueError("n_workers must be >= 1.")

    path = Path(path)
    try:
        X, y = _read_concurrent(path, n_workers)
    except (OSError, DatasetLoadError) as exc:
        raise DatasetLoadError(f"Failed to load dataset '{path}': {exc}") from exc

    logger.debug(
        f"Loaded {X.shape[0]} instances with {X.shape[1]} features from '{path}'"
    )
    return X, y


def read_chunk(path, start: int, end: int) -> list[list[float]]:
    """Parse the lines owned by the byte range ``[start, end)`` of a file.

    Blank lines are skipped.

    Raises
    ------
    DatasetLoadError
        A line contains a token that is not a number.
    """
    rows = []
    with open(path, "rb") as fh:
        if start > 0:
            # Finish the line holding byte start-1; it belongs to the
            # previous range (or is just its newline).
            fh.seek(start - 1)
            fh.readline()
        while True:
            offset = fh.tell()
            if offset >= end:
                break
            line = fh.readline()
            if not line:
                break
            try:
                row = [float(tok) for tok in line.decode().split()]
            except ValueError as exc:
                raise DatasetLoadError(
                    f"Could not parse line at byte {offset}: {exc}"
                ) from exc
            if row:
                rows.append(row)
    return rows


def split_raw_rows(rows: Iterable[Iterable[float]]) -> tuple[np.ndarray, np.ndarray]:
    """Split raw rows (label first) into ``X`` and ``y``.

    Raises
    ------
    DatasetLoadError
        No rows, rows of different lengths, or a ``nan``/``inf`` value.
    """
    rows = [list(r) for r in rows if len(r) > 0]
    if not rows:
        raise DatasetLoadError("No data rows found")

    widths = {len(r) for r in rows}
    if len(widths) > 1:
        raise DatasetLoadError(
            f"Inconsistent feature count in dataset (row widths {sorted(widths)})"
        )

    raw = np.asarray(rows, dtype=float)
    bad = ~np.isfinite(raw).all(axis=1)
    if bad.any():
        raise DatasetLoadError(
            f"Non-finite value in {int(bad.sum())} row(s) "
            f"(first at row {int(np.argmax(bad)) + 1})"
        )
    y = raw[:, 0].astype(int)
    # Labels and features come from the same rows, so they stay aligned.
    return raw[:, 1:], y


def _read_concurrent(path: Path, n_workers: int) -> tuple[np.ndarray, np.ndarray]:
    size = path.stat().st_size
    n_chunks = max(1, min(n_workers, size))
    bounds = [
        (size * i // n_chunks, size * (i + 1) // n_chunks)
        for i in range(n_chunks)
    ]

    chunks = Parallel(n_jobs=n_chunks, prefer="threads")(
        delayed(read_chunk)(path, start, end) for start, end in bounds
    )
    return split_raw_rows(row for chunk in chunks for row in chunk)


# ---------------------------------------------------------------------------
# Utilities
# ---------------------------------------------------------------------------

def extract_features(X: np.ndarray, features: Iterable[int]) -> np.ndarray:
    """Columns of ``X`` for the given features, in ascending index order.

    Out-of-range indices are skipped.  An empty feature set (or empty data)
    gives an array with no columns.
    """
    X_arr = _as_matrix(X)
    features = list(features)
    if X_arr.shape[0] == 0 or not features:
        return np.empty((X_arr.shape[0], 0))
    return X_arr[:, resolve_features(features, X_arr.shape[1])]


def describe_dataset(X: np.ndarray, y: np.ndarray) -> DatasetInfo:
    """Instance/feature counts, class distribution and majority-class rate.

    Ties for the majority class go to the smallest label.
    """
    X_arr = _as_matrix(X)
    y_arr = np.asarray(y).ravel()
    n = X_arr.shape[0]
    if n == 0 or y_arr.shape[0] == 0:
        return DatasetInfo(n_instances=n, n_features=X_arr.shape[1])

    labels, counts = np.unique(y_arr, return_counts=True)
    top = int(np.argmax(counts))
    return DatasetInfo(
        n_instances=n,
        n_features=X_arr.shape[1],
        class_counts={lab.item(): int(c) for lab, c in zip(labels, counts)},
        majority_class=labels[top].item(),
        default_accuracy=float(counts[top]) / y_arr.shape[0],
    )
