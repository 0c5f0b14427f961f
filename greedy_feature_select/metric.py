"""
greedy_feature_select.metric
============================
Euclidean distance, 1-nearest-neighbour lookup and the leave-one-out
accuracy estimate used to score feature subsets.

A feature subset S is scored as::

    acc(S) = (1 / n) * Σ_i  1[ y_i == y_NN(i, S) ]

where NN(i, S) is the nearest other instance to instance i when distances
are measured only over the features in S.  The empty subset is a sentinel
meaning "use every feature".

Computational notes
-------------------
* Distances come from ``scipy.spatial.distance.cdist``; each pair is
  computed independently, so a block of rows gives the same values as a
  row-by-row scan.
* ``np.argmin`` returns the first minimum, which reproduces the
  strict-less-than scan: the lowest index wins ties.
* LOOCV rows are processed in blocks whose distance matrix stays below
  ``LOOCV_BLOCK_ELEMENTS`` entries, so memory per worker does not grow
  with n squared.  Every block returns its own count
  of correct predictions and the counts are summed once all blocks are
  done, so the result does not depend on completion order.
"""

from __future__ import annotations

from typing import Iterable, Sequence

import numpy as np
from joblib import Parallel, delayed
from scipy.spatial.distance import cdist

from ._logging import get_logger


__all__ = ["distance", "find_nearest", "loocv_accuracy", "resolve_features"]

logger = get_logger(__name__)

LOOCV_BLOCK_SIZE = 256
# Upper bound on the distance entries one LOOCV block holds (2 MiB of float64).
LOOCV_BLOCK_ELEMENTS = 2 ** 18


# ---------------------------------------------------------------------------
# Public functions
# ---------------------------------------------------------------------------

def resolve_features(features: Iterable[int] | None, n_features: int) -> np.ndarray:
    """Turn a feature set into ascending column indices.

    Parameters
    ----------
    features : iterable of int, optional
        Feature indices.  Empty (or ``None``) selects every feature.
    n_features : int
        Number of usable columns.  Indices outside ``[0, n_features)``
        are dropped.

    Returns
    -------
    np.ndarray of intp
        Sorted, unique column indices.
    """
    if features is None:
        features = ()
    idx = np.unique(np.fromiter((int(f) for f in features), dtype=np.intp))
    if idx.size == 0:
        return np.arange(n_features, dtype=np.intp)
    return idx[(idx >= 0) & (idx < n_features)]


def distance(
    a: Sequence[float],
    b: Sequence[float],
    features: Iterable[int] = (),
) -> float:
    """Euclidean distance between two points over a feature subset.

    Parameters
    ----------
    a, b : array-like, shape (n_features,)
        The two points.  They may differ in length.
    features : iterable of int, default=()
        Indices to compare.  Indices beyond either point are skipped.
        If empty, the first ``min(len(a), len(b))`` coordinates are used.

    Returns
    -------
    float
        Non-negative distance; ``0.0`` when no coordinate is usable.

    Examples
    --------
    >>> from greedy_feature_select import distance
    >>> distance([0.0, 0.0, 9.0], [3.0, 4.0, 1.0], {0, 1})
    5.0
    """
    a_arr = np.asarray(a, dtype=float).ravel()
    b_arr = np.asarray(b, dtype=float).ravel()
    cols = resolve_features(features, min(a_arr.shape[0], b_arr.shape[0]))
    if cols.size == 0:
        return 0.0
    return float(cdist(a_arr[None, cols], b_arr[None, cols])[0, 0])


def find_nearest(
    X: np.ndarray,
    query: Sequence[float],
    exclude_index: int,
    features: Iterable[int] = (),
) -> int:
    """Index of the row of ``X`` closest to ``query``, skipping one row.

    Parameters
    ----------
    X : array-like, shape (n_samples, n_features)
        Candidate neighbours.  Must contain at least one row other than
        ``exclude_index``.
    query : array-like, shape (n_features,)
    exclude_index : int
        Row never returned (the query's own position when doing LOOCV).
    features : iterable of int, default=()
        Feature subset; empty means all features.

    Returns
    -------
    int
        Row index.  On equal distances the lowest index is returned.
    """
    X_arr = _as_matrix(X)
    q = np.asarray(query, dtype=float).ravel()
    cols = resolve_features(features, min(q.shape[0], X_arr.shape[1]))

    dist = _pairwise(q[None, :], X_arr, cols)[0]
    if 0 <= exclude_index < dist.shape[0]:
        dist[exclude_index] = np.inf
    return int(np.argmin(dist))


def loocv_accuracy(
    X: np.ndarray,
    y: np.ndarray,
    features: Iterable[int] = (),
    verbose: int = 0,
    n_jobs: int | None = 1,
) -> float:
    """Leave-one-out 1-NN accuracy of a feature subset.

    Parameters
    ----------
    X : array-like, shape (n_samples, n_features)
    y : array-like, shape (n_samples,)
        Class labels, index-aligned with ``X``.
    features : iterable of int, default=()
        Feature subset; empty means all features.
    verbose : int, default=0
        At 2 or above, one INFO record is logged per instance.
    n_jobs : int, optional
        Threads used across row blocks.  ``1`` runs inline.

    Returns
    -------
    float
        Fraction of instances whose nearest other instance has the same
        label, in ``[0, 1]``.  Empty or length-mismatched inputs give
        ``0.0``.
    """
    X_arr = _as_matrix(X)
    y_arr = np.asarray(y).ravel()
    n = X_arr.shape[0]
    if n == 0 or y_arr.shape[0] == 0 or n != y_arr.shape[0]:
        return 0.0

    cols = resolve_features(features, X_arr.shape[1])
    step = _block_rows(n)
    blocks = [(s, min(s + step, n)) for s in range(0, n, step)]

    if n_jobs == 1 or len(blocks) == 1:
        counts = [
            _count_correct(X_arr, y_arr, cols, start, stop, verbose)
            for start, stop in blocks
        ]
    else:
        if verbose >= 2:
            logger.debug(f"LOOCV over {len(blocks)} blocks with n_jobs={n_jobs}")
        counts = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(_count_correct)(X_arr, y_arr, cols, start, stop, verbose)
            for start, stop in blocks
        )

    return sum(counts) / n


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _as_matrix(X) -> np.ndarray:
    X_arr = np.asarray(X, dtype=float)
    if X_arr.ndim == 1 and X_arr.size == 0:
        return X_arr.reshape(0, 0)
    if X_arr.ndim != 2:
        raise ValueError(f"Expected a 2-D data matrix, got shape {X_arr.shape}.")
    return X_arr


def _pairwise(A: np.ndarray, X: np.ndarray, cols: np.ndarray) -> np.ndarray:
    """Distances from every row of A to every row of X over ``cols``."""
    if cols.size == 0:
        return np.zeros((A.shape[0], X.shape[0]))
    dist = cdist(A[:, cols], X[:, cols])
    # A NaN distance must never win argmin.
    dist[np.isnan(dist)] = np.inf
    return dist


def _block_rows(n: int) -> int:
    """Rows per LOOCV block so that a block holds at most
    ``LOOCV_BLOCK_ELEMENTS`` distances, capped at ``LOOCV_BLOCK_SIZE``."""
    return max(1, min(LOOCV_BLOCK_SIZE, LOOCV_BLOCK_ELEMENTS // max(n, 1)))


def _count_correct(
    X: np.ndarray,
    y: np.ndarray,
    cols: np.ndarray,
    start: int,
    stop: int,
    verbose: int,
) -> int:
    """Correct 1-NN predictions for rows ``start:stop`` (leave-one-out)."""
    dist = _pairwise(X[start:stop], X, cols)
    rows = np.arange(stop - start)
    dist[rows, start + rows] = np.inf
    nearest = np.argmin(dist, axis=1)
    hits = y[start:stop] == y[nearest]

    if verbose >= 2:
        for r, j in enumerate(nearest):
            i = start + r
            logger.info(
                f"Object {i + 1} is class {y[i]}, its nearest neighbor is "
                f"{j + 1} which is in class {y[j]}"
            )

    return int(hits.sum())
