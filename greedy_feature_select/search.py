"""
greedy_feature_select.search
============================
Greedy wrapper search over feature subsets, scored by leave-one-out 1-NN
accuracy.

Two strategies are provided:

**Forward selection**
    Start from the empty subset and, level by level, add the single
    feature whose addition gives the highest accuracy.

**Backward elimination**
    Start from the full feature set and, level by level, remove the single
    feature whose removal gives the highest accuracy.  The empty subset is
    scored once more at the very end.

Every level's winner is recorded in the search history, even when it is
worse than the best subset seen so far; the overall best subset only
changes on a strictly higher accuracy.

Candidates of a level are independent, so they are scored on a joblib
thread pool and collected in candidate order.  The winner is then chosen
by a sequential scan using strict ``>``, so the first candidate (lowest
feature index for forward, earliest remaining feature for backward) wins
ties no matter in which order the workers finished.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Iterable

import numpy as np
from joblib import Parallel, delayed, effective_n_jobs

from ._logging import get_logger
from .metric import _as_matrix, loocv_accuracy


__all__ = [
    "SearchResult",
    "backward_elimination",
    "format_feature_set",
    "forward_selection",
]

logger = get_logger(__name__)

# Levels with this many candidates or fewer are scored inline.
PARALLEL_MIN_CANDIDATES = 8

FeatureSet = frozenset


@dataclass(frozen=True)
class SearchResult:
    """Outcome of one greedy search.

    Attributes
    ----------
    best_features : frozenset of int
        Best subset found.  Empty means "all features".
    best_accuracy : float
        LOOCV accuracy of ``best_features``.
    history : tuple of (frozenset, float)
        Baseline, then one entry per level winner (plus the final empty-set
        check for backward elimination), in search order.
    direction : str
        ``"forward"`` or ``"backward"``.
    """

    best_features: FeatureSet
    best_accuracy: float
    history: tuple
    direction: str = "forward"

    @property
    def n_levels(self) -> int:
        return len(self.history)

    def accuracies(self) -> list:
        return [acc for _, acc in self.history]


def format_feature_set(features: Iterable[int], one_based: bool = False) -> str:
    """Render a feature set as ``{0,3,7}`` (ascending)."""
    offset = 1 if one_based else 0
    return "{" + ",".join(str(f + offset) for f in sorted(features)) + "}"


# ---------------------------------------------------------------------------
# Search strategies
# ---------------------------------------------------------------------------

def forward_selection(
    X: np.ndarray,
    y: np.ndarray,
    verbose: int = 0,
    *,
    n_jobs: int | None = None,
) -> SearchResult:
    """Greedy forward selection.

    Parameters
    ----------
    X : array-like, shape (n_samples, n_features)
        Validated data matrix.
    y : array-like, shape (n_samples,)
        Class labels.
    verbose : int, default=0
        1 logs every candidate and level winner, 2 also logs every LOOCV
        prediction.  Has no effect on the result.
    n_jobs : int, optional
        Worker threads for candidate scoring.  ``None`` uses every core.

    Returns
    -------
    SearchResult

    Examples
    --------
    >>> import numpy as np
    >>> from greedy_feature_select import forward_selection
    >>> X = np.array([[0.0, 5.0], [0.1, 1.0], [5.0, 4.9], [5.1, 1.1]])
    >>> y = np.array([1, 1, 2, 2])
    >>> result = forward_selection(X, y)
    >>> sorted(result.history[1][0]), result.history[1][1]
    ([0], 1.0)
    """
    X_arr, y_arr = _as_matrix(X), np.asarray(y).ravel()
    n_features = X_arr.shape[1]
    n_jobs = -1 if n_jobs is None else n_jobs
    started = time.perf_counter()

    if verbose >= 1:
        _log_start("Forward Selection", n_jobs)

    current = frozenset()
    baseline = _score(X_arr, y_arr, current, verbose)
    history = [(current, baseline)]
    best_features, best_accuracy = current, baseline

    for _ in range(n_features):
        candidates = [current | {f} for f in range(n_features) if f not in current]
        if not candidates:
            break

        accuracies = _score_candidates(X_arr, y_arr, candidates, n_jobs, verbose)
        k = _first_best(accuracies)
        current, accuracy = candidates[k], accuracies[k]

        if verbose >= 1:
            logger.info(
                f"Feature set {format_feature_set(current)} was best, "
                f"accuracy is {accuracy * 100:.1f}%"
            )

        history.append((current, accuracy))
        if accuracy > best_accuracy:
            best_features, best_accuracy = current, accuracy

    if verbose >= 1:
        _log_finish("Forward Selection", best_features, best_accuracy, started)

    return SearchResult(best_features, best_accuracy, tuple(history), "forward")


def backward_elimination(
    X: np.ndarray,
    y: np.ndarray,
    verbose: int = 0,
    *,
    n_jobs: int | None = None,
) -> SearchResult:
    """Greedy backward elimination.

    Parameters
    ----------
    X : array-like, shape (n_samples, n_features)
        Validated data matrix.
    y : array-like, shape (n_samples,)
        Class labels.
    verbose : int, default=0
        Same meaning as in :func:`forward_selection`.
    n_jobs : int, optional
        Worker threads for candidate scoring.  ``None`` uses every core.

    Returns
    -------
    SearchResult
        The last history entry is always the empty feature set.
    """
    X_arr, y_arr = _as_matrix(X), np.asarray(y).ravel()
    n_features = X_arr.shape[1]
    n_jobs = -1 if n_jobs is None else n_jobs
    started = time.perf_counter()

    if verbose >= 1:
        _log_start("Backward Elimination", n_jobs)

    current = frozenset(range(n_features))
    baseline = _score(X_arr, y_arr, current, verbose)
    history = [(current, baseline)]
    best_features, best_accuracy = current, baseline

    remaining = list(range(n_features))
    while len(remaining) > 1:
        candidates = [current - {f} for f in remaining]

        accuracies = _score_candidates(X_arr, y_arr, candidates, n_jobs, verbose)
        k = _first_best(accuracies)
        del remaining[k]
        current, accuracy = candidates[k], accuracies[k]

        if verbose >= 1:
            logger.info(
                f"Feature set {format_feature_set(current)} was best, "
                f"accuracy is {accuracy * 100:.1f}%"
            )

        history.append((current, accuracy))
        if accuracy > best_accuracy:
            best_features, best_accuracy = current, accuracy

    # With no features the baseline already is the empty set.
    if n_features > 0:
        empty = frozenset()
        accuracy = _score(X_arr, y_arr, empty, verbose)
        history.append((empty, accuracy))
        if accuracy > best_accuracy:
            best_features, best_accuracy = empty, accuracy

    if verbose >= 1:
        _log_finish("Backward Elimination", best_features, best_accuracy, started)

    return SearchResult(best_features, best_accuracy, tuple(history), "backward")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _score(X: np.ndarray, y: np.ndarray, features: FeatureSet, verbose: int) -> float:
    accuracy = loocv_accuracy(X, y, features, verbose=verbose, n_jobs=1)
    if verbose >= 1:
        logger.info(
            f"Using feature(s) {format_feature_set(features)} "
            f"accuracy is {accuracy * 100:.1f}%"
        )
    return accuracy


def _score_candidates(
    X: np.ndarray,
    y: np.ndarray,
    candidates: list,
    n_jobs: int,
    verbose: int,
) -> list:
    """Accuracy of every candidate, in candidate order."""
    if n_jobs == 1 or len(candidates) <= PARALLEL_MIN_CANDIDATES:
        return [_score(X, y, c, verbose) for c in candidates]
    return Parallel(n_jobs=n_jobs, prefer="threads")(
        delayed(_score)(X, y, c, verbose) for c in candidates
    )


def _first_best(accuracies: list) -> int:
    """Index of the first strictly-highest accuracy."""
    best = 0
    for k in range(1, len(accuracies)):
        if accuracies[k] > accuracies[best]:
            best = k
    return best


def _log_start(name: str, n_jobs: int) -> None:
    logger.info(f"Beginning {name} search.")
    logger.info(f"Scoring candidates with up to {effective_n_jobs(n_jobs)} threads.")


def _log_finish(name: str, best_features: FeatureSet, best_accuracy: float, started: float) -> None:
    logger.info(
        f"Finished search!! The best feature subset is "
        f"{format_feature_set(best_features)}, which has an accuracy of "
        f"{best_accuracy * 100:.1f}%"
    )
    logger.info(f"{name} took {_format_elapsed(time.perf_counter() - started)}")


def _format_elapsed(seconds: float) -> str:
    if seconds < 60.0:
        return f"{seconds:.2f} seconds"
    minutes = int(seconds) // 60
    return f"{minutes} minutes, {seconds - minutes * 60:.2f} seconds"
