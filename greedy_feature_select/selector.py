"""
greedy_feature_select.selector
==============================
Scikit-learn compatible estimator wrapping the greedy 1-NN searches.

The estimator follows the standard sklearn API:

    selector = GreedyFeatureSelector(direction="forward", n_jobs=-1)
    selector.fit(X_train, y_train)
    X_reduced = selector.transform(X_train)

It also supports ``set_output(transform="pandas")`` if pandas is installed.
"""

from __future__ import annotations

import numpy as np
from sklearn.base import BaseEstimator, TransformerMixin
from sklearn.utils.validation import check_is_fitted

from .search import backward_elimination, format_feature_set, forward_selection


__all__ = ["GreedyFeatureSelector"]

_SEARCHES = {
    "forward": forward_selection,
    "backward": backward_elimination,
}


class GreedyFeatureSelector(TransformerMixin, BaseEstimator):
    """Greedy wrapper feature selector scored by leave-one-out 1-NN accuracy.

    **Forward selection**
        Start from no features and add, one level at a time, the feature
        that gives the highest LOOCV accuracy.

    **Backward elimination**
        Start from all features and remove, one level at a time, the
        feature whose removal gives the highest LOOCV accuracy.

    The subset with the best accuracy over all levels is selected.  An
    empty best subset means every feature is kept.

    Parameters
    ----------
    direction : {'forward', 'backward'}, default='forward'
        Search strategy.
    n_jobs : int, optional
        Threads used to score the candidates of a level.  ``None`` or
        ``-1`` uses all available cores.
    verbose : int, default=0
        Verbosity level (0 = silent, 1 = candidates and level winners,
        2 = also every LOOCV prediction).

    Attributes
    ----------
    selected_features_ : tuple of int
        Indices of the selected features after fitting.
    accuracy_ : float
        LOOCV accuracy of the selected subset.
    history_ : list of (tuple, float)
        Level-by-level search trace.
    result_ : SearchResult
        Raw search output.
    n_features_in_ : int
        Total number of features seen during fit.

    Examples
    --------
    >>> from sklearn.datasets import load_iris
    >>> from greedy_feature_select import GreedyFeatureSelector
    >>>
    >>> X, y = load_iris(return_X_y=True)
    >>> selector = GreedyFeatureSelector(direction="forward")
    >>> selector.fit(X, y)
    GreedyFeatureSelector()
    >>> selector.selected_features_
    (...)
    """

    def __init__(
        self,
        direction: str = "forward",
        n_jobs: int | None = None,
        verbose: int = 0,
    ):
        self.direction = direction
        self.n_jobs    = n_jobs
        self.verbose   = verbose

    # ------------------------------------------------------------------
    # sklearn API
    # ------------------------------------------------------------------

    def fit(self, X: np.ndarray, y: np.ndarray) -> "GreedyFeatureSelector":
        """Run the greedy search.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)
            Training data.
        y : array-like, shape (n_samples,)
            Class labels.

        Returns
        -------
        self
        """
        X_arr = np.asarray(X, dtype=float)
        y_arr = np.asarray(y)
        self._validate_params(X_arr, y_arr)
        self.n_features_in_ = X_arr.shape[1]

        search = _SEARCHES[self.direction]
        self.result_ = search(X_arr, y_arr, self.verbose, n_jobs=self.n_jobs)

        self.selected_features_ = tuple(sorted(self.result_.best_features))
        self.accuracy_          = self.result_.best_accuracy
        self.history_           = [
            (tuple(sorted(features)), accuracy)
            for features, accuracy in self.result_.history
        ]
        return self

    def transform(self, X: np.ndarray) -> np.ndarray:
        """Project X onto the selected feature subset.

        Parameters
        ----------
        X : array-like, shape (n_samples, n_features)

        Returns
        -------
        X_reduced : np.ndarray, shape (n_samples, n_selected)
        """
        check_is_fitted(self, "selected_features_")
        X_arr = np.asarray(X, dtype=float)
        return X_arr[:, self.get_support(indices=True)]

    def get_support(self, indices: bool = False):
        """Return a mask or indices of the selected features.

        Parameters
        ----------
        indices : bool, default=False
            If ``True``, return indices; otherwise return a boolean mask.

        Returns
        -------
        mask : np.ndarray of bool, or np.ndarray of int
        """
        check_is_fitted(self, "selected_features_")
        if self.selected_features_:
            mask = np.zeros(self.n_features_in_, dtype=bool)
            mask[list(self.selected_features_)] = True
        else:
            mask = np.ones(self.n_features_in_, dtype=bool)
        if indices:
            return np.where(mask)[0]
        return mask

    def get_feature_names_out(self, input_features=None):
        """Get feature names for the selected features.

        Parameters
        ----------
        input_features : array-like of str, optional
            Input feature names.  If ``None``, uses ``x0``, ``x1``, etc.

        Returns
        -------
        feature_names_out : np.ndarray of str
        """
        check_is_fitted(self, "selected_features_")
        if input_features is None:
            input_features = [f"x{i}" for i in range(self.n_features_in_)]
        return np.array([input_features[i] for i in self.get_support(indices=True)])

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_params(self, X: np.ndarray, y: np.ndarray):
        if self.direction not in _SEARCHES:
            raise ValueError(
                f"direction must be one of {sorted(_SEARCHES)}, "
                f"got {self.direction!r}."
            )
        if X.ndim != 2:
            raise ValueError(f"X must be 2-D, got shape {X.shape}.")
        if X.shape[0] < 2:
            raise ValueError("At least two samples are required for LOOCV.")
        if y.shape[0] != X.shape[0]:
            raise ValueError(
                f"X has {X.shape[0]} samples but y has {y.shape[0]} labels."
            )

    def summary(self) -> str:
        """Return a human-readable summary of the fitted selector."""
        check_is_fitted(self, "selected_features_")
        lines = [
            "GreedyFeatureSelector – fit summary",
            f"  direction              : {self.direction}",
            f"  n_features_in          : {self.n_features_in_}",
            f"  levels evaluated       : {len(self.history_)}",
            f"  selected features      : {format_feature_set(self.selected_features_)}",
            f"  LOOCV accuracy         : {self.accuracy_:.4f}",
            "",
            "  Feature sets evaluated:",
        ]
        for features, accuracy in self.history_:
            lines.append(f"    {format_feature_set(features):<22} {accuracy * 100:.1f}%")
        return "\n".join(lines)
