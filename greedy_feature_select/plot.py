"""
greedy_feature_select.plot
==========================
Visualization helpers for greedy search results.
"""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt
import matplotlib.patches as mpatches

from .metric import find_nearest
from .search import SearchResult, format_feature_set


__all__ = ["plot_feature_space_2d", "plot_search_history"]


def plot_search_history(
    result: SearchResult,
    *,
    title: str | None = None,
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Bar chart of LOOCV accuracy for each search level.

    The level holding the best subset is drawn in red.

    Parameters
    ----------
    result : SearchResult
        Output of :func:`~greedy_feature_select.forward_selection` or
        :func:`~greedy_feature_select.backward_elimination`.
    title : str, optional
        Plot title.  Defaults to the search direction.
    ax : matplotlib Axes, optional
    save_path : str, optional

    Returns
    -------
    matplotlib.figure.Figure
    """
    labels = [format_feature_set(feat) for feat, _ in result.history]
    scores = [acc for _, acc in result.history]
    best_level = next(
        k for k, (feat, acc) in enumerate(result.history)
        if feat == result.best_features and acc == result.best_accuracy
    )
    colors = ["#C44E52" if k == best_level else "#4C72B0" for k in range(len(scores))]

    if ax is None:
        fig, ax = plt.subplots(figsize=(max(8, len(scores) * 0.55), 4))
    else:
        fig = ax.get_figure()

    bars = ax.bar(range(len(scores)), scores, color=colors, edgecolor="white", linewidth=0.5)
    ax.set_xticks(range(len(scores)))
    ax.set_xticklabels(labels, rotation=60, ha="right", fontsize=8)
    ax.set_xlabel("Search level", fontsize=12)
    ax.set_ylabel("LOOCV accuracy", fontsize=12)
    if title is None:
        title = f"{result.direction.capitalize()} search – accuracy per level"
    ax.set_title(title, fontsize=13)
    ax.set_ylim(0, 1.05)

    for bar, score in zip(bars, scores):
        ax.text(
            bar.get_x() + bar.get_width() / 2,
            bar.get_height() + 0.01,
            f"{score:.3f}",
            ha="center", va="bottom", fontsize=7,
        )

    patch = mpatches.Patch(
        color="#C44E52",
        label=f"Best: {format_feature_set(result.best_features)}",
    )
    ax.legend(handles=[patch], fontsize=9)

    fig.tight_layout()
    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig


def plot_feature_space_2d(
    X: np.ndarray,
    y: np.ndarray,
    feature_indices: tuple[int, int],
    *,
    feature_names: Sequence[str] | None = None,
    title: str = "Feature space",
    ax: Optional[plt.Axes] = None,
    save_path: Optional[str] = None,
) -> plt.Figure:
    """Scatter plot of two features, marking LOOCV misclassifications.

    A point is marked when its nearest other point in this 2-D subspace
    carries a different label.

    Parameters
    ----------
    X : array-like, shape (n_samples, n_features)
    y : array-like, shape (n_samples,)
    feature_indices : (int, int)
        Pair of feature indices to plot.
    feature_names : sequence of str, optional
        Names for all features (for axis labels).
    title : str
    ax : matplotlib Axes, optional
    save_path : str, optional

    Returns
    -------
    matplotlib.figure.Figure
    """
    X_arr = np.asarray(X, dtype=float)
    y_arr = np.asarray(y)
    i, j  = feature_indices

    classes   = np.unique(y_arr)
    cmap      = plt.cm.tab10(np.linspace(0, 0.85, len(classes)))
    class_col = {cls: cmap[k] for k, cls in enumerate(classes)}

    if ax is None:
        fig, ax = plt.subplots(figsize=(7, 6))
    else:
        fig = ax.get_figure()

    missed = np.array([
        y_arr[find_nearest(X_arr, X_arr[r], r, {i, j})] != y_arr[r]
        for r in range(len(X_arr))
    ], dtype=bool)

    for cls in classes:
        mask = (y_arr == cls) & ~missed
        ax.scatter(
            X_arr[mask, i], X_arr[mask, j],
            c=[class_col[cls]], s=30, edgecolors="white",
            linewidths=0.4, label=f"Class {cls}",
            zorder=3,
        )

    if missed.any():
        ax.scatter(
            X_arr[missed, i], X_arr[missed, j],
            c="black", s=35, marker="x", linewidths=1.2,
            label="Misclassified (1-NN)", zorder=4,
        )

    if feature_names is not None:
        ax.set_xlabel(feature_names[i], fontsize=12)
        ax.set_ylabel(feature_names[j], fontsize=12)
    else:
        ax.set_xlabel(f"Feature {i}", fontsize=12)
        ax.set_ylabel(f"Feature {j}", fontsize=12)

    ax.set_title(f"{title}\nLOOCV accuracy = {1.0 - missed.mean():.3f}", fontsize=13)
    ax.legend(fontsize=9, loc="best")
    fig.tight_layout()

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches="tight")
    return fig
