"""
greedy_feature_select
=====================
Greedy wrapper feature selection for classification, scored by
leave-one-out 1-nearest-neighbour accuracy.

Core idea
---------
A feature subset S is scored by predicting every instance's label from its
nearest other instance, measuring Euclidean distance over S only::

    acc(S) = (number of instances whose nearest neighbour shares their label) / n

Two greedy searches walk the space of subsets one level at a time:

**Forward selection**
    Start from the empty subset; at each level add the feature that gives
    the highest accuracy.

**Backward elimination**
    Start from the full set; at each level drop the feature whose removal
    gives the highest accuracy, then score the empty subset once more.

Both return a :class:`SearchResult` holding the best subset over all
levels and the level-by-level history.  Candidates of a level are scored
on a thread pool; ties go to the first candidate in scan order.

Public API
----------
GreedyFeatureSelector   – sklearn-compatible estimator
forward_selection       – greedy forward search
backward_elimination    – greedy backward search
loocv_accuracy          – LOOCV 1-NN accuracy of one subset
find_nearest            – nearest other instance under a subset
distance                – Euclidean distance under a subset
load_dataset            – concurrent dataset file reader
"""

from .data     import DatasetInfo, describe_dataset, extract_features, load_dataset
from .exceptions import DatasetLoadError, GreedyFeatureSelectError
from .metric   import distance, find_nearest, loocv_accuracy
from .search   import SearchResult, backward_elimination, format_feature_set, forward_selection
from .selector import GreedyFeatureSelector
from ._logging import set_log_level

__all__ = [
    "DatasetInfo",
    "DatasetLoadError",
    "GreedyFeatureSelectError",
    "GreedyFeatureSelector",
    "SearchResult",
    "backward_elimination",
    "describe_dataset",
    "distance",
    "extract_features",
    "find_nearest",
    "format_feature_set",
    "forward_selection",
    "load_dataset",
    "loocv_accuracy",
    "set_log_level",
]

__version__ = "0.1.0"
