"""
greedy_feature_select.exceptions
================================
Exception hierarchy for the package.
"""


class GreedyFeatureSelectError(Exception):
    """Base exception for all package errors."""
    pass


class DatasetLoadError(GreedyFeatureSelectError, ValueError):
    """A dataset file could not be read or failed validation."""
    pass
