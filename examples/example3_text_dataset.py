"""
Example 3 – Loading a Text Dataset and Scoring Subsets Directly
================================================================
Writes a small synthetic dataset in the label-first text format, loads it
back with the concurrent reader and uses the low-level API:
``loocv_accuracy`` and ``forward_selection``.
"""

import numpy as np

from greedy_feature_select import (
    format_feature_set,
    forward_selection,
    load_dataset,
    loocv_accuracy,
)

# ---------------------------------------------------------------------------
# Synthetic dataset: features 0,1 informative | 2,3,4 noise
# ---------------------------------------------------------------------------
rng = np.random.default_rng(0)
n   = 300

X = np.hstack([
    np.vstack([rng.normal([0, 0], 0.6, (n//2, 2)),
               rng.normal([2, 2], 0.6, (n//2, 2))]),   # informative
    rng.normal(0, 1, (n, 3)),                            # noise
])
y = np.array([1]*(n//2) + [2]*(n//2))

with open("example3_data.txt", "w") as fh:
    for label, row in zip(y, X):
        fh.write("  ".join(f"{v:.7e}" for v in [label, *row]) + "\n")

X, y = load_dataset("example3_data.txt")
print(f"Loaded {X.shape[0]} instances with {X.shape[1]} features\n")

# ---------------------------------------------------------------------------
# Score specific subsets
# ---------------------------------------------------------------------------
for subset in [{0}, {0, 1}, {2, 3}, {0, 1, 2, 3, 4}]:
    acc = loocv_accuracy(X, y, subset)
    print(f"  accuracy{format_feature_set(subset)} = {acc:.4f}")

# ---------------------------------------------------------------------------
# Forward search trace
# ---------------------------------------------------------------------------
print("\nForward selection trace:")
result = forward_selection(X, y)
for level, (features, acc) in enumerate(result.history):
    print(f"  level {level}  features={format_feature_set(features)}  accuracy={acc:.4f}")
print(f"\nBest: {format_feature_set(result.best_features)} ({result.best_accuracy:.4f})")
