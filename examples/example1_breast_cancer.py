"""
Example 1 – Breast Cancer (Forward vs. Backward)
=================================================
Runs both greedy searches on the Wisconsin Breast Cancer data and compares
the subsets they settle on.

Dataset : Wisconsin Breast Cancer (30 features, 2 classes, 569 samples)
Score   : leave-one-out 1-NN accuracy
"""

from sklearn.datasets import load_breast_cancer

from greedy_feature_select import (
    backward_elimination,
    describe_dataset,
    format_feature_set,
    forward_selection,
)
from greedy_feature_select.plot import plot_search_history, plot_feature_space_2d

# ---------------------------------------------------------------------------
# 1. Load data
# ---------------------------------------------------------------------------
X, y = load_breast_cancer(return_X_y=True)
feature_names = load_breast_cancer().feature_names.tolist()

info = describe_dataset(X, y)
print(f"Dataset: {info.n_instances} samples, {info.n_features} features, "
      f"{len(info.class_counts)} classes")
print(f"Default rate (always predict class {info.majority_class}): "
      f"{info.default_accuracy * 100:.1f}%\n")

# ---------------------------------------------------------------------------
# 2. Run both searches
# ---------------------------------------------------------------------------
results = {
    "Forward Selection":    forward_selection(X, y, verbose=1),
    "Backward Elimination": backward_elimination(X, y, verbose=1),
}

for name, result in results.items():
    print(f"\n===== {name} Results =====")
    print(f"Best feature subset: {format_feature_set(result.best_features, one_based=True)}")
    print(f"Best accuracy: {result.best_accuracy * 100:.1f}%")

# ---------------------------------------------------------------------------
# 3. Visualise
# ---------------------------------------------------------------------------
forward = results["Forward Selection"]
plot_search_history(forward, save_path="example1_forward_history.png")
plot_search_history(results["Backward Elimination"],
                    save_path="example1_backward_history.png")

# First two features added by forward selection
fi = next(iter(forward.history[1][0]))
fj = next(iter(forward.history[2][0] - forward.history[1][0]))
plot_feature_space_2d(
    X, y,
    feature_indices=(fi, fj),
    feature_names=feature_names,
    title=f"Feature space: {feature_names[fi]} vs {feature_names[fj]}",
    save_path="example1_feature_space.png",
)

print("\nPlots saved: example1_forward_history.png, "
      "example1_backward_history.png, example1_feature_space.png")
