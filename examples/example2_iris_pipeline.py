"""
Example 2 – Multi-class Classification & sklearn Pipeline
==========================================================
Demonstrates:
  * Multi-class support (Iris dataset, 3 classes)
  * Integration with a scikit-learn Pipeline
  * Checking the selected subset with sklearn's own 1-NN classifier

The selector fits inside a Pipeline like any other transformer.
"""

from sklearn.datasets import load_iris
from sklearn.neighbors import KNeighborsClassifier
from sklearn.pipeline import Pipeline
from sklearn.model_selection import LeaveOneOut, cross_val_score

from greedy_feature_select import GreedyFeatureSelector

# ---------------------------------------------------------------------------
# 1. Load data
# ---------------------------------------------------------------------------
X, y = load_iris(return_X_y=True)
feature_names = load_iris().feature_names

print(f"Dataset: {X.shape[0]} samples, {X.shape[1]} features, 3 classes\n")

# ---------------------------------------------------------------------------
# 2. Use selector inside a Pipeline
# ---------------------------------------------------------------------------
pipe = Pipeline([
    ("selector", GreedyFeatureSelector(direction="backward")),
    ("clf",      KNeighborsClassifier(n_neighbors=1)),
])
pipe.fit(X, y)

selector = pipe.named_steps["selector"]
print(selector.summary())
print("Selected:", list(selector.get_feature_names_out(feature_names)))

# ---------------------------------------------------------------------------
# 3. Cross-check with sklearn's leave-one-out on the selected columns
# ---------------------------------------------------------------------------
X_red = selector.transform(X)
scores = cross_val_score(KNeighborsClassifier(n_neighbors=1), X_red, y, cv=LeaveOneOut())
print(f"\nsklearn LOOCV 1-NN accuracy on selected features: {scores.mean():.4f}")
print(f"Selector's own estimate:                          {selector.accuracy_:.4f}")
