"""
Cross-validated sweep over the number of features tried at each split.

Every candidate is scored on the same stratified k-fold assignment, so the
differences between candidates come from the forests and not from the folds.
The error curve is then reduced to one value with the one-standard-error
rule: take the smallest candidate whose mean error is within one standard
error of the best mean error. Past that point extra features per split stop
buying a material improvement.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
import pandas as pd
from sklearn.model_selection import StratifiedKFold, cross_val_score

from pml_report.modeling.forest import ForestConfig, build_forest

logger = logging.getLogger(__name__)


def cv_error_curve(
    X: pd.DataFrame,
    y: pd.Series,
    candidates: Sequence[int],
    rng: np.random.RandomState,
    n_folds: int = 5,
    n_trees: int = 100,
    n_jobs: int | None = None,
) -> pd.DataFrame:
    """
    Estimate the k-fold misclassification error for each features-per-split value.

    Args:
        X: Training feature matrix.
        y: Training labels.
        candidates: Features-per-split values to try. Values larger than the
            number of columns in X are skipped with a warning.
        rng: Random generator for the fold shuffle and the forests.
        n_folds: Number of stratified folds.
        n_trees: Trees per forest during the sweep.
        n_jobs: Parallelism passed to scikit-learn.

    Returns:
        DataFrame indexed by features_per_split (ascending) with columns
        mean_error, std_error (across folds) and se (std_error / sqrt(n_folds)).

    Raises:
        ValueError: If no usable candidate remains.
    """
    n_features = X.shape[1]
    usable = sorted({int(c) for c in candidates if 1 <= int(c) <= n_features})
    dropped = sorted({int(c) for c in candidates} - set(usable))
    if dropped:
        logger.warning("Skipping candidates outside [1, %d]: %s", n_features, dropped)
    if not usable:
        raise ValueError(f"No features-per-split candidate in [1, {n_features}]: {list(candidates)}")

    # Materialise the folds once so every candidate sees the same split.
    kf = StratifiedKFold(n_splits=n_folds, shuffle=True, random_state=rng)
    folds = list(kf.split(X, y))
    forest_seed = rng.randint(np.iinfo(np.int32).max)

    rows = []
    for mtry in usable:
        model = build_forest(
            ForestConfig(n_trees=n_trees, features_per_split=mtry, n_jobs=n_jobs),
            rng=np.random.RandomState(forest_seed),
            oob_score=False,
        )
        accuracy = cross_val_score(model, X, y, cv=folds, scoring="accuracy")
        errors = 1.0 - accuracy
        rows.append({
            "features_per_split": mtry,
            "mean_error": float(errors.mean()),
            "std_error": float(errors.std(ddof=1)) if n_folds > 1 else 0.0,
        })
        logger.info(
            "  mtry=%d → CV error %.4f ± %.4f",
            mtry,
            rows[-1]["mean_error"],
            rows[-1]["std_error"],
        )

    curve = pd.DataFrame(rows).set_index("features_per_split")
    curve["se"] = curve["std_error"] / np.sqrt(n_folds)
    return curve


def select_features_per_split(curve: pd.DataFrame) -> int:
    """
    Pick features-per-split from an error curve with the one-standard-error rule.

    The threshold is the minimum mean error plus the standard error at that
    minimum; the smallest candidate at or below the threshold wins.
    """
    if curve.empty:
        raise ValueError("Cannot select from an empty CV curve")

    best = curve["mean_error"].idxmin()
    threshold = curve.loc[best, "mean_error"] + curve.loc[best, "se"]
    within = curve.index[curve["mean_error"] <= threshold]
    selected = int(min(within))

    logger.info(
        "Best CV error at mtry=%d (%.4f); one-SE threshold %.4f → selected mtry=%d",
        best,
        curve.loc[best, "mean_error"],
        threshold,
        selected,
    )
    return selected
