"""
Final random-forest fit for the activity-quality classifier.

The model is configured through an explicit ForestConfig instead of a formula:
tree count, number of features tried at each split, and whether to keep the
impurity-based (mean decrease in Gini) importances for the report. An
out-of-bag estimate is always computed, since it comes for free with
bootstrapped trees and gives a sanity check against the held-out error.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.ensemble import RandomForestClassifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ForestConfig:
    """Tree count, features tried per split, and whether importances are kept."""

    n_trees: int = 500
    features_per_split: int = 7
    compute_importance: bool = True
    n_jobs: int | None = None

    def __post_init__(self) -> None:
        if self.n_trees < 1:
            raise ValueError(f"n_trees must be ≥ 1, got {self.n_trees}")
        if self.features_per_split < 1:
            raise ValueError(f"features_per_split must be ≥ 1, got {self.features_per_split}")


def build_forest(
    config: ForestConfig,
    rng: np.random.RandomState,
    oob_score: bool = True,
) -> RandomForestClassifier:
    """Return an unfitted forest configured from config."""
    return RandomForestClassifier(
        n_estimators=config.n_trees,
        max_features=config.features_per_split,
        oob_score=oob_score,
        n_jobs=config.n_jobs,
        random_state=rng,
    )


def train_forest(
    X: pd.DataFrame,
    y: pd.Series,
    config: ForestConfig,
    rng: np.random.RandomState,
) -> RandomForestClassifier:
    """
    Fit one forest on the training partition.

    Args:
        X: Feature matrix (cleaned training partition without the label).
        y: Class labels aligned with X.
        config: Tree count, features per split and importance flag.
        rng: Random generator driving bootstrap samples and split features.

    Returns:
        The fitted RandomForestClassifier. Fitting errors from scikit-learn
        propagate unchanged.

    Raises:
        ValueError: If features_per_split exceeds the number of columns in X.
    """
    if config.features_per_split > X.shape[1]:
        raise ValueError(
            f"features_per_split={config.features_per_split} exceeds the "
            f"{X.shape[1]} available features"
        )

    logger.info(
        "Training forest: %d trees, %d features per split, %d rows x %d features",
        config.n_trees,
        config.features_per_split,
        X.shape[0],
        X.shape[1],
    )
    model = build_forest(config, rng)
    model.fit(X, y)
    # Read back by feature_importance().
    model.compute_importance_ = config.compute_importance
    logger.info("Forest trained. OOB error estimate: %.4f", oob_error(model))
    return model


def oob_error(model: RandomForestClassifier) -> float:
    """Out-of-bag misclassification estimate of a fitted forest."""
    if not getattr(model, "oob_score", False) or not hasattr(model, "oob_score_"):
        raise ValueError("Model was not fitted with oob_score=True")
    return 1.0 - float(model.oob_score_)


def feature_importance(model: RandomForestClassifier) -> pd.Series:
    """
    Mean decrease in Gini impurity per feature, largest first.

    Raises:
        ValueError: If the model was trained with compute_importance=False.
    """
    if not getattr(model, "compute_importance_", True):
        raise ValueError("Feature importance was disabled for this model")

    names = getattr(model, "feature_names_in_", None)
    if names is None:
        names = [f"x{i}" for i in range(model.n_features_in_)]
    return (
        pd.Series(model.feature_importances_, index=list(names), name="mean_decrease_gini")
        .sort_values(ascending=False)
    )


def predict(model: RandomForestClassifier, X: pd.DataFrame) -> pd.Series:
    """Predicted class for every row of X, indexed like X."""
    return pd.Series(model.predict(X), index=X.index, name="predicted")
