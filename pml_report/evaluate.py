"""
Held-out scoring: confusion matrix, misclassification rate and per-class stats.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd
from sklearn.metrics import cohen_kappa_score, confusion_matrix, precision_recall_fscore_support

logger = logging.getLogger(__name__)


@dataclass
class EvaluationResult:
    confusion: pd.DataFrame
    error_rate: float
    accuracy: float
    kappa: float
    per_class: pd.DataFrame
    n_rows: int


def misclassification_rate(y_true: pd.Series, y_pred: pd.Series) -> float:
    """(number of predicted != actual) / (number of rows), a value in [0, 1]."""
    y_true = np.asarray(y_true)
    y_pred = np.asarray(y_pred)
    if len(y_true) == 0:
        raise ValueError("Cannot score an empty held-out set")
    if len(y_true) != len(y_pred):
        raise ValueError(f"Length mismatch: {len(y_true)} labels vs {len(y_pred)} predictions")
    return float(np.count_nonzero(y_true != y_pred) / len(y_true))


def evaluate_predictions(y_true: pd.Series, y_pred: pd.Series) -> EvaluationResult:
    """
    Compare predicted to actual labels on the held-out partition.

    The confusion matrix has actual classes as rows and predicted classes as
    columns, over the union of classes seen in either vector.

    Raises:
        ValueError: If the inputs are empty or differ in length.
    """
    error_rate = misclassification_rate(y_true, y_pred)

    classes = sorted(set(np.asarray(y_true)) | set(np.asarray(y_pred)))
    matrix = confusion_matrix(y_true, y_pred, labels=classes)
    confusion = pd.DataFrame(
        matrix,
        index=pd.Index(classes, name="actual"),
        columns=pd.Index(classes, name="predicted"),
    )

    precision, recall, _, support = precision_recall_fscore_support(
        y_true, y_pred, labels=classes, zero_division=0
    )
    per_class = pd.DataFrame(
        {"sensitivity": recall, "precision": precision, "support": support},
        index=pd.Index(classes, name="class"),
    )

    result = EvaluationResult(
        confusion=confusion,
        error_rate=error_rate,
        accuracy=1.0 - error_rate,
        kappa=float(cohen_kappa_score(y_true, y_pred, labels=classes)),
        per_class=per_class,
        n_rows=int(matrix.sum()),
    )
    logger.info(
        "Held-out: %d rows, accuracy %.4f, misclassification rate %.4f, kappa %.4f",
        result.n_rows,
        result.accuracy,
        result.error_rate,
        result.kappa,
    )
    return result
