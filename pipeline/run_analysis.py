"""
run_analysis.py — The whole report, top to bottom.

  1. load pml-training.csv
  2. seeded, stratified 75/25 partition
  3. clean the training partition, align the held-out partition to it
  4. 5-fold CV sweep over features per split → one-SE choice → 500-tree fit
     → confusion matrix and misclassification rate on the held-out rows

Every step is fatal on failure; there is nothing to resume.

Usage:
    python -m pipeline.run_analysis

Input:
    data/pml-training.csv (and optionally data/pml-testing.csv)
Output:
    reports/report.md, reports/cv_error_curve.png,
    reports/variable_importance.png, reports/run.log
"""

from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pandas as pd

_PROJECT_ROOT = Path(__file__).parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))

from pml_report.config import load_config  # noqa: E402
from pml_report.data.cleaning import align_to_training, clean_dataset, split_features  # noqa: E402
from pml_report.data.loader import load_dataset  # noqa: E402
from pml_report.data.partition import apply_partition, stratified_split  # noqa: E402
from pml_report.evaluate import evaluate_predictions  # noqa: E402
from pml_report.logging_utils import get_logger  # noqa: E402
from pml_report.modeling.forest import (  # noqa: E402
    ForestConfig,
    feature_importance,
    oob_error,
    predict,
    train_forest,
)
from pml_report.modeling.tuning import cv_error_curve, select_features_per_split  # noqa: E402
from pml_report.report import ReportSummary, plot_cv_curve, plot_importance, write_report  # noqa: E402

_cfg = load_config("analysis")
_data = _cfg["data"]
_part = _cfg["partition"]
_cv = _cfg["cross_validation"]
_forest = _cfg["forest"]
_report = _cfg["report"]

TRAINING_CSV: str = _data["training_csv"]
SCORING_CSV: str | None = _data.get("scoring_csv")
NA_VALUES: list[str] = _data["na_values"]
LABEL: str = _data["label"]
METADATA_COLUMNS: list[str] = _data["metadata_columns"]

SEED: int = _part["seed"]
TRAIN_FRACTION: float = _part["train_fraction"]

OUTPUT_DIR = Path(_report["output_dir"])

logger = get_logger(__name__)


def _score_unlabeled(model, training_columns: list[str]) -> pd.DataFrame | None:
    """Predict the unlabeled cases, if the scoring file is configured and present."""
    if not SCORING_CSV or not Path(SCORING_CSV).exists():
        logger.info("No scoring file at %s — skipping unlabeled predictions", SCORING_CSV)
        return None

    scoring_df = load_dataset(SCORING_CSV, na_values=NA_VALUES)
    feature_columns = [c for c in training_columns if c != LABEL]
    X_score = align_to_training(scoring_df, feature_columns)
    predictions = predict(model, X_score).to_frame()
    if "problem_id" in scoring_df.columns:
        predictions.insert(0, "problem_id", scoring_df["problem_id"])
    return predictions.reset_index(drop=True)


def main() -> None:
    get_logger(__name__, log_file=OUTPUT_DIR / "run.log")
    logger.info("PML random forest report")
    rng = np.random.RandomState(SEED)

    # 1. Load
    raw_df = load_dataset(TRAINING_CSV, na_values=NA_VALUES)

    # 2. Partition
    partition = stratified_split(raw_df, LABEL, TRAIN_FRACTION, rng)
    train_raw, test_raw = apply_partition(raw_df, partition)

    # 3. Clean on the training rows only; the held-out rows follow its columns
    train_df = clean_dataset(train_raw, LABEL, METADATA_COLUMNS)
    test_df = align_to_training(test_raw, train_df.columns)
    X_train, y_train = split_features(train_df, LABEL)
    X_test, y_test = split_features(test_df, LABEL)

    # 4a. Features per split
    logger.info("Running %d-fold CV over features per split: %s", _cv["n_folds"], _cv["candidates"])
    curve = cv_error_curve(
        X_train,
        y_train,
        candidates=_cv["candidates"],
        rng=rng,
        n_folds=_cv["n_folds"],
        n_trees=_cv["n_trees"],
        n_jobs=_forest["n_jobs"],
    )
    mtry = select_features_per_split(curve)

    # 4b. Final fit
    config = ForestConfig(
        n_trees=_forest["n_trees"],
        features_per_split=mtry,
        compute_importance=_forest["compute_importance"],
        n_jobs=_forest["n_jobs"],
    )
    model = train_forest(X_train, y_train, config, rng)

    # 4c. Held-out scoring
    evaluation = evaluate_predictions(y_test, predict(model, X_test))
    logger.info("Confusion matrix (rows = actual, columns = predicted):\n%s", evaluation.confusion)
    logger.info("Misclassification rate: %.4f", evaluation.error_rate)

    summary = ReportSummary(
        source_file=Path(TRAINING_CSV).name,
        raw_shape=raw_df.shape,
        cleaned_shape=train_df.shape,
        train_classes=y_train.value_counts().sort_index(),
        test_classes=y_test.value_counts().sort_index(),
        cv_curve=curve,
        selected_features_per_split=mtry,
        n_trees=config.n_trees,
        oob_error=oob_error(model),
        evaluation=evaluation,
        cv_plot=plot_cv_curve(curve, mtry, OUTPUT_DIR / "cv_error_curve.png"),
    )
    if config.compute_importance:
        summary.importance = feature_importance(model)
        summary.importance_plot = plot_importance(
            summary.importance,
            OUTPUT_DIR / "variable_importance.png",
            top_n=_report["top_n_importance"],
        )

    summary.scoring_predictions = _score_unlabeled(model, list(train_df.columns))
    if summary.scoring_predictions is None:
        summary.notes.append(f"Unlabeled scoring file not found: {SCORING_CSV}")

    write_report(OUTPUT_DIR / "report.md", summary)
    logger.info("Done. Held-out misclassification rate = %.4f", evaluation.error_rate)


if __name__ == "__main__":
    main()
