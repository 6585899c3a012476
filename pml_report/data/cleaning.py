"""
Column cleaning and selection for the sensor dataset.

Incompleteness is resolved by exclusion only: a column with any missing cell
is dropped as a whole, never imputed. In the raw training file that removes
the ~100 window-summary columns (kurtosis_*, skewness_*, max_*, avg_*, ...)
that are only filled on new-window rows. The bookkeeping columns at the front
of the file (row id, subject, timestamps, window markers) are dropped as well,
leaving the label plus the raw belt / arm / forearm / dumbbell measurements.

All functions here are pure and return new DataFrames.

    cleaned = clean_dataset(train_df, label="classe", metadata_columns=META)
    held_out = align_to_training(test_df, cleaned.columns)
    X_train, y_train = split_features(cleaned, "classe")
"""

from __future__ import annotations

import logging
from typing import Iterable

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


def _blank_to_nan(df: pd.DataFrame) -> pd.DataFrame:
    """Treat empty and whitespace-only string cells as missing."""
    return df.replace(r"^\s*$", np.nan, regex=True)


def missing_fraction(df: pd.DataFrame) -> pd.Series:
    """Share of missing cells per column (empty strings count as missing)."""
    return _blank_to_nan(df).isna().mean()


def drop_incomplete_columns(df: pd.DataFrame, keep: Iterable[str] = ()) -> pd.DataFrame:
    """
    Drop every column that has at least one missing value.

    Columns listed in keep are never dropped here; callers validate them
    separately (the label, for instance, must be complete anyway).
    """
    df = _blank_to_nan(df)
    fractions = df.isna().mean()
    keep = set(keep)
    incomplete = [c for c in df.columns if fractions[c] > 0 and c not in keep]

    if incomplete:
        mostly_missing = int((fractions[incomplete] >= 0.9).sum())
        logger.info(
            "Dropping %d incomplete columns (%d of them ≥90%% missing)",
            len(incomplete),
            mostly_missing,
        )
        logger.debug("Incomplete columns: %s", incomplete)
    return df.drop(columns=incomplete)


def drop_metadata_columns(df: pd.DataFrame, columns: Iterable[str]) -> pd.DataFrame:
    """Drop the listed bookkeeping columns; ones not present are ignored."""
    columns = list(columns)
    present = [c for c in columns if c in df.columns]
    absent = [c for c in columns if c not in df.columns]
    if absent:
        logger.debug("Metadata columns already absent: %s", absent)
    return df.drop(columns=present)


def clean_dataset(
    df: pd.DataFrame,
    label: str,
    metadata_columns: Iterable[str],
) -> pd.DataFrame:
    """
    Reduce a raw dataset to the label plus complete, numeric sensor columns.

    Args:
        df: Raw dataset as returned by load_dataset (or a partition of it).
        label: Name of the class column.
        metadata_columns: Bookkeeping columns to remove from the retained set.

    Returns:
        A DataFrame with no missing cells whose columns are the sensor
        measurements followed by the label. Column order otherwise follows df.

    Raises:
        KeyError: If the label column is absent.
        ValueError: If the label has missing values, or a retained column
            other than the label is not numeric.
    """
    if label not in df.columns:
        raise KeyError(f"Label column {label!r} not found")

    n_before = df.shape[1]
    cleaned = drop_incomplete_columns(df, keep=[label])

    if cleaned[label].isna().any():
        raise ValueError(
            f"Label column {label!r} has {int(cleaned[label].isna().sum())} missing values"
        )

    cleaned = drop_metadata_columns(cleaned, metadata_columns)

    features = [c for c in cleaned.columns if c != label]
    non_numeric = [c for c in features if not pd.api.types.is_numeric_dtype(cleaned[c])]
    if non_numeric:
        raise ValueError(f"Non-numeric columns left after cleaning: {non_numeric}")

    cleaned = cleaned[features + [label]]
    logger.info(
        "Cleaning kept %d of %d columns (%d features + label)",
        cleaned.shape[1],
        n_before,
        len(features),
    )
    return cleaned


def align_to_training(df: pd.DataFrame, training_columns: Iterable[str]) -> pd.DataFrame:
    """
    Restrict a held-out frame to exactly the columns retained for training.

    Raises:
        KeyError: If a training column is missing from df.
        ValueError: If a retained column has missing values in df.
    """
    training_columns = list(training_columns)
    absent = [c for c in training_columns if c not in df.columns]
    if absent:
        raise KeyError(f"Held-out data lacks training columns: {absent}")

    aligned = _blank_to_nan(df[training_columns])
    incomplete = aligned.columns[aligned.isna().any()].tolist()
    if incomplete:
        raise ValueError(f"Held-out data has missing values in retained columns: {incomplete}")
    return aligned


def split_features(df: pd.DataFrame, label: str) -> tuple[pd.DataFrame, pd.Series]:
    """Split a cleaned frame into (feature matrix, label vector)."""
    return df.drop(columns=[label]), df[label]
