"""
Shared pytest fixtures for the PML report test suite.

All fixtures are synthetic — no real dataset files required. The frame mimics
the layout of pml-training.csv at a much smaller scale: the seven bookkeeping
columns, a handful of sensor columns whose level depends on the class, two
window-summary columns that are almost always missing, and the label.
"""

from __future__ import annotations

from pathlib import Path

import numpy as np
import pandas as pd
import pytest

CLASSES = ["A", "B", "C", "D", "E"]
METADATA_COLUMNS = [
    "X",
    "user_name",
    "raw_timestamp_part_1",
    "raw_timestamp_part_2",
    "cvtd_timestamp",
    "new_window",
    "num_window",
]
SENSOR_COLUMNS = ["roll_belt", "pitch_belt", "yaw_belt", "accel_arm_x", "magnet_dumbbell_z", "gyros_forearm_y"]


def make_pml_frame(rows_per_class: int = 40, seed: int = 0) -> pd.DataFrame:
    """
    Build a pml-shaped frame with rows_per_class rows for each of the 5 classes.

    Every sensor column is class mean (0, 10, 20, 30, 40) plus unit noise, so a
    forest separates the classes almost perfectly. kurtosis_roll_belt is filled
    only on "new window" rows (~3% of rows); skewness_yaw_belt is "#DIV/0!" or
    blank everywhere except those rows.
    """
    rng = np.random.RandomState(seed)
    n = rows_per_class * len(CLASSES)
    labels = np.repeat(CLASSES, rows_per_class)
    offsets = np.repeat(np.arange(len(CLASSES)) * 10.0, rows_per_class)
    new_window = np.zeros(n, dtype=bool)
    new_window[np.linspace(0, n - 1, 6).astype(int)] = True  # 6 of 200 rows → 97% missing

    df = pd.DataFrame({
        "X": np.arange(1, n + 1),
        "user_name": rng.choice(["adelmo", "carlitos", "pedro"], size=n),
        "raw_timestamp_part_1": 1322489729 + np.arange(n),
        "raw_timestamp_part_2": rng.randint(0, 999999, size=n),
        "cvtd_timestamp": "05/12/2011 11:23",
        "new_window": np.where(new_window, "yes", "no"),
        "num_window": rng.randint(1, 860, size=n),
    })
    for col in SENSOR_COLUMNS:
        df[col] = offsets + rng.normal(size=n)
    df["kurtosis_roll_belt"] = np.where(new_window, rng.normal(size=n), np.nan)
    df["skewness_yaw_belt"] = np.where(new_window, "0.5", np.where(np.arange(n) % 2, "#DIV/0!", ""))
    df["classe"] = labels
    return df


@pytest.fixture()
def sensor_columns() -> list[str]:
    return list(SENSOR_COLUMNS)


@pytest.fixture()
def pml_df() -> pd.DataFrame:
    """In-memory frame with the missing markers already applied (as the loader would)."""
    df = make_pml_frame()
    df["skewness_yaw_belt"] = pd.to_numeric(df["skewness_yaw_belt"], errors="coerce")
    return df


@pytest.fixture()
def pml_csv_file(tmp_path: Path) -> Path:
    """
    make_pml_frame() written the way R's write.csv writes it: a blank header
    for the row id column, "NA" for missing numbers.
    """
    df = make_pml_frame().rename(columns={"X": ""})
    p = tmp_path / "pml-training.csv"
    df.to_csv(p, index=False, na_rep="NA")
    return p


@pytest.fixture()
def malformed_csv_file(tmp_path: Path) -> Path:
    """Header with three fields, third data row with five."""
    p = tmp_path / "malformed.csv"
    p.write_text("a,b,classe\n1,2,A\n3,4,B\n5,6,C,7,8\n", encoding="utf-8")
    return p


@pytest.fixture()
def cleaned_split(pml_df: pd.DataFrame) -> tuple[pd.DataFrame, pd.Series]:
    """(X, y) after cleaning the whole synthetic frame."""
    from pml_report.data.cleaning import clean_dataset, split_features

    cleaned = clean_dataset(pml_df, "classe", METADATA_COLUMNS)
    return split_features(cleaned, "classe")


@pytest.fixture()
def pml_workdir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """
    tmp_path laid out like the project root: data/pml-training.csv and a
    20-row data/pml-testing.csv (no label, a problem_id column instead).
    The working directory is switched to it for the duration of the test.
    """
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    make_pml_frame().rename(columns={"X": ""}).to_csv(
        data_dir / "pml-training.csv", index=False, na_rep="NA"
    )
    scoring = make_pml_frame(rows_per_class=4, seed=1).drop(columns=["classe"])
    scoring["problem_id"] = range(1, len(scoring) + 1)
    scoring.rename(columns={"X": ""}).to_csv(data_dir / "pml-testing.csv", index=False, na_rep="NA")

    monkeypatch.chdir(tmp_path)
    return tmp_path
