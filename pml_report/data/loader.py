"""
Loader for the weight-lifting sensor CSV files (pml-training.csv / pml-testing.csv).

The files are plain comma-separated tables with a header row, written by R's
write.csv. Two quirks need handling:

  - the leading row-id column has a blank header, which pandas would name
    "Unnamed: 0"; it is renamed to "X" to match the name everyone else uses
  - summary-statistic columns (kurtosis_*, skewness_*, ...) are only filled on
    window-boundary rows and contain "" or "#DIV/0!" elsewhere; both are
    parsed as missing so the cleaner can drop those columns

Usage:

    from pml_report.data.loader import load_dataset

    df = load_dataset("data/pml-training.csv")
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Sequence

import pandas as pd
from pandas.errors import EmptyDataError, ParserError

logger = logging.getLogger(__name__)

DEFAULT_NA_VALUES = ("", "NA", "#DIV/0!")
ROW_ID_COLUMN = "X"


def load_dataset(
    path: Path | str,
    na_values: Sequence[str] = DEFAULT_NA_VALUES,
) -> pd.DataFrame:
    """
    Read a sensor CSV into a DataFrame with one column per header entry.

    Args:
        path: Path to a CSV file with a header row.
        na_values: Cell values to treat as missing, in addition to blank cells.

    Returns:
        The parsed DataFrame. Row order matches the file.

    Raises:
        FileNotFoundError: If the path does not exist.
        pandas.errors.ParserError: If the file is empty or is not valid CSV
            (e.g. a row with more fields than the header).
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Dataset file not found: {path}")

    try:
        df = pd.read_csv(path, na_values=list(na_values), keep_default_na=False)
    except EmptyDataError as exc:
        raise ParserError(f"{path.name}: {exc}") from exc

    first = df.columns[0]
    if isinstance(first, str) and first.startswith("Unnamed: 0"):
        df = df.rename(columns={first: ROW_ID_COLUMN})

    logger.info("%s: loaded %d rows x %d columns", path.name, len(df), df.shape[1])
    return df
