"""Month-by-year incident counts across several FARS years.

Output of ``fars_summarize_years`` (one row per month present in the data):

    MONTH  2013  2014
        1  2230  2168
        2  1952  1893
      ...

Year columns are sorted ascending. A month missing from one year is ``<NA>``
in that year's column (nullable ``Int64``), never 0.
"""

from __future__ import annotations

import logging
import pathlib
from typing import Any, Iterable, Sequence

import pandas as pd

from fars_data import read_year_results
from fars_errors import InvalidYearBatchError

_logger = logging.getLogger(__name__)

__all__ = [
    "count_by_month",
    "pivot_counts",
    "fars_summarize_years",
]


def _ensure_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"DataFrame missing columns: {missing}")


def count_by_month(projected: pd.DataFrame) -> pd.DataFrame:
    """Return incident counts per (year, MONTH).

    Output columns:
    - year (int)
    - MONTH (int)
    - n (int)
    """
    _ensure_columns(projected, ["MONTH", "year"])
    if projected.empty:
        return pd.DataFrame(
            {
                "year": pd.Series(dtype="int64"),
                "MONTH": pd.Series(dtype="int64"),
                "n": pd.Series(dtype="int64"),
            }
        )
    counts = projected.groupby(["year", "MONTH"]).size().rename("n").reset_index()
    counts["n"] = counts["n"].astype("int64")
    return counts


def pivot_counts(counts: pd.DataFrame) -> pd.DataFrame:
    """Spread (year, MONTH, n) into one row per MONTH and one column per year."""
    _ensure_columns(counts, ["year", "MONTH", "n"])
    if counts.empty:
        return pd.DataFrame({"MONTH": pd.Series(dtype="int64")})

    wide = (
        counts.pivot(index="MONTH", columns="year", values="n")
        .sort_index()
        .sort_index(axis=1)
        .astype("Int64")
    )
    wide.columns = [int(c) for c in wide.columns]
    return wide.reset_index()


def fars_summarize_years(
    years: Sequence[Any] | Any,
    *,
    data_dir: str | pathlib.Path | None = None,
    max_workers: int = 1,
) -> pd.DataFrame:
    """Count incidents per month for each requested year.

    Years that fail to load are skipped with an ``InvalidYearWarning``.
    Raises ``InvalidYearBatchError`` when no year could be loaded.
    """
    results = read_year_results(years, data_dir=data_dir, max_workers=max_workers)
    frames = [r.data for r in results if r.ok]
    if not frames:
        raise InvalidYearBatchError([r.year for r in results])

    combined = pd.concat(frames, ignore_index=True)
    _logger.debug(
        "Summarizing %d incidents across %d of %d years",
        len(combined),
        len(frames),
        len(results),
    )
    return pivot_counts(count_by_month(combined))
