from __future__ import annotations

import pandas as pd
import pytest

from fars_errors import InvalidYearBatchError, InvalidYearWarning
from fars_summary import count_by_month, fars_summarize_years, pivot_counts


def _row(summary: pd.DataFrame, month: int) -> pd.Series:
    rows = summary[summary["MONTH"] == month]
    assert len(rows) == 1
    return rows.iloc[0]


def test_summary_counts_months_per_year(fars_dir) -> None:
    summary = fars_summarize_years([2013, 2014], data_dir=fars_dir)

    assert list(summary.columns) == ["MONTH", 2013, 2014]
    assert summary["MONTH"].tolist() == [1, 2, 3, 5, 7]

    january = _row(summary, 1)
    assert january[2013] == 3
    assert january[2014] == 5


def test_summary_leaves_missing_months_empty(fars_dir) -> None:
    summary = fars_summarize_years([2013, 2014], data_dir=fars_dir)

    assert pd.isna(_row(summary, 3)[2013])
    assert pd.isna(_row(summary, 2)[2014])
    assert 4 not in summary["MONTH"].tolist()
    assert str(summary[2013].dtype) == "Int64"


def test_summary_sorts_year_columns(fars_dir) -> None:
    summary = fars_summarize_years([2014, 2013], data_dir=fars_dir)

    assert list(summary.columns) == ["MONTH", 2013, 2014]


def test_summary_skips_invalid_year(fars_dir) -> None:
    with pytest.warns(InvalidYearWarning, match="invalid year: 9999"):
        summary = fars_summarize_years([2013, 9999], data_dir=fars_dir)

    assert list(summary.columns) == ["MONTH", 2013]
    assert summary[2013].sum() == 6


def test_summary_fails_when_no_year_is_valid(fars_dir) -> None:
    with pytest.warns(InvalidYearWarning):
        with pytest.raises(InvalidYearBatchError, match="no valid years") as exc_info:
            fars_summarize_years([9999], data_dir=fars_dir)

    assert exc_info.value.years == [9999]


def test_summary_is_repeatable(fars_dir) -> None:
    first = fars_summarize_years([2013, 2014], data_dir=fars_dir)
    second = fars_summarize_years([2013, 2014], data_dir=fars_dir, max_workers=2)

    pd.testing.assert_frame_equal(first, second)


def test_count_by_month_and_pivot() -> None:
    projected = pd.DataFrame({"MONTH": [2, 1, 2, 12], "year": [2020, 2020, 2020, 2021]})

    counts = count_by_month(projected)
    assert counts.to_dict("records") == [
        {"year": 2020, "MONTH": 1, "n": 1},
        {"year": 2020, "MONTH": 2, "n": 2},
        {"year": 2021, "MONTH": 12, "n": 1},
    ]

    wide = pivot_counts(counts)
    assert list(wide.columns) == ["MONTH", 2020, 2021]
    assert wide["MONTH"].tolist() == [1, 2, 12]
    assert wide[2020].tolist()[:2] == [1, 2]
    assert pd.isna(wide.loc[wide["MONTH"] == 12, 2020].iloc[0])


def test_pivot_of_empty_counts_has_only_month_column() -> None:
    wide = pivot_counts(count_by_month(pd.DataFrame({"MONTH": [], "year": []})))

    assert list(wide.columns) == ["MONTH"]
    assert wide.empty


def test_count_by_month_requires_projected_columns() -> None:
    with pytest.raises(KeyError, match="year"):
        count_by_month(pd.DataFrame({"MONTH": [1]}))
