"""Loading yearly FARS accident files.

One compressed CSV per year, named ``accident_<year>.csv.bz2``. This module
covers the three steps every other helper builds on:

- ``make_filename``: year -> file name (pure, no I/O)
- ``fars_read``: file name -> full accident table (fails if the file is absent)
- ``fars_read_years``: years -> one (MONTH, year) table per year, or ``None``
  for each year that could not be loaded

Multi-year reads never fail as a whole because of a single bad year: every
year is captured as a ``YearResult`` and failed years are reported with an
``InvalidYearWarning`` once all loads have finished.
"""

from __future__ import annotations

import dataclasses
import inspect
import logging
import numbers
import pathlib
import warnings
from concurrent.futures import ThreadPoolExecutor
from types import FrameType
from typing import Any, Iterable, Sequence

import pandas as pd

from fars_errors import FarsFileNotFoundError, InvalidYearWarning

FILENAME_TEMPLATE = "accident_{year}.csv.bz2"
PROJECTED_COLUMNS = ["MONTH", "year"]

_logger = logging.getLogger(__name__)

# Frames skipped when attributing an InvalidYearWarning to the caller.
_INTERNAL_MODULES = frozenset({"fars_data", "fars_summary"})

__all__ = [
    "FILENAME_TEMPLATE",
    "PROJECTED_COLUMNS",
    "YearResult",
    "coerce_whole_number",
    "coerce_year",
    "make_filename",
    "year_path",
    "fars_read",
    "read_year",
    "read_year_results",
    "fars_read_years",
]


def _ensure_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"DataFrame missing columns: {missing}")


def coerce_whole_number(value: Any, what: str = "value") -> int:
    """Turn ``value`` into an int; fractional floats, bools and unparsable values raise."""
    if isinstance(value, bool):
        raise TypeError(f"{what} must be an integer, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{what} must be a whole number, got {value!r}")
        return int(value)
    if isinstance(value, str):
        value = value.strip()
    return int(value)


def coerce_year(year: Any) -> int:
    return coerce_whole_number(year, "year")


def _as_year_list(years: Any) -> list[Any]:
    if isinstance(years, (str, bytes, numbers.Number)):
        return [years]
    return list(years)


def make_filename(year: Any) -> str:
    """Return the accident file name for ``year``, e.g. ``accident_2013.csv.bz2``."""
    return FILENAME_TEMPLATE.format(year=coerce_year(year))


def fars_read(filename: str | pathlib.Path) -> pd.DataFrame:
    """Read one accident CSV (compression inferred from the suffix).

    Raises ``FarsFileNotFoundError`` naming the file when it does not exist.
    All columns are kept in file order and rows keep their on-disk order.
    """
    path = pathlib.Path(filename)
    if not path.is_file():
        raise FarsFileNotFoundError(str(filename))
    # Single-pass read; no mixed-dtype warnings on the wide schema.
    data = pd.read_csv(path, low_memory=False)
    _logger.debug("Read %d rows from %s", len(data), path)
    return data


def year_path(year: Any, data_dir: str | pathlib.Path | None = None) -> pathlib.Path:
    """Path of the accident file for ``year`` inside ``data_dir`` (default: working directory)."""
    filename = make_filename(year)
    return pathlib.Path(data_dir) / filename if data_dir is not None else pathlib.Path(filename)


def _project(data: pd.DataFrame, year: int) -> pd.DataFrame:
    _ensure_columns(data, ["MONTH"])
    return data.assign(year=year)[PROJECTED_COLUMNS]


def read_year(year: Any, *, data_dir: str | pathlib.Path | None = None) -> pd.DataFrame:
    """Load one year and project it to the (MONTH, year) columns.

    ``year`` is the tag written to every row; a year column inside the raw
    file is ignored. Errors propagate to the caller.
    """
    year = coerce_year(year)
    projected = _project(fars_read(year_path(year, data_dir)), year)
    _logger.debug("Year %d: %d incidents", year, len(projected))
    return projected


@dataclasses.dataclass(frozen=True)
class YearResult:
    """Outcome of loading a single year: either a table or the error that stopped it.

    ``year`` is the coerced integer, or the caller's raw value when it could
    not be turned into one.
    """

    year: Any
    data: pd.DataFrame | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.data is not None

    @classmethod
    def success(cls, year: int, data: pd.DataFrame) -> YearResult:
        return cls(year=year, data=data)

    @classmethod
    def failure(cls, year: Any, error: Exception) -> YearResult:
        return cls(year=year, error=error)


def _load_year_result(raw_year: Any, data_dir: str | pathlib.Path | None) -> YearResult:
    try:
        year = coerce_year(raw_year)
    except (TypeError, ValueError) as exc:
        return YearResult.failure(raw_year, exc)
    try:
        return YearResult.success(year, read_year(year, data_dir=data_dir))
    except Exception as exc:
        return YearResult.failure(year, exc)


def _caller_frame() -> FrameType | None:
    frame = inspect.currentframe()
    while frame is not None and frame.f_globals.get("__name__") in _INTERNAL_MODULES:
        frame = frame.f_back
    return frame


def _warn_invalid_year(year: Any) -> None:
    frame = _caller_frame()
    if frame is None:
        filename, lineno, module = __file__, 0, __name__
    else:
        filename, lineno = frame.f_code.co_filename, frame.f_lineno
        module = frame.f_globals.get("__name__", "")
    # Fresh registry: under the "default" action every failure is shown,
    # not only the first one per call site.
    warnings.warn_explicit(
        f"invalid year: {year}",
        InvalidYearWarning,
        filename,
        lineno,
        module=module,
        registry={},
    )


def read_year_results(
    years: Sequence[Any] | Any,
    *,
    data_dir: str | pathlib.Path | None = None,
    max_workers: int = 1,
    warn: bool = True,
) -> list[YearResult]:
    """Load every year in isolation and return one ``YearResult`` per year, in input order.

    Any error while coercing, loading or projecting a year is captured in that
    year's result. With ``warn`` set, one ``InvalidYearWarning`` is issued per
    failed year on every call.
    """
    raw_years = _as_year_list(years)

    if max_workers > 1 and len(raw_years) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as ex:
            results = list(ex.map(lambda y: _load_year_result(y, data_dir), raw_years))
    else:
        results = [_load_year_result(y, data_dir) for y in raw_years]

    if warn:
        for result in results:
            if result.ok:
                continue
            _logger.warning("Skipping year %s: %s", result.year, result.error)
            _warn_invalid_year(result.year)
    return results


def fars_read_years(
    years: Sequence[Any] | Any,
    *,
    data_dir: str | pathlib.Path | None = None,
    max_workers: int = 1,
) -> list[pd.DataFrame | None]:
    """Return one (MONTH, year) table per requested year, ``None`` where the year failed."""
    results = read_year_results(years, data_dir=data_dir, max_workers=max_workers)
    return [r.data if r.ok else None for r in results]
