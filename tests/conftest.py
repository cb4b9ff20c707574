from __future__ import annotations

import pathlib
from typing import Callable

import pandas as pd
import pytest

# YEAR deliberately disagrees with the file name; rows are tagged from the file name.
ACCIDENTS_2013 = pd.DataFrame(
    {
        "ST_CASE": [10001, 10002, 360001, 360002, 360003, 20001],
        "STATE": [1, 1, 36, 36, 36, 2],
        "MONTH": [1, 1, 1, 2, 5, 7],
        "YEAR": [2099, 2099, 2099, 2099, 2099, 2099],
        "LATITUDE": [32.1, 33.5, 40.7, 99.9999, 42.0, 99.9999],
        "LONGITUD": [-86.2, -87.0, -73.9, -74.1, 999.9999, 999.9999],
    }
)

ACCIDENTS_2014 = pd.DataFrame(
    {
        "ST_CASE": [10001, 10002, 10003, 360001, 360002, 60001],
        "STATE": [1, 1, 1, 36, 36, 6],
        "MONTH": [1, 1, 1, 1, 1, 3],
        "YEAR": [2014, 2014, 2014, 2014, 2014, 2014],
        "LATITUDE": [32.3, 31.9, 34.0, 41.1, 43.2, 36.7],
        "LONGITUD": [-86.5, -85.9, -87.7, -73.5, -75.8, -119.8],
    }
)


@pytest.fixture
def write_year(tmp_path: pathlib.Path) -> Callable[[int, pd.DataFrame], pathlib.Path]:
    def _write(year: int, frame: pd.DataFrame) -> pathlib.Path:
        path = tmp_path / f"accident_{year}.csv.bz2"
        frame.to_csv(path, index=False, compression="bz2")
        return path

    return _write


@pytest.fixture
def fars_dir(tmp_path: pathlib.Path, write_year) -> pathlib.Path:
    write_year(2013, ACCIDENTS_2013)
    write_year(2014, ACCIDENTS_2014)
    return tmp_path
