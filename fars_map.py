"""Plot FARS accident locations for one state and year with folium.

Steps (each a separate function so it can be used on its own):
- ``filter_state``: keep one state's rows; the state number must appear in the
  year's STATE values
- ``sanitize_coordinates``: LONGITUD > 900 / LATITUDE > 90 are "unknown" codes
  and become NaN
- ``bounding_box``: extent of the known coordinates only
- ``render_state_map``: base map + one marker per located accident

``fars_map_state`` chains them. A state with no accidents is not an error:
an info message is logged and ``None`` is returned.
"""

from __future__ import annotations

import dataclasses
import logging
import pathlib
from typing import Any, Callable, Iterable

import folium
import numpy as np
import pandas as pd

from fars_data import coerce_whole_number, coerce_year, fars_read, year_path
from fars_errors import InvalidStateError

LONGITUDE_SENTINEL = 900
LATITUDE_SENTINEL = 90
COORD_COLUMNS = ["LONGITUD", "LATITUDE"]
POINT_COLOR = "#b10026"

_logger = logging.getLogger(__name__)

__all__ = [
    "LONGITUDE_SENTINEL",
    "LATITUDE_SENTINEL",
    "BoundingBox",
    "StatePointSet",
    "filter_state",
    "sanitize_coordinates",
    "bounding_box",
    "extract_state_points",
    "render_state_map",
    "fars_map_state",
]


def _ensure_columns(df: pd.DataFrame, columns: Iterable[str]) -> None:
    missing = [c for c in columns if c not in df.columns]
    if missing:
        raise KeyError(f"DataFrame missing columns: {missing}")


def _coerce_state(state_num: Any) -> int:
    return coerce_whole_number(state_num, "state number")


@dataclasses.dataclass(frozen=True)
class BoundingBox:
    min_lon: float
    min_lat: float
    max_lon: float
    max_lat: float

    @property
    def center(self) -> list[float]:
        return [(self.min_lat + self.max_lat) / 2, (self.min_lon + self.max_lon) / 2]

    def to_bounds(self) -> list[list[float]]:
        """Leaflet ordering: [[south, west], [north, east]]."""
        return [[self.min_lat, self.min_lon], [self.max_lat, self.max_lon]]


@dataclasses.dataclass(frozen=True)
class StatePointSet:
    """Accident coordinates for one (state, year); NaN marks an unknown coordinate."""

    state_num: int
    year: int
    points: pd.DataFrame
    bbox: BoundingBox

    def __len__(self) -> int:
        return len(self.points)

    @property
    def located(self) -> pd.DataFrame:
        """Rows where both longitude and latitude are known."""
        return self.points.dropna(subset=COORD_COLUMNS)


def filter_state(data: pd.DataFrame, state_num: Any, *, year: int | None = None) -> pd.DataFrame:
    """Return the rows for ``state_num``.

    Raises ``InvalidStateError`` when the number is not among the STATE values
    present in ``data``.
    """
    _ensure_columns(data, ["STATE"])
    state = _coerce_state(state_num)
    observed = set(pd.unique(data["STATE"].dropna()))
    if state not in observed:
        raise InvalidStateError(state, year)
    return data[data["STATE"] == state].copy()


def sanitize_coordinates(df: pd.DataFrame) -> pd.DataFrame:
    """Replace unknown-coordinate codes with NaN (LONGITUD > 900, LATITUDE > 90)."""
    _ensure_columns(df, COORD_COLUMNS)
    out = df.copy()
    lon = pd.to_numeric(out["LONGITUD"], errors="coerce").astype("float64")
    lat = pd.to_numeric(out["LATITUDE"], errors="coerce").astype("float64")
    out["LONGITUD"] = lon.mask(lon > LONGITUDE_SENTINEL, np.nan)
    out["LATITUDE"] = lat.mask(lat > LATITUDE_SENTINEL, np.nan)
    return out


def bounding_box(points: pd.DataFrame) -> BoundingBox | None:
    """Extent of the known coordinates, per axis; ``None`` if an axis has no known value."""
    _ensure_columns(points, COORD_COLUMNS)
    lon = points["LONGITUD"].dropna()
    lat = points["LATITUDE"].dropna()
    if lon.empty or lat.empty:
        return None
    return BoundingBox(
        min_lon=float(lon.min()),
        min_lat=float(lat.min()),
        max_lon=float(lon.max()),
        max_lat=float(lat.max()),
    )


def extract_state_points(
    state_num: Any,
    year: Any,
    *,
    data_dir: str | pathlib.Path | None = None,
) -> StatePointSet | None:
    """Load ``year``, keep ``state_num``'s accidents and clean their coordinates.

    Returns ``None`` (after logging an info message) when there is nothing to plot.
    """
    year = coerce_year(year)
    data = fars_read(year_path(year, data_dir))
    state = _coerce_state(state_num)
    subset = filter_state(data, state, year=year)
    if subset.empty:
        _logger.info("no accidents to plot")
        return None

    points = sanitize_coordinates(subset)[COORD_COLUMNS].reset_index(drop=True)
    bbox = bounding_box(points)
    if bbox is None:
        _logger.info("no accidents with known coordinates to plot")
        return None

    _logger.debug(
        "State %d, %d: %d accidents, %d located, bounds %s",
        state,
        year,
        len(points),
        len(points.dropna(subset=COORD_COLUMNS)),
        bbox.to_bounds(),
    )
    return StatePointSet(state_num=state, year=year, points=points, bbox=bbox)


def render_state_map(points: StatePointSet, *, tiles: str = "CartoDB positron") -> folium.Map:
    m = folium.Map(location=points.bbox.center, zoom_start=6, tiles=tiles)

    layer = folium.FeatureGroup(name=f"Accidents {points.year} (state {points.state_num})")
    for row in points.located.itertuples(index=False):
        folium.CircleMarker(
            location=[row.LATITUDE, row.LONGITUD],
            radius=2,
            color=POINT_COLOR,
            fill=True,
            fill_opacity=0.7,
            weight=1,
        ).add_to(layer)
    layer.add_to(m)

    m.fit_bounds(points.bbox.to_bounds())
    return m


def fars_map_state(
    state_num: Any,
    year: Any,
    *,
    data_dir: str | pathlib.Path | None = None,
    renderer: Callable[[StatePointSet], Any] | None = None,
    out: str | pathlib.Path | None = None,
) -> Any | None:
    """Map the accidents of one state in one year.

    ``renderer`` defaults to ``render_state_map``. When ``out`` is given the
    rendered map is saved there (the renderer's result must have ``save``).
    Returns the rendered map, or ``None`` when there is nothing to plot.
    """
    points = extract_state_points(state_num, year, data_dir=data_dir)
    if points is None:
        return None

    render = renderer or render_state_map
    rendered = render(points)
    if out is not None:
        rendered.save(str(out))
        _logger.info("Map written to %s", out)
    return rendered
