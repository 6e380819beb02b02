"""Manufacturer fuel-consumption curves for diesel gensets.

Each genset size is calibrated at four loading points and fuel burn between
them is modelled piecewise-linearly:

    F(x) = y0 + t * (y1 - y0),   t = (x - x0) / (x1 - x0)

where x is the load fraction (load kVA / rated kVA) and (x0, y0), (x1, y1)
are the bracketing calibration points at 25 / 50 / 75 / 100 % load.  Below
25 % and above 100 % the curve is held flat at the end samples.

Only exact genset ratings are supported: there is no interpolation across
different sizes.
"""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path
from types import MappingProxyType

import numpy as np

from engine.errors import InterpolationFailure, UnknownGensetRating

# Calibrated load fractions, ascending.
LOAD_BREAKPOINTS: tuple[float, float, float, float] = (0.25, 0.50, 0.75, 1.00)

_CSV_FIELDS = ("kva", "lph25", "lph50", "lph75", "lph100")


@dataclass(frozen=True)
class FuelCurvePoint:
    """Calibration row for one genset size.

    Parameters
    ----------
    kva : float
        Nominal genset rating (kVA).  Unique within a table.
    lph25, lph50, lph75, lph100 : float
        Fuel burn rate (L/hr) at 25, 50, 75 and 100 % load.
    """

    kva: float
    lph25: float
    lph50: float
    lph75: float
    lph100: float

    @property
    def samples(self) -> tuple[float, float, float, float]:
        """Fuel rates aligned with :data:`LOAD_BREAKPOINTS`."""
        return (self.lph25, self.lph50, self.lph75, self.lph100)

    def to_dict(self) -> dict[str, float]:
        return {
            "kva": self.kva,
            "lph25": self.lph25,
            "lph50": self.lph50,
            "lph75": self.lph75,
            "lph100": self.lph100,
        }


class FuelCurveTable:
    """Read-only, ordered collection of :class:`FuelCurvePoint` rows.

    Rows are kept in the order given and indexed by rating for exact-key
    lookup.  The table cannot be modified after construction.
    """

    __slots__ = ("_rows", "_by_kva")

    def __init__(self, rows: Iterable[FuelCurvePoint]) -> None:
        rows = tuple(rows)
        by_kva: dict[float, FuelCurvePoint] = {}
        for row in rows:
            if row.kva in by_kva:
                raise ValueError(f"Duplicate fuel curve rating: {row.kva:g} kVA")
            if min(row.samples) < 0:
                raise ValueError(
                    f"Fuel rates must be >= 0, got {row.samples} for {row.kva:g} kVA"
                )
            by_kva[row.kva] = row
        self._rows = rows
        self._by_kva = MappingProxyType(by_kva)

    def __iter__(self) -> Iterator[FuelCurvePoint]:
        return iter(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def __contains__(self, rating_kva: object) -> bool:
        return rating_kva in self._by_kva

    def __repr__(self) -> str:
        return f"FuelCurveTable({len(self._rows)} rows)"

    @property
    def ratings(self) -> tuple[float, ...]:
        """Genset ratings in table order."""
        return tuple(row.kva for row in self._rows)

    def row(self, rating_kva: float) -> FuelCurvePoint:
        """Return the calibration row for *rating_kva*.

        Raises
        ------
        UnknownGensetRating
            If the rating is not in the table.
        """
        try:
            return self._by_kva[rating_kva]
        except KeyError:
            raise UnknownGensetRating(rating_kva) from None

    def to_list(self) -> list[dict[str, float]]:
        """Return the table as a list of dicts for API responses."""
        return [row.to_dict() for row in self._rows]


# Built-in manufacturer data (L/hr).
DEFAULT_FUEL_CURVE_TABLE = FuelCurveTable([
    FuelCurvePoint(10, 0.9, 1.2, 1.7, 2.1),
    FuelCurvePoint(15, 1.3, 1.8, 2.6, 3.2),
    FuelCurvePoint(20, 2.3, 3.4, 4.9, 6.1),
    FuelCurvePoint(30, 4.0, 5.7, 7.6, 8.4),
    FuelCurvePoint(40, 4.9, 6.1, 9.1, 11.0),
    FuelCurvePoint(50, 6.1, 8.7, 12.1, 15.1),
    FuelCurvePoint(60, 7.3, 10.5, 14.1, 15.9),
    FuelCurvePoint(75, 6.8, 11.0, 14.4, 18.2),
    FuelCurvePoint(100, 9.1, 12.9, 17.4, 23.1),
    FuelCurvePoint(125, 9.8, 15.5, 22.0, 28.0),
    FuelCurvePoint(150, 11.7, 18.9, 26.9, 34.4),
    FuelCurvePoint(180, 13.6, 22.3, 31.8, 41.3),
    FuelCurvePoint(200, 15.5, 25.7, 36.7, 48.1),
    FuelCurvePoint(250, 17.8, 29.1, 41.6, 54.5),
    FuelCurvePoint(300, 21.6, 36.0, 51.5, 68.1),
    FuelCurvePoint(350, 25.7, 42.8, 60.9, 81.4),
    FuelCurvePoint(400, 29.9, 49.6, 70.8, 95.0),
    FuelCurvePoint(500, 33.7, 56.4, 80.6, 108.3),
    FuelCurvePoint(600, 41.6, 70.0, 99.9, 135.1),
    FuelCurvePoint(800, 61.7, 79.3, 119.1, 161.0),
    FuelCurvePoint(1000, 75.9, 111.9, 153.0, 222.3),
    FuelCurvePoint(1250, 81.8, 137.7, 197.2, 269.1),
])


def genset_sizes(table: FuelCurveTable = DEFAULT_FUEL_CURVE_TABLE) -> list[float]:
    """Selectable genset ratings (kVA), in table order."""
    return list(table.ratings)


def interpolate_fuel_rate(
    rating_kva: float,
    load_fraction: float,
    table: FuelCurveTable = DEFAULT_FUEL_CURVE_TABLE,
) -> float:
    """Estimate fuel burn for a genset at a given loading.

    Parameters
    ----------
    rating_kva : float
        Genset rating; must match a table row exactly.
    load_fraction : float
        Load as a fraction of rating.  Values outside [0.25, 1.0] are
        clamped to the end samples.
    table : FuelCurveTable
        Calibration data to interpolate over.

    Returns
    -------
    float
        Fuel consumption in litres per hour (L/hr).

    Raises
    ------
    UnknownGensetRating
        If *rating_kva* is not in *table*.
    InterpolationFailure
        If no bracketing pair exists (e.g. *load_fraction* is NaN).
    """
    samples = table.row(rating_kva).samples

    if load_fraction <= LOAD_BREAKPOINTS[0]:
        return samples[0]
    if load_fraction >= LOAD_BREAKPOINTS[-1]:
        return samples[-1]

    i = int(np.searchsorted(LOAD_BREAKPOINTS, load_fraction, side="right")) - 1
    if not 0 <= i < len(LOAD_BREAKPOINTS) - 1:
        raise InterpolationFailure(load_fraction)

    x0, x1 = LOAD_BREAKPOINTS[i], LOAD_BREAKPOINTS[i + 1]
    y0, y1 = samples[i], samples[i + 1]
    t = (load_fraction - x0) / (x1 - x0)
    return y0 + t * (y1 - y0)


# ----------------------------------------------------------------------
# Loading versioned tables from disk
# ----------------------------------------------------------------------


def _row_from_mapping(record: dict) -> FuelCurvePoint:
    try:
        return FuelCurvePoint(*(float(record[field]) for field in _CSV_FIELDS))
    except KeyError as exc:
        raise ValueError(f"Fuel curve row missing field {exc.args[0]!r}") from None


def parse_fuel_curve_csv(text: str) -> FuelCurveTable:
    """Parse CSV text with header ``kva,lph25,lph50,lph75,lph100``."""
    reader = csv.DictReader(io.StringIO(text))
    rows = [
        _row_from_mapping({k.strip(): v for k, v in record.items() if k})
        for record in reader
        if any((v or "").strip() for v in record.values())
    ]
    return FuelCurveTable(rows)


def parse_fuel_curve_json(text: str) -> FuelCurveTable:
    """Parse a JSON array of row objects."""
    data = json.loads(text)
    if not isinstance(data, list):
        raise ValueError("Fuel curve JSON must be a list of rows")
    return FuelCurveTable(_row_from_mapping(record) for record in data)


def load_fuel_curve_table(path: str | Path) -> FuelCurveTable:
    """Load a fuel curve table from a ``.csv`` or ``.json`` file."""
    path = Path(path)
    suffix = path.suffix.lower()
    text = path.read_text(encoding="utf-8")
    if suffix == ".csv":
        return parse_fuel_curve_csv(text)
    if suffix == ".json":
        return parse_fuel_curve_json(text)
    raise ValueError(f"Unsupported fuel curve file type: {path.suffix!r}")
