"""Diesel generator engine module."""

from .fuel_curve import (
    DEFAULT_FUEL_CURVE_TABLE,
    FuelCurvePoint,
    FuelCurveTable,
    genset_sizes,
    interpolate_fuel_rate,
    load_fuel_curve_table,
)

__all__ = [
    "DEFAULT_FUEL_CURVE_TABLE",
    "FuelCurvePoint",
    "FuelCurveTable",
    "genset_sizes",
    "interpolate_fuel_rate",
    "load_fuel_curve_table",
]
