"""Fuel curve reference data shared by all requests."""

import logging
from functools import lru_cache

from app.config import settings
from engine.generator.fuel_curve import (
    DEFAULT_FUEL_CURVE_TABLE,
    FuelCurveTable,
    load_fuel_curve_table,
)

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_fuel_curve_table() -> FuelCurveTable:
    """Return the fuel curve table, loading ``settings.fuel_curve_path`` once.

    Falls back to the built-in table when no path is configured.  A
    configured path that cannot be read is an error: the service must not
    start with silently different reference data.
    """
    path = settings.fuel_curve_path
    if not path:
        logger.info(
            "Using built-in fuel curve table (%d ratings)", len(DEFAULT_FUEL_CURVE_TABLE)
        )
        return DEFAULT_FUEL_CURVE_TABLE

    table = load_fuel_curve_table(path)
    logger.info("Loaded fuel curve table from %s (%d ratings)", path, len(table))
    return table
