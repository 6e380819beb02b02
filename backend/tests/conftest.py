"""Shared test fixtures for BESS ROI engine and API tests."""

from __future__ import annotations

import pytest

from engine.economics.bess_roi import RoiInputs
from engine.generator.fuel_curve import FuelCurvePoint, FuelCurveTable


# ======================================================================
# Fuel curve fixtures
# ======================================================================

@pytest.fixture
def linear_table() -> FuelCurveTable:
    """Two synthetic gensets with evenly spaced samples."""
    return FuelCurveTable([
        FuelCurvePoint(100, 10.0, 20.0, 30.0, 40.0),
        FuelCurvePoint(200, 12.0, 22.0, 36.0, 50.0),
    ])


@pytest.fixture
def zero_table() -> FuelCurveTable:
    """A genset whose curve reads zero at part load (bad manufacturer data)."""
    return FuelCurveTable([FuelCurvePoint(100, 0.0, 0.0, 5.0, 10.0)])


# ======================================================================
# ROI input fixtures
# ======================================================================

@pytest.fixture
def scenario_a() -> RoiInputs:
    """125 kVA genset at 56 kVA, 520 kWh battery: the default site."""
    return RoiInputs(
        rating_kva=125,
        load_kva=56,
        power_factor=0.8,
        hours_per_day=10,
        diesel_price_per_litre=3,
        battery_capacity_kwh=520,
        battery_price_per_kwh=650,
        soc_ceiling=1,
        soc_floor=0.2,
    )


@pytest.fixture
def scenario_a_payload() -> dict[str, float]:
    """Scenario A as a camelCase request body."""
    return {
        "gensetKVA": 125,
        "loadKVA": 56,
        "powerFactor": 0.8,
        "hoursPerDay": 10,
        "dieselPricePerL": 3,
        "bessSizeKWh": 520,
        "bessPricePerKWh": 650,
        "socMax": 1,
        "socMin": 0.2,
    }
