"""Tests for engine.economics.bess_roi — full-load charging strategy ROI."""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import replace

import pytest

from engine.economics.bess_roi import (
    DAYS_PER_YEAR,
    RoiInputs,
    RoiOutputs,
    compute_roi,
)
from engine.errors import (
    DegenerateFuelCurve,
    DegenerateSocWindow,
    InvalidDutyCycle,
    InvalidElectricalInputs,
    InvalidSizingInputs,
    InvalidSocWindow,
    NoChargingHeadroom,
    RoiInputError,
    StrategyDoesNotSaveFuel,
    UnknownGensetRating,
)
from engine.generator.fuel_curve import FuelCurvePoint, FuelCurveTable

# Smallest positive double; scaling it down underflows to zero.
TINY = 5e-324


# ======================================================================
# Scenario A (default site)
# ======================================================================


class TestScenarioA:
    """125 kVA genset, 56 kVA load, PF 0.8, 10 h/day, 520 kWh at 650/kWh."""

    def test_load_point(self, scenario_a):
        out = compute_roi(scenario_a)
        assert out.load_fraction == 0.448
        assert out.load_power_kw == pytest.approx(44.8)

    def test_baseline_fuel(self, scenario_a):
        out = compute_roi(scenario_a)
        rate = 9.8 + 0.792 * 5.7
        assert out.baseline_fuel_rate_lph == pytest.approx(rate)
        assert out.annual_baseline_litres == pytest.approx(rate * 10 * 365)
        assert out.annual_baseline_cost == pytest.approx(rate * 10 * 365 * 3)

    def test_savings(self, scenario_a):
        """Genset runs 4.48 h/day at 28 L/hr instead of 10 h at 14.3144 L/hr."""
        out = compute_roi(scenario_a)
        assert out.saved_litres_per_day == pytest.approx(143.144 - 125.44)
        assert out.annual_saved_litres == pytest.approx(17.704 * 365)
        assert out.annual_saved_cost == pytest.approx(17.704 * 365 * 3)

    def test_energy_conversion(self, scenario_a):
        out = compute_roi(scenario_a)
        density = 44.8 / 14.3144
        assert out.diesel_energy_density_kwh_per_litre == pytest.approx(density)
        assert out.daily_battery_throughput_kwh == pytest.approx(17.704 * density)

    def test_cycles_per_day(self, scenario_a):
        """10 h * 55.2 kW * 44.8 kW / (416 kWh * 100 kW)."""
        out = compute_roi(scenario_a)
        assert out.cycles_per_day == pytest.approx(10 * 55.2 * 44.8 / (416 * 100))

    def test_capex_and_payback(self, scenario_a):
        out = compute_roi(scenario_a)
        assert out.capital_expense == 520 * 650 == 338_000
        assert out.payback_years is not None
        assert out.payback_years > 0
        assert out.payback_years == pytest.approx(338_000 / (17.704 * 365 * 3))

    def test_five_year_roi(self, scenario_a):
        out = compute_roi(scenario_a)
        annual = 17.704 * 365 * 3
        expected = (annual * 5 - 338_000) / 338_000 * 100
        assert out.five_year_roi_percent == pytest.approx(expected)
        assert out.five_year_roi_percent < 0


# ======================================================================
# Validation gates
# ======================================================================


class TestElectricalInputs:
    @pytest.mark.parametrize(
        "changes",
        [{"rating_kva": 0}, {"rating_kva": -125}, {"load_kva": 0}, {"load_kva": -1}, {"power_factor": 0}],
    )
    def test_non_positive_rejected(self, scenario_a, changes):
        with pytest.raises(InvalidElectricalInputs):
            compute_roi(replace(scenario_a, **changes))


class TestSizingInputs:
    @pytest.mark.parametrize(
        "changes",
        [{"hours_per_day": 0}, {"battery_capacity_kwh": 0}, {"battery_price_per_kwh": -650}],
    )
    def test_non_positive_rejected(self, scenario_a, changes):
        with pytest.raises(InvalidSizingInputs):
            compute_roi(replace(scenario_a, **changes))

    def test_electrical_checked_first(self, scenario_a):
        with pytest.raises(InvalidElectricalInputs):
            compute_roi(replace(scenario_a, rating_kva=0, hours_per_day=0))


class TestSocWindow:
    @pytest.mark.parametrize(
        "ceiling, floor",
        [(0.2, 0.5), (0.5, 0.5), (1.1, 0.2), (0.8, -0.1)],
    )
    def test_invalid_window(self, scenario_a, ceiling, floor):
        with pytest.raises(InvalidSocWindow):
            compute_roi(replace(scenario_a, soc_ceiling=ceiling, soc_floor=floor))

    def test_full_window_accepted(self, scenario_a):
        out = compute_roi(replace(scenario_a, soc_ceiling=1.0, soc_floor=0.0))
        assert out.cycles_per_day == pytest.approx(10 * 55.2 * 44.8 / (520 * 100))

    def test_sizing_checked_before_soc(self, scenario_a):
        with pytest.raises(InvalidSizingInputs):
            compute_roi(replace(scenario_a, hours_per_day=0, soc_ceiling=0.1, soc_floor=0.5))


class TestHeadroom:
    def test_load_equals_rating(self, scenario_a):
        with pytest.raises(NoChargingHeadroom):
            compute_roi(replace(scenario_a, load_kva=125))

    def test_load_exceeds_rating(self, scenario_a):
        with pytest.raises(NoChargingHeadroom):
            compute_roi(replace(scenario_a, load_kva=150))

    def test_soc_checked_before_headroom(self, scenario_a):
        with pytest.raises(InvalidSocWindow):
            compute_roi(replace(scenario_a, load_kva=125, soc_ceiling=0.2, soc_floor=0.5))


class TestFuelCurveGates:
    def test_unknown_rating(self, scenario_a):
        with pytest.raises(UnknownGensetRating):
            compute_roi(replace(scenario_a, rating_kva=130))

    def test_zero_baseline_rate(self, scenario_a, zero_table):
        """30 % load on a curve that reads zero below 50 %."""
        inputs = replace(scenario_a, rating_kva=100, load_kva=30)
        with pytest.raises(DegenerateFuelCurve, match="Baseline"):
            compute_roi(inputs, zero_table)

    def test_zero_full_load_rate(self, scenario_a):
        table = FuelCurveTable([FuelCurvePoint(100, 5.0, 6.0, 7.0, 0.0)])
        inputs = replace(scenario_a, rating_kva=100, load_kva=30)
        with pytest.raises(DegenerateFuelCurve, match="Full-load"):
            compute_roi(inputs, table)


class TestUnderflowGates:
    """Gates that only trip when floating point collapses a positive value."""

    def test_usable_energy_underflows(self, scenario_a):
        inputs = replace(scenario_a, battery_capacity_kwh=TINY, soc_ceiling=0.5, soc_floor=0.0)
        with pytest.raises(DegenerateSocWindow):
            compute_roi(inputs)

    def test_charge_time_underflows(self, scenario_a):
        inputs = replace(scenario_a, battery_capacity_kwh=TINY, soc_ceiling=1.0, soc_floor=0.0)
        with pytest.raises(InvalidDutyCycle):
            compute_roi(inputs)


class TestStrategyDoesNotSaveFuel:
    def test_convex_curve_rejected(self, scenario_a, linear_table):
        """At 60 % load: 27.6 L/hr baseline vs 50 L/hr * 0.6 with the battery."""
        inputs = replace(scenario_a, rating_kva=200, load_kva=120)
        with pytest.raises(StrategyDoesNotSaveFuel) as excinfo:
            compute_roi(inputs, linear_table)
        assert isinstance(excinfo.value, RoiInputError)
        assert excinfo.value.client_error is True

    def test_high_load_still_saves_on_default_curve(self, scenario_a):
        out = compute_roi(replace(scenario_a, load_kva=112.5))
        assert out.saved_litres_per_day > 0


# ======================================================================
# Payback and ROI
# ======================================================================


class TestPayback:
    def test_free_diesel_has_no_payback(self, scenario_a):
        """Fuel is still saved but is worth nothing: payback is not applicable."""
        out = compute_roi(replace(scenario_a, diesel_price_per_litre=0))
        assert out.saved_litres_per_day > 0
        assert out.annual_saved_cost == 0
        assert out.payback_years is None
        assert out.five_year_roi_percent == pytest.approx(-100.0)

    def test_payback_scales_with_battery_price(self, scenario_a):
        base = compute_roi(scenario_a)
        doubled = compute_roi(replace(scenario_a, battery_price_per_kwh=1300))
        assert doubled.payback_years == pytest.approx(2 * base.payback_years)

    def test_positive_roi_when_cheap(self, scenario_a):
        out = compute_roi(replace(scenario_a, battery_price_per_kwh=50))
        assert out.five_year_roi_percent > 0
        assert out.payback_years < 5


# ======================================================================
# Structural properties
# ======================================================================


class TestProperties:
    def test_genset_on_fraction_equals_load_fraction(self, scenario_a):
        """t_ch / (t_ch + t_dis) reduces to P_load / P_gen."""
        out = compute_roi(scenario_a)
        baseline = out.baseline_fuel_rate_lph
        expected = 10 * (baseline - 28.0 * out.load_fraction)
        assert out.saved_litres_per_day == pytest.approx(expected)

    def test_cycles_match_simplified_formula(self, scenario_a):
        inputs = replace(scenario_a, rating_kva=250, load_kva=90, power_factor=0.85)
        out = compute_roi(inputs)
        load_kw = 90 * 0.85
        genset_kw = 250 * 0.85
        usable = 520 * 0.8
        simplified = 10 * (genset_kw - load_kw) * load_kw / (usable * genset_kw)
        assert out.cycles_per_day == pytest.approx(simplified, rel=1e-12)

    def test_annual_figures_use_365_days(self, scenario_a):
        out = compute_roi(scenario_a)
        assert out.annual_saved_litres == pytest.approx(out.saved_litres_per_day * DAYS_PER_YEAR)

    def test_deterministic(self, scenario_a):
        first = compute_roi(scenario_a)
        second = compute_roi(RoiInputs(**dataclasses.asdict(scenario_a)))
        assert first == second
        assert first.to_dict() == second.to_dict()

    def test_outputs_frozen(self, scenario_a):
        out = compute_roi(scenario_a)
        with pytest.raises(dataclasses.FrozenInstanceError):
            out.capital_expense = 0.0  # type: ignore[misc]

    def test_no_rounding(self, scenario_a):
        out = compute_roi(scenario_a)
        assert out.cycles_per_day != round(out.cycles_per_day, 6)


class TestSerialization:
    def test_wire_keys(self, scenario_a):
        data = compute_roi(scenario_a).to_dict()
        assert list(data) == [
            "loadPct",
            "loadKW",
            "fuelLph",
            "annualFuelOnlyLitres",
            "annualFuelOnlyCost",
            "dieselKWhPerL",
            "dailyBESSEnergyKWh",
            "fuelSavedPerDayLitres",
            "annualFuelSavingsLitres",
            "annualFuelSavingsCost",
            "bessCyclesPerDay",
            "capex",
            "paybackYears",
            "simpleFiveYearROI",
        ]
        assert data["capex"] == 338_000

    def test_none_preserved(self, scenario_a):
        data = compute_roi(replace(scenario_a, diesel_price_per_litre=0)).to_dict()
        assert data["paybackYears"] is None

    def test_every_field_serialized(self):
        assert len(RoiOutputs.__dataclass_fields__) == 14


def test_debug_logging(scenario_a, caplog):
    with caplog.at_level(logging.DEBUG, logger="engine.economics.bess_roi"):
        compute_roi(scenario_a)
    assert any("Duty cycle" in r.getMessage() for r in caplog.records)
