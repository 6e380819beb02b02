"""Return on investment of a BESS under the full-load charging strategy.

Baseline: the genset runs for the whole operating day at partial load,
serving the site directly.

Strategy: whenever the genset is on it runs at 100 % rated power.  The load
is served and the surplus charges the battery across its SOC window; the
genset then stops and the battery alone serves the load until the window is
exhausted.  One charge/discharge cycle takes

    t_ch  = E_use / (P_gen - P_load)
    t_dis = E_use / P_load

so the genset is on for ``t_ch / (t_ch + t_dis)`` of the operating day.

Fuel saving is the baseline daily burn minus the full-load burn over the
reduced run hours.  All monetary values share the diesel price currency.
Nothing is rounded here; rounding is left to presentation.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from engine.errors import (
    DegenerateFuelCurve,
    DegenerateSocWindow,
    InvalidDutyCycle,
    InvalidElectricalInputs,
    InvalidSizingInputs,
    InvalidSocWindow,
    NoChargingHeadroom,
    StrategyDoesNotSaveFuel,
)
from engine.generator.fuel_curve import (
    DEFAULT_FUEL_CURVE_TABLE,
    FuelCurveTable,
    interpolate_fuel_rate,
)

logger = logging.getLogger(__name__)

DAYS_PER_YEAR: int = 365
ROI_HORIZON_YEARS: int = 5


@dataclass(frozen=True)
class RoiInputs:
    """Site and battery parameters for one calculation.

    Parameters
    ----------
    rating_kva : float
        Genset nominal rating; must exist in the fuel curve table.
    load_kva : float
        Average site load.
    power_factor : float
        Converts kVA to kW, in (0, 1].
    hours_per_day : float
        Operating hours of the site per day.
    diesel_price_per_litre : float
        Fuel price.
    battery_capacity_kwh : float
        Nameplate battery energy.
    battery_price_per_kwh : float
        Installed battery cost per kWh.
    soc_ceiling, soc_floor : float
        Usable state-of-charge window, fractions of capacity.
    """

    rating_kva: float
    load_kva: float
    power_factor: float
    hours_per_day: float
    diesel_price_per_litre: float
    battery_capacity_kwh: float
    battery_price_per_kwh: float
    soc_ceiling: float
    soc_floor: float


@dataclass(frozen=True)
class RoiOutputs:
    """Derived metrics of one calculation."""

    load_fraction: float
    load_power_kw: float
    baseline_fuel_rate_lph: float
    annual_baseline_litres: float
    annual_baseline_cost: float
    diesel_energy_density_kwh_per_litre: float
    daily_battery_throughput_kwh: float
    saved_litres_per_day: float
    annual_saved_litres: float
    annual_saved_cost: float
    cycles_per_day: float
    capital_expense: float
    payback_years: float | None
    five_year_roi_percent: float | None

    def to_dict(self) -> dict[str, Any]:
        """Serialize using the wire names of the calculation API."""
        return {
            "loadPct": self.load_fraction,
            "loadKW": self.load_power_kw,
            "fuelLph": self.baseline_fuel_rate_lph,
            "annualFuelOnlyLitres": self.annual_baseline_litres,
            "annualFuelOnlyCost": self.annual_baseline_cost,
            "dieselKWhPerL": self.diesel_energy_density_kwh_per_litre,
            "dailyBESSEnergyKWh": self.daily_battery_throughput_kwh,
            "fuelSavedPerDayLitres": self.saved_litres_per_day,
            "annualFuelSavingsLitres": self.annual_saved_litres,
            "annualFuelSavingsCost": self.annual_saved_cost,
            "bessCyclesPerDay": self.cycles_per_day,
            "capex": self.capital_expense,
            "paybackYears": self.payback_years,
            "simpleFiveYearROI": self.five_year_roi_percent,
        }


def compute_roi(
    inputs: RoiInputs,
    table: FuelCurveTable = DEFAULT_FUEL_CURVE_TABLE,
) -> RoiOutputs:
    """Evaluate the full-load charging strategy for one site.

    Parameters
    ----------
    inputs : RoiInputs
        Site, fuel and battery parameters.
    table : FuelCurveTable
        Genset fuel curves; ``inputs.rating_kva`` must be one of its rows.

    Returns
    -------
    RoiOutputs
        All derived metrics.  ``payback_years`` is ``None`` when there is
        no annual saving to pay the battery back.

    Raises
    ------
    RoiError
        The first violated precondition, see :mod:`engine.errors`.
        No partial result is ever produced.
    """
    rating_kva = inputs.rating_kva
    load_kva = inputs.load_kva
    pf = inputs.power_factor
    hours_per_day = inputs.hours_per_day
    capacity_kwh = inputs.battery_capacity_kwh
    soc_ceiling = inputs.soc_ceiling
    soc_floor = inputs.soc_floor

    if rating_kva <= 0 or load_kva <= 0 or pf <= 0:
        raise InvalidElectricalInputs("Invalid genset, load or power factor")
    if hours_per_day <= 0 or capacity_kwh <= 0 or inputs.battery_price_per_kwh <= 0:
        raise InvalidSizingInputs("Invalid hours per day or BESS sizing")
    if soc_ceiling <= soc_floor or soc_ceiling > 1 or soc_floor < 0:
        raise InvalidSocWindow("Invalid SOC limits")

    load_power_kw = load_kva * pf
    genset_power_kw = rating_kva * pf
    if load_power_kw >= genset_power_kw:
        raise NoChargingHeadroom("No headroom to charge BESS from genset")

    load_fraction = load_kva / rating_kva

    baseline_rate = interpolate_fuel_rate(rating_kva, load_fraction, table)
    if baseline_rate <= 0:
        raise DegenerateFuelCurve("Baseline fuel is non-positive")

    full_load_rate = interpolate_fuel_rate(rating_kva, 1.0, table)
    if full_load_rate <= 0:
        raise DegenerateFuelCurve("Full-load fuel is non-positive")

    usable_energy_kwh = capacity_kwh * (soc_ceiling - soc_floor)
    if usable_energy_kwh <= 0:
        raise DegenerateSocWindow("Usable BESS energy is non-positive")

    surplus_power_kw = genset_power_kw - load_power_kw
    if surplus_power_kw <= 0:
        raise NoChargingHeadroom("No surplus power to charge BESS")

    # --- Duty cycle ---------------------------------------------------
    charge_hours = usable_energy_kwh / surplus_power_kw
    discharge_hours = usable_energy_kwh / load_power_kw
    if charge_hours <= 0 or discharge_hours <= 0:
        raise InvalidDutyCycle("Invalid charge/discharge time")

    cycle_hours = charge_hours + discharge_hours
    on_fraction = charge_hours / cycle_hours
    genset_run_hours_per_day = hours_per_day * on_fraction

    logger.debug(
        "Duty cycle: charge %.4f h, discharge %.4f h, genset on %.4f h/day",
        charge_hours,
        discharge_hours,
        genset_run_hours_per_day,
    )

    # --- Fuel -----------------------------------------------------------
    baseline_daily_litres = baseline_rate * hours_per_day
    annual_baseline_litres = baseline_daily_litres * DAYS_PER_YEAR
    annual_baseline_cost = annual_baseline_litres * inputs.diesel_price_per_litre

    strategy_daily_litres = full_load_rate * genset_run_hours_per_day

    saved_litres_per_day = baseline_daily_litres - strategy_daily_litres
    if saved_litres_per_day <= 0:
        raise StrategyDoesNotSaveFuel(
            "Full-load strategy does not save fuel for this case"
        )

    annual_saved_litres = saved_litres_per_day * DAYS_PER_YEAR
    annual_saved_cost = annual_saved_litres * inputs.diesel_price_per_litre

    # kWh delivered per litre at the baseline operating point.
    diesel_energy_density = load_power_kw / baseline_rate
    daily_battery_throughput_kwh = saved_litres_per_day * diesel_energy_density

    # --- Battery cycling --------------------------------------------------
    # surplus + load == genset power; the expanded form is kept as written.
    cycles_per_day = 0.0
    if surplus_power_kw > 0:
        denom = usable_energy_kwh * (surplus_power_kw + load_power_kw)
        if denom != 0:
            cycles_per_day = (
                hours_per_day * surplus_power_kw * load_power_kw
            ) / denom

    # --- Capex & ROI --------------------------------------------------------
    capital_expense = capacity_kwh * inputs.battery_price_per_kwh
    payback_years = (
        capital_expense / annual_saved_cost if annual_saved_cost > 0 else None
    )
    five_year_roi_percent = (
        (annual_saved_cost * ROI_HORIZON_YEARS - capital_expense)
        / capital_expense
        * 100
        if capital_expense > 0
        else None
    )

    logger.debug(
        "ROI: saved %.3f L/day, capex %.2f, payback %s years",
        saved_litres_per_day,
        capital_expense,
        payback_years,
    )

    return RoiOutputs(
        load_fraction=load_fraction,
        load_power_kw=load_power_kw,
        baseline_fuel_rate_lph=baseline_rate,
        annual_baseline_litres=annual_baseline_litres,
        annual_baseline_cost=annual_baseline_cost,
        diesel_energy_density_kwh_per_litre=diesel_energy_density,
        daily_battery_throughput_kwh=daily_battery_throughput_kwh,
        saved_litres_per_day=saved_litres_per_day,
        annual_saved_litres=annual_saved_litres,
        annual_saved_cost=annual_saved_cost,
        cycles_per_day=cycles_per_day,
        capital_expense=capital_expense,
        payback_years=payback_years,
        five_year_roi_percent=five_year_roi_percent,
    )

