"""Pydantic schemas for the BESS full-load ROI calculation."""
from pydantic import BaseModel, ConfigDict, Field

from engine.economics.bess_roi import RoiInputs


def _number(alias: str, description: str):
    # Strict: reject strings/bools; finite: reject NaN and +/-inf.
    return Field(
        ...,
        alias=alias,
        strict=True,
        allow_inf_nan=False,
        description=description,
    )


class RoiRequest(BaseModel):
    """Calculation request body.

    Only well-typed, finite numbers pass this schema.  Domain checks
    (positive sizes, SOC window, headroom) belong to the engine.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    genset_kva: float = _number("gensetKVA", "Genset nominal rating (kVA)")
    load_kva: float = _number("loadKVA", "Average site load (kVA)")
    power_factor: float = _number("powerFactor", "Power factor (0-1]")
    hours_per_day: float = _number("hoursPerDay", "Operating hours per day")
    diesel_price_per_l: float = _number("dieselPricePerL", "Diesel price per litre")
    bess_size_kwh: float = _number("bessSizeKWh", "Battery capacity (kWh)")
    bess_price_per_kwh: float = _number("bessPricePerKWh", "Battery price per kWh")
    soc_max: float = _number("socMax", "State-of-charge ceiling (0-1]")
    soc_min: float = _number("socMin", "State-of-charge floor [0-1)")

    def to_inputs(self) -> RoiInputs:
        return RoiInputs(
            rating_kva=self.genset_kva,
            load_kva=self.load_kva,
            power_factor=self.power_factor,
            hours_per_day=self.hours_per_day,
            diesel_price_per_litre=self.diesel_price_per_l,
            battery_capacity_kwh=self.bess_size_kwh,
            battery_price_per_kwh=self.bess_price_per_kwh,
            soc_ceiling=self.soc_max,
            soc_floor=self.soc_min,
        )


DEFAULT_REQUEST = RoiRequest(
    genset_kva=125,
    load_kva=56,
    power_factor=0.8,
    hours_per_day=10,
    diesel_price_per_l=3,
    bess_size_kwh=520,
    bess_price_per_kwh=650,
    soc_max=1,
    soc_min=0.2,
)


class RoiResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    load_pct: float = Field(alias="loadPct")
    load_kw: float = Field(alias="loadKW")
    fuel_lph: float = Field(alias="fuelLph")
    annual_fuel_only_litres: float = Field(alias="annualFuelOnlyLitres")
    annual_fuel_only_cost: float = Field(alias="annualFuelOnlyCost")
    diesel_kwh_per_l: float = Field(alias="dieselKWhPerL")
    daily_bess_energy_kwh: float = Field(alias="dailyBESSEnergyKWh")
    fuel_saved_per_day_litres: float = Field(alias="fuelSavedPerDayLitres")
    annual_fuel_savings_litres: float = Field(alias="annualFuelSavingsLitres")
    annual_fuel_savings_cost: float = Field(alias="annualFuelSavingsCost")
    bess_cycles_per_day: float = Field(alias="bessCyclesPerDay")
    capex: float
    payback_years: float | None = Field(alias="paybackYears")
    simple_five_year_roi: float | None = Field(alias="simpleFiveYearROI")


class RoiResponse(BaseModel):
    success: bool = True
    result: RoiResult


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    kind: str


class FuelCurveRow(BaseModel):
    kva: float
    lph25: float
    lph50: float
    lph75: float
    lph100: float
