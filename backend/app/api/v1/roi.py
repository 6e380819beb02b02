"""BESS full-load strategy ROI endpoints."""

from fastapi import APIRouter, Depends, Request

from app.core.rate_limit import calc_limiter
from app.schemas.roi import DEFAULT_REQUEST, FuelCurveRow, RoiRequest, RoiResponse
from app.services.fuel_curves import get_fuel_curve_table

from engine.economics.bess_roi import compute_roi
from engine.generator.fuel_curve import FuelCurveTable, genset_sizes

router = APIRouter()


@router.post(
    "/calc",
    response_model=RoiResponse,
    summary="Full-load strategy ROI",
    description="Estimate fuel savings, battery cycling, payback and 5-year ROI of "
    "adding a BESS to a diesel genset run at full load while charging.",
)
async def calculate_roi(
    request: Request,
    body: RoiRequest,
    table: FuelCurveTable = Depends(get_fuel_curve_table),
):
    calc_limiter.check(request)

    # Engine errors propagate to the handlers registered in app.core.errors.
    result = compute_roi(body.to_inputs(), table)
    return {"success": True, "result": result.to_dict()}


@router.get(
    "/fuel-curves",
    response_model=list[FuelCurveRow],
    summary="List fuel curves",
    description="Return the genset fuel curve table (L/hr at 25/50/75/100 % load).",
)
async def list_fuel_curves(table: FuelCurveTable = Depends(get_fuel_curve_table)):
    return table.to_list()


@router.get(
    "/genset-sizes",
    response_model=list[float],
    summary="List genset sizes",
    description="Return the genset ratings (kVA) that have a fuel curve.",
)
async def list_genset_sizes(table: FuelCurveTable = Depends(get_fuel_curve_table)):
    return genset_sizes(table)


@router.get(
    "/defaults",
    summary="Default inputs",
    description="Return the default calculation inputs used to prefill the form.",
)
async def default_inputs():
    return DEFAULT_REQUEST.model_dump(by_alias=True)
