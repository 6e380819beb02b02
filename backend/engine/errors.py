"""Exception taxonomy for the fuel-curve and BESS ROI calculations.

Every failure is terminal for a single calculation.  Each class carries a
stable ``kind`` string (used on the wire) and a ``client_error`` flag that
tells the HTTP layer whether the request itself was at fault or whether an
internal invariant was broken.
"""

from __future__ import annotations


class RoiError(Exception):
    """Base class for all calculation errors."""

    kind: str = "RoiError"
    client_error: bool = True


class RoiInputError(RoiError, ValueError):
    """The supplied inputs cannot produce a meaningful result."""


class RoiInternalError(RoiError, RuntimeError):
    """An invariant of the calculation was violated (should be unreachable)."""

    client_error = False


# ----------------------------------------------------------------------
# Fuel curve
# ----------------------------------------------------------------------


class UnknownGensetRating(RoiInputError):
    kind = "UnknownGensetRating"

    def __init__(self, rating_kva: float) -> None:
        self.rating_kva = rating_kva
        super().__init__(f"Fuel curve missing for {rating_kva:g} kVA")


class InterpolationFailure(RoiInternalError):
    kind = "InterpolationFailure"

    def __init__(self, load_fraction: float) -> None:
        self.load_fraction = load_fraction
        super().__init__(f"Interpolation failed for load fraction {load_fraction!r}")


# ----------------------------------------------------------------------
# ROI validation gates
# ----------------------------------------------------------------------


class InvalidElectricalInputs(RoiInputError):
    kind = "InvalidElectricalInputs"


class InvalidSizingInputs(RoiInputError):
    kind = "InvalidSizingInputs"


class InvalidSocWindow(RoiInputError):
    kind = "InvalidSocWindow"


class NoChargingHeadroom(RoiInputError):
    kind = "NoChargingHeadroom"


class DegenerateFuelCurve(RoiInputError):
    kind = "DegenerateFuelCurve"


class DegenerateSocWindow(RoiInputError):
    kind = "DegenerateSocWindow"


class InvalidDutyCycle(RoiInputError):
    kind = "InvalidDutyCycle"


class StrategyDoesNotSaveFuel(RoiInputError):
    """The full-load strategy burns as much fuel as running at partial load.

    This is an expected outcome for some sites, not a bug.
    """

    kind = "StrategyDoesNotSaveFuel"
