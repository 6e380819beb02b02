"""Economic analysis module."""

from .bess_roi import RoiInputs, RoiOutputs, compute_roi

__all__ = ["RoiInputs", "RoiOutputs", "compute_roi"]
