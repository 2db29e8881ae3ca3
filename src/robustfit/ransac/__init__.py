"""
RANSAC package

This module provides:
- A reusable generic RANSAC engine
- Typed geometry primitives
- Model interface definitions
- Line (2D) and plane (3D) models with minimal and least-squares fits
"""

from .types import (
    FloatArray, BoolArray, IndexArray, Points2D, Points3D, Vec3, Mask,
    INVALID_RESIDUAL, INVALID_SCORE, RansacStatus,
    RansacError, InsufficientDataError, NoConsensusError,
    SampleDraw, ModelFitter, RansacConfig, RansacResult, as_points,
)

from .line import (
    LineModel, LineKind, fit_line_minimal, fit_line_least_squares, residuals_line,
)

from .plane import (
    PlaneModel, are_collinear, fit_plane_minimal, fit_plane_least_squares, residuals_plane,
)

from .sampling import draw_distinct_pair, draw_noncollinear_triple

from .line_fitter import LineFitter

from .plane_fitter import PlaneFitter

from .consensus import consensus_mask, consensus_set, evaluate

from .core import RansacEngine, ransac, fit_line, fit_plane

__all__ = [
    "FloatArray", "BoolArray", "IndexArray", "Points2D", "Points3D", "Vec3", "Mask",
    "INVALID_RESIDUAL", "INVALID_SCORE", "RansacStatus",
    "RansacError", "InsufficientDataError", "NoConsensusError",
    "SampleDraw", "ModelFitter", "RansacConfig", "RansacResult", "as_points",
    "LineModel", "LineKind", "fit_line_minimal", "fit_line_least_squares", "residuals_line",
    "PlaneModel", "are_collinear", "fit_plane_minimal", "fit_plane_least_squares", "residuals_plane",
    "draw_distinct_pair", "draw_noncollinear_triple",
    "LineFitter",
    "PlaneFitter",
    "consensus_mask", "consensus_set", "evaluate",
    "RansacEngine", "ransac", "fit_line", "fit_plane",
]
