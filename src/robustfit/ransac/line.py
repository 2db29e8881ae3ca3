"""
2D line model utilities.

A general line is stored in slope-intercept form:

    y = slope * x + intercept

Slope-intercept form cannot express x = const, so the model is a tagged
variant:

    kind == "general"   -> (slope, intercept)
    kind == "vertical"  -> x0, the line x = x0
    kind == "invalid"   -> no line (coincident sample / zero-spread refit)

Residuals:
    general:  |slope * x + intercept - y|   (vertical distance)
    vertical: |x - x0|                      (horizontal distance)
    invalid:  INVALID_RESIDUAL
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Literal

import numpy as np
import numpy.typing as npt

from .types import Points2D, FloatArray, INVALID_RESIDUAL

LineKind = Literal["general", "vertical", "invalid"]

# Relative x spread (std / max|x|) below which all x count as equal
_EPS_SPREAD = 1e-10


@dataclass(frozen=True)
class LineModel:
    kind: LineKind = "invalid"
    slope: float = 0.0
    intercept: float = 0.0
    x0: float = 0.0

    @classmethod
    def general(cls, slope: float, intercept: float) -> "LineModel":
        return cls(kind="general", slope=float(slope), intercept=float(intercept))

    @classmethod
    def vertical(cls, x0: float) -> "LineModel":
        return cls(kind="vertical", x0=float(x0))

    @classmethod
    def invalid(cls) -> "LineModel":
        return cls(kind="invalid")

    def is_valid(self) -> bool:
        if self.kind == "general":
            return math.isfinite(self.slope) and math.isfinite(self.intercept)
        if self.kind == "vertical":
            return math.isfinite(self.x0)
        return False

    def residual(self, pt: npt.ArrayLike) -> float:
        """Distance from a single (x, y) point to this line."""
        x, y = float(pt[0]), float(pt[1])
        if not self.is_valid():
            return INVALID_RESIDUAL
        if self.kind == "vertical":
            return abs(x - self.x0)
        return abs(self.slope * x + self.intercept - y)

    def residuals(self, pts: Points2D) -> FloatArray:
        return residuals_line(self, pts)

    def __str__(self) -> str:
        if self.kind == "general":
            return f"y = {self.slope:.6g}x + {self.intercept:.6g}"
        if self.kind == "vertical":
            return f"x = {self.x0:.6g}"
        return "<invalid line>"


# ---------- Minimal fit ----------
def fit_line_minimal(p1: npt.ArrayLike, p2: npt.ArrayLike) -> LineModel:
    """
    Line through two points.

        slope     = (y2 - y1) / (x2 - x1)
        intercept = y1 - slope * x1

    Equal x with different y gives a vertical line.
    Coincident points do not determine a line -> invalid.
    """
    x1, y1 = float(p1[0]), float(p1[1])
    x2, y2 = float(p2[0]), float(p2[1])

    if x1 == x2:
        if y1 == y2:
            return LineModel.invalid()
        return LineModel.vertical(x1)

    slope = (y2 - y1) / (x2 - x1)
    intercept = y1 - slope * x1
    return LineModel.general(slope, intercept)


# ---------- Least squares ----------
def fit_line_least_squares(pts: Points2D) -> LineModel:
    """
    Ordinary least squares over all points (minimizes vertical error):

        slope     = (n*Sxy - Sx*Sy) / (n*Sxx - Sx^2)
        intercept = (Sy - slope*Sx) / n

    evaluated on coordinates centered at the mean, which is the same formula
    but does not lose the x spread to cancellation when |x| is large:

        slope     = sum(dx*dy) / sum(dx*dx)
        intercept = mean_y - slope * mean_x

    If the x spread vanishes every x is equal: the points lie on a
    vertical line, unless they are all the same point (invalid).
    """
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected pts shape (N,2), got {pts.shape}")

    n = pts.shape[0]
    if n < 2:
        return LineModel.invalid()

    x = pts[:, 0]
    y = pts[:, 1]

    mean_x = float(np.mean(x))
    mean_y = float(np.mean(y))
    dx = x - mean_x
    dy = y - mean_y

    sxx = float(dx @ dx)
    sxy = float(dx @ dy)

    # x spread below rounding noise of the coordinates themselves counts as zero
    scale = max(1.0, float(np.max(np.abs(x))))
    if sxx == 0.0 or sxx <= n * (_EPS_SPREAD * scale) ** 2:
        if float(np.ptp(y)) == 0.0:
            return LineModel.invalid()
        return LineModel.vertical(mean_x)

    slope = sxy / sxx
    intercept = mean_y - slope * mean_x
    return LineModel.general(slope, intercept)


# ---------- Residuals ----------
def residuals_line(model: LineModel, pts: Points2D) -> FloatArray:
    """
    Per-point residuals against a line model, shape (N,).
    """
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected pts shape (N,2), got {pts.shape}")

    if not model.is_valid():
        return np.full((pts.shape[0],), INVALID_RESIDUAL, dtype=np.float64)

    if model.kind == "vertical":
        return np.abs(pts[:, 0] - model.x0).astype(np.float64)

    predicted = model.slope * pts[:, 0] + model.intercept
    return np.abs(predicted - pts[:, 1]).astype(np.float64)
