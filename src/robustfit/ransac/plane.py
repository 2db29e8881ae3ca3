"""
3D plane model utilities.

A plane is stored in Hessian normal form:

    normal . p + offset = 0,    ||normal|| = 1

so |normal . p + offset| is the Euclidean point-to-plane distance.
An invalid plane has a zero normal and acts as the "no model" sentinel.

Equivalent coefficient form a*x + b*y + c*z + d = 0 with
(a, b, c) = normal and d = offset.
"""

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np
import numpy.typing as npt

from .types import Points3D, Vec3, FloatArray, INVALID_RESIDUAL

# Cross products / normals shorter than this are treated as zero.
EPS_NORMAL = 1e-9


@dataclass(frozen=True, eq=False)
class PlaneModel:
    normal: Vec3 = field(default_factory=lambda: np.zeros(3, dtype=np.float64))
    offset: float = 0.0

    @classmethod
    def invalid(cls) -> "PlaneModel":
        return cls()

    @classmethod
    def from_normal_point(cls, normal: Vec3, point: Vec3) -> "PlaneModel":
        """
        Plane with the given (not necessarily unit) normal passing through point.
        A zero-length normal gives an invalid plane.
        """
        normal = np.asarray(normal, dtype=np.float64).reshape(3)
        norm = float(np.linalg.norm(normal))
        if norm < EPS_NORMAL:
            return cls.invalid()
        unit = normal / norm
        return cls(normal=unit, offset=-float(unit @ np.asarray(point, dtype=np.float64)))

    def is_valid(self) -> bool:
        return bool(np.isfinite(self.normal).all()) and float(np.linalg.norm(self.normal)) > EPS_NORMAL

    @property
    def coefficients(self) -> tuple[float, float, float, float]:
        """(a, b, c, d) of a*x + b*y + c*z + d = 0."""
        a, b, c = map(float, self.normal.tolist())
        return a, b, c, float(self.offset)

    def residual(self, pt: npt.ArrayLike) -> float:
        if not self.is_valid():
            return INVALID_RESIDUAL
        return abs(float(self.normal @ np.asarray(pt, dtype=np.float64)) + self.offset)

    def residuals(self, pts: Points3D) -> FloatArray:
        return residuals_plane(self, pts)

    def __str__(self) -> str:
        if not self.is_valid():
            return "<invalid plane>"
        a, b, c, d = self.coefficients
        return f"{a:.6g}x + {b:.6g}y + {c:.6g}z + {d:.6g} = 0"


# ---------- Degeneracy Check Helpers ----------
def are_collinear(p1: Vec3, p2: Vec3, p3: Vec3, eps: float = EPS_NORMAL) -> bool:
    """
    True when three points do not span a plane:

        ||(p2 - p1) x (p3 - p1)|| < eps

    Covers coincident points as well as points on a common line.
    """
    cross = np.cross(p2 - p1, p3 - p1)
    return float(np.linalg.norm(cross)) < eps


# ---------- Minimal fit ----------
def fit_plane_minimal(p1: Vec3, p2: Vec3, p3: Vec3, eps: float = EPS_NORMAL) -> PlaneModel:
    """
    Plane through three points.

        normal = normalize((p2 - p1) x (p3 - p1))
        offset = -normal . p1

    Collinear or coincident points give an invalid plane.
    """
    p1 = np.asarray(p1, dtype=np.float64)
    p2 = np.asarray(p2, dtype=np.float64)
    p3 = np.asarray(p3, dtype=np.float64)

    cross = np.cross(p2 - p1, p3 - p1)
    norm = float(np.linalg.norm(cross))
    if norm < eps:
        return PlaneModel.invalid()

    normal = cross / norm
    return PlaneModel(normal=normal, offset=-float(normal @ p1))


# ---------- Least squares ----------
def _orient_normal(normal: Vec3, centroid: Vec3, eps: float = EPS_NORMAL) -> Vec3:
    """
    Pick a deterministic sign for a plane normal.

    Primary rule: normal . centroid <= 0 (the normal points from the plane
    back toward the origin, so offset >= 0).
    When the plane passes through the origin the dot product carries no
    sign information; then the first non-negligible component is made positive.
    """
    dot = float(normal @ centroid)
    scale = max(1.0, float(np.linalg.norm(centroid)))
    if dot > eps * scale:
        return -normal
    if dot < -eps * scale:
        return normal

    for comp in normal:
        if abs(comp) > eps:
            return normal if comp > 0 else -normal
    return normal


def fit_plane_least_squares(pts: Points3D) -> PlaneModel:
    """
    Total least squares plane through N >= 3 points.

    1) centroid = mean of the points
    2) center every point on the centroid
    3) the normal is the direction of least variance: the right singular
       vector of the centered (N,3) matrix for the smallest singular value
    4) orient the normal (see _orient_normal) and pass the plane through the centroid

    Fewer than 3 points or a failed SVD gives an invalid plane.
    """
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError(f"Expected pts shape (N,3), got {pts.shape}")
    if pts.shape[0] < 3:
        return PlaneModel.invalid()

    centroid = np.mean(pts, axis=0)
    centered = pts - centroid

    try:
        # vt rows are right singular vectors, sorted by decreasing singular value
        _, _, vt = np.linalg.svd(centered, full_matrices=False)
    except np.linalg.LinAlgError:
        return PlaneModel.invalid()

    normal = _orient_normal(vt[-1].astype(np.float64), centroid)
    return PlaneModel.from_normal_point(normal, centroid)


# ---------- Residuals ----------
def residuals_plane(model: PlaneModel, pts: Points3D) -> FloatArray:
    """
    Per-point distances to the plane, shape (N,).
    An invalid plane scores every point INVALID_RESIDUAL.
    """
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError(f"Expected pts shape (N,3), got {pts.shape}")

    if not model.is_valid():
        return np.full((pts.shape[0],), INVALID_RESIDUAL, dtype=np.float64)

    return np.abs(pts @ model.normal + model.offset).astype(np.float64)
