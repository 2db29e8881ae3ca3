"""
Adapter class for the plane model to match the ModelFitter protocol.

Lets the generic RANSAC engine fit planes in 3D point clouds without
knowing anything about normals or SVD.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .types import Points3D, FloatArray, SampleDraw, ModelFitter
from .plane import (
    PlaneModel, EPS_NORMAL,
    fit_plane_minimal, fit_plane_least_squares, residuals_plane,
)
from .sampling import draw_noncollinear_triple, DEFAULT_MAX_ATTEMPTS


@dataclass(frozen=True)
class PlaneFitter(ModelFitter[PlaneModel]):
    """
    Plane model for RANSAC.

    eps: cross-product norm below which a triple counts as collinear
    """
    eps: float = EPS_NORMAL

    @property
    def sample_size(self) -> int:
        return 3

    @property
    def dim(self) -> int:
        return 3

    def sample(
            self,
            rng: np.random.Generator,
            points: Points3D,
            max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> SampleDraw:
        """
        Called by RANSAC once per iteration.

        Scans a shuffled index order for a non-collinear triple.
        """
        return draw_noncollinear_triple(
            rng, points, max_attempts=max_attempts, eps=self.eps)

    def fit_minimal(self, sample: Points3D) -> PlaneModel:
        if sample.shape != (3, 3):
            raise ValueError(f"PlaneFitter.fit_minimal expects (3,3) input, got {sample.shape}")
        return fit_plane_minimal(sample[0], sample[1], sample[2], eps=self.eps)

    def fit_least_squares(self, points: Points3D) -> PlaneModel:
        """
        Called by RANSAC after the best consensus set is selected.
        """
        return fit_plane_least_squares(points)

    def residuals(self, model: PlaneModel, points: Points3D) -> FloatArray:
        return residuals_plane(model, points)

    def is_valid(self, model: PlaneModel) -> bool:
        return model.is_valid()
