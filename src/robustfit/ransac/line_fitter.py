"""
Adapter: makes line functions conform to the ModelFitter Protocol.

This keeps ransac/core.py generic and reusable.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from .types import Points2D, FloatArray, SampleDraw, ModelFitter
from .line import LineModel, fit_line_minimal, fit_line_least_squares, residuals_line
from .sampling import draw_distinct_pair, DEFAULT_MAX_ATTEMPTS


@dataclass(frozen=True)
class LineFitter(ModelFitter[LineModel]):

    @property
    def sample_size(self) -> int:
        return 2

    @property
    def dim(self) -> int:
        return 2

    def sample(
            self,
            rng: np.random.Generator,
            points: Points2D,
            max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> SampleDraw:
        return draw_distinct_pair(rng, points, max_attempts=max_attempts)

    def fit_minimal(self, sample: Points2D) -> LineModel:
        if sample.shape != (2, 2):
            raise ValueError(f"LineFitter.fit_minimal expects (2,2) input, got {sample.shape}")
        return fit_line_minimal(sample[0], sample[1])

    def fit_least_squares(self, points: Points2D) -> LineModel:
        return fit_line_least_squares(points)

    def residuals(self, model: LineModel, points: Points2D) -> FloatArray:
        return residuals_line(model, points)

    def is_valid(self, model: LineModel) -> bool:
        return model.is_valid()
