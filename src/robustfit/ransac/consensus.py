"""
Consensus evaluation: which points does a model explain, and how well.
"""

from __future__ import annotations

from typing import TypeVar

import numpy as np

from .types import FloatArray, Mask, ModelFitter, INVALID_SCORE

M = TypeVar("M")


def consensus_mask(model_fitter: ModelFitter[M], model: M, pts: FloatArray, tolerance: float) -> Mask:
    """
    Inlier mask: residual < tolerance. All False for an invalid model.
    """
    if not model_fitter.is_valid(model):
        return np.zeros((pts.shape[0],), dtype=bool)
    err = model_fitter.residuals(model, pts)
    return err < tolerance


def consensus_set(model_fitter: ModelFitter[M], model: M, pts: FloatArray, tolerance: float) -> FloatArray:
    return pts[consensus_mask(model_fitter, model, pts, tolerance)]


def evaluate(model_fitter: ModelFitter[M], model: M, pts: FloatArray, tolerance: float) -> float:
    """
    Mean residual over the model's inliers.

    Returns INVALID_SCORE (inf) for an invalid model or when no point is an
    inlier, so such a model never compares better than a real one.
    """
    if not model_fitter.is_valid(model):
        return INVALID_SCORE

    err = model_fitter.residuals(model, pts)
    inlier_err = err[err < tolerance]
    if inlier_err.size == 0:
        return INVALID_SCORE
    return float(np.mean(inlier_err))
