"""
Shared typed primitives for the robust fitting pipeline.

Defines:
- Typed NumPy aliases for geometry
    - 2D observations are (N,2) float arrays, 3D observations are (N,3)
    - Inlier masks are (N,) bool arrays
- Generic model-fitter protocol for RANSAC
- Run configuration and structured result container (model + inliers + stats)
- Error taxonomy for failed runs
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Protocol, TypeVar, Generic, Optional, TypeAlias, Literal, Any, Mapping

import numpy as np
import numpy.typing as npt

# ---------- Numpy typing aliases ----------
# - float64 for geometry (more stable for linear algebra)
# - bool_ for masks
# - intp for sample indices

FloatArray: TypeAlias = npt.NDArray[np.float64]
BoolArray: TypeAlias = npt.NDArray[np.bool_]
IndexArray: TypeAlias = npt.NDArray[np.intp]

Points2D: TypeAlias = FloatArray      # shape: (N, 2), rows are (x, y)
Points3D: TypeAlias = FloatArray      # shape: (N, 3), rows are (x, y, z)
Vec3: TypeAlias = FloatArray          # shape: (3,)

# Boolean inlier mask: True as inlier, False as outlier
Mask: TypeAlias = BoolArray           # shape: (N,)

# Residual reported for a point scored against an invalid model.
# Large enough that no invalid model ever collects inliers.
INVALID_RESIDUAL = 1e10

# Score reported by evaluate() for an invalid model or an empty consensus set.
INVALID_SCORE = float("inf")

M = TypeVar("M")

RansacStatus = Literal["ok", "insufficient_data", "no_consensus"]


# ---------- Errors ----------
class RansacError(RuntimeError):
    """Base class for user-visible RANSAC run failures."""


class InsufficientDataError(RansacError):
    """Fewer points were supplied than the minimal sample size."""


class NoConsensusError(RansacError):
    """No consensus set of at least minimal size was found, or its refit failed."""


# ---------- Sampling ----------
@dataclass(frozen=True)
class SampleDraw:
    """
    Outcome of one sampler call.

    indices is None when every attempt in the budget hit a degenerate
    configuration. attempts is the number of candidate subsets inspected.
    """
    indices: Optional[IndexArray]
    attempts: int

    @property
    def found(self) -> bool:
        return self.indices is not None


# ---------- Generic model typing ----------
class ModelFitter(Protocol[M]):
    """
    Interface that a geometric model kind must implement to be usable by the
    generic RANSAC engine.

    RANSAC steps:
    1) Draw a non-degenerate minimal sample
    2) Fit a model from that sample
    3) Score all points with a per-point residual
    4) Refit a better model from the best consensus set (least squares)
    """

    @property
    def sample_size(self) -> int:
        """Number of points in a minimal sample (line=2, plane=3)."""
        ...

    @property
    def dim(self) -> int:
        """Point dimension the fitter accepts (line=2, plane=3)."""
        ...

    def sample(self, rng: np.random.Generator, points: FloatArray, max_attempts: int) -> SampleDraw:
        """
        Draw one minimal, non-degenerate subset of point indices.
        Return SampleDraw(indices=None, ...) once max_attempts candidates were degenerate.
        """
        ...

    def fit_minimal(self, sample: FloatArray) -> M:
        """Fit from exactly sample_size points. May return an invalid model."""
        ...

    def fit_least_squares(self, points: FloatArray) -> M:
        """Refit using a whole consensus set. Returns an invalid model on numeric degeneracy."""
        ...

    def residuals(self, model: M, points: FloatArray) -> FloatArray:
        """Return one residual per point, shape (N,). Smaller = better."""
        ...

    def is_valid(self, model: M) -> bool:
        ...


# ---------- Configuration ----------
@dataclass(frozen=True)
class RansacConfig:
    """
    Config for one RANSAC run.

    - error_tolerance: a point is an inlier when residual < error_tolerance
    - max_iterations: upper bound on sampling iterations
    - min_consensus:
      Inlier count the best model must reach before stagnation can stop the loop.
      Must be >= the fitter's minimal sample size (checked by the engine).
    - stagnation_ratio:
      The loop stops early once the best count reaches min_consensus and
      more than int(max_iterations * stagnation_ratio) consecutive
      iterations failed to improve it.
    - max_sample_attempts: degenerate-sample retry budget per iteration
    - confidence:
      Optional adaptive cap. When set (e.g. 0.99) the iteration bound shrinks
      to what is needed to draw one all-inlier sample with that probability.
    - seed: RNG seed used when no generator is injected
    """
    error_tolerance: float = 0.5
    max_iterations: int = 1000
    min_consensus: int = 3
    stagnation_ratio: float = 0.25
    max_sample_attempts: int = 10
    confidence: Optional[float] = None
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if not np.isfinite(self.error_tolerance) or self.error_tolerance <= 0:
            raise ValueError(f"error_tolerance must be > 0, got {self.error_tolerance}")
        if int(self.max_iterations) != self.max_iterations or self.max_iterations <= 0:
            raise ValueError(f"max_iterations must be a positive int, got {self.max_iterations}")
        if int(self.min_consensus) != self.min_consensus or self.min_consensus < 0:
            raise ValueError(f"min_consensus must be a non-negative int, got {self.min_consensus}")
        if not 0.0 <= self.stagnation_ratio <= 1.0:
            raise ValueError(f"stagnation_ratio must be in [0, 1], got {self.stagnation_ratio}")
        if self.max_sample_attempts <= 0:
            raise ValueError(f"max_sample_attempts must be >= 1, got {self.max_sample_attempts}")
        if self.confidence is not None and not 0.0 < self.confidence < 1.0:
            raise ValueError(f"confidence must be in (0, 1), got {self.confidence}")

    @property
    def stagnation_limit(self) -> int:
        """Consecutive non-improving iterations tolerated before an early stop."""
        return int(self.max_iterations * self.stagnation_ratio)

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> "RansacConfig":
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"Unknown RansacConfig keys: {sorted(unknown)}")
        return cls(**dict(values))


# ---------- RANSAC output container ----------
# frozen=True means "immutable" after construction
@dataclass(frozen=True)
class RansacResult(Generic[M]):
    model: Optional[M]              # refined model, None when the run failed
    inliers: Mask                   # inlier mask under the final model
    num_inliers: int                # count of True values in inliers
    num_points: int                 # dataset size
    mean_error: float               # mean inlier residual under the final model
    iterations: int                 # how many iterations were actually run
    sampler_failures: int           # iterations wasted on degenerate samples
    best_inlier_history: tuple[int, ...]  # best count after each iteration
    threshold: float                # the error tolerance used
    status: RansacStatus = "ok"
    stopped_early: bool = False

    @property
    def success(self) -> bool:
        return self.status == "ok"

    def raise_for_status(self) -> "RansacResult[M]":
        if self.status == "insufficient_data":
            raise InsufficientDataError(
                f"Need at least a minimal sample of points, got {self.num_points}")
        if self.status == "no_consensus":
            raise NoConsensusError(
                f"No valid model found after {self.iterations} iterations "
                f"over {self.num_points} points")
        return self


# ---------- Helper Functions ----------
def as_points(pts: npt.ArrayLike, dim: int) -> FloatArray:
    """
    Convert input to an (N, dim) float64 array.
    Rejects wrong shapes and non-finite coordinates.
    """
    arr = np.asarray(pts, dtype=np.float64)
    if arr.ndim == 1 and arr.size == 0:
        arr = arr.reshape(0, dim)
    if arr.ndim != 2 or arr.shape[1] != dim:
        raise ValueError(f"Expected points shape (N, {dim}) but got {arr.shape}")
    if not np.isfinite(arr).all():
        raise ValueError("Points must have finite coordinates")
    return arr
