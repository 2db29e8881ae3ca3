"""
Generic RANSAC engine (model-agnostic).

RANSAC overview:
- Draw a *minimal*, non-degenerate subset of points
- Fit a candidate model from that subset
- Score all points by residual, inliers are those with residual < tolerance
- Keep the model with the most inliers (ties keep the incumbent)
- Stop early once the best model has enough support and has stopped improving
- Refit using the best consensus set (least squares) to get the final model

Uses the ModelFitter Protocol from types.py:
    the same engine fits lines (LineFitter) and planes (PlaneFitter)
"""
from __future__ import annotations

import logging
import os
from typing import Optional, TypeVar, Generic

import numpy as np
import numpy.typing as npt

from .types import (
    FloatArray, Mask, ModelFitter, RansacConfig, RansacResult, RansacStatus,
    INVALID_SCORE, as_points,
)
from .consensus import consensus_mask, evaluate
from .line import LineModel
from .line_fitter import LineFitter
from .plane import PlaneModel
from .plane_fitter import PlaneFitter

M = TypeVar("M")

logger = logging.getLogger(__name__)
if os.environ.get("ROBUSTFIT_RANSAC_DEBUG", "0") == "1":
    logger.setLevel(logging.DEBUG)


def _required_iter_for_confidence(
        *,
        p_all_inliers: float,
        inlier_ratio: float,
        sample_size: int,
) -> int:
    """
    Number of iterations needed so that the probability of having drawn at
    least ONE all-inlier minimal sample is >= p_all_inliers.

    inlier ratio w = (# inliers) / N, minimal sample size s:
    - P(all-inliers) = w^s
    - P(no-all-inlier-sample-in-k-draws) = (1 - w^s)^k
    - k >= log(1 - p) / log(1 - w^s)

    Edge cases:
     - w == 0  -> impossible, return "infinite-ish" (capped by max_iterations)
     - w == 1  -> 1 iteration is enough
    """
    p = float(np.clip(p_all_inliers, 1e-12, 1.0 - 1e-12))
    w = float(np.clip(inlier_ratio, 0.0, 1.0))
    s = int(sample_size)

    if s <= 0:
        raise ValueError("sample_size must be >= 1")
    if w >= 1.0:
        return 1
    if w <= 0.0:
        return int(1e9)

    # If w^s is extremely tiny, log(1 - w^s) is close to 0
    w_to_s = float(np.clip(w ** s, 1e-12, 1.0 - 1e-12))

    k = int(np.ceil(np.log(1 - p) / np.log(1 - w_to_s)))
    return max(1, k)


class RansacEngine(Generic[M]):
    """
    One RANSAC run over a fixed point set.

    - fitter: the geometric model kind (LineFitter, PlaneFitter, ...)
    - points: (N, fitter.dim) observations, copied and read-only afterwards
    - config: tolerance / iteration budget / early-stop settings
    - rng: optional injected Generator; otherwise built from config.seed

    The engine owns its Generator, so separate engines never share random
    state. run() may be called repeatedly; each call continues the same
    random stream.
    """

    def __init__(
            self,
            fitter: ModelFitter[M],
            points: npt.ArrayLike,
            config: RansacConfig = RansacConfig(),
            *,
            rng: Optional[np.random.Generator] = None,
    ) -> None:
        if config.min_consensus < fitter.sample_size:
            raise ValueError(
                f"min_consensus ({config.min_consensus}) must be >= the minimal "
                f"sample size ({fitter.sample_size})")

        self.fitter = fitter
        self.config = config
        self.points: FloatArray = as_points(points, fitter.dim).copy()
        self.points.setflags(write=False)
        self.rng = rng if rng is not None else np.random.default_rng(config.seed)

    @property
    def num_points(self) -> int:
        return int(self.points.shape[0])

    # ---------- Query surface ----------
    def residuals(self, model: M) -> FloatArray:
        return self.fitter.residuals(model, self.points)

    def consensus_mask(self, model: M) -> Mask:
        return consensus_mask(self.fitter, model, self.points, self.config.error_tolerance)

    def consensus_set(self, model: M) -> FloatArray:
        return self.points[self.consensus_mask(model)]

    def evaluate(self, model: M) -> float:
        return evaluate(self.fitter, model, self.points, self.config.error_tolerance)

    # ---------- Main loop ----------
    def run(self) -> RansacResult[M]:
        cfg = self.config
        fitter = self.fitter
        pts = self.points
        n = self.num_points
        s = fitter.sample_size

        if n < s:
            logger.warning("Insufficient data: %d points, need at least %d", n, s)
            return self._failure("insufficient_data", iterations=0, sampler_failures=0, history=())

        # Track the best hypothesis
        best_mask: Optional[Mask] = None
        best_num_inliers = 0
        no_improvement = 0
        stagnation_limit = cfg.stagnation_limit

        target_iters = cfg.max_iterations
        sampler_failures = 0
        history: list[int] = []
        stopped_early = False

        i = 0
        while i < target_iters:
            i += 1

            hypothesis = self._hypothesize()
            if hypothesis is None:
                # Wasted iteration: counts against the budget, not against stagnation
                sampler_failures += 1
            else:
                model, inliers = hypothesis
                num_inliers = int(np.count_nonzero(inliers))

                # Strict improvement only: equal counts keep the incumbent
                if num_inliers > best_num_inliers:
                    best_num_inliers = num_inliers
                    best_mask = inliers
                    no_improvement = 0

                    logger.debug("iter %d: better model %s, inliers=%d/%d", i, model, num_inliers, n)

                    if cfg.confidence is not None:
                        iter_needed = _required_iter_for_confidence(
                            p_all_inliers=cfg.confidence,
                            inlier_ratio=best_num_inliers / float(n),
                            sample_size=s,
                        )
                        target_iters = min(target_iters, max(iter_needed, i))
                else:
                    no_improvement += 1

            history.append(best_num_inliers)

            if best_num_inliers >= cfg.min_consensus and no_improvement > stagnation_limit:
                stopped_early = True
                break

        iterations = i

        if best_mask is None or best_num_inliers < s:
            logger.warning(
                "RANSAC failed to find a consensus set of %d+ points in %d iterations", s, iterations)
            return self._failure("no_consensus", iterations, sampler_failures, tuple(history))

        final_model = fitter.fit_least_squares(pts[best_mask])
        if not fitter.is_valid(final_model):
            logger.warning("RANSAC refit over %d inliers produced an invalid model", best_num_inliers)
            return self._failure("no_consensus", iterations, sampler_failures, tuple(history))

        final_mask = self.consensus_mask(final_model)
        num_final = int(np.count_nonzero(final_mask))
        if num_final < s:
            logger.warning(
                "RANSAC refit explains only %d points, fewer than a minimal sample of %d", num_final, s)
            return self._failure("no_consensus", iterations, sampler_failures, tuple(history))

        logger.info(
            "RANSAC converged with %d inliers out of %d points after %d iterations",
            num_final, n, iterations)

        return RansacResult(
            model=final_model,
            inliers=final_mask,
            num_inliers=num_final,
            num_points=n,
            mean_error=self.evaluate(final_model),
            iterations=iterations,
            sampler_failures=sampler_failures,
            best_inlier_history=tuple(history),
            threshold=float(cfg.error_tolerance),
            status="ok",
            stopped_early=stopped_early,
        )

    def _hypothesize(self) -> Optional[tuple[M, Mask]]:
        """
        Sample -> minimal fit -> score. None when no usable sample was drawn.
        """
        draw = self.fitter.sample(self.rng, self.points, self.config.max_sample_attempts)
        if not draw.found:
            return None
        model = self.fitter.fit_minimal(self.points[draw.indices])
        if not self.fitter.is_valid(model):
            return None
        return model, self.consensus_mask(model)

    def _failure(
            self,
            status: RansacStatus,
            iterations: int,
            sampler_failures: int,
            history: tuple[int, ...],
    ) -> RansacResult[M]:
        return RansacResult(
            model=None,
            inliers=np.zeros((self.num_points,), dtype=bool),
            num_inliers=0,
            num_points=self.num_points,
            mean_error=INVALID_SCORE,
            iterations=iterations,
            sampler_failures=sampler_failures,
            best_inlier_history=history,
            threshold=float(self.config.error_tolerance),
            status=status,
        )


def ransac(
        model_fitter: ModelFitter[M],
        points: npt.ArrayLike,
        *,
        tolerance: float,
        max_iters: int = 1000,
        min_consensus: Optional[int] = None,
        seed: Optional[int] = 0,
        rng: Optional[np.random.Generator] = None,
) -> RansacResult[M]:
    """
    Run RANSAC to fit one model to points.

    Inputs:
    - model_fitter: provides sample, fit_minimal, fit_least_squares, residuals
    - points: (N, dim) observations
    - tolerance: inlier threshold on the residual
    - max_iters: upper bound of number of RANSAC iterations
    - min_consensus: support needed before early stopping (default: minimal sample size)
    - seed / rng: randomness for reproducibility

    Returns:
    - RansacResult; check .success or call .raise_for_status()
    """
    config = RansacConfig(
        error_tolerance=tolerance,
        max_iterations=max_iters,
        min_consensus=model_fitter.sample_size if min_consensus is None else min_consensus,
        seed=seed,
    )
    return RansacEngine(model_fitter, points, config, rng=rng).run()


def fit_line(
        points: npt.ArrayLike,
        config: RansacConfig = RansacConfig(min_consensus=2),
        *,
        rng: Optional[np.random.Generator] = None,
) -> RansacResult[LineModel]:
    fitter = LineFitter()
    return RansacEngine(fitter, points, config, rng=rng).run()


def fit_plane(
        points: npt.ArrayLike,
        config: RansacConfig = RansacConfig(min_consensus=3),
        *,
        rng: Optional[np.random.Generator] = None,
) -> RansacResult[PlaneModel]:
    fitter = PlaneFitter()
    return RansacEngine(fitter, points, config, rng=rng).run()
