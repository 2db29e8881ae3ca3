"""
Minimal-sample drawing with bounded degeneracy retries.

Both samplers take the engine's Generator so runs are reproducible per
engine instance, and both give up after a fixed number of attempts
instead of retrying forever. The attempt count is reported back in the
SampleDraw so callers can inspect the worst-case cost of an iteration.
"""

from __future__ import annotations

import numpy as np

from .types import Points2D, Points3D, SampleDraw
from .plane import are_collinear, EPS_NORMAL

DEFAULT_MAX_ATTEMPTS = 10


def draw_distinct_pair(
        rng: np.random.Generator,
        pts: Points2D,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
) -> SampleDraw:
    """
    Draw two different indices uniformly (without replacement), redrawing
    while the two points have identical coordinates.
    """
    n = pts.shape[0]
    if n < 2:
        return SampleDraw(indices=None, attempts=0)

    for attempt in range(1, max_attempts + 1):
        idx = rng.choice(n, size=2, replace=False)
        if not np.array_equal(pts[idx[0]], pts[idx[1]]):
            return SampleDraw(indices=idx.astype(np.intp), attempts=attempt)

    return SampleDraw(indices=None, attempts=max_attempts)


def draw_noncollinear_triple(
        rng: np.random.Generator,
        pts: Points3D,
        *,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        eps: float = EPS_NORMAL,
) -> SampleDraw:
    """
    Shuffle all indices once, then scan consecutive triples

        (perm[k], perm[k+1], perm[k+2]),  k = 0 .. min(max_attempts, n-2) - 1

    returning the first triple that is not collinear.
    """
    n = pts.shape[0]
    budget = min(max_attempts, n - 2)
    if budget <= 0:
        return SampleDraw(indices=None, attempts=0)

    perm = rng.permutation(n)
    for k in range(budget):
        idx = perm[k:k + 3]
        if not are_collinear(pts[idx[0]], pts[idx[1]], pts[idx[2]], eps=eps):
            return SampleDraw(indices=idx.astype(np.intp), attempts=k + 1)

    return SampleDraw(indices=None, attempts=budget)
