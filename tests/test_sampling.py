"""Tests for bounded minimal-sample drawing."""

import numpy as np

from robustfit.ransac import draw_distinct_pair, draw_noncollinear_triple, are_collinear


class TestDistinctPair:

    def test_returns_two_different_points(self, rng, line_inliers):
        for _ in range(50):
            draw = draw_distinct_pair(rng, line_inliers)
            assert draw.found
            assert draw.attempts == 1
            i, j = draw.indices
            assert i != j

    def test_skips_duplicate_coordinates(self, rng):
        pts = np.array([[1.0, 1.0], [1.0, 1.0], [1.0, 1.0], [4.0, 2.0]])
        for _ in range(50):
            draw = draw_distinct_pair(rng, pts, max_attempts=100)
            assert draw.found
            i, j = draw.indices
            assert not np.array_equal(pts[i], pts[j])

    def test_gives_up_after_budget(self, rng):
        pts = np.ones((6, 2))
        draw = draw_distinct_pair(rng, pts, max_attempts=7)
        assert not draw.found
        assert draw.indices is None
        assert draw.attempts == 7

    def test_too_few_points(self, rng):
        draw = draw_distinct_pair(rng, np.zeros((1, 2)))
        assert not draw.found
        assert draw.attempts == 0


class TestNoncollinearTriple:

    def test_returns_noncollinear_triple(self, rng, plane_inliers):
        for _ in range(50):
            draw = draw_noncollinear_triple(rng, plane_inliers)
            assert draw.found
            assert len(set(draw.indices.tolist())) == 3
            assert not are_collinear(*plane_inliers[draw.indices])

    def test_collinear_cloud_exhausts_budget(self, rng):
        t = np.arange(20, dtype=np.float64)
        pts = np.column_stack([t, 2 * t, -t])
        draw = draw_noncollinear_triple(rng, pts, max_attempts=10)
        assert not draw.found
        assert draw.attempts == 10

    def test_budget_capped_by_point_count(self, rng):
        pts = np.array([[0.0, 0, 0], [1.0, 0, 0], [2.0, 0, 0], [3.0, 0, 0]])
        draw = draw_noncollinear_triple(rng, pts, max_attempts=10)
        assert not draw.found
        # n - 2 consecutive triples exist in a permutation of 4 indices
        assert draw.attempts == 2

    def test_too_few_points(self, rng):
        draw = draw_noncollinear_triple(rng, np.zeros((2, 3)))
        assert not draw.found
        assert draw.attempts == 0

    def test_same_seed_same_sample(self, plane_inliers):
        a = draw_noncollinear_triple(np.random.default_rng(3), plane_inliers)
        b = draw_noncollinear_triple(np.random.default_rng(3), plane_inliers)
        assert np.array_equal(a.indices, b.indices)
