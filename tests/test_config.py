"""Tests for run configuration."""

import dataclasses

import pytest

from robustfit.ransac import RansacConfig


class TestRansacConfig:
    """Test configuration validation."""

    def test_defaults(self):
        config = RansacConfig()
        assert config.error_tolerance == 0.5
        assert config.max_iterations == 1000
        assert config.stagnation_ratio == 0.25
        assert config.max_sample_attempts == 10
        assert config.confidence is None

    def test_stagnation_limit_is_quarter_of_budget(self):
        assert RansacConfig(max_iterations=100).stagnation_limit == 25
        assert RansacConfig(max_iterations=2000).stagnation_limit == 500
        assert RansacConfig(max_iterations=7).stagnation_limit == 1

    def test_frozen(self):
        config = RansacConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.max_iterations = 5

    @pytest.mark.parametrize("kwargs", [
        {"error_tolerance": 0.0},
        {"error_tolerance": -1.0},
        {"error_tolerance": float("nan")},
        {"max_iterations": 0},
        {"max_iterations": 2.5},
        {"min_consensus": -1},
        {"stagnation_ratio": 1.5},
        {"max_sample_attempts": 0},
        {"confidence": 1.0},
    ])
    def test_invalid_values_rejected(self, kwargs):
        with pytest.raises(ValueError):
            RansacConfig(**kwargs)

    def test_from_dict(self):
        config = RansacConfig.from_dict({"error_tolerance": 0.4, "max_iterations": 2000, "min_consensus": 9})
        assert config == RansacConfig(error_tolerance=0.4, max_iterations=2000, min_consensus=9)

    def test_from_dict_unknown_key(self):
        with pytest.raises(ValueError, match="threshold"):
            RansacConfig.from_dict({"threshold": 3.0})
