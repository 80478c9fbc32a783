"""
Tests for configuration module.
"""

import pytest
from linipm import config
from linipm.config import IpmConfig
from linipm.errors import ConfigError


class TestConstants:
    """Test numerical constants."""

    def test_default_nmaxit(self):
        assert config.DEFAULT_NMAXIT == 50

    def test_default_tol(self):
        assert config.DEFAULT_TOL == 1e-8

    def test_step_fraction(self):
        """Steps stop 1% short of the boundary."""
        assert config.STEP_FRACTION == 0.99

    def test_centering_exponent(self):
        assert config.CENTERING_EXPONENT == 3

    def test_starting_point_factors(self):
        assert config.START_SHIFT_FACTOR == 1.5
        assert config.START_BALANCE_FACTOR == 0.5

    def test_default_solver(self):
        assert config.DEFAULT_SOLVER == "superlu"


class TestIpmConfig:
    """Test option parsing."""

    def test_defaults(self):
        cfg = IpmConfig.from_params(None)
        assert cfg.nmaxit == 50
        assert cfg.tol == 1e-8
        assert cfg.feastol is None

    def test_recognized_options(self):
        cfg = IpmConfig.from_params({"nmaxit": 20, "tol": 1e-6, "feastol": 1e-9})
        assert cfg.nmaxit == 20
        assert cfg.tol == 1e-6
        assert cfg.feastol == 1e-9

    def test_unrecognized_options_ignored(self):
        cfg = IpmConfig.from_params({"nmaxit": 7, "verbose": True, "foo": "bar"})
        assert cfg.nmaxit == 7
        assert cfg.tol == config.DEFAULT_TOL

    def test_integral_float_nmaxit(self):
        """Numeric parameter bags may hold nmaxit as a float."""
        assert IpmConfig.from_params({"nmaxit": 10.0}).nmaxit == 10

    def test_zero_nmaxit_allowed(self):
        assert IpmConfig.from_params({"nmaxit": 0}).nmaxit == 0

    @pytest.mark.parametrize("value", [-1, 2.5, True, "abc", None])
    def test_invalid_nmaxit(self, value):
        with pytest.raises(ConfigError):
            IpmConfig.from_params({"nmaxit": value})

    @pytest.mark.parametrize("value", [0.0, -1e-8, float("nan"), float("inf")])
    def test_invalid_tol(self, value):
        with pytest.raises(ConfigError):
            IpmConfig.from_params({"tol": value})

    def test_invalid_feastol(self):
        with pytest.raises(ConfigError):
            IpmConfig.from_params({"feastol": -1.0})

    def test_params_must_be_mapping(self):
        with pytest.raises(ConfigError):
            IpmConfig.from_params([("nmaxit", 5)])

    def test_config_error_is_value_error(self):
        with pytest.raises(ValueError):
            IpmConfig.from_params({"tol": -1.0})
