"""
Global configuration and numerical constants for the interior-point solver.

Reference: Nocedal & Wright, Numerical Optimization, Chapter 14
"""

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional

from .errors import ConfigError


# =============================================================================
# Iteration Control
# =============================================================================

DEFAULT_NMAXIT = 50
"""Maximum number of Newton (predictor-corrector) iterations."""

DEFAULT_TOL = 1e-8
"""Tolerance on the relative duality gap |cᵀx - bᵀλ| / (1 + |cᵀx|)."""

FEASIBILITY_WARN_TOL = 1e-6
"""Residual norm above which a gap-only convergence issues a warning."""


# =============================================================================
# Predictor-Corrector Constants
# =============================================================================

STEP_FRACTION = 0.99
"""Fraction of the ratio-test step taken, keeping x and s strictly positive."""

CENTERING_EXPONENT = 3
"""Exponent in σ = (μ_aff / μ)^3."""


# =============================================================================
# Starting Point Heuristic
# =============================================================================

START_SHIFT_FACTOR = 1.5
"""Shift δ = max(-1.5 min(v), 0) applied to x and s."""

START_BALANCE_FACTOR = 0.5
"""Balancing shifts δx = 0.5 xᵀs / Σs and δs = 0.5 xᵀs / Σx."""


# =============================================================================
# Linear Algebra
# =============================================================================

DEFAULT_SOLVER = "superlu"
"""Name of the default sparse linear-solver backend."""

CERTIFY_PRECISION = 50
"""Number of decimal digits for mpmath certificate evaluation."""


# =============================================================================
# Solver Options
# =============================================================================

@dataclass
class IpmConfig:
    """Recognized options of the interior-point solver."""
    nmaxit: int = DEFAULT_NMAXIT
    tol: float = DEFAULT_TOL
    feastol: Optional[float] = None  # None keeps the gap-only criterion

    def __post_init__(self):
        if isinstance(self.nmaxit, bool) or int(self.nmaxit) != self.nmaxit:
            raise ConfigError(f"nmaxit must be an integer, got {self.nmaxit!r}")
        self.nmaxit = int(self.nmaxit)
        if self.nmaxit < 0:
            raise ConfigError(f"nmaxit must be non-negative, got {self.nmaxit}")
        self.tol = float(self.tol)
        if not math.isfinite(self.tol) or self.tol <= 0:
            raise ConfigError(f"tol must be positive and finite, got {self.tol}")
        if self.feastol is not None:
            self.feastol = float(self.feastol)
            if not math.isfinite(self.feastol) or self.feastol <= 0:
                raise ConfigError(
                    f"feastol must be positive and finite, got {self.feastol}"
                )

    @classmethod
    def from_params(cls, params: Optional[Mapping[str, Any]] = None) -> "IpmConfig":
        """
        Build a configuration from a parameter mapping.

        Recognized keys are ``nmaxit``, ``tol`` and ``feastol``; any other
        key is ignored.

        Parameters
        ----------
        params : mapping, optional
            Option name to value.

        Returns
        -------
        IpmConfig

        Raises
        ------
        ConfigError
            If a recognized option has an invalid value.
        """
        if params is None:
            return cls()
        if not isinstance(params, Mapping):
            raise ConfigError(
                f"params must be a mapping, got {type(params).__name__}"
            )
        kwargs = {}
        for name in ("nmaxit", "tol", "feastol"):
            if name in params:
                kwargs[name] = params[name]
        try:
            return cls(**kwargs)
        except ConfigError:
            raise
        except (TypeError, ValueError, OverflowError) as e:
            raise ConfigError(f"Invalid solver option: {e}") from e
