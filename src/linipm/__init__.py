"""
linipm: primal-dual interior-point solver for linear programs

Solves min cᵀx s.t. A x = b, x ≥ 0 (and its dual) for sparse A with
Mehrotra's predictor-corrector method and a pluggable sparse direct solver.
"""

from . import config
from .errors import (
    LinIpmError,
    ConfigError,
    LinearSolverError,
    SetupError,
    FactorizationError,
    SolveError,
    ConvergenceError,
)
from .lp.linipm import IterationRecord, LinIpm, LinIpmResult

__version__ = "0.1.0"
__all__ = [
    "config",
    "LinIpm",
    "LinIpmResult",
    "IterationRecord",
    "LinIpmError",
    "ConfigError",
    "LinearSolverError",
    "SetupError",
    "FactorizationError",
    "SolveError",
    "ConvergenceError",
]
