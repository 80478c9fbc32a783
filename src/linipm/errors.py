"""
Exception hierarchy for the interior-point LP solver.

- ConfigError: invalid options or degenerate problem dimensions
- LinearSolverError: failures reported by a linear-solver backend
  (SetupError, FactorizationError, SolveError)
- ConvergenceError: iteration limit reached without meeting the tolerance

None of these are retried internally; recovery is left to the caller.
"""

from typing import Optional


class LinIpmError(Exception):
    """Base class for all errors raised by linipm."""


class ConfigError(LinIpmError, ValueError):
    """Invalid solver options or problem dimensions."""


class LinearSolverError(LinIpmError):
    """
    Failure inside a linear-solver backend.

    Attributes
    ----------
    backend : str or None
        Name of the backend that failed.
    """

    def __init__(self, message: str, backend: Optional[str] = None):
        super().__init__(message)
        self.backend = backend


class SetupError(LinearSolverError):
    """Backend could not be initialized for the given matrix."""


class FactorizationError(LinearSolverError):
    """Matrix factorization failed (e.g. singular matrix)."""


class SolveError(LinearSolverError):
    """Triangular solves with an existing factorization failed."""


class ConvergenceError(LinIpmError, RuntimeError):
    """
    Iteration limit reached without convergence.

    Attributes
    ----------
    nit : int
        Number of iterations performed.
    error : float or None
        Relative duality gap at the last evaluated iterate.
    """

    def __init__(self, message: str, nit: int = 0, error: Optional[float] = None):
        super().__init__(message)
        self.nit = nit
        self.error = error
