"""
Pluggable linear-solver backends for the Newton (KKT) systems.

A backend is bound to a Triplet with ``initialize``, refactorizes the
current triplet values with ``factorize`` and then performs any number of
``solve`` calls against that factorization. ``release`` drops the
factorization context and may be called any number of times.

Backends:
- "superlu": scipy.sparse.linalg.splu (SuperLU, sparse LU)
- "dense":   scipy.linalg.lu_factor / lu_solve (small systems, debugging)
"""

import time
import warnings
from abc import ABC, abstractmethod
from typing import Dict, List, Optional, Type

import numpy as np
import scipy.linalg as la
from scipy.sparse.linalg import splu

from ..errors import ConfigError, FactorizationError, SetupError, SolveError
from .triplet import Triplet


class LinearSolver(ABC):
    """Base class of linear-solver backends."""

    name = "base"

    def __init__(self):
        self._triplet: Optional[Triplet] = None
        self.symmetric = False
        self.verbose = False
        self.timing = False
        self.factorized = False

    @property
    def initialized(self) -> bool:
        return self._triplet is not None

    def initialize(self, triplet: Triplet, symmetric: bool = False,
                   verbose: bool = False, timing: bool = False) -> None:
        """
        Bind the backend to a square triplet matrix.

        Raises
        ------
        SetupError
            If the matrix is not square or empty.
        """
        m, n = triplet.shape
        if m != n or m == 0:
            raise SetupError(
                f"{self.name}: matrix must be square and non-empty, got {m}x{n}",
                backend=self.name,
            )
        self.release()
        self._triplet = triplet
        self.symmetric = symmetric
        self.verbose = verbose
        self.timing = timing
        self._setup()
        if self.verbose:
            kind = "symmetric" if symmetric else "unsymmetric"
            print(f"  [{self.name}] initialized {kind} {m}x{n} system")

    def factorize(self) -> None:
        """
        Factorize the current values of the bound triplet.

        Raises
        ------
        SetupError
            If called before ``initialize``.
        FactorizationError
            If the matrix is singular or the factors are not finite.
        """
        if self._triplet is None:
            raise SetupError(f"{self.name}: factorize called before initialize",
                             backend=self.name)
        self.factorized = False
        t0 = time.perf_counter()
        self._factorize(self._triplet)
        self.factorized = True
        if self.timing:
            print(f"  [{self.name}] factorize: {time.perf_counter() - t0:.3e} s")

    def solve(self, out: np.ndarray, rhs: np.ndarray,
              transposed: bool = False) -> np.ndarray:
        """
        Solve M out = rhs (or Mᵀ out = rhs) with the current factorization.

        Raises
        ------
        SetupError
            If no factorization is available.
        SolveError
            If shapes mismatch or the solution is not finite.
        """
        if not self.factorized:
            raise SetupError(f"{self.name}: solve called before factorize",
                             backend=self.name)
        n = self._triplet.m
        if out.shape != (n,) or rhs.shape != (n,):
            raise SolveError(
                f"{self.name}: expected vectors of length {n}, "
                f"got out {out.shape} and rhs {rhs.shape}",
                backend=self.name,
            )
        t0 = time.perf_counter()
        sol = self._solve(rhs, transposed)
        if not np.all(np.isfinite(sol)):
            raise SolveError(f"{self.name}: solution contains non-finite values",
                             backend=self.name)
        out[:] = sol
        if self.timing:
            print(f"  [{self.name}] solve: {time.perf_counter() - t0:.3e} s")
        return out

    def release(self) -> None:
        """Drop the factorization context. Safe to call repeatedly."""
        if self._triplet is None:
            return
        self._release()
        self._triplet = None
        self.factorized = False
        if self.verbose:
            print(f"  [{self.name}] released")

    def _setup(self) -> None:
        pass

    @abstractmethod
    def _factorize(self, triplet: Triplet) -> None:
        ...

    @abstractmethod
    def _solve(self, rhs: np.ndarray, transposed: bool) -> np.ndarray:
        ...

    @abstractmethod
    def _release(self) -> None:
        ...


class SuperLUSolver(LinearSolver):
    """Sparse LU factorization via SuperLU (scipy.sparse.linalg.splu)."""

    name = "superlu"

    def __init__(self):
        super().__init__()
        self._lu = None
        self.permc_spec = "COLAMD"

    def _setup(self) -> None:
        self.permc_spec = "MMD_AT_PLUS_A" if self.symmetric else "COLAMD"

    def _factorize(self, triplet: Triplet) -> None:
        self._lu = None
        mat = triplet.to_csc()
        try:
            lu = splu(mat, permc_spec=self.permc_spec)
        except RuntimeError as e:
            raise FactorizationError(f"{self.name}: {e}", backend=self.name) from e
        if not np.all(np.isfinite(lu.U.diagonal())):
            raise FactorizationError(f"{self.name}: factor contains non-finite values",
                                     backend=self.name)
        self._lu = lu

    def _solve(self, rhs: np.ndarray, transposed: bool) -> np.ndarray:
        return self._lu.solve(rhs, trans="T" if transposed else "N")

    def _release(self) -> None:
        self._lu = None


class DenseLUSolver(LinearSolver):
    """Dense LU factorization via LAPACK (scipy.linalg.lu_factor)."""

    name = "dense"

    def __init__(self):
        super().__init__()
        self._lu_piv = None

    def _factorize(self, triplet: Triplet) -> None:
        self._lu_piv = None
        mat = triplet.to_dense()
        if not np.all(np.isfinite(mat)):
            raise FactorizationError(f"{self.name}: matrix contains non-finite values",
                                     backend=self.name)
        with warnings.catch_warnings():
            warnings.simplefilter("error", la.LinAlgWarning)
            try:
                lu, piv = la.lu_factor(mat, check_finite=False)
            except (la.LinAlgError, la.LinAlgWarning) as e:
                raise FactorizationError(f"{self.name}: {e}", backend=self.name) from e
        if np.any(np.diag(lu) == 0.0):
            raise FactorizationError(f"{self.name}: matrix is exactly singular",
                                     backend=self.name)
        self._lu_piv = (lu, piv)

    def _solve(self, rhs: np.ndarray, transposed: bool) -> np.ndarray:
        return la.lu_solve(self._lu_piv, rhs, trans=1 if transposed else 0,
                           check_finite=False)

    def _release(self) -> None:
        self._lu_piv = None


_SOLVERS: Dict[str, Type[LinearSolver]] = {
    SuperLUSolver.name: SuperLUSolver,
    DenseLUSolver.name: DenseLUSolver,
}


def available_solvers() -> List[str]:
    """Names accepted by ``get_solver``."""
    return sorted(_SOLVERS)


def get_solver(name: str) -> LinearSolver:
    """
    Create a new backend instance by name.

    Raises
    ------
    ConfigError
        If the name is not registered.
    """
    try:
        cls = _SOLVERS[name.lower()]
    except (KeyError, AttributeError):
        raise ConfigError(
            f"Unknown linear solver {name!r}; choose from {available_solvers()}"
        ) from None
    return cls()
