"""
Primal-dual interior-point method for linear programs in standard form.

Solves

    min cᵀx   s.t.   A x = b,  x ≥ 0

or, equivalently, the dual problem

    max bᵀλ   s.t.   Aᵀλ + s = c,  s ≥ 0

with Mehrotra's predictor-corrector method. The iterate y = [x, λ, s] is
stored in a single buffer of length Ny = 2 Nx + Nl; x, λ and s are numpy
views into it, as are the direction -Δy = [-Δx, -Δλ, -Δs] and the residual
R = [Rx, Rl, Rs]. All buffers, and the triplet holding the Jacobian, are
allocated once and overwritten in place every iteration.

Each iteration:
    1. Residuals Rx = Aᵀλ + s - c, Rl = A x - b, Rs = x ⊙ s, μ = xᵀs / Nx
    2. Stop if |cᵀx - bᵀλ| / (1 + |cᵀx|) < tol
    3. Assemble the Jacobian J of the KKT map at (x, λ, s) and factorize it
    4. Affine step: J (-Δy) = R; ratio test; σ = (μ_aff / μ)^3
    5. Corrector: Rs += Δx ⊙ Δs - σμ; J (-Δy) = R with the same factors
    6. Step lengths α = min(1, 0.99 ratio); update x, s (and λ with α_dual)

Reference: Nocedal & Wright, Numerical Optimization, Algorithm 14.3
"""

import warnings
from dataclasses import dataclass
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

import numpy as np

from ..config import (
    CENTERING_EXPONENT,
    DEFAULT_SOLVER,
    FEASIBILITY_WARN_TOL,
    START_BALANCE_FACTOR,
    START_SHIFT_FACTOR,
    STEP_FRACTION,
    IpmConfig,
)
from ..errors import ConfigError, ConvergenceError
from ..linalg.dense import spd_solve2
from ..linalg.solvers import LinearSolver, get_solver
from ..linalg.sparse import (
    MatrixLike,
    as_csc,
    mat_mat_tr_mul,
    mat_tr_vec_mul,
    mat_tr_vec_mul_add,
    mat_vec_mul,
)
from ..linalg.triplet import Triplet


@dataclass
class IterationRecord:
    """
    Trace of one interior-point iteration.

    Attributes
    ----------
    it : int
        Iteration index (0-based).
    fx : float
        Primal objective cᵀx at the start of the iteration.
    error : float
        Relative duality gap |cᵀx - bᵀλ| / (1 + |cᵀx|).
    mu : float
        Duality measure xᵀs / Nx.
    x_min, s_min : float
        Smallest entries of x and s at the start of the iteration.
    sigma : float or None
        Centering parameter of the step taken (None if converged).
    alpha_primal, alpha_dual : float or None
        Step lengths of the step taken (None if converged).
    """
    it: int
    fx: float
    error: float
    mu: float
    x_min: float
    s_min: float
    sigma: Optional[float] = None
    alpha_primal: Optional[float] = None
    alpha_dual: Optional[float] = None


@dataclass
class LinIpmResult:
    """
    Solution of a converged interior-point solve.

    Attributes
    ----------
    x : np.ndarray
        Primal solution (length Nx).
    lam : np.ndarray
        Equality multipliers λ (length Nl).
    s : np.ndarray
        Dual slacks (length Nx).
    fun : float
        Primal objective cᵀx.
    dual_fun : float
        Dual objective bᵀλ.
    nit : int
        Iteration at which the convergence test succeeded.
    error : float
        Final relative duality gap.
    primal_residual : float
        ‖A x - b‖∞.
    dual_residual : float
        ‖Aᵀλ + s - c‖∞.
    status : str
        Human-readable status message.
    """
    x: np.ndarray
    lam: np.ndarray
    s: np.ndarray
    fun: float
    dual_fun: float
    nit: int
    error: float
    primal_residual: float
    dual_residual: float
    status: str = "converged"


def _min_ratio(v: np.ndarray, mdv: np.ndarray) -> float:
    """min{ v_i / mdv_i : mdv_i > 0 }, or +inf when no entry qualifies."""
    mask = mdv > 0
    if not np.any(mask):
        return np.inf
    return float(np.min(v[mask] / mdv[mask]))


class LinIpm:
    """
    Mehrotra predictor-corrector solver for standard-form LPs.

    Parameters
    ----------
    A : np.ndarray or scipy.sparse matrix
        Constraint matrix of shape (Nl, Nx).
    b : array_like
        Right-hand side of length Nl.
    c : array_like
        Cost vector of length Nx.
    params : mapping, optional
        Solver options: ``nmaxit`` (default 50), ``tol`` (default 1e-8)
        and ``feastol`` (default None). Other keys are ignored.
    solver : str or LinearSolver
        Linear-solver backend name or instance (default "superlu").

    Raises
    ------
    ConfigError
        On empty or inconsistent dimensions, invalid options or an
        unknown backend name.

    Examples
    --------
    >>> ipm = LinIpm([[1.0, 1.0]], [4.0], [-1.0, -2.0])
    >>> res = ipm.solve()
    >>> round(res.fun, 6)
    -8.0
    """

    def __init__(
        self,
        A: MatrixLike,
        b,
        c,
        params: Optional[Mapping[str, Any]] = None,
        solver: Union[str, LinearSolver] = DEFAULT_SOLVER,
    ):
        # problem
        b = np.array(b, dtype=np.float64)
        c = np.array(c, dtype=np.float64)
        if b.ndim != 1 or c.ndim != 1:
            raise ConfigError(
                f"b and c must be 1-D, got ndim {b.ndim} and {c.ndim}"
            )
        try:
            A = as_csc(A)
        except ValueError as e:
            raise ConfigError(f"Invalid constraint matrix: {e}") from e

        # constants
        self.config = IpmConfig.from_params(params)
        self.nmaxit = self.config.nmaxit
        self.tol = self.config.tol
        self.feastol = self.config.feastol

        # dimensions
        self.nx = c.shape[0]
        self.nl = b.shape[0]
        if self.nx == 0 or self.nl == 0:
            raise ConfigError(
                f"Problem dimensions must be positive, got Nx={self.nx}, Nl={self.nl}"
            )
        if A.shape != (self.nl, self.nx):
            raise ConfigError(
                f"A must have shape (Nl, Nx) = ({self.nl}, {self.nx}), got {A.shape}"
            )
        self.ny = 2 * self.nx + self.nl
        self.A, self.b, self.c = A, b, c
        ix, jx = 0, self.nx
        il, jl = self.nx, self.nx + self.nl
        is_, js = self.nx + self.nl, self.ny

        # solution vector y = [x, λ, s] and its views
        self.y = np.zeros(self.ny)
        self.x = self.y[ix:jx]
        self.lam = self.y[il:jl]
        self.s = self.y[is_:js]

        # direction -Δy
        self.mdy = np.zeros(self.ny)
        self.mdx = self.mdy[ix:jx]
        self.mdl = self.mdy[il:jl]
        self.mds = self.mdy[is_:js]

        # residual
        self.r = np.zeros(self.ny)
        self.rx = self.r[ix:jx]
        self.rl = self.r[il:jl]
        self.rs = self.r[is_:js]

        # Jacobian: A twice plus three diagonals of length Nx
        self.J = Triplet(self.ny, self.ny, 2 * self.A.nnz + 3 * self.nx)
        self._ones = np.ones(self.nx)

        # linear solver
        if isinstance(solver, LinearSolver):
            self._lis = solver
        else:
            self._lis = get_solver(solver)

        self.nit = 0
        self.history: List[IterationRecord] = []

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    @property
    def linear_solver(self) -> LinearSolver:
        return self._lis

    def release(self) -> None:
        """Release the linear-solver backend. Safe to call repeatedly."""
        self._lis.release()

    def __enter__(self) -> "LinIpm":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()

    # -------------------------------------------------------------------------
    # Phases
    # -------------------------------------------------------------------------

    def starting_point(self) -> None:
        """
        Set (x, λ, s) to Mehrotra's starting point.

        Solves (A Aᵀ) d = b and (A Aᵀ) λ = A c with one Cholesky
        factorization, sets x = Aᵀ d and s = c - Aᵀ λ, then shifts x and s
        so that they are positive and of balanced magnitude. No feasibility
        is implied.

        Raises
        ------
        FactorizationError
            If A Aᵀ is not positive definite (A rank-deficient).
        """
        AAt = np.zeros((self.nl, self.nl))
        e = np.zeros(self.nl)
        mat_mat_tr_mul(AAt, 1.0, self.A)
        mat_vec_mul(e, 1.0, self.A, self.c)
        d, lam0 = spd_solve2(AAt, self.b, e)
        self.lam[:] = lam0
        mat_tr_vec_mul(self.x, 1.0, self.A, d)
        self.s[:] = self.c
        mat_tr_vec_mul_add(self.s, -1.0, self.A, self.lam)

        dx = max(-START_SHIFT_FACTOR * float(self.x.min()), 0.0)
        ds = max(-START_SHIFT_FACTOR * float(self.s.min()), 0.0)
        self.x += dx
        self.s += ds

        xdots = float(self.x @ self.s)
        xsum = float(self.x.sum())
        ssum = float(self.s.sum())
        # only an exactly vanishing xᵀs is skipped (Σx or Σs would be zero);
        # a rounding-level xᵀs still balances
        if xdots > 0.0:
            self.x += START_BALANCE_FACTOR * xdots / ssum
            self.s += START_BALANCE_FACTOR * xdots / xsum

    def compute_residual(self) -> Tuple[float, float, float]:
        """
        Fill R = [Rx, Rl, Rs] at the current iterate.

        Returns
        -------
        mu : float
            Duality measure xᵀs / Nx.
        ctx : float
            Primal objective cᵀx.
        btl : float
            Dual objective bᵀλ.
        """
        mat_tr_vec_mul(self.rx, 1.0, self.A, self.lam)
        self.rx += self.s
        self.rx -= self.c
        mat_vec_mul(self.rl, 1.0, self.A, self.x)
        self.rl -= self.b
        np.multiply(self.x, self.s, out=self.rs)
        mu = float(self.rs.sum()) / self.nx
        ctx = float(self.c @ self.x)
        btl = float(self.b @ self.lam)
        return mu, ctx, btl

    def residual_norms(self) -> Tuple[float, float]:
        """(‖Rl‖∞, ‖Rx‖∞) from the last ``compute_residual``."""
        return float(np.max(np.abs(self.rl))), float(np.max(np.abs(self.rx)))

    def assemble_jacobian(self) -> None:
        """
        Rebuild J at the current (x, s).

        Layout, with I = Nx + Nl::

                 x      λ      s
            x  [ .      Aᵀ     1 ]
            λ  [ A      .      . ]
            s  [ S      .      X ]
        """
        I = self.nx + self.nl
        self.J.start()
        self.J.put_matrix_and_transpose(self.A)
        self.J.put_diagonal(0, I, self._ones)
        self.J.put_diagonal(I, 0, self.s)
        self.J.put_diagonal(I, I, self.x)

    def min_ratios(self) -> Tuple[float, float]:
        """
        Ratio test on the current direction.

        Returns
        -------
        xrmin : float
            min{ x_i / (-Δx_i) : -Δx_i > 0 }, +inf if none.
        srmin : float
            min{ s_i / (-Δs_i) : -Δs_i > 0 }, +inf if none.
        """
        return _min_ratio(self.x, self.mdx), _min_ratio(self.s, self.mds)

    def predictor_corrector_step(self, mu: float) -> Tuple[float, float, float]:
        """
        Take one predictor-corrector step with the factorized Jacobian.

        Parameters
        ----------
        mu : float
            Duality measure of the current iterate.

        Returns
        -------
        sigma : float
            Centering parameter.
        alpha_primal, alpha_dual : float
            Step lengths applied to x and to (λ, s).
        """
        # affine (predictor) direction
        self._lis.solve(self.mdy, self.r)
        xrmin, srmin = self.min_ratios()
        apa = min(1.0, xrmin)
        ada = min(1.0, srmin)
        mu_aff = float((self.x - apa * self.mdx) @ (self.s - ada * self.mds)) / self.nx
        sigma = (mu_aff / mu) ** CENTERING_EXPONENT if mu > 0.0 else 0.0

        # corrector: second-order term plus centering target
        self.rs += self.mdx * self.mds - sigma * mu
        self._lis.solve(self.mdy, self.r)

        # step lengths
        xrmin, srmin = self.min_ratios()
        apa = min(1.0, STEP_FRACTION * xrmin)
        ada = min(1.0, STEP_FRACTION * srmin)

        # update
        self.x -= apa * self.mdx
        self.s -= ada * self.mds
        self.lam -= ada * self.mdl
        return sigma, apa, ada

    def _converged(self, lerr: float) -> bool:
        if lerr >= self.tol:
            return False
        if self.feastol is None:
            return True
        return max(self.residual_norms()) < self.feastol

    # -------------------------------------------------------------------------
    # Driver
    # -------------------------------------------------------------------------

    def solve(
        self,
        verbose: bool = False,
        callback: Optional[Callable[[IterationRecord], None]] = None,
        timing: bool = False,
    ) -> LinIpmResult:
        """
        Solve the linear program.

        On success ``x``, ``lam`` and ``s`` hold the optimal primal, dual
        and slack values. Each call restarts from the starting point.

        Parameters
        ----------
        verbose : bool
            If True, print the iteration table (it, f(x), error).
        callback : callable, optional
            Called with the IterationRecord of every iteration, after the
            iterate has been updated.
        timing : bool
            If True, the backend prints factorization/solve timings.

        Returns
        -------
        LinIpmResult

        Raises
        ------
        ConvergenceError
            If ``nmaxit`` iterations pass without convergence.
        FactorizationError, SolveError
            Propagated from the starting point or the linear solver.
        """
        self.history = []
        self.nit = 0
        self.starting_point()

        if verbose:
            print(f"{'it':>3}{'f(x)':>16}{'error':>16}")

        lerr = None
        converged = False
        try:
            for it in range(self.nmaxit):
                mu, ctx, btl = self.compute_residual()
                lerr = abs(ctx - btl) / (1.0 + abs(ctx))
                record = IterationRecord(
                    it=it, fx=ctx, error=lerr, mu=mu,
                    x_min=float(self.x.min()), s_min=float(self.s.min()),
                )
                self.history.append(record)
                if verbose:
                    print(f"{it:3d}{ctx:16.8e}{lerr:16.8e}")

                if self._converged(lerr):
                    self.nit = it
                    converged = True
                    if callback is not None:
                        callback(record)
                    break

                self.assemble_jacobian()
                if it == 0:
                    self._lis.initialize(self.J, symmetric=False,
                                         verbose=False, timing=timing)
                self._lis.factorize()
                sigma, apa, ada = self.predictor_corrector_step(mu)
                record.sigma = sigma
                record.alpha_primal = apa
                record.alpha_dual = ada
                if callback is not None:
                    callback(record)
        finally:
            self._lis.release()

        if not converged:
            self.nit = self.nmaxit
            raise ConvergenceError("iterations did not converge",
                                   nit=self.nmaxit, error=lerr)

        result = self.result()
        if self.feastol is None:
            worst = max(result.primal_residual, result.dual_residual)
            if worst > FEASIBILITY_WARN_TOL:
                warnings.warn(
                    f"Converged on the duality gap ({result.error:.3e}) with "
                    f"feasibility residual {worst:.3e} > {FEASIBILITY_WARN_TOL:.0e}; "
                    f"set feastol to require feasibility.",
                    RuntimeWarning,
                )
        return result

    # -------------------------------------------------------------------------
    # Results
    # -------------------------------------------------------------------------

    @property
    def objective(self) -> float:
        """Primal objective cᵀx at the current iterate."""
        return float(self.c @ self.x)

    def result(self) -> LinIpmResult:
        """Snapshot of the current iterate and its last evaluated residuals."""
        pres, dres = self.residual_norms()
        ctx = self.objective
        btl = float(self.b @ self.lam)
        return LinIpmResult(
            x=self.x.copy(),
            lam=self.lam.copy(),
            s=self.s.copy(),
            fun=ctx,
            dual_fun=btl,
            nit=self.nit,
            error=abs(ctx - btl) / (1.0 + abs(ctx)),
            primal_residual=pres,
            dual_residual=dres,
        )
