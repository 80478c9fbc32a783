"""
Extended-precision verification of interior-point solutions.

Re-evaluates the optimality conditions of a candidate (x, λ, s) in mpmath
arithmetic so that the reported residuals are not polluted by float64
cancellation:

    primal residual    ‖A x - b‖∞
    dual residual      ‖Aᵀλ + s - c‖∞
    complementarity    xᵀs
    relative gap       |cᵀx - bᵀλ| / (1 + |cᵀx|)
"""

import numpy as np
from dataclasses import dataclass
from typing import List
from mpmath import mp, mpf

from ..config import CERTIFY_PRECISION
from ..linalg.sparse import MatrixLike, as_csc


@dataclass
class Certificate:
    """Optimality measures of a candidate solution, evaluated in mpmath."""
    primal_residual: mpf
    dual_residual: mpf
    complementarity: mpf
    primal_objective: mpf
    dual_objective: mpf
    relative_gap: mpf
    x_min: mpf
    s_min: mpf
    dps: int

    def passed(self, tol: float) -> bool:
        """
        True if both residuals and the relative gap are within tol and
        x, s are non-negative.
        """
        t = mpf(tol)
        return (
            self.primal_residual <= t
            and self.dual_residual <= t
            and self.relative_gap <= t
            and self.x_min >= 0
            and self.s_min >= 0
        )

    def as_dict(self) -> dict:
        """Float view, e.g. for JSON output."""
        return {
            "primal_residual": float(self.primal_residual),
            "dual_residual": float(self.dual_residual),
            "complementarity": float(self.complementarity),
            "primal_objective": float(self.primal_objective),
            "dual_objective": float(self.dual_objective),
            "relative_gap": float(self.relative_gap),
            "dps": self.dps,
        }


def _to_mp(v: np.ndarray) -> List[mpf]:
    return [mpf(float(vi)) for vi in np.asarray(v, dtype=np.float64).ravel()]


def certify_solution(
    A: MatrixLike,
    b: np.ndarray,
    c: np.ndarray,
    x: np.ndarray,
    lam: np.ndarray,
    s: np.ndarray,
    dps: int = CERTIFY_PRECISION,
) -> Certificate:
    """
    Evaluate the optimality conditions of (x, λ, s) at dps decimal digits.

    Parameters
    ----------
    A : np.ndarray or scipy.sparse matrix
        Constraint matrix of shape (Nl, Nx).
    b, c : np.ndarray
        Right-hand side and cost vector.
    x, lam, s : np.ndarray
        Candidate primal, dual and slack values.
    dps : int
        mpmath decimal places.

    Returns
    -------
    Certificate
    """
    A = as_csc(A)
    nl, nx = A.shape
    if len(b) != nl or len(c) != nx or len(x) != nx or len(s) != nx or len(lam) != nl:
        raise ValueError(
            f"Dimension mismatch for A of shape {A.shape}: "
            f"b {len(b)}, c {len(c)}, x {len(x)}, lam {len(lam)}, s {len(s)}"
        )

    saved_dps = mp.dps
    mp.dps = dps
    try:
        b_mp, c_mp = _to_mp(b), _to_mp(c)
        x_mp, l_mp, s_mp = _to_mp(x), _to_mp(lam), _to_mp(s)
        zero = mpf(0)

        # A x and Aᵀλ, column by column over the CSC structure
        ax = [zero] * nl
        atl = [zero] * nx
        for j in range(nx):
            for k in range(A.indptr[j], A.indptr[j + 1]):
                i = int(A.indices[k])
                aij = mpf(float(A.data[k]))
                ax[i] += aij * x_mp[j]
                atl[j] += aij * l_mp[i]

        primal_res = max(abs(ax[i] - b_mp[i]) for i in range(nl))
        dual_res = max(abs(atl[j] + s_mp[j] - c_mp[j]) for j in range(nx))
        comp = mp.fsum(x_mp[j] * s_mp[j] for j in range(nx))
        ctx = mp.fsum(c_mp[j] * x_mp[j] for j in range(nx))
        btl = mp.fsum(b_mp[i] * l_mp[i] for i in range(nl))
        gap = abs(ctx - btl) / (1 + abs(ctx))

        return Certificate(
            primal_residual=primal_res,
            dual_residual=dual_res,
            complementarity=comp,
            primal_objective=ctx,
            dual_objective=btl,
            relative_gap=gap,
            x_min=min(x_mp),
            s_min=min(s_mp),
            dps=dps,
        )
    finally:
        mp.dps = saved_dps
