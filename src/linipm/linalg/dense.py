"""
Small dense solves used for the starting point.
"""

import numpy as np
from scipy.linalg import LinAlgError, cho_factor, cho_solve
from typing import Tuple

from ..errors import FactorizationError


def spd_solve2(a: np.ndarray, b1: np.ndarray,
               b2: np.ndarray) -> Tuple[np.ndarray, np.ndarray]:
    """
    Solve a x1 = b1 and a x2 = b2 for symmetric positive-definite a.

    Both right-hand sides share a single Cholesky factorization.

    Parameters
    ----------
    a : np.ndarray
        Symmetric positive-definite matrix of shape (n, n).
    b1, b2 : np.ndarray
        Right-hand sides of shape (n,).

    Returns
    -------
    x1, x2 : np.ndarray
        Solutions of shape (n,).

    Raises
    ------
    FactorizationError
        If a is not positive definite (e.g. A Aᵀ of a rank-deficient A).
    """
    n = a.shape[0]
    if a.shape != (n, n) or b1.shape != (n,) or b2.shape != (n,):
        raise ValueError(
            f"Shape mismatch: a {a.shape}, b1 {b1.shape}, b2 {b2.shape}"
        )
    try:
        factor = cho_factor(a, lower=False, check_finite=True)
    except (LinAlgError, ValueError) as e:
        raise FactorizationError(
            f"Cholesky factorization of the {n}x{n} normal matrix failed: {e}",
            backend="cholesky",
        ) from e
    rhs = np.column_stack([b1, b2])
    sol = cho_solve(factor, rhs)
    return sol[:, 0].copy(), sol[:, 1].copy()
