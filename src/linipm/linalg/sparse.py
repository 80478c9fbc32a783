"""
Sparse matrix-vector kernels used by the interior-point solver.

All kernels write into a caller-owned output array (in place) so that the
solver can reuse its buffers across iterations:

    mat_vec_mul        : out ← α A x
    mat_tr_vec_mul     : out ← α Aᵀ x
    mat_tr_vec_mul_add : out ← out + α Aᵀ x
    mat_mat_tr_mul     : out ← α A Aᵀ   (dense output)
"""

import numpy as np
import scipy.sparse as sp
from typing import Union

MatrixLike = Union[np.ndarray, sp.spmatrix]


def as_csc(A: MatrixLike) -> sp.csc_matrix:
    """
    Convert a dense or sparse 2-D matrix to float64 CSC format.

    Parameters
    ----------
    A : np.ndarray or scipy.sparse matrix
        Matrix of any shape.

    Returns
    -------
    scipy.sparse.csc_matrix
        CSC copy of A with duplicates summed.
    """
    if sp.issparse(A):
        out = sp.csc_matrix(A, dtype=np.float64, copy=True)
    else:
        dense = np.asarray(A, dtype=np.float64)
        if dense.ndim != 2:
            raise ValueError(f"Matrix must be 2-D, got ndim={dense.ndim}")
        out = sp.csc_matrix(dense)
    out.sum_duplicates()
    return out


def _check_out(out: np.ndarray, size: int, name: str) -> None:
    if out.shape != (size,):
        raise ValueError(f"{name}: output has shape {out.shape}, expected ({size},)")


def mat_vec_mul(out: np.ndarray, alpha: float, A: sp.spmatrix,
                x: np.ndarray) -> np.ndarray:
    """Compute out ← α A x in place."""
    m, n = A.shape
    _check_out(out, m, "mat_vec_mul")
    if x.shape != (n,):
        raise ValueError(f"mat_vec_mul: x has shape {x.shape}, expected ({n},)")
    out[:] = A @ x
    if alpha != 1.0:
        out *= alpha
    return out


def mat_tr_vec_mul(out: np.ndarray, alpha: float, A: sp.spmatrix,
                   x: np.ndarray) -> np.ndarray:
    """Compute out ← α Aᵀ x in place."""
    m, n = A.shape
    _check_out(out, n, "mat_tr_vec_mul")
    if x.shape != (m,):
        raise ValueError(f"mat_tr_vec_mul: x has shape {x.shape}, expected ({m},)")
    out[:] = A.T @ x
    if alpha != 1.0:
        out *= alpha
    return out


def mat_tr_vec_mul_add(out: np.ndarray, alpha: float, A: sp.spmatrix,
                       x: np.ndarray) -> np.ndarray:
    """Compute out ← out + α Aᵀ x in place."""
    m, n = A.shape
    _check_out(out, n, "mat_tr_vec_mul_add")
    if x.shape != (m,):
        raise ValueError(
            f"mat_tr_vec_mul_add: x has shape {x.shape}, expected ({m},)"
        )
    out += alpha * (A.T @ x)
    return out


def mat_mat_tr_mul(out: np.ndarray, alpha: float, A: sp.spmatrix) -> np.ndarray:
    """
    Materialize α A Aᵀ into a dense buffer.

    Parameters
    ----------
    out : np.ndarray
        Dense output of shape (m, m), overwritten.
    alpha : float
        Scaling factor.
    A : scipy.sparse matrix
        Matrix of shape (m, n).

    Returns
    -------
    np.ndarray
        The ``out`` buffer.
    """
    m = A.shape[0]
    if out.shape != (m, m):
        raise ValueError(f"mat_mat_tr_mul: output has shape {out.shape}, expected ({m}, {m})")
    AAt = A @ A.T
    out[:, :] = AAt.toarray() if sp.issparse(AAt) else AAt
    if alpha != 1.0:
        out *= alpha
    return out
