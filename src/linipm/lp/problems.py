"""
Standard-form LP instances and their on-disk format.

Provides small hand-checked problems with known optima, a generator of
random sparse problems that are guaranteed to have a bounded optimum, and
NPZ persistence.

File format: a single NPZ holding the CSC parts of A (data, indices,
indptr, shape) together with b, c and the problem name.
"""

import numpy as np
import scipy.sparse as sp
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from ..linalg.sparse import MatrixLike, as_csc


@dataclass
class LPProblem:
    """
    A standard-form LP: min cᵀx s.t. A x = b, x ≥ 0.

    Attributes
    ----------
    name : str
        Identifier used in reports.
    A : scipy.sparse.csc_matrix
        Constraint matrix of shape (Nl, Nx).
    b : np.ndarray
        Right-hand side (length Nl).
    c : np.ndarray
        Cost vector (length Nx).
    expected_x : np.ndarray or None
        Known optimal x, if unique and known.
    expected_fun : float or None
        Known optimal objective value.
    """
    name: str
    A: sp.csc_matrix
    b: np.ndarray
    c: np.ndarray
    expected_x: Optional[np.ndarray] = None
    expected_fun: Optional[float] = None

    @property
    def shape(self):
        return self.A.shape


def make_problem(name: str, A: MatrixLike, b, c,
                 expected_x=None, expected_fun: Optional[float] = None) -> LPProblem:
    """Build an LPProblem with arrays converted to float64."""
    return LPProblem(
        name=name,
        A=as_csc(A),
        b=np.asarray(b, dtype=np.float64).ravel(),
        c=np.asarray(c, dtype=np.float64).ravel(),
        expected_x=None if expected_x is None else np.asarray(expected_x, dtype=np.float64),
        expected_fun=expected_fun,
    )


# =============================================================================
# Canonical Instances
# =============================================================================

def equal_cost_problem() -> LPProblem:
    """
    min x1 + x2  s.t.  x1 + x2 = 1.

    Every feasible point is optimal; the starting point already lies at
    x = (0.5, 0.5).
    """
    return make_problem(
        "equal_cost",
        [[1.0, 1.0]], [1.0], [1.0, 1.0],
        expected_x=[0.5, 0.5], expected_fun=1.0,
    )


def vertex_problem() -> LPProblem:
    """
    min -x1 - 2 x2  s.t.  x1 + x2 = 4.

    Unique optimum at the vertex x = (0, 4), objective -8.
    """
    return make_problem(
        "vertex",
        [[1.0, 1.0]], [4.0], [-1.0, -2.0],
        expected_x=[0.0, 4.0], expected_fun=-8.0,
    )


def wyndor_problem() -> LPProblem:
    """
    Wyndor Glass product mix in standard form (slacks s1..s3 appended).

        max 3 x1 + 5 x2
        s.t. x1 ≤ 4,  2 x2 ≤ 12,  3 x1 + 2 x2 ≤ 18,  x ≥ 0

    Unique optimum x = (2, 6) with slacks (2, 0, 0), objective -36.
    """
    A = [
        [1.0, 0.0, 1.0, 0.0, 0.0],
        [0.0, 2.0, 0.0, 1.0, 0.0],
        [3.0, 2.0, 0.0, 0.0, 1.0],
    ]
    return make_problem(
        "wyndor",
        A, [4.0, 12.0, 18.0], [-3.0, -5.0, 0.0, 0.0, 0.0],
        expected_x=[2.0, 6.0, 2.0, 0.0, 0.0], expected_fun=-36.0,
    )


def random_feasible_problem(
    nl: int,
    nx: int,
    density: float = 0.3,
    seed: Optional[int] = None,
) -> LPProblem:
    """
    Random sparse LP with full row rank and a bounded optimum.

    A = [B | I] with columns shuffled, so A has full row rank. A strictly
    positive x0 defines b = A x0 (primal feasible) and a strictly positive
    s0 with random λ0 defines c = Aᵀλ0 + s0 (dual feasible), hence the LP
    has a finite optimum.

    Parameters
    ----------
    nl : int
        Number of equality constraints.
    nx : int
        Number of variables, must exceed nl.
    density : float
        Density of the random block B.
    seed : int, optional
        Seed for numpy's default_rng.

    Returns
    -------
    LPProblem
    """
    if nl <= 0 or nx <= nl:
        raise ValueError(f"Need 0 < nl < nx, got nl={nl}, nx={nx}")
    rng = np.random.default_rng(seed)
    B = sp.random(nl, nx - nl, density=density, random_state=rng,
                  data_rvs=lambda k: rng.uniform(-1.0, 1.0, size=k))
    A = sp.hstack([B, sp.identity(nl)], format="csc")
    A = A[:, rng.permutation(nx)]

    x0 = rng.uniform(0.5, 1.5, size=nx)
    lam0 = rng.normal(size=nl)
    s0 = rng.uniform(0.5, 1.5, size=nx)
    b = A @ x0
    c = A.T @ lam0 + s0
    return make_problem(f"random_{nl}x{nx}", A, b, c)


# =============================================================================
# NPZ Persistence
# =============================================================================

def save_problem(problem: LPProblem, path: Union[str, Path]) -> Path:
    """
    Save a problem to an NPZ file.

    Parameters
    ----------
    problem : LPProblem
        Problem to save.
    path : str or Path
        Output file; parent directories are created.

    Returns
    -------
    Path
        Path of the written file.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    A = as_csc(problem.A)
    np.savez_compressed(
        path,
        name=np.str_(problem.name),
        data=A.data,
        indices=A.indices,
        indptr=A.indptr,
        shape=np.array(A.shape, dtype=np.int64),
        b=problem.b,
        c=problem.c,
    )
    return path


def load_problem(path: Union[str, Path]) -> LPProblem:
    """
    Load a problem written by ``save_problem``.

    Raises
    ------
    FileNotFoundError
        If the file does not exist.
    ValueError
        If required arrays are missing.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Problem file not found: {path}")
    with np.load(path, allow_pickle=False) as data:
        missing = [k for k in ("data", "indices", "indptr", "shape", "b", "c")
                   if k not in data.files]
        if missing:
            raise ValueError(f"{path}: missing arrays {missing}")
        shape = tuple(int(v) for v in data["shape"])
        A = sp.csc_matrix(
            (data["data"], data["indices"], data["indptr"]), shape=shape
        )
        name = str(data["name"]) if "name" in data.files else path.stem
        return make_problem(name, A, data["b"], data["c"])
