"""
Linear algebra collaborators of the interior-point solver.

Implements:
- In-place sparse matrix-vector kernels (A x, Aᵀ x, A Aᵀ)
- Fixed-capacity triplet assembly of the Jacobian
- Dense SPD solve with two right-hand sides (starting point)
- Pluggable sparse direct solvers (SuperLU, dense LU)
"""

from .sparse import (
    as_csc,
    mat_vec_mul,
    mat_tr_vec_mul,
    mat_tr_vec_mul_add,
    mat_mat_tr_mul,
)

from .triplet import Triplet

from .dense import spd_solve2

from .solvers import (
    LinearSolver,
    SuperLUSolver,
    DenseLUSolver,
    available_solvers,
    get_solver,
)

__all__ = [
    # Sparse kernels
    "as_csc",
    "mat_vec_mul",
    "mat_tr_vec_mul",
    "mat_tr_vec_mul_add",
    "mat_mat_tr_mul",
    # Assembly
    "Triplet",
    # Dense
    "spd_solve2",
    # Backends
    "LinearSolver",
    "SuperLUSolver",
    "DenseLUSolver",
    "available_solvers",
    "get_solver",
]
