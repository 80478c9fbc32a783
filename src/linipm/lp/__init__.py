"""
Linear programming module.

Implements:
- Mehrotra predictor-corrector interior-point solver (LinIpm)
- Built-in LP instances and NPZ persistence
- Extended-precision (mpmath) certificates of optimality
- Command-line driver

Main entry points:
- `LinIpm(A, b, c, params).solve()`: solve a standard-form LP
- `certify_solution(A, b, c, x, lam, s)`: verify a solution in mpmath
- `load_problem(path)` / `save_problem(problem, path)`: NPZ I/O
"""

from .linipm import (
    IterationRecord,
    LinIpm,
    LinIpmResult,
)

from .problems import (
    LPProblem,
    make_problem,
    equal_cost_problem,
    vertex_problem,
    wyndor_problem,
    random_feasible_problem,
    save_problem,
    load_problem,
)

from .certify import Certificate, certify_solution

__all__ = [
    # Solver
    "LinIpm",
    "LinIpmResult",
    "IterationRecord",
    # Problems
    "LPProblem",
    "make_problem",
    "equal_cost_problem",
    "vertex_problem",
    "wyndor_problem",
    "random_feasible_problem",
    "save_problem",
    "load_problem",
    # Certificates
    "Certificate",
    "certify_solution",
]
