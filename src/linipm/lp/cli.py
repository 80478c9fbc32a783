"""
Command-line driver for the interior-point LP solver.

Loads a standard-form LP from an NPZ file (see ``problems.save_problem``)
or builds one of the built-in instances, solves it and reports the result.

Usage:
    python -m linipm.lp.cli --problem data/lp.npz --verbose \\
        --output results/lp.json --plot figures/lp_trace.png

    python -m linipm.lp.cli --demo random --nl 20 --nx 50 --seed 1

Exit status: 0 converged, 1 missing or invalid input, 2 solver failure.
"""

import argparse
import json
import sys
from pathlib import Path
from typing import List, Optional

from ..config import CERTIFY_PRECISION, DEFAULT_NMAXIT, DEFAULT_SOLVER, DEFAULT_TOL
from ..errors import LinIpmError
from ..linalg.solvers import available_solvers
from .certify import certify_solution
from .linipm import LinIpm, LinIpmResult
from .problems import (
    LPProblem,
    equal_cost_problem,
    load_problem,
    random_feasible_problem,
    vertex_problem,
    wyndor_problem,
)

DEMOS = {
    "equal_cost": equal_cost_problem,
    "vertex": vertex_problem,
    "wyndor": wyndor_problem,
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Solve min cᵀx s.t. A x = b, x ≥ 0 with a "
                    "predictor-corrector interior-point method"
    )
    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--problem", type=str,
        help="Path to an NPZ problem file",
    )
    source.add_argument(
        "--demo", type=str, choices=sorted(DEMOS) + ["random"],
        help="Solve a built-in problem",
    )
    parser.add_argument(
        "--nl", type=int, default=10,
        help="Constraints of the random demo (default: 10)",
    )
    parser.add_argument(
        "--nx", type=int, default=30,
        help="Variables of the random demo (default: 30)",
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Seed of the random demo",
    )
    parser.add_argument(
        "--nmaxit", type=int, default=DEFAULT_NMAXIT,
        help=f"Maximum iterations (default: {DEFAULT_NMAXIT})",
    )
    parser.add_argument(
        "--tol", type=float, default=DEFAULT_TOL,
        help=f"Relative duality-gap tolerance (default: {DEFAULT_TOL})",
    )
    parser.add_argument(
        "--feastol", type=float, default=None,
        help="Also require residual norms below this value",
    )
    parser.add_argument(
        "--solver", type=str, default=DEFAULT_SOLVER,
        choices=available_solvers(),
        help=f"Linear solver backend (default: {DEFAULT_SOLVER})",
    )
    parser.add_argument(
        "--verbose", action="store_true",
        help="Print the iteration table",
    )
    parser.add_argument(
        "--timing", action="store_true",
        help="Print linear solver timings",
    )
    parser.add_argument(
        "--certify-dps", type=int, default=None,
        help=f"Verify the solution in mpmath at this precision "
             f"(e.g. {CERTIFY_PRECISION})",
    )
    parser.add_argument(
        "--output", type=str, default=None,
        help="Write the result as JSON to this path",
    )
    parser.add_argument(
        "--plot", type=str, default=None,
        help="Save a convergence plot to this path",
    )
    return parser


def result_to_dict(problem: LPProblem, result: LinIpmResult) -> dict:
    """JSON-serializable summary of a solve."""
    return {
        "problem": problem.name,
        "shape": list(problem.shape),
        "status": result.status,
        "nit": result.nit,
        "fun": result.fun,
        "dual_fun": result.dual_fun,
        "error": result.error,
        "primal_residual": result.primal_residual,
        "dual_residual": result.dual_residual,
        "x": result.x.tolist(),
        "lam": result.lam.tolist(),
        "s": result.s.tolist(),
    }


def main(argv: Optional[List[str]] = None) -> int:
    """Command-line entry point."""
    args = build_parser().parse_args(argv)

    try:
        if args.problem is not None:
            problem = load_problem(args.problem)
        elif args.demo == "random":
            problem = random_feasible_problem(args.nl, args.nx, seed=args.seed)
        else:
            problem = DEMOS[args.demo]()
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    nl, nx = problem.shape
    print(f"Problem {problem.name}: {nl} constraints, {nx} variables, "
          f"{problem.A.nnz} nonzeros")

    params = {"nmaxit": args.nmaxit, "tol": args.tol, "feastol": args.feastol}
    try:
        with LinIpm(problem.A, problem.b, problem.c, params,
                    solver=args.solver) as ipm:
            result = ipm.solve(verbose=args.verbose, timing=args.timing)
            history = list(ipm.history)
    except LinIpmError as e:
        print(f"ERROR: {type(e).__name__}: {e}", file=sys.stderr)
        return 2

    print(f"Converged in {result.nit} iterations: f(x) = {result.fun:.10e}, "
          f"error = {result.error:.3e}")
    print(f"Residuals: primal {result.primal_residual:.3e}, "
          f"dual {result.dual_residual:.3e}")

    summary = result_to_dict(problem, result)

    if args.certify_dps is not None:
        cert = certify_solution(problem.A, problem.b, problem.c,
                                result.x, result.lam, result.s,
                                dps=args.certify_dps)
        summary["certificate"] = cert.as_dict()
        print(f"Certificate ({cert.dps} digits): "
              f"primal {float(cert.primal_residual):.3e}, "
              f"dual {float(cert.dual_residual):.3e}, "
              f"gap {float(cert.relative_gap):.3e}")

    if args.output is not None:
        out_path = Path(args.output)
        out_path.parent.mkdir(parents=True, exist_ok=True)
        with open(out_path, "w") as f:
            json.dump(summary, f, indent=2)
        print(f"Saved: {out_path}")

    if args.plot is not None:
        from ..plot.convergence import plot_convergence
        plot_convergence(history, output=Path(args.plot), title=problem.name)

    return 0


if __name__ == "__main__":
    sys.exit(main())
