"""
Tests for the pluggable linear-solver backends.

Both backends must agree with numpy's dense solver, report singular
matrices as FactorizationError and enforce the initialize → factorize →
solve → release lifecycle.
"""

import pytest
import numpy as np

from linipm.errors import ConfigError, FactorizationError, SetupError, SolveError
from linipm.linalg.solvers import (
    DenseLUSolver,
    LinearSolver,
    SuperLUSolver,
    available_solvers,
    get_solver,
)
from linipm.linalg.triplet import Triplet


def triplet_from_dense(dense):
    m, n = dense.shape
    t = Triplet(m, n, m * n)
    for i in range(m):
        for j in range(n):
            if dense[i, j] != 0.0:
                t.put(i, j, dense[i, j])
    return t


M = np.array([[4.0, 1.0, 0.0],
              [2.0, 5.0, 1.0],
              [0.0, -1.0, 3.0]])


@pytest.fixture(params=["superlu", "dense"])
def backend(request):
    lis = get_solver(request.param)
    yield lis
    lis.release()


# ============================================================================
# Registry
# ============================================================================

class TestRegistry:

    def test_available(self):
        assert available_solvers() == ["dense", "superlu"]

    def test_get_by_name(self):
        assert isinstance(get_solver("superlu"), SuperLUSolver)
        assert isinstance(get_solver("dense"), DenseLUSolver)
        assert isinstance(get_solver("SuperLU"), SuperLUSolver)

    def test_new_instance_each_call(self):
        assert get_solver("superlu") is not get_solver("superlu")

    def test_unknown_name(self):
        with pytest.raises(ConfigError):
            get_solver("umfpack")

    def test_abstract_base(self):
        with pytest.raises(TypeError):
            LinearSolver()


# ============================================================================
# Solves
# ============================================================================

class TestSolve:

    def test_solve_matches_numpy(self, backend):
        rhs = np.array([1.0, -2.0, 0.5])
        backend.initialize(triplet_from_dense(M))
        backend.factorize()
        out = np.zeros(3)
        backend.solve(out, rhs)
        np.testing.assert_allclose(out, np.linalg.solve(M, rhs))

    def test_transposed_solve(self, backend):
        rhs = np.array([1.0, -2.0, 0.5])
        backend.initialize(triplet_from_dense(M))
        backend.factorize()
        out = np.zeros(3)
        backend.solve(out, rhs, transposed=True)
        np.testing.assert_allclose(out, np.linalg.solve(M.T, rhs))

    def test_multiple_solves_one_factorization(self, backend):
        backend.initialize(triplet_from_dense(M))
        backend.factorize()
        out = np.zeros(3)
        for rhs in np.eye(3):
            backend.solve(out, rhs)
            np.testing.assert_allclose(M @ out, rhs, atol=1e-12)

    def test_refactorize_picks_up_new_values(self, backend):
        t = triplet_from_dense(M)
        backend.initialize(t)
        backend.factorize()
        t.start()
        t.put_diagonal(0, 0, np.array([2.0, 4.0, 8.0]))
        backend.factorize()
        out = np.zeros(3)
        backend.solve(out, np.ones(3))
        np.testing.assert_allclose(out, [0.5, 0.25, 0.125])

    def test_solve_into_view(self, backend):
        backend.initialize(triplet_from_dense(M))
        backend.factorize()
        buf = np.zeros(7)
        backend.solve(buf[2:5], np.array([1.0, 0.0, 0.0]))
        np.testing.assert_allclose(buf[2:5], np.linalg.solve(M, [1.0, 0.0, 0.0]))

    def test_wrong_length(self, backend):
        backend.initialize(triplet_from_dense(M))
        backend.factorize()
        with pytest.raises(SolveError):
            backend.solve(np.zeros(2), np.ones(2))


# ============================================================================
# Failures and lifecycle
# ============================================================================

class TestFailures:

    def test_singular_matrix(self, backend):
        singular = np.array([[1.0, 1.0], [1.0, 1.0]])
        backend.initialize(triplet_from_dense(singular))
        with pytest.raises(FactorizationError) as excinfo:
            backend.factorize()
        assert excinfo.value.backend == backend.name

    def test_zero_matrix(self, backend):
        t = Triplet(2, 2, 0)
        backend.initialize(t)
        with pytest.raises(FactorizationError):
            backend.factorize()

    def test_non_square(self, backend):
        with pytest.raises(SetupError):
            backend.initialize(Triplet(2, 3, 6))

    def test_factorize_before_initialize(self, backend):
        with pytest.raises(SetupError):
            backend.factorize()

    def test_solve_before_factorize(self, backend):
        backend.initialize(triplet_from_dense(M))
        with pytest.raises(SetupError):
            backend.solve(np.zeros(3), np.ones(3))

    def test_release_idempotent(self, backend):
        backend.initialize(triplet_from_dense(M))
        backend.factorize()
        assert backend.initialized
        backend.release()
        backend.release()
        assert not backend.initialized
        assert not backend.factorized

    def test_solve_after_release(self, backend):
        backend.initialize(triplet_from_dense(M))
        backend.factorize()
        backend.release()
        with pytest.raises(SetupError):
            backend.solve(np.zeros(3), np.ones(3))

    def test_reinitialize(self, backend):
        backend.initialize(triplet_from_dense(M))
        backend.factorize()
        backend.initialize(triplet_from_dense(np.eye(2)))
        backend.factorize()
        out = np.zeros(2)
        backend.solve(out, np.array([3.0, 4.0]))
        np.testing.assert_allclose(out, [3.0, 4.0])


class TestReporting:

    def test_timing_output(self, capsys):
        lis = SuperLUSolver()
        lis.initialize(triplet_from_dense(M), timing=True)
        lis.factorize()
        lis.solve(np.zeros(3), np.ones(3))
        lis.release()
        out = capsys.readouterr().out
        assert "[superlu] factorize" in out
        assert "[superlu] solve" in out

    def test_symmetric_ordering(self):
        lis = SuperLUSolver()
        lis.initialize(triplet_from_dense(np.eye(3)), symmetric=True)
        assert lis.permc_spec == "MMD_AT_PLUS_A"
        lis.initialize(triplet_from_dense(np.eye(3)), symmetric=False)
        assert lis.permc_spec == "COLAMD"
        lis.release()
