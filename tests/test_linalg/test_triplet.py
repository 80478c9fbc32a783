"""
Tests for fixed-capacity triplet assembly.
"""

import pytest
import numpy as np
import scipy.sparse as sp

from linipm.linalg.triplet import Triplet


class TestTripletBasics:

    def test_put_and_convert(self):
        t = Triplet(3, 3, 4)
        t.put(0, 0, 1.0)
        t.put(2, 1, -2.0)
        assert t.nnz == 2
        dense = t.to_dense()
        expected = np.zeros((3, 3))
        expected[0, 0] = 1.0
        expected[2, 1] = -2.0
        np.testing.assert_array_equal(dense, expected)

    def test_duplicates_sum(self):
        t = Triplet(2, 2, 3)
        t.put(1, 1, 1.5)
        t.put(1, 1, 2.5)
        assert t.to_csc()[1, 1] == 4.0

    def test_start_clears(self):
        t = Triplet(2, 2, 2)
        t.put(0, 0, 1.0)
        t.put(1, 1, 1.0)
        t.start()
        assert t.nnz == 0
        t.put(0, 1, 3.0)
        np.testing.assert_array_equal(t.to_dense(), [[0.0, 3.0], [0.0, 0.0]])

    def test_capacity_exceeded(self):
        t = Triplet(2, 2, 1)
        t.put(0, 0, 1.0)
        with pytest.raises(IndexError):
            t.put(1, 1, 1.0)

    def test_out_of_bounds(self):
        t = Triplet(2, 2, 4)
        with pytest.raises(IndexError):
            t.put(2, 0, 1.0)
        with pytest.raises(IndexError):
            t.put(0, -1, 1.0)

    def test_shape(self):
        t = Triplet(4, 5, 0)
        assert t.shape == (4, 5)
        assert t.max_nnz == 0


class TestTripletBulk:

    def test_put_diagonal(self):
        t = Triplet(4, 4, 3)
        t.put_diagonal(1, 0, np.array([1.0, 2.0, 3.0]))
        expected = np.zeros((4, 4))
        expected[1, 0] = 1.0
        expected[2, 1] = 2.0
        expected[3, 2] = 3.0
        np.testing.assert_array_equal(t.to_dense(), expected)

    def test_put_diagonal_out_of_bounds(self):
        t = Triplet(3, 3, 10)
        with pytest.raises(IndexError):
            t.put_diagonal(2, 0, np.ones(2))

    def test_put_diagonal_capacity(self):
        t = Triplet(3, 3, 2)
        with pytest.raises(IndexError):
            t.put_diagonal(0, 0, np.ones(3))

    def test_put_matrix_and_transpose_layout(self):
        """A (2x3) goes to rows 3-4, cols 0-2; Aᵀ to rows 0-2, cols 3-4."""
        a = np.array([[1.0, 2.0, 0.0],
                      [0.0, 3.0, 4.0]])
        t = Triplet(5, 5, 8)
        t.put_matrix_and_transpose(sp.csc_matrix(a))
        assert t.nnz == 8
        dense = t.to_dense()
        np.testing.assert_array_equal(dense[3:5, 0:3], a)
        np.testing.assert_array_equal(dense[0:3, 3:5], a.T)
        assert np.all(dense[0:3, 0:3] == 0.0)
        assert np.all(dense[3:5, 3:5] == 0.0)

    def test_put_matrix_and_transpose_too_large(self):
        t = Triplet(4, 4, 20)
        with pytest.raises(IndexError):
            t.put_matrix_and_transpose(sp.csc_matrix(np.ones((2, 3))))

    def test_reuse_after_start(self):
        """Refilling after start() gives the new values, not the sum."""
        t = Triplet(2, 2, 2)
        t.put_diagonal(0, 0, np.array([1.0, 1.0]))
        t.start()
        t.put_diagonal(0, 0, np.array([5.0, 6.0]))
        np.testing.assert_array_equal(t.to_dense(), np.diag([5.0, 6.0]))
