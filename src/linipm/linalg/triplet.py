"""
Triplet (coordinate) assembly of sparse matrices with a fixed capacity.

The interior-point solver rebuilds its Jacobian every iteration. The
triplet arrays are allocated once with the declared capacity and reused:
``start()`` rewinds the write position, ``put`` appends entries, and
``to_csc()`` converts to compressed-column form with duplicates summed.
"""

import numpy as np
import scipy.sparse as sp


class Triplet:
    """
    Coordinate-format accumulator for an m × n sparse matrix.

    Parameters
    ----------
    m, n : int
        Matrix dimensions.
    max_nnz : int
        Capacity. Writing more entries raises IndexError.
    """

    def __init__(self, m: int, n: int, max_nnz: int):
        if m < 0 or n < 0 or max_nnz < 0:
            raise ValueError(f"Invalid triplet dimensions ({m}, {n}, {max_nnz})")
        self.m = int(m)
        self.n = int(n)
        self.max_nnz = int(max_nnz)
        self._rows = np.zeros(self.max_nnz, dtype=np.int64)
        self._cols = np.zeros(self.max_nnz, dtype=np.int64)
        self._vals = np.zeros(self.max_nnz, dtype=np.float64)
        self._pos = 0

    @property
    def shape(self):
        return (self.m, self.n)

    @property
    def nnz(self) -> int:
        """Number of entries put since the last ``start()``."""
        return self._pos

    def start(self) -> None:
        """Discard all entries, keeping the allocated capacity."""
        self._pos = 0

    def _reserve(self, count: int) -> slice:
        if self._pos + count > self.max_nnz:
            raise IndexError(
                f"Triplet capacity exceeded: {self._pos + count} > {self.max_nnz}"
            )
        span = slice(self._pos, self._pos + count)
        self._pos += count
        return span

    def put(self, i: int, j: int, x: float) -> None:
        """Append entry (i, j) = x. Duplicate positions are summed."""
        if not (0 <= i < self.m and 0 <= j < self.n):
            raise IndexError(f"Entry ({i}, {j}) outside matrix of shape {self.shape}")
        k = self._reserve(1).start
        self._rows[k] = i
        self._cols[k] = j
        self._vals[k] = x

    def put_diagonal(self, i0: int, j0: int, values: np.ndarray) -> None:
        """Append entries (i0 + k, j0 + k) = values[k] for every k."""
        values = np.asarray(values, dtype=np.float64).ravel()
        count = values.shape[0]
        if i0 < 0 or j0 < 0 or i0 + count > self.m or j0 + count > self.n:
            raise IndexError(
                f"Diagonal of length {count} at ({i0}, {j0}) outside matrix "
                f"of shape {self.shape}"
            )
        span = self._reserve(count)
        offsets = np.arange(count)
        self._rows[span] = i0 + offsets
        self._cols[span] = j0 + offsets
        self._vals[span] = values

    def put_matrix_and_transpose(self, a: sp.spmatrix) -> None:
        """
        Append a matrix and its transpose in the off-diagonal blocks.

        For ``a`` of shape (p, q) the layout is::

            [ .   aᵀ  . ]      rows [0, q)     cols [q, q+p)
            [ a   .   . ]      rows [q, q+p)   cols [0, q)
            [ .   .   . ]

        Parameters
        ----------
        a : scipy.sparse matrix
            Block to insert, shape (p, q) with p + q ≤ min(m, n).
        """
        coo = sp.coo_matrix(a)
        p, q = coo.shape
        if p + q > self.m or p + q > self.n:
            raise IndexError(
                f"Blocks of a {p}x{q} matrix do not fit in shape {self.shape}"
            )
        count = coo.nnz
        span = self._reserve(2 * count)
        first = slice(span.start, span.start + count)
        second = slice(span.start + count, span.stop)
        # aᵀ: entry (r, c) of a goes to (c, q + r)
        self._rows[first] = coo.col
        self._cols[first] = q + coo.row
        self._vals[first] = coo.data
        # a: entry (r, c) goes to (q + r, c)
        self._rows[second] = q + coo.row
        self._cols[second] = coo.col
        self._vals[second] = coo.data

    def to_csc(self) -> sp.csc_matrix:
        """Convert the current entries to CSC format, summing duplicates."""
        k = self._pos
        mat = sp.coo_matrix(
            (self._vals[:k], (self._rows[:k], self._cols[:k])),
            shape=self.shape,
        ).tocsc()
        mat.sum_duplicates()
        return mat

    def to_dense(self) -> np.ndarray:
        """Dense copy of the current entries."""
        return self.to_csc().toarray()
