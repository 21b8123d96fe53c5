"""Dense direct solver: Gaussian elimination with partial pivoting."""

from __future__ import annotations

import numpy as np
from numba import njit
from numpy.typing import NDArray

from .exceptions import SingularMatrixError

PIVOT_TOL = 1e-15


@njit
def _gauss_core(aug, tol):
    """
    Forward elimination with row pivoting on the augmented matrix [A | b].

    Works in place. Returns -1 on success, otherwise the column whose best
    pivot fell below ``tol`` or is NaN; nothing is divided by that pivot.
    """
    n = aug.shape[0]
    m = aug.shape[1]

    for i in range(n):
        # Row of largest magnitude in column i among unprocessed rows
        max_row = i
        for k in range(i + 1, n):
            if abs(aug[k, i]) > abs(aug[max_row, i]):
                max_row = k

        if max_row != i:
            for j in range(m):
                tmp = aug[i, j]
                aug[i, j] = aug[max_row, j]
                aug[max_row, j] = tmp

        if not (abs(aug[i, i]) >= tol):
            return i

        for k in range(i + 1, n):
            factor = aug[k, i] / aug[i, i]
            for j in range(i, m):
                aug[k, j] -= factor * aug[i, j]

    return -1


@njit
def _back_substitution_core(aug):
    n = aug.shape[0]
    x = np.zeros(n)
    for i in range(n - 1, -1, -1):
        s = aug[i, n]
        for j in range(i + 1, n):
            s -= aug[i, j] * x[j]
        x[i] = s / aug[i, i]
    return x


def gaussian_elimination(
    A: NDArray[np.float64], b: NDArray[np.float64], tol: float = PIVOT_TOL
) -> NDArray[np.float64]:
    """
    Solve A x = b by Gaussian elimination with partial pivoting.

    Parameters
    ----------
    A : ndarray (n, n)
    b : ndarray (n,)
    tol : float
        Pivot magnitude below which the system is treated as singular.

    Returns
    -------
    x : ndarray (n,)

    Raises
    ------
    SingularMatrixError
        If a pivot magnitude falls below ``tol`` or is NaN. No partial result is returned.
    """
    A = np.asarray(A, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    n = len(b)
    if A.shape != (n, n):
        raise ValueError(f"Shape mismatch: A is {A.shape}, b has length {n}")

    aug = np.empty((n, n + 1), dtype=np.float64)
    aug[:, :n] = A
    aug[:, n] = b

    col = _gauss_core(aug, tol)
    if col >= 0:
        raise SingularMatrixError(int(col), float(aug[col, col]))
    return _back_substitution_core(aug)
