"""Tests for the dense Gaussian elimination solver.

Run with: pytest tests/test_linalg.py -v
"""

import numpy as np
import pytest
from scipy.linalg import solve as scipy_solve

from ellipfem import SingularMatrixError, gaussian_elimination


class TestGaussianElimination:
    def test_matches_scipy(self):
        rng = np.random.default_rng(0)
        A = rng.standard_normal((8, 8)) + 8.0 * np.eye(8)
        b = rng.standard_normal(8)
        np.testing.assert_allclose(gaussian_elimination(A, b), scipy_solve(A, b), rtol=1e-12)

    def test_nonsymmetric(self):
        rng = np.random.default_rng(3)
        A = rng.standard_normal((25, 25))
        b = rng.standard_normal(25)
        x = gaussian_elimination(A, b)
        np.testing.assert_allclose(A @ x, b, atol=1e-9)

    def test_requires_pivoting(self):
        A = np.array([[0.0, 1.0], [1.0, 0.0]])
        b = np.array([2.0, 3.0])
        np.testing.assert_array_equal(gaussian_elimination(A, b), [3.0, 2.0])

    def test_identity(self):
        b = np.array([1.0, -2.0, 3.5])
        np.testing.assert_array_equal(gaussian_elimination(np.eye(3), b), b)

    def test_inputs_not_modified(self):
        A = np.array([[2.0, 1.0], [1.0, 3.0]])
        b = np.array([1.0, 2.0])
        A0, b0 = A.copy(), b.copy()
        gaussian_elimination(A, b)
        np.testing.assert_array_equal(A, A0)
        np.testing.assert_array_equal(b, b0)

    def test_shape_mismatch(self):
        with pytest.raises(ValueError):
            gaussian_elimination(np.eye(3), np.ones(2))


class TestSingularDetection:
    def test_dependent_rows(self):
        A = np.array([[1.0, 2.0], [2.0, 4.0]])
        with pytest.raises(SingularMatrixError) as exc_info:
            gaussian_elimination(A, np.ones(2))
        assert exc_info.value.column == 1

    def test_zero_matrix(self):
        with pytest.raises(SingularMatrixError) as exc_info:
            gaussian_elimination(np.zeros((3, 3)), np.ones(3))
        assert exc_info.value.column == 0

    def test_nan_pivot(self):
        A = np.array([[np.nan, 0.0], [0.0, 1.0]])
        with pytest.raises(SingularMatrixError) as exc_info:
            gaussian_elimination(A, np.ones(2))
        assert exc_info.value.column == 0

    def test_nan_after_elimination(self):
        A = np.array([[1.0, 1.0], [1.0, np.nan]])
        with pytest.raises(SingularMatrixError) as exc_info:
            gaussian_elimination(A, np.ones(2))
        assert exc_info.value.column == 1

    def test_is_linalg_error(self):
        with pytest.raises(np.linalg.LinAlgError):
            gaussian_elimination(np.zeros((2, 2)), np.ones(2))

    def test_custom_tolerance(self):
        A = np.array([[1e-10, 0.0], [0.0, 1.0]])
        b = np.ones(2)
        np.testing.assert_allclose(gaussian_elimination(A, b), [1e10, 1.0])
        with pytest.raises(SingularMatrixError):
            gaussian_elimination(A, b, tol=1e-8)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
