"""Exception types raised by the elliptic FEM engine."""

import numpy as np


class EllipFEMError(Exception):
    """Base class for all errors raised by ellipfem."""


class InvalidParameterError(EllipFEMError, ValueError):
    """Malformed request, e.g. a non-positive domain size or Nx < 2."""


class EvaluationError(EllipFEMError, ValueError):
    """Malformed expression text or an undefined operation during evaluation.

    Never escapes the coefficient-function binder; see ``ellipfem.functions``.
    """


class SingularMatrixError(EllipFEMError, np.linalg.LinAlgError):
    """The assembled (boundary-modified) system is numerically singular."""

    def __init__(self, column: int, pivot: float):
        self.column = column
        self.pivot = pivot
        super().__init__(
            f"Singular matrix in linear system solver: |pivot| = {abs(pivot):.3e} "
            f"in column {column}"
        )
