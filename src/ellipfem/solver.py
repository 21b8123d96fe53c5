"""Finite element solver for the general 2D linear elliptic PDE.

Solves

    -div(A grad u) + b . grad u + c u = f,   A = [[a11, a12], [a12, a22]], b = (b1, b2)

on a structured P1 mesh with Dirichlet and Neumann boundary conditions.
"""

from __future__ import annotations

import logging
import time
from typing import Mapping, Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from .assembly import COEFFICIENT_NAMES, assemble_global_system
from .boundary import apply_boundary_conditions
from .datastructures import BoundaryConditionData, Mesh
from .functions import CoefficientFunction, as_coefficient_function
from .linalg import gaussian_elimination

log = logging.getLogger(__name__)


class EllipticFEMSolver:
    """P1 finite element solver with centroid quadrature and a dense direct solve.

    Each coefficient may be a callable f(x, y), expression text, a number or
    None (the zero function). The solver holds no per-call state, so one
    instance can be reused for any number of meshes and boundary conditions.

    Parameters
    ----------
    a11, a12, a22 : coefficient, optional
        Entries of the symmetric diffusion tensor.
    b1, b2 : coefficient, optional
        Convection velocity.
    c : coefficient, optional
        Reaction coefficient.
    f : coefficient, optional
        Source term.
    """

    def __init__(
        self,
        a11=None,
        a12=None,
        a22=None,
        b1=None,
        b2=None,
        c=None,
        f=None,
    ):
        self.coefficients: dict[str, CoefficientFunction] = {
            name: as_coefficient_function(value)
            for name, value in zip(COEFFICIENT_NAMES, (a11, a12, a22, b1, b2, c, f))
        }

    def assemble(self, mesh: Mesh) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        """Assemble the global matrix and load vector (no boundary conditions)."""
        return assemble_global_system(mesh, self.coefficients)

    def apply_boundary_conditions(
        self,
        K: NDArray[np.float64],
        F: NDArray[np.float64],
        mesh: Mesh,
        boundary_conditions: Mapping[str, BoundaryConditionData],
        order: Optional[Sequence[str]] = None,
    ) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
        return apply_boundary_conditions(K, F, mesh, boundary_conditions, order)

    def solve(
        self,
        mesh: Mesh,
        boundary_conditions: Mapping[str, BoundaryConditionData],
        order: Optional[Sequence[str]] = None,
    ) -> NDArray[np.float64]:
        """
        Assemble, apply boundary conditions and solve.

        Parameters
        ----------
        mesh : Mesh
        boundary_conditions : mapping
            Boundary name -> BoundaryConditionData; unknown names are ignored.
        order : sequence of str, optional
            Boundary processing order. Default is alphabetical; for corner nodes
            shared by two Dirichlet boundaries the later one wins.

        Returns
        -------
        u : ndarray (n_nodes,)
            Nodal solution, aligned with ``mesh.nodes``.

        Raises
        ------
        SingularMatrixError
            If the boundary-modified system is singular.
        """
        log.info(f"Solving on {mesh.n_nodes} nodes, {mesh.n_elements} elements")
        t0 = time.perf_counter()

        K, F = self.assemble(mesh)
        t1 = time.perf_counter()

        self.apply_boundary_conditions(K, F, mesh, boundary_conditions, order)
        u = gaussian_elimination(K, F)
        t2 = time.perf_counter()

        log.debug(f"Assembly {t1 - t0:.3f}s, boundary conditions + solve {t2 - t1:.3f}s")
        log.info(f"Problem solved in {t2 - t0:.3f}s. Solution computed for {len(u)} nodes.")
        return u
