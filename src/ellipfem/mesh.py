from __future__ import annotations

import logging
from dataclasses import dataclass
from numbers import Integral

import numpy as np

from .datastructures import EAST, NORTH, SOUTH, WEST, Mesh
from .exceptions import InvalidParameterError

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class MeshGenerator:
    """Structured P1 triangulation of the rectangle [0, Lx] x [0, Ly].

    Parameters
    ----------
    Lx, Ly : float
        Domain extents, both > 0.
    Nx, Ny : int
        Number of nodes in x and y, both >= 2.
    """

    Lx: float
    Ly: float
    Nx: int
    Ny: int

    def __post_init__(self) -> None:
        if not isinstance(self.Nx, Integral) or not isinstance(self.Ny, Integral):
            raise InvalidParameterError(
                f"Invalid mesh parameters: Nx, Ny must be integers (got {self.Nx!r}, {self.Ny!r})"
            )
        if not (self.Lx > 0 and self.Ly > 0 and self.Nx >= 2 and self.Ny >= 2):
            raise InvalidParameterError(
                "Invalid mesh parameters: Lx, Ly must be positive, Nx, Ny must be >= 2 "
                f"(got Lx={self.Lx}, Ly={self.Ly}, Nx={self.Nx}, Ny={self.Ny})"
            )

    @property
    def dx(self) -> float:
        return self.Lx / (self.Nx - 1)

    @property
    def dy(self) -> float:
        return self.Ly / (self.Ny - 1)

    def generate(self) -> Mesh:
        """Build nodes, elements and the four boundary node sets."""
        Nx, Ny = int(self.Nx), int(self.Ny)

        # Nodes, row-major: index = row*Nx + col
        col, row = np.meshgrid(np.arange(Nx), np.arange(Ny))
        nodes = np.empty((Nx * Ny, 2), dtype=np.float64)
        nodes[:, 0] = col.ravel() * self.dx
        nodes[:, 1] = row.ravel() * self.dy

        # Cell corners, cells in row-major order
        ccol, crow = np.meshgrid(np.arange(Nx - 1), np.arange(Ny - 1))
        n1 = (crow * Nx + ccol).ravel()
        n2 = n1 + 1
        n3 = n1 + Nx
        n4 = n3 + 1

        # Two triangles per cell, same diagonal everywhere: (n1, n2, n3), (n2, n4, n3)
        n_cells = (Nx - 1) * (Ny - 1)
        elements = np.empty((2 * n_cells, 3), dtype=np.int64)
        elements[0::2, 0] = n1
        elements[0::2, 1] = n2
        elements[0::2, 2] = n3
        elements[1::2, 0] = n2
        elements[1::2, 1] = n4
        elements[1::2, 2] = n3

        rows = np.arange(Ny, dtype=np.int64)
        cols = np.arange(Nx, dtype=np.int64)
        boundaries = {
            WEST: rows * Nx,
            EAST: rows * Nx + Nx - 1,
            SOUTH: cols,
            NORTH: (Ny - 1) * Nx + cols,
        }

        mesh = Mesh(
            nodes=nodes,
            elements=elements,
            boundaries=boundaries,
            Lx=float(self.Lx),
            Ly=float(self.Ly),
            Nx=Nx,
            Ny=Ny,
        )
        log.info(
            f"Mesh generated: {self.Lx} x {self.Ly} domain, {Nx} x {Ny} nodes, "
            f"{mesh.n_nodes} nodes and {mesh.n_elements} elements"
        )
        return mesh
